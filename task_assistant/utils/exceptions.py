"""
Exception Hierarchy for the Task Assistant

Exception Categories:
- Configuration Errors: settings, environment or missing provider packages
- Validation Errors: tool arguments that fail their schema
- Dispatch Errors: tool names outside the catalogue
- Transport Errors: the conversational model is unreachable or replies badly
- Storage Errors: persisted state that cannot be written or read back

Only transport errors are allowed to escape into the conversation loop; the
dispatch layer turns validation and unknown-tool errors into tool results,
and the task store recovers from malformed state on load.

Usage:
    from task_assistant.utils.exceptions import MissingParameterError

    if "title" not in args:
        raise MissingParameterError("title", context="addTask")
"""

from typing import Optional, Any, Dict, List


# ============================================================================
# Base Exception
# ============================================================================

class TaskAssistantError(Exception):
    """
    Base exception for all Task Assistant errors.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for categorization
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(TaskAssistantError):
    """Raised when there's an issue with configuration or settings."""

    def __init__(
        self,
        setting_name: str,
        message: str,
        expected_value: Optional[Any] = None,
        actual_value: Optional[Any] = None
    ):
        details = {"setting_name": setting_name}
        if expected_value is not None:
            details["expected_value"] = str(expected_value)
        if actual_value is not None:
            details["actual_value"] = str(actual_value)

        super().__init__(
            message=f"Configuration error for '{setting_name}': {message}",
            error_code="CONFIG_ERROR",
            details=details
        )
        self.setting_name = setting_name


class MissingDependencyError(TaskAssistantError):
    """Raised when a provider package is not installed."""

    def __init__(
        self,
        package_name: str,
        install_command: Optional[str] = None,
        purpose: Optional[str] = None
    ):
        message = f"Required package '{package_name}' is not installed"
        if purpose:
            message += f" (needed for {purpose})"
        if install_command:
            message += f"\nInstall with: {install_command}"

        super().__init__(
            message=message,
            error_code="MISSING_DEPENDENCY",
            details={
                "package_name": package_name,
                "install_command": install_command,
                "purpose": purpose
            }
        )
        self.package_name = package_name


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(TaskAssistantError):
    """Base class for validation errors."""
    pass


class InvalidParameterError(ValidationError):
    """Raised when a parameter value is invalid."""

    def __init__(
        self,
        parameter_name: str,
        message: str,
        expected_type: Optional[str] = None,
        actual_value: Optional[Any] = None
    ):
        details = {"parameter_name": parameter_name}
        if expected_type:
            details["expected_type"] = expected_type
        if actual_value is not None:
            details["actual_value"] = str(actual_value)

        super().__init__(
            message=f"Invalid parameter '{parameter_name}': {message}",
            error_code="INVALID_PARAM",
            details=details
        )
        self.parameter_name = parameter_name


class MissingParameterError(ValidationError):
    """Raised when a required parameter is missing."""

    def __init__(
        self,
        parameter_name: str,
        context: Optional[str] = None
    ):
        message = f"Missing required parameter: '{parameter_name}'"
        if context:
            message += f" in {context}"

        super().__init__(
            message=message,
            error_code="MISSING_PARAM",
            details={"parameter_name": parameter_name, "context": context}
        )
        self.parameter_name = parameter_name


class UnknownToolError(ValidationError):
    """Raised when a tool name is outside the catalogue."""

    def __init__(self, tool_name: str, supported_tools: Optional[List[str]] = None):
        super().__init__(
            message=f"Unknown tool: {tool_name}",
            error_code="UNKNOWN_TOOL",
            details={
                "tool_name": tool_name,
                "supported_tools": supported_tools
            }
        )
        self.tool_name = tool_name


# ============================================================================
# Transport Errors
# ============================================================================

class ModelTransportError(TaskAssistantError):
    """Raised when the conversational model cannot be reached or replies badly."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        full_message = f"Model request failed: {message}"
        if original_error:
            full_message += f"\nCaused by: {str(original_error)}"

        super().__init__(
            message=full_message,
            error_code="MODEL_TRANSPORT_ERROR",
            details={
                "provider": provider,
                "model": model,
                "original_error": str(original_error) if original_error else None
            }
        )
        self.original_error = original_error


# ============================================================================
# Storage Errors
# ============================================================================

class PersistenceError(TaskAssistantError):
    """Raised when the key-value store cannot be written."""

    def __init__(
        self,
        file_path: str,
        message: str,
        original_error: Optional[Exception] = None
    ):
        full_message = f"Storage error for '{file_path}': {message}"
        if original_error:
            full_message += f"\nCaused by: {str(original_error)}"

        super().__init__(
            message=full_message,
            error_code="PERSISTENCE_ERROR",
            details={
                "file_path": file_path,
                "original_error": str(original_error) if original_error else None
            }
        )
        self.file_path = file_path


class MalformedStateError(TaskAssistantError):
    """Raised when persisted state does not describe a valid forest."""

    def __init__(self, message: str, actual_value: Optional[Any] = None):
        details = {}
        if actual_value is not None:
            details["actual_value"] = str(actual_value)[:200]

        super().__init__(
            message=message,
            error_code="MALFORMED_STATE",
            details=details
        )


__all__ = [
    "TaskAssistantError",
    "ConfigurationError",
    "MissingDependencyError",
    "ValidationError",
    "InvalidParameterError",
    "MissingParameterError",
    "UnknownToolError",
    "ModelTransportError",
    "PersistenceError",
    "MalformedStateError",
]
