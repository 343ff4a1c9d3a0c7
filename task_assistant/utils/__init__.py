"""
Utilities module - Logging, errors, validation and model access
"""

from .logger import get_logger, setup_logging
from .exceptions import (
    TaskAssistantError,
    ConfigurationError,
    MissingDependencyError,
    ValidationError,
    InvalidParameterError,
    MissingParameterError,
    UnknownToolError,
    ModelTransportError,
    PersistenceError,
    MalformedStateError,
)
from .validation import validate_tool_arguments
from .prompt_builder import PromptBuilder, GREETING, ERROR_FALLBACK_REPLY, EMPTY_REPLY_FALLBACK
from .llm_client import ChatSession, build_chat_model, message_text

__all__ = [
    'get_logger',
    'setup_logging',
    'TaskAssistantError',
    'ConfigurationError',
    'MissingDependencyError',
    'ValidationError',
    'InvalidParameterError',
    'MissingParameterError',
    'UnknownToolError',
    'ModelTransportError',
    'PersistenceError',
    'MalformedStateError',
    'validate_tool_arguments',
    'PromptBuilder',
    'GREETING',
    'ERROR_FALLBACK_REPLY',
    'EMPTY_REPLY_FALLBACK',
    'ChatSession',
    'build_chat_model',
    'message_text',
]
