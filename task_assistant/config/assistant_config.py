"""
Assistant configuration - Settings for the Task Assistant
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
from enum import Enum

from .env_config import EnvConfig


class LLMProvider(str, Enum):
    """Supported LLM providers"""
    GOOGLE = "google"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


DEFAULT_MODELS = {
    "google": "gemini-2.5-flash",
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o-mini",
}


@dataclass
class LLMConfig:
    """
    Configuration for the conversational model.

    Attributes:
        provider: LLM provider (google, anthropic, openai)
        model_name: Model identifier for the provider (provider default when empty)
        api_key: API key (reads LLM_API_KEY, then the provider variable, if not provided)
        temperature: Temperature for response generation (0-2)
        timeout: Request timeout in seconds
        max_retries: Retries the provider client performs before failing
        extra_params: Additional provider-specific parameters
    """

    provider: str = "google"
    model_name: str = ""
    api_key: Optional[str] = None
    temperature: float = 0.2
    timeout: int = 30
    max_retries: int = 2
    extra_params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        valid_providers = [p.value for p in LLMProvider]
        if self.provider not in valid_providers:
            raise ValueError(f"Provider must be one of {valid_providers}, got {self.provider}")

        if not 0 <= self.temperature <= 2:
            raise ValueError(f"Temperature must be between 0 and 2, got {self.temperature}")

        if self.timeout < 1:
            raise ValueError("timeout must be at least 1 second")

        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")

        if not self.model_name:
            self.model_name = DEFAULT_MODELS[self.provider]

        # The key itself is only required once a real model is built
        if not self.api_key:
            self.api_key = EnvConfig.get('LLM_API_KEY') or EnvConfig.get(self.api_key_env_var)

    @property
    def api_key_env_var(self) -> str:
        """Provider-specific environment variable holding the API key."""
        env_vars = {
            "google": "GOOGLE_API_KEY",
            "anthropic": "ANTHROPIC_API_KEY",
            "openai": "OPENAI_API_KEY",
        }
        return env_vars[self.provider]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding API key for security."""
        return {
            "provider": self.provider,
            "model_name": self.model_name,
            "temperature": self.temperature,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
        }


@dataclass
class StorageConfig:
    """
    Configuration for task persistence.

    Attributes:
        data_file: JSON file backing the key-value store
        tasks_key: Key the serialized forest is stored under
    """
    data_file: str = "./data/taskai_store.json"
    tasks_key: str = "taskai_tasks"

    @property
    def data_path(self) -> Path:
        """Get absolute data file path."""
        return Path(self.data_file).resolve()

    @classmethod
    def from_env(cls, prefix: str = "ASSISTANT_") -> "StorageConfig":
        return cls(
            data_file=EnvConfig.get(f"{prefix}DATA_FILE", "./data/taskai_store.json"),
            tasks_key=EnvConfig.get(f"{prefix}TASKS_KEY", "taskai_tasks"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data_file": str(self.data_path),
            "tasks_key": self.tasks_key,
        }


@dataclass
class AssistantConfig:
    """
    Configuration settings for the Task Assistant.

    Attributes:
        llm: LLM configuration (default: Google Gemini 2.5 Flash)
        storage: Persistence configuration
        max_tool_rounds: Follow-up model turns allowed to request tools in one round
        log_level: Logging level (default: 'INFO')
        debug: Log at DEBUG regardless of log_level (default: False)
    """

    llm: LLMConfig = field(default_factory=LLMConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    max_tool_rounds: int = 5
    log_level: str = "INFO"
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.llm, dict):
            self.llm = LLMConfig(**self.llm)

        if isinstance(self.storage, dict):
            self.storage = StorageConfig(**self.storage)

        if self.max_tool_rounds < 1:
            raise ValueError("max_tool_rounds must be at least 1")

        if self.log_level not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            raise ValueError(f"Invalid log_level: {self.log_level}")

    @classmethod
    def from_env(cls, prefix: str = "ASSISTANT_") -> "AssistantConfig":
        """
        Create configuration from environment variables.

        Args:
            prefix: Prefix for environment variables (default: "ASSISTANT_")

        Returns:
            Configured AssistantConfig instance

        Example:
            export ASSISTANT_LLM_PROVIDER=anthropic
            export ASSISTANT_LOG_LEVEL=DEBUG
            export LLM_API_KEY=sk-...
            config = AssistantConfig.from_env()
        """
        return cls(
            llm=LLMConfig(
                provider=EnvConfig.get(f"{prefix}LLM_PROVIDER", "google").lower(),
                model_name=EnvConfig.get(f"{prefix}LLM_MODEL", ""),
                api_key=EnvConfig.get("LLM_API_KEY"),
                temperature=EnvConfig.get_float(f"{prefix}LLM_TEMPERATURE", 0.2),
                timeout=EnvConfig.get_int(f"{prefix}LLM_TIMEOUT", 30),
                max_retries=EnvConfig.get_int(f"{prefix}LLM_MAX_RETRIES", 2),
            ),
            storage=StorageConfig.from_env(prefix),
            max_tool_rounds=EnvConfig.get_int(f"{prefix}MAX_TOOL_ROUNDS", 5),
            log_level=EnvConfig.get(f"{prefix}LOG_LEVEL", "INFO").upper(),
            debug=EnvConfig.get_bool(f"{prefix}DEBUG", False),
        )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "AssistantConfig":
        """
        Create configuration from dictionary.

        Example:
            config = AssistantConfig.from_dict({
                "llm": {"provider": "anthropic", "api_key": "sk-ant-..."},
                "max_tool_rounds": 3,
            })
        """
        config_dict = dict(config_dict)
        llm_config = config_dict.pop("llm", {})
        if isinstance(llm_config, dict):
            llm_config = LLMConfig(**llm_config)

        storage_config = config_dict.pop("storage", {})
        if isinstance(storage_config, dict):
            storage_config = StorageConfig(**storage_config)

        return cls(llm=llm_config, storage=storage_config, **config_dict)

    def to_dict(self, include_secrets: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary.

        Args:
            include_secrets: Whether to include API keys (default: False)
        """
        result = {
            "llm": self.llm.to_dict(),
            "storage": self.storage.to_dict(),
            "max_tool_rounds": self.max_tool_rounds,
            "log_level": self.log_level,
            "debug": self.debug,
        }

        if include_secrets and self.llm.api_key:
            result["llm"]["api_key"] = self.llm.api_key

        return result
