"""
Environment configuration - Load settings from .env files
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class EnvConfig:
    """
    Load and read configuration from environment variables and .env files.

    Priority:
    1. Environment variables already set (never overwritten)
    2. .env file in the current directory or up to three parents
    """

    @staticmethod
    def find_env_file(start: Optional[Path] = None) -> Optional[Path]:
        """Search for a .env file in the start dir and up to 3 levels up."""
        current = (start or Path.cwd()).resolve()
        for _ in range(4):  # Current dir + 3 parent levels
            potential_path = current / ".env"
            if potential_path.exists():
                return potential_path
            if current.parent == current:  # Stop at filesystem root
                break
            current = current.parent
        return None

    @staticmethod
    def load_env_file(path: Optional[str] = None) -> bool:
        """
        Load environment variables from a .env file.

        Args:
            path: Path to .env file (default: search current dir and parents)

        Returns:
            True if a file was loaded, False otherwise
        """
        env_path = Path(path) if path else EnvConfig.find_env_file()

        if env_path and env_path.exists():
            load_dotenv(env_path, override=False)
            return True

        return False

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a setting; blank values (KEY= in .env) count as unset."""
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    @staticmethod
    def get_bool(key: str, default: bool = False) -> bool:
        """Get a true/false setting (true, 1, yes, on)."""
        value = EnvConfig.get(key)
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    @staticmethod
    def get_int(key: str, default: int = 0) -> int:
        """
        Get an integer setting.

        Raises:
            ValueError: If the variable is set but not an integer
        """
        value = EnvConfig.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {value!r}")

    @staticmethod
    def get_float(key: str, default: float = 0.0) -> float:
        """
        Get a numeric setting.

        Raises:
            ValueError: If the variable is set but not a number
        """
        value = EnvConfig.get(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"{key} must be a number, got {value!r}")

    @staticmethod
    def show_config_template(llm_provider: str = "google") -> str:
        """
        Show .env template for configuration.

        Args:
            llm_provider: LLM provider to show config for

        Returns:
            Template as string
        """
        templates = {
            "google": """
# Google Gemini Configuration
LLM_API_KEY=AIza...
ASSISTANT_LLM_PROVIDER=google
ASSISTANT_LLM_MODEL=gemini-2.5-flash
ASSISTANT_LOG_LEVEL=INFO
ASSISTANT_MAX_TOOL_ROUNDS=5
ASSISTANT_DATA_FILE=./data/taskai_store.json
""",
            "anthropic": """
# Anthropic Configuration
LLM_API_KEY=sk-ant-...
ASSISTANT_LLM_PROVIDER=anthropic
ASSISTANT_LLM_MODEL=claude-sonnet-4-20250514
ASSISTANT_LOG_LEVEL=INFO
ASSISTANT_MAX_TOOL_ROUNDS=5
ASSISTANT_DATA_FILE=./data/taskai_store.json
""",
            "openai": """
# OpenAI Configuration
LLM_API_KEY=sk-...
ASSISTANT_LLM_PROVIDER=openai
ASSISTANT_LLM_MODEL=gpt-4o-mini
ASSISTANT_LOG_LEVEL=INFO
ASSISTANT_MAX_TOOL_ROUNDS=5
ASSISTANT_DATA_FILE=./data/taskai_store.json
""",
        }

        return templates.get(llm_provider, templates["google"])
