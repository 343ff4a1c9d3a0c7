"""
Configuration module - Settings and configuration management
"""

from .assistant_config import AssistantConfig, LLMConfig, LLMProvider, StorageConfig
from .env_config import EnvConfig

__all__ = [
    'AssistantConfig',
    'LLMConfig',
    'LLMProvider',
    'StorageConfig',
    'EnvConfig',
]
