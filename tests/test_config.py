"""
Unit tests for configuration and environment loading
"""

import os
import unittest
from unittest.mock import patch

from task_assistant.config import AssistantConfig, EnvConfig, LLMConfig, StorageConfig
from task_assistant.utils.exceptions import ConfigurationError
from task_assistant.utils.llm_client import build_chat_model

_CLEAN_ENV = {"LLM_API_KEY": "", "GOOGLE_API_KEY": "", "ANTHROPIC_API_KEY": "", "OPENAI_API_KEY": ""}


class TestLLMConfig(unittest.TestCase):
    """Tests for LLMConfig."""

    def test_defaults(self):
        """Test the default provider and model."""
        config = LLMConfig(api_key="test-key")

        self.assertEqual(config.provider, "google")
        self.assertEqual(config.model_name, "gemini-2.5-flash")
        self.assertEqual(config.temperature, 0.2)

    def test_provider_default_model(self):
        """Test an empty model name picks the provider default."""
        config = LLMConfig(provider="anthropic", api_key="sk-ant-test-key")
        self.assertEqual(config.model_name, "claude-sonnet-4-20250514")

    def test_invalid_provider(self):
        """Test unknown provider raises error."""
        with self.assertRaises(ValueError):
            LLMConfig(provider="mystery", api_key="k")

    def test_invalid_temperature(self):
        """Test invalid temperature raises error."""
        with self.assertRaises(ValueError):
            LLMConfig(api_key="k", temperature=3.0)

    def test_invalid_timeout(self):
        with self.assertRaises(ValueError):
            LLMConfig(api_key="k", timeout=0)

    @patch.dict(os.environ, {**_CLEAN_ENV, "GOOGLE_API_KEY": "google-key"})
    def test_api_key_from_provider_variable(self):
        """Test the provider-specific variable is used when LLM_API_KEY is unset."""
        self.assertEqual(LLMConfig().api_key, "google-key")

    @patch.dict(os.environ, {**_CLEAN_ENV, "LLM_API_KEY": "shared", "OPENAI_API_KEY": "openai"})
    def test_generic_api_key_wins(self):
        self.assertEqual(LLMConfig(provider="openai").api_key, "shared")

    def test_to_dict_excludes_key(self):
        """Test the API key never appears in to_dict()."""
        self.assertNotIn("api_key", LLMConfig(api_key="secret").to_dict())

    @patch.dict(os.environ, _CLEAN_ENV)
    def test_missing_key_fails_when_model_is_built(self):
        """Test a config without a key is accepted but cannot build a model."""
        config = LLMConfig()
        self.assertFalse(config.api_key)

        with self.assertRaises(ConfigurationError) as ctx:
            build_chat_model(config)
        self.assertIn("GOOGLE_API_KEY", ctx.exception.message)


class TestAssistantConfig(unittest.TestCase):
    """Tests for AssistantConfig."""

    def test_valid_config(self):
        """Test creating valid configuration."""
        config = AssistantConfig(
            llm=LLMConfig(provider="anthropic", api_key="sk-ant-test-key", temperature=0.5),
            max_tool_rounds=3,
        )

        self.assertEqual(config.llm.temperature, 0.5)
        self.assertEqual(config.max_tool_rounds, 3)
        self.assertEqual(config.storage.tasks_key, "taskai_tasks")

    def test_invalid_max_tool_rounds(self):
        """Test invalid max_tool_rounds raises error."""
        with self.assertRaises(ValueError):
            AssistantConfig(max_tool_rounds=0)

    def test_invalid_log_level(self):
        """Test invalid log_level raises error."""
        with self.assertRaises(ValueError):
            AssistantConfig(log_level="INVALID")

    @patch.dict(os.environ, {
        **_CLEAN_ENV,
        "LLM_API_KEY": "env-key",
        "ASSISTANT_LLM_PROVIDER": "OpenAI",
        "ASSISTANT_LLM_TEMPERATURE": "0.7",
        "ASSISTANT_MAX_TOOL_ROUNDS": "2",
        "ASSISTANT_LOG_LEVEL": "debug",
        "ASSISTANT_DATA_FILE": "/tmp/tasks.json",
        "ASSISTANT_DEBUG": "true",
    })
    def test_from_env(self):
        """Test configuration is read from environment variables."""
        config = AssistantConfig.from_env()

        self.assertEqual(config.llm.provider, "openai")
        self.assertEqual(config.llm.model_name, "gpt-4o-mini")
        self.assertEqual(config.llm.api_key, "env-key")
        self.assertEqual(config.llm.temperature, 0.7)
        self.assertEqual(config.max_tool_rounds, 2)
        self.assertEqual(config.log_level, "DEBUG")
        self.assertEqual(config.storage.data_file, "/tmp/tasks.json")
        self.assertTrue(config.debug)

    def test_from_dict(self):
        """Test nested dictionaries become config objects."""
        config = AssistantConfig.from_dict({
            "llm": {"provider": "anthropic", "api_key": "sk-ant-x"},
            "storage": {"data_file": "tasks.json", "tasks_key": "mine"},
            "max_tool_rounds": 4,
        })

        self.assertIsInstance(config.llm, LLMConfig)
        self.assertIsInstance(config.storage, StorageConfig)
        self.assertEqual(config.storage.tasks_key, "mine")
        self.assertEqual(config.max_tool_rounds, 4)

    def test_to_dict_secrets(self):
        """Test secrets are only included on request."""
        config = AssistantConfig(llm=LLMConfig(api_key="secret"))

        self.assertNotIn("api_key", config.to_dict()["llm"])
        self.assertEqual(config.to_dict(include_secrets=True)["llm"]["api_key"], "secret")


class TestEnvConfig(unittest.TestCase):
    """Tests for EnvConfig helpers."""

    @patch.dict(os.environ, {"FLAG_ON": "Yes", "FLAG_OFF": "0", "NUM": "12", "RATE": "0.5"})
    def test_typed_getters(self):
        self.assertTrue(EnvConfig.get_bool("FLAG_ON"))
        self.assertFalse(EnvConfig.get_bool("FLAG_OFF", default=True))
        self.assertTrue(EnvConfig.get_bool("FLAG_MISSING", default=True))
        self.assertEqual(EnvConfig.get_int("NUM"), 12)
        self.assertEqual(EnvConfig.get_float("RATE"), 0.5)

    @patch.dict(os.environ, {"BLANK": "  "})
    def test_blank_value_counts_as_unset(self):
        """Test KEY= lines in .env fall back to the default."""
        self.assertEqual(EnvConfig.get("BLANK", "default"), "default")
        self.assertEqual(EnvConfig.get_int("BLANK", 7), 7)
        self.assertTrue(EnvConfig.get_bool("BLANK", default=True))

    @patch.dict(os.environ, {"BAD_NUM": "twelve"})
    def test_bad_number_names_the_variable(self):
        with self.assertRaises(ValueError) as ctx:
            EnvConfig.get_int("BAD_NUM", default=3)
        self.assertIn("BAD_NUM", str(ctx.exception))

    @patch.dict(os.environ, {"ASSISTANT_MAX_TOOL_ROUNDS": "lots"})
    def test_from_env_rejects_bad_number(self):
        with self.assertRaises(ValueError):
            AssistantConfig.from_env()

    def test_config_template_for_provider(self):
        self.assertIn("ASSISTANT_LLM_PROVIDER=anthropic", EnvConfig.show_config_template("anthropic"))


if __name__ == "__main__":
    unittest.main()
