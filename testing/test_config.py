"""Tests for configuration loading."""

import unittest
from unittest.mock import patch

from newsagent.config import (
    DEFAULT_USER_AGENT,
    BedrockConfig,
    ConfigError,
    TodoistConfig,
    WebConfig,
    dotenv_path,
    load_config,
)

REQUIRED_ENV = {
    "NEWSAGENT_TODOIST_API_TOKEN": "token",
    "NEWSAGENT_TODOIST_PROJECT_ID": "proj-1",
    "NEWSAGENT_GLEAN_DIR": "/tmp/style",
}


class TestLoadConfig(unittest.TestCase):
    """Tests for load_config."""

    @patch.dict("os.environ", REQUIRED_ENV, clear=True)
    def test_defaults(self) -> None:
        """Test loading with only the required settings."""
        config = load_config()

        self.assertEqual(config.todoist.project_id, "proj-1")
        self.assertIsNone(config.todoist.project_section)
        self.assertEqual(config.todoist.base_url, "https://api.todoist.com")
        self.assertEqual(config.bedrock.model, "sonnet")
        self.assertIsNone(config.bedrock.api_key)
        self.assertEqual(config.web.max_chars, 8000)
        self.assertEqual(config.web.timeout_secs, 15)
        self.assertEqual(config.web.min_interval_ms, 0)
        self.assertEqual(config.web.user_agent, DEFAULT_USER_AGENT)
        self.assertEqual(config.web.allowlist_hosts, ())
        self.assertEqual(config.discourse.parsed_instances, ())
        self.assertEqual(config.glean.dir, "/tmp/style")
        self.assertIsNone(config.glean.filter)

    @patch.dict(
        "os.environ",
        {
            **REQUIRED_ENV,
            "NEWSAGENT_BEDROCK_MODEL": "Opus",
            "NEWSAGENT_TODOIST_PROJECT_SECTION": "  Newsletter ",
            "NEWSAGENT_WEB_ALLOWLIST": "github.com, .Python.org,,",
            "NEWSAGENT_WEB_MIN_INTERVAL_MS": "250",
            "NEWSAGENT_DISCOURSE_INSTANCES": "forum.example.com=key",
            "NEWSAGENT_GLEAN_FILTER": "issue",
        },
        clear=True,
    )
    def test_overrides(self) -> None:
        """Test that every component reads its own prefix."""
        config = load_config()

        self.assertEqual(config.bedrock.model, "opus")
        self.assertEqual(config.todoist.project_section, "Newsletter")
        self.assertEqual(config.web.allowlist_hosts, ("github.com", "python.org"))
        self.assertEqual(config.web.min_interval_ms, 250)
        self.assertEqual(config.discourse.parsed_instances[0].api_key, "key")
        self.assertEqual(config.glean.filter, "issue")

    @patch.dict("os.environ", {}, clear=True)
    def test_missing_required_settings(self) -> None:
        """Test that every missing required setting is reported."""
        with self.assertRaises(ConfigError) as ctx:
            load_config()

        message = str(ctx.exception)
        self.assertIn("NEWSAGENT_TODOIST_API_TOKEN", message)
        self.assertIn("NEWSAGENT_TODOIST_PROJECT_ID", message)
        self.assertIn("NEWSAGENT_GLEAN_DIR", message)

    @patch.dict(
        "os.environ",
        {**REQUIRED_ENV, "NEWSAGENT_WEB_MAX_CHARS": "lots"},
        clear=True,
    )
    def test_invalid_number(self) -> None:
        """Test that a non-numeric limit is a configuration error."""
        with self.assertRaises(ConfigError) as ctx:
            load_config()

        self.assertIn("NEWSAGENT_WEB_MAX_CHARS", str(ctx.exception))

    @patch.dict(
        "os.environ",
        {**REQUIRED_ENV, "NEWSAGENT_DISCOURSE_INSTANCES": "forum.example.com"},
        clear=True,
    )
    def test_invalid_discourse_instances(self) -> None:
        """Test that malformed Discourse instances are a configuration error."""
        with self.assertRaises(ConfigError) as ctx:
            load_config()

        self.assertIn("NEWSAGENT_DISCOURSE_INSTANCES", str(ctx.exception))


class TestComponentConfigs(unittest.TestCase):
    """Tests for individual settings classes."""

    def test_unknown_model_rejected(self) -> None:
        """Test that unknown model aliases fail validation."""
        with self.assertRaises(ValueError):
            BedrockConfig(model="gpt-4")

    def test_blank_section_is_none(self) -> None:
        """Test that a blank section is treated as unset."""
        config = TodoistConfig(api_token="t", project_id="p", project_section="   ")

        self.assertIsNone(config.project_section)

    def test_blank_user_agent_uses_default(self) -> None:
        """Test that a blank User-Agent falls back to the default."""
        self.assertEqual(WebConfig(user_agent="  ").user_agent, DEFAULT_USER_AGENT)

    @patch.dict("os.environ", {}, clear=True)
    def test_dotenv_path_default(self) -> None:
        """Test the default .env location."""
        self.assertEqual(dotenv_path(), ".env")

    @patch.dict("os.environ", {"NEWSAGENT_DOTENV_PATH": "/etc/newsagent.env"}, clear=True)
    def test_dotenv_path_override(self) -> None:
        """Test overriding the .env location."""
        self.assertEqual(dotenv_path(), "/etc/newsagent.env")


if __name__ == "__main__":
    unittest.main()
