"""Tests for the NewsAgent orchestrator."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from newsagent.agent.models import AgentRunResult
from newsagent.agent.newsagent import MAX_TURNS, NewsAgent
from newsagent.agent.prompt import SYSTEM_PREAMBLE
from newsagent.config import (
    AppConfig,
    BedrockConfig,
    DiscourseConfig,
    GleanConfig,
    TodoistConfig,
    WebConfig,
)
from newsagent.tools.exceptions import MissingDirectoryError


class TestNewsAgent(unittest.TestCase):
    """Tests for NewsAgent."""

    def setUp(self) -> None:
        """Set up a style directory and configuration."""
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        Path(self._tmp.name, "sample.md").write_text("Sample issue", encoding="utf-8")

        self.client = MagicMock()

    def _config(self, instances: str = "", section: str | None = None, glean_dir: str = "") -> AppConfig:
        return AppConfig(
            bedrock=BedrockConfig(model="haiku", max_tokens=4096),
            todoist=TodoistConfig(api_token="token", project_id="proj", project_section=section),
            web=WebConfig(),
            discourse=DiscourseConfig(instances=instances),
            glean=GleanConfig(dir=glean_dir or self._tmp.name),
        )

    def test_registers_core_tools(self) -> None:
        """Test that the Discourse tool is omitted without instances."""
        agent = NewsAgent(self._config(), client=self.client)

        self.assertEqual(
            agent.registry.names(),
            ["todoist_tasks", "browse_web", "local_markdown_context"],
        )
        self.assertEqual(agent.discourse_hosts, [])

    def test_registers_discourse_tool(self) -> None:
        """Test that the Discourse tool is added when instances are configured."""
        agent = NewsAgent(self._config(instances="forum.example.com=key"), client=self.client)

        self.assertIn("discourse_fetch", agent.registry)
        self.assertEqual(agent.discourse_hosts, ["forum.example.com"])
        self.assertIn("forum.example.com", agent.initial_prompt())

    def test_system_prompt_includes_style_context(self) -> None:
        """Test that the gathered context is appended to the system prompt."""
        agent = NewsAgent(self._config(), client=self.client)

        self.assertTrue(agent.system_prompt.startswith(SYSTEM_PREAMBLE))
        self.assertTrue(agent.system_prompt.endswith("# sample.md\n\nSample issue"))

    def test_empty_style_directory(self) -> None:
        """Test that an empty style directory leaves only the preamble."""
        with tempfile.TemporaryDirectory() as empty:
            agent = NewsAgent(self._config(glean_dir=empty), client=self.client)

        self.assertEqual(agent.system_prompt, SYSTEM_PREAMBLE)

    def test_missing_style_directory_fails_at_construction(self) -> None:
        """Test that a missing style directory is reported before any model call."""
        with self.assertRaises(MissingDirectoryError):
            NewsAgent(self._config(glean_dir=str(Path(self._tmp.name, "missing"))), client=self.client)

        self.client.converse.assert_not_called()

    def test_section_hint_in_initial_prompt(self) -> None:
        """Test that the configured section is passed to the prompt."""
        agent = NewsAgent(self._config(section="Newsletter"), client=self.client)

        self.assertIn('section: "Newsletter"', agent.initial_prompt())

    @patch("newsagent.agent.newsagent.AgentRunner")
    def test_run_returns_response(self, mock_runner_class: MagicMock) -> None:
        """Test that run returns the model's final text."""
        mock_runner_class.return_value.run.return_value = AgentRunResult(response="## Issue 1")
        agent = NewsAgent(self._config(), client=self.client)

        self.assertEqual(agent.run(), "## Issue 1")

        kwargs = mock_runner_class.call_args.kwargs
        self.assertEqual(kwargs["config"].max_turns, MAX_TURNS)
        self.assertEqual(kwargs["config"].chat_model, "haiku")
        self.assertEqual(kwargs["config"].max_tokens, 4096)
        self.assertIs(kwargs["client"], self.client)
        mock_runner_class.return_value.run.assert_called_once_with(agent.initial_prompt())

    @patch("newsagent.agent.newsagent.BedrockClient")
    def test_builds_bedrock_client_from_config(self, mock_client_class: MagicMock) -> None:
        """Test that a client is created from the Bedrock settings when none is given."""
        config = self._config()
        config = AppConfig(
            bedrock=BedrockConfig(model="sonnet", region="us-east-1", api_key="bedrock-key"),
            todoist=config.todoist,
            web=config.web,
            discourse=config.discourse,
            glean=config.glean,
        )

        NewsAgent(config)

        mock_client_class.assert_called_once_with(region_name="us-east-1", api_key="bedrock-key")


if __name__ == "__main__":
    unittest.main()
