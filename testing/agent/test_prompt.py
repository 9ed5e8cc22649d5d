"""Tests for the agent prompts."""

import unittest

from newsagent.agent.prompt import (
    PROMPT,
    SYSTEM_PREAMBLE,
    build_initial_prompt,
    build_system_prompt,
)


class TestBuildInitialPrompt(unittest.TestCase):
    """Tests for build_initial_prompt."""

    def test_no_hints(self) -> None:
        """Test that the template is returned unchanged without hints."""
        self.assertEqual(build_initial_prompt(None, []), PROMPT)

    def test_blank_section_adds_no_hint(self) -> None:
        """Test that a blank section is ignored."""
        self.assertEqual(build_initial_prompt("   ", []), PROMPT)

    def test_section_hint(self) -> None:
        """Test that the section hint names the trimmed section."""
        prompt = build_initial_prompt("  Newsletter  ", [])

        self.assertTrue(
            prompt.endswith('\n\nUse the todoist_tasks tool with section: "Newsletter".')
        )

    def test_discourse_hint(self) -> None:
        """Test that configured Discourse hosts are listed."""
        prompt = build_initial_prompt(None, ["forum.example.com", "localhost:3000"])

        self.assertIn(
            "For URLs on these Discourse instances: forum.example.com, localhost:3000, "
            "use the discourse_fetch tool instead of browse_web.",
            prompt,
        )

    def test_section_hint_precedes_discourse_hint(self) -> None:
        """Test the order of the dynamic hints."""
        prompt = build_initial_prompt("Inbox", ["forum.example.com"])

        self.assertLess(prompt.index("section:"), prompt.index("Discourse instances"))


class TestBuildSystemPrompt(unittest.TestCase):
    """Tests for build_system_prompt."""

    def test_without_style_context(self) -> None:
        """Test the preamble alone when there is no context."""
        self.assertEqual(build_system_prompt(""), SYSTEM_PREAMBLE)

    def test_with_style_context(self) -> None:
        """Test that the style context is appended after an introduction."""
        prompt = build_system_prompt("# a.md\n\nAlpha")

        self.assertEqual(
            prompt,
            f"{SYSTEM_PREAMBLE}\n\n"
            "Use the following sample as a style guide for tone and structure:\n\n"
            "# a.md\n\nAlpha",
        )


if __name__ == "__main__":
    unittest.main()
