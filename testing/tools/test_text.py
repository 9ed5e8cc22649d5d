"""Tests for the plain-text helpers."""

import unittest

from newsagent.tools.text import strip_html, truncate_chars


class TestTruncateChars(unittest.TestCase):
    """Tests for truncate_chars."""

    def test_short_text_unchanged(self) -> None:
        """Test that text within the budget is returned unchanged."""
        self.assertEqual(truncate_chars("hello", 5), ("hello", False))

    def test_long_text_truncated(self) -> None:
        """Test that text over the budget is cut and flagged."""
        self.assertEqual(truncate_chars("hello world", 5), ("hello", True))

    def test_counts_characters_not_bytes(self) -> None:
        """Test that multi-byte characters count once."""
        text, truncated = truncate_chars("héllo wörld", 7)

        self.assertEqual(text, "héllo w")
        self.assertTrue(truncated)

    def test_zero_budget(self) -> None:
        """Test that a zero budget empties non-empty text."""
        self.assertEqual(truncate_chars("x", 0), ("", True))
        self.assertEqual(truncate_chars("", 0), ("", False))


class TestStripHtml(unittest.TestCase):
    """Tests for strip_html."""

    def test_removes_tags(self) -> None:
        """Test that tags are removed and text kept."""
        self.assertEqual(strip_html("<p>Hello <b>world</b></p>"), "Hello world")

    def test_decodes_entities(self) -> None:
        """Test that the basic entities are decoded."""
        self.assertEqual(
            strip_html("<p>a &amp; b &lt;c&gt; &quot;d&quot; &#39;e&#39;&nbsp;f</p>"),
            "a & b <c> \"d\" 'e' f",
        )

    def test_does_not_double_decode(self) -> None:
        """Test that an escaped entity is decoded only once."""
        self.assertEqual(strip_html("&amp;lt;"), "&lt;")

    def test_unknown_entities_left_alone(self) -> None:
        """Test that other entities pass through."""
        self.assertEqual(strip_html("&copy; 2024"), "&copy; 2024")


if __name__ == "__main__":
    unittest.main()
