"""Tests for Sentry initialisation."""

import unittest
from unittest.mock import MagicMock, patch

from newsagent.observability.sentry import init_sentry


class TestInitSentry(unittest.TestCase):
    """Tests for init_sentry."""

    @patch("newsagent.observability.sentry.sentry_sdk.init")
    @patch.dict("os.environ", {}, clear=True)
    def test_noop_without_dsn(self, mock_init: MagicMock) -> None:
        """Test that nothing happens without SENTRY_DSN."""
        self.assertFalse(init_sentry())
        mock_init.assert_not_called()

    @patch("newsagent.observability.sentry.sentry_sdk.init")
    @patch.dict(
        "os.environ",
        {"SENTRY_DSN": "https://key@sentry.example.com/1", "APP_ENV": "prod"},
        clear=True,
    )
    def test_init_with_dsn(self, mock_init: MagicMock) -> None:
        """Test that Sentry is initialised with the configured environment."""
        self.assertTrue(init_sentry())

        kwargs = mock_init.call_args.kwargs
        self.assertEqual(kwargs["dsn"], "https://key@sentry.example.com/1")
        self.assertEqual(kwargs["environment"], "prod")
        self.assertFalse(kwargs["send_default_pii"])


if __name__ == "__main__":
    unittest.main()
