"""Command-line entry point for the newsletter agent."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from newsagent.agent.exceptions import AgentError
from newsagent.agent.newsagent import NewsAgent
from newsagent.config import ConfigError, dotenv_path, load_config
from newsagent.observability.sentry import init_sentry
from newsagent.tools.exceptions import ToolError
from newsagent.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    """Draft the newsletter and print it to stdout.

    :returns: Process exit status.
    """
    load_dotenv(dotenv_path())
    configure_logging()
    init_sentry()

    try:
        config = load_config()
        agent = NewsAgent(config)
        newsletter = agent.run()
    except (ConfigError, ToolError, AgentError) as e:
        logger.error(f"newsagent failed: {e}")
        return 1

    print(newsletter)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
