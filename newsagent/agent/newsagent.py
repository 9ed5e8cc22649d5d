"""Newsletter agent: wires the tools, prompts and runner together."""

from __future__ import annotations

import logging

from newsagent.agent.bedrock_client import BedrockClient
from newsagent.agent.prompt import build_initial_prompt, build_system_prompt
from newsagent.agent.registry import ToolRegistry
from newsagent.agent.runner import AgentRunner
from newsagent.agent.utils.config import AgentConfig
from newsagent.config import AppConfig
from newsagent.tools.discourse import DiscourseTool
from newsagent.tools.glean import GleanContext
from newsagent.tools.todoist import TodoistTasksTool
from newsagent.tools.web import WebReadabilityTool

logger = logging.getLogger(__name__)

MAX_TURNS = 20


class NewsAgent:
    """Drafts the newsletter from the configured task list.

    Construction builds every tool and gathers the style context, so
    configuration problems such as a missing style directory surface before
    any model call is made.
    """

    def __init__(self, config: AppConfig, client: BedrockClient | None = None) -> None:
        """Initialise the agent.

        :param config: Application configuration.
        :param client: Bedrock client. Created from config if not provided.
        :raises MissingDirectoryError: If the style context directory is missing.
        :raises InvalidFilterError: If the style context filter is invalid.
        """
        self._config = config

        todoist_tool = TodoistTasksTool.from_config(config.todoist)
        web_tool = WebReadabilityTool(config.web)
        glean = GleanContext(config.glean)
        discourse_tool = DiscourseTool.from_config(config.discourse)

        self.discourse_hosts = discourse_tool.base_urls() if discourse_tool else []

        self.registry = ToolRegistry()
        self.registry.register_all([todoist_tool.tool_def(), web_tool.tool_def(), glean.tool_def()])
        if discourse_tool is not None:
            self.registry.register(discourse_tool.tool_def())

        self.style_context = glean.gather()
        self.system_prompt = build_system_prompt(self.style_context)

        self._runner = AgentRunner(
            registry=self.registry,
            system_prompt=self.system_prompt,
            client=client
            or BedrockClient(region_name=config.bedrock.region, api_key=config.bedrock.api_key),
            config=AgentConfig(
                max_turns=MAX_TURNS,
                chat_model=config.bedrock.model,
                max_tokens=config.bedrock.max_tokens,
            ),
        )

    def initial_prompt(self) -> str:
        """Build the first user message for the run.

        :returns: Prompt text.
        """
        return build_initial_prompt(self._config.todoist.project_section, self.discourse_hosts)

    def run(self) -> str:
        """Run the agent and return the generated newsletter.

        :returns: The model's final text, verbatim.
        :raises BedrockClientError: If a model call fails.
        :raises MaxTurnsExceededError: If no final answer is produced within the turn limit.
        """
        logger.info("Sending prompt to model")
        result = self._runner.run(self.initial_prompt())
        return result.response
