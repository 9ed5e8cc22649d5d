"""Conversation loop that drives the model and its tools."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from newsagent.agent.bedrock_client import (
    BedrockClient,
    tool_result_block,
    tool_results_message,
    user_message,
)
from newsagent.agent.enums import StopReason, ToolResultStatus
from newsagent.agent.exceptions import (
    BedrockClientError,
    MaxTurnsExceededError,
    ResponseTruncatedError,
    ToolExecutionError,
)
from newsagent.agent.models import AgentRunResult, ModelReply, ToolCall, ToolUse
from newsagent.agent.registry import ToolRegistry
from newsagent.agent.utils.config import DEFAULT_AGENT_CONFIG, AgentConfig
from newsagent.tools.exceptions import ToolError

logger = logging.getLogger(__name__)


@dataclass
class _Conversation:
    messages: list[dict[str, Any]]
    tool_calls: list[ToolCall] = field(default_factory=list)
    turns: int = 0


class AgentRunner:
    """Runs the model until it stops asking for tools.

    Each model call counts as one turn. Tools requested in a turn run
    sequentially and their results go back in a single user message. A
    failing tool becomes an error result for the model to react to; it never
    aborts the run.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        system_prompt: str,
        client: BedrockClient | None = None,
        config: AgentConfig = DEFAULT_AGENT_CONFIG,
    ) -> None:
        """Initialise the runner.

        :param registry: Tools offered to the model.
        :param system_prompt: System prompt sent with every call.
        :param client: Bedrock client. A default one is created if omitted.
        :param config: Turn limit and model settings.
        """
        self.registry = registry
        self.system_prompt = system_prompt
        self.client = client or BedrockClient()
        self._config = config

    def run(self, prompt: str) -> AgentRunResult:
        """Run the conversation to completion.

        :param prompt: Initial user message.
        :returns: Final text with the record of tool calls.
        :raises MaxTurnsExceededError: If no final answer arrives within max_turns.
        :raises ResponseTruncatedError: If a reply stops at the token limit.
        :raises BedrockClientError: If a model call fails.
        """
        conversation = _Conversation(messages=[user_message(prompt)])
        tool_config = self.registry.tool_config()

        logger.info(
            f"Starting agent run: model={self._config.chat_model}, "
            f"tools={self.registry.names() or '(none)'}, max_turns={self._config.max_turns}"
        )

        while conversation.turns < self._config.max_turns:
            reply = self._call_model(conversation.messages, tool_config)
            conversation.turns += 1
            logger.debug(f"Turn {conversation.turns}: stop_reason={reply.stop_reason}")

            if reply.stop_reason == StopReason.TOOL_USE:
                if reply.tool_uses:
                    self._answer_tool_uses(reply, conversation)
                    continue
                logger.warning("Model stopped for tool use without requesting a tool")
            elif reply.stop_reason == StopReason.MAX_TOKENS:
                logger.error(f"Reply truncated at max_tokens={self._config.max_tokens}")
                raise ResponseTruncatedError(self._config.max_tokens, reply.text)
            elif reply.stop_reason != StopReason.END_TURN:
                logger.warning(f"Unexpected stop reason: {reply.stop_reason}")

            logger.info(
                f"Agent run completed: turns={conversation.turns}, "
                f"tool_calls={len(conversation.tool_calls)}"
            )
            return AgentRunResult(
                response=reply.text,
                tool_calls=conversation.tool_calls,
                turns_taken=conversation.turns,
                stop_reason=reply.stop_reason,
            )

        logger.warning(f"Agent ran out of turns: max_turns={self._config.max_turns}")
        raise MaxTurnsExceededError(self._config.max_turns)

    def _call_model(
        self,
        messages: list[dict[str, Any]],
        tool_config: dict[str, Any] | None,
    ) -> ModelReply:
        try:
            return self.client.converse(
                messages=messages,  # type: ignore[arg-type]
                model=self._config.chat_model,
                system_prompt=self.system_prompt,
                tool_config=tool_config,  # type: ignore[arg-type]
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
            )
        except BedrockClientError:
            logger.exception("Model call failed during agent run")
            raise

    def _answer_tool_uses(self, reply: ModelReply, conversation: _Conversation) -> None:
        conversation.messages.append(reply.message)

        blocks = []
        for tool_use in reply.tool_uses:
            logger.info(f"Tool use requested: tool={tool_use.name}, id={tool_use.tool_use_id}")
            try:
                output, status = self._run_tool(tool_use), ToolResultStatus.SUCCESS
            except ToolExecutionError as e:
                logger.warning(str(e))
                output, status = {"error": e.error}, ToolResultStatus.ERROR

            conversation.tool_calls.append(
                ToolCall(
                    tool_use_id=tool_use.tool_use_id,
                    tool_name=tool_use.name,
                    input_args=tool_use.input,
                    output=output,
                    is_error=status == ToolResultStatus.ERROR,
                )
            )
            blocks.append(tool_result_block(tool_use.tool_use_id, output, status))

        conversation.messages.append(tool_results_message(blocks))

    def _run_tool(self, tool_use: ToolUse) -> dict[str, Any]:
        """Invoke the requested tool.

        :raises ToolExecutionError: For an unknown tool, invalid input or a
            failing handler.
        """
        if tool_use.name not in self.registry:
            raise ToolExecutionError(tool_use.name, f"Unknown tool: {tool_use.name}")

        tool = self.registry.get(tool_use.name)
        try:
            return tool.invoke(tool_use.input)
        except ValidationError as e:
            raise ToolExecutionError(tool.name, f"Invalid arguments: {e}") from e
        except ToolError as e:
            raise ToolExecutionError(tool.name, str(e)) from e
        except Exception as e:
            logger.exception(f"Tool raised unexpectedly: tool={tool.name}")
            raise ToolExecutionError(tool.name, str(e)) from e
