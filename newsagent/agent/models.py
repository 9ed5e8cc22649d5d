"""Pydantic models for the agent runtime."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field


class ToolDef(BaseModel):
    """A tool the model may call.

    :param name: Name the model uses to call the tool.
    :param description: Model-facing description of the tool.
    :param args_model: Pydantic model validating the tool input.
    :param handler: Callable receiving the validated arguments.
    """

    name: str = Field(..., min_length=1, max_length=64)
    description: str = Field(..., min_length=1, max_length=1024)
    args_model: type[BaseModel]
    handler: Callable[[Any], dict[str, Any]]

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the tool input, without the model title."""
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        return schema

    def tool_spec(self) -> dict[str, Any]:
        """Build the Converse ``toolSpec`` entry for this tool.

        :returns: Tool specification for a Bedrock ``toolConfig``.
        """
        return {
            "toolSpec": {
                "name": self.name,
                "description": self.description,
                "inputSchema": {"json": self.input_schema()},
            }
        }

    def invoke(self, raw_args: Mapping[str, Any]) -> dict[str, Any]:
        """Validate raw model input and run the handler.

        :param raw_args: Tool input exactly as the model sent it.
        :returns: The handler's JSON-serialisable result.
        :raises ValidationError: If the input does not match ``args_model``.
        """
        return self.handler(self.args_model.model_validate(dict(raw_args)))


class ToolUse(BaseModel):
    """A tool call requested by the model."""

    model_config = {"frozen": True}

    tool_use_id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class ModelReply(BaseModel):
    """The parts of a Converse response the runner acts on.

    :param stop_reason: Raw stop reason. Compared against StopReason members.
    :param message: Assistant message, kept verbatim for the conversation history.
    :param text: Text blocks joined by newlines.
    :param tool_uses: Tool calls in the order the model made them.
    :param usage: Token usage as reported by Bedrock.
    """

    stop_reason: str = ""
    message: dict[str, Any] = Field(default_factory=dict)
    text: str = ""
    tool_uses: list[ToolUse] = Field(default_factory=list)
    usage: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> ModelReply:
        """Parse a raw Converse response.

        :param response: Response returned by ``bedrock-runtime.converse``.
        :returns: Parsed reply.
        """
        message = dict(response.get("output", {}).get("message", {}))
        content = message.get("content", [])

        text = "\n".join(block["text"] for block in content if "text" in block)
        tool_uses = [
            ToolUse(
                tool_use_id=block["toolUse"].get("toolUseId", ""),
                name=block["toolUse"].get("name", ""),
                input=block["toolUse"].get("input") or {},
            )
            for block in content
            if "toolUse" in block
        ]

        return cls(
            stop_reason=str(response.get("stopReason", "")),
            message=message,
            text=text,
            tool_uses=tool_uses,
            usage=dict(response.get("usage", {})),
        )


class ToolCall(BaseModel):
    """Record of one tool call made during a run."""

    tool_use_id: str
    tool_name: str
    input_args: dict[str, Any]
    output: dict[str, Any]
    is_error: bool = False


class AgentRunResult(BaseModel):
    """Outcome of a completed run.

    :param response: Final text produced by the model.
    :param tool_calls: Tool calls in the order they were made.
    :param turns_taken: Number of model calls.
    :param stop_reason: Stop reason of the final model call.
    """

    response: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)
    turns_taken: int = 0
    stop_reason: str = "end_turn"
