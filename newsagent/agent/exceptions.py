"""Errors raised by the agent runtime."""


class AgentError(Exception):
    """Root of every agent runtime error."""


class ToolRegistryError(AgentError):
    """A tool could not be registered or looked up."""


class _NamedToolError(ToolRegistryError):
    message_template = "Tool '{name}'"

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(self.message_template.format(name=tool_name))


class DuplicateToolError(_NamedToolError):
    """Two tools were registered under one name."""

    message_template = "Tool '{name}' is already registered"


class ToolNotFoundError(_NamedToolError):
    """No tool is registered under the requested name."""

    message_template = "Tool '{name}' not found in registry"


class BedrockClientError(AgentError):
    """A Bedrock Converse call failed."""


class MaxTurnsExceededError(AgentError):
    """The model kept requesting tools past the turn limit.

    :param max_turns: Turn limit that was reached.
    """

    def __init__(self, max_turns: int) -> None:
        self.max_turns = max_turns
        super().__init__(f"Agent exceeded maximum turns: max={max_turns}")


class ToolExecutionError(AgentError):
    """A requested tool call could not produce a result.

    The runner turns this into an error result for the model, so ``error``
    is written for the model to read.

    :param tool_name: Tool the model asked for.
    :param error: Message returned to the model.
    """

    def __init__(self, tool_name: str, error: str) -> None:
        self.tool_name = tool_name
        self.error = error
        super().__init__(f"Tool call failed: tool={tool_name}, error={error}")


class ResponseTruncatedError(AgentError):
    """The final reply hit the token limit before the model finished.

    :param max_tokens: Token limit of the reply.
    :param partial: Text received before the cut-off.
    """

    def __init__(self, max_tokens: int, partial: str) -> None:
        self.max_tokens = max_tokens
        self.partial = partial
        super().__init__(f"Model reply truncated: max_tokens={max_tokens}")
