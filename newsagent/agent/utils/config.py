"""Limits and model settings for the agent loop."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AgentConfig:
    """Settings shared by every turn of a run.

    :param max_turns: Model calls allowed before the run is abandoned.
    :param chat_model: Model alias, resolved by the Bedrock client.
    :param max_tokens: Token limit for one reply. The newsletter arrives in a
        single reply, so this is set well above chat-sized answers.
    :param temperature: Sampling temperature.
    """

    max_turns: int = 20
    chat_model: str = "sonnet"
    max_tokens: int = 8192
    temperature: float = 0.3


DEFAULT_AGENT_CONFIG = AgentConfig()
