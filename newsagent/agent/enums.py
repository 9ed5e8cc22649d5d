"""Enumerations for the agent runtime."""

from enum import StrEnum


class StopReason(StrEnum):
    """Why the model ended its turn, as reported by Bedrock Converse."""

    END_TURN = "end_turn"
    TOOL_USE = "tool_use"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"
    GUARDRAIL_INTERVENED = "guardrail_intervened"
    CONTENT_FILTERED = "content_filtered"


class ToolResultStatus(StrEnum):
    """Outcome reported back to the model for a tool call."""

    SUCCESS = "success"
    ERROR = "error"
