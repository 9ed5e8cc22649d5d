"""AI Agent module for tool-based LLM interactions.

This module provides the agent runtime built on AWS Bedrock Converse with
structured tool calling.
"""

from newsagent.agent.bedrock_client import MODEL_ALIASES, BedrockClient, resolve_model_id
from newsagent.agent.exceptions import (
    AgentError,
    BedrockClientError,
    DuplicateToolError,
    MaxTurnsExceededError,
    ResponseTruncatedError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolRegistryError,
)
from newsagent.agent.enums import StopReason, ToolResultStatus
from newsagent.agent.models import AgentRunResult, ModelReply, ToolCall, ToolDef, ToolUse
from newsagent.agent.registry import ToolRegistry
from newsagent.agent.runner import AgentRunner
from newsagent.agent.utils.config import DEFAULT_AGENT_CONFIG, AgentConfig

__all__ = [
    "DEFAULT_AGENT_CONFIG",
    "MODEL_ALIASES",
    "AgentConfig",
    "AgentError",
    "AgentRunResult",
    "AgentRunner",
    "BedrockClient",
    "BedrockClientError",
    "DuplicateToolError",
    "MaxTurnsExceededError",
    "ModelReply",
    "ResponseTruncatedError",
    "StopReason",
    "ToolCall",
    "ToolDef",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolRegistryError",
    "ToolResultStatus",
    "ToolUse",
    "resolve_model_id",
]
