"""AWS Bedrock Converse client for the newsletter agent."""

from __future__ import annotations

import logging
import os
import time
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from newsagent.agent.enums import ToolResultStatus
from newsagent.agent.exceptions import BedrockClientError
from newsagent.agent.models import ModelReply

if TYPE_CHECKING:
    from mypy_boto3_bedrock_runtime import BedrockRuntimeClient
    from mypy_boto3_bedrock_runtime.type_defs import (
        MessageTypeDef,
        ToolConfigurationTypeDef,
    )

logger = logging.getLogger(__name__)

DEFAULT_REGION = "eu-west-2"

# A full newsletter is generated in a single response
READ_TIMEOUT_SECS = 300

# boto3 reads Bedrock API keys from this variable
BEDROCK_API_KEY_ENV = "AWS_BEARER_TOKEN_BEDROCK"

MODEL_ALIASES: dict[str, str] = {
    "haiku": "global.anthropic.claude-haiku-4-5-20251001-v1:0",
    "sonnet": "global.anthropic.claude-sonnet-4-5-20250929-v1:0",
    "opus": "global.anthropic.claude-opus-4-5-20251101-v1:0",
}

VALID_MODEL_OPTIONS = frozenset(MODEL_ALIASES)


def resolve_model_id(alias: str) -> str:
    """Map a model alias to its Bedrock model ID.

    :param alias: haiku, sonnet or opus, in any case.
    :returns: Bedrock model ID.
    :raises ValueError: If the alias is unknown.
    """
    model_id = MODEL_ALIASES.get(alias.lower())
    if model_id is None:
        options = ", ".join(sorted(VALID_MODEL_OPTIONS))
        raise ValueError(f"Invalid model '{alias}'. Must be one of: {options}")
    return model_id


def user_message(text: str) -> MessageTypeDef:
    """Wrap text as a user message."""
    return {"role": "user", "content": [{"text": text}]}


def tool_result_block(
    tool_use_id: str,
    result: dict[str, Any],
    status: ToolResultStatus = ToolResultStatus.SUCCESS,
) -> dict[str, Any]:
    """Build the toolResult block answering one tool call.

    :param tool_use_id: ID of the tool call being answered.
    :param result: JSON result, or ``{"error": ...}`` on failure.
    :param status: Outcome reported to the model.
    :returns: Content block for a user message.
    """
    return {
        "toolResult": {
            "toolUseId": tool_use_id,
            "content": [{"json": result}],
            "status": str(status),
        }
    }


def tool_results_message(blocks: list[dict[str, Any]]) -> dict[str, Any]:
    """Collect the results of one turn into a single user message.

    Bedrock rejects the conversation if the answers to a multi-tool turn are
    split across messages.
    """
    return {"role": "user", "content": blocks}


class BedrockClient:
    """Thin wrapper over the Bedrock Converse API.

    The model is chosen per call, so one client can serve any alias.
    """

    def __init__(self, region_name: str | None = None, api_key: str | None = None) -> None:
        """Initialise the Bedrock client.

        :param region_name: AWS region. Defaults to AWS_REGION, then eu-west-2.
        :param api_key: Bedrock API key. Without one the AWS credential chain
            is used.
        """
        self.region_name = region_name or os.environ.get("AWS_REGION", DEFAULT_REGION)

        if api_key:
            os.environ[BEDROCK_API_KEY_ENV] = api_key

        self._client: BedrockRuntimeClient = boto3.client(
            "bedrock-runtime",
            region_name=self.region_name,
            config=Config(read_timeout=READ_TIMEOUT_SECS, retries={"max_attempts": 1}),
        )

        logger.debug(
            f"BedrockClient initialised: region={self.region_name}, api_key={bool(api_key)}"
        )

    def converse(  # noqa: PLR0913
        self,
        messages: list[MessageTypeDef],
        model: str,
        system_prompt: str | None = None,
        tool_config: ToolConfigurationTypeDef | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        cache_system_prompt: bool = True,
    ) -> ModelReply:
        """Make one Converse call.

        :param messages: Conversation so far.
        :param model: Model alias.
        :param system_prompt: Optional system prompt.
        :param tool_config: Tools offered to the model, if any.
        :param max_tokens: Response token limit.
        :param temperature: Sampling temperature.
        :param cache_system_prompt: Add a cache point after the system prompt.
        :returns: Parsed model reply.
        :raises BedrockClientError: If the call fails.
        :raises ValueError: If the model alias is unknown.
        """
        request = self._build_request(
            messages,
            resolve_model_id(model),
            system_prompt,
            tool_config,
            max_tokens,
            temperature,
            cache_system_prompt,
        )

        logger.debug(f"Calling Bedrock: model={request['modelId']}, messages={len(messages)}")
        started = time.perf_counter()
        try:
            response = self._client.converse(**request)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "Unknown")
            message = error.get("Message", str(e))
            logger.exception(f"Bedrock API error: code={code}, message={message}")
            raise BedrockClientError(f"Bedrock API call failed: {code} - {message}") from e
        except BotoCoreError as e:
            logger.exception("Bedrock request failed")
            raise BedrockClientError(f"Bedrock request failed: {e}") from e

        reply = ModelReply.from_response(response)
        latency_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(
            f"Bedrock reply: stop_reason={reply.stop_reason}, "
            f"usage={reply.usage}, latency_ms={latency_ms}"
        )

        cache_read = reply.usage.get("cacheReadInputTokens", 0)
        cache_write = reply.usage.get("cacheWriteInputTokens", 0)
        if cache_read or cache_write:
            logger.info(f"Prompt cache: read={cache_read} tokens, write={cache_write} tokens")

        return reply

    @staticmethod
    def _build_request(  # noqa: PLR0913
        messages: list[MessageTypeDef],
        model_id: str,
        system_prompt: str | None,
        tool_config: ToolConfigurationTypeDef | None,
        max_tokens: int,
        temperature: float,
        cache_system_prompt: bool,
    ) -> dict[str, Any]:
        request: dict[str, Any] = {
            "modelId": model_id,
            "messages": messages,
            "inferenceConfig": {"maxTokens": max_tokens, "temperature": temperature},
        }

        if system_prompt:
            system: list[dict[str, Any]] = [{"text": system_prompt}]
            if cache_system_prompt:
                system.append({"cachePoint": {"type": "default"}})
            request["system"] = system

        if tool_config:
            request["toolConfig"] = tool_config

        return request
