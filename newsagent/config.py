"""Configuration for newsagent using pydantic-settings.

Every setting is read from an environment variable with the NEWSAGENT_ prefix.
Each component owns a settings class with its own sub-prefix, and AppConfig
bundles them for the orchestrator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import cached_property

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from newsagent.agent.bedrock_client import resolve_model_id

DEFAULT_USER_AGENT = "newsagent/0.1"
DEFAULT_MAX_CHARS = 8000
DEFAULT_TIMEOUT_SECS = 15


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class DiscourseInstance:
    """A configured Discourse instance.

    :param base_url: Host name, optionally with an explicit ``:port``.
    :param api_key: API key sent with every request to this instance.
    """

    base_url: str
    api_key: str


def _settings_config(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        extra="ignore",
        populate_by_name=True,
    )


class BedrockConfig(BaseSettings):
    """Configuration for the language model.

    :param api_key: Bedrock API key. Falls back to the AWS credential chain when unset.
    :param model: Model alias (haiku, sonnet, opus).
    :param region: AWS region. Defaults to AWS_REGION or eu-west-2.
    :param max_tokens: Maximum tokens per model response.
    """

    model_config = _settings_config("NEWSAGENT_BEDROCK_")

    api_key: str | None = Field(default=None, description="Bedrock API key")
    model: str = Field(default="sonnet", description="Model alias")
    region: str | None = Field(default=None, description="AWS region")
    max_tokens: int = Field(default=8192, ge=256, le=64000)

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        """Validate that the model is a known alias.

        :param v: Raw model alias from environment.
        :returns: The lower-cased alias.
        :raises ValueError: If the alias is unknown.
        """
        resolve_model_id(v)
        return v.lower()


class TodoistConfig(BaseSettings):
    """Configuration for the Todoist task tool.

    :param api_token: Todoist API token.
    :param project_id: Project whose tasks are rendered.
    :param project_section: Optional section the agent is told to use.
    :param base_url: Todoist API base URL.
    :param timeout_secs: Request timeout in seconds.
    """

    model_config = _settings_config("NEWSAGENT_TODOIST_")

    api_token: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    project_section: str | None = None
    base_url: str = "https://api.todoist.com"
    timeout_secs: int = Field(default=DEFAULT_TIMEOUT_SECS, ge=1)

    @field_validator("project_section")
    @classmethod
    def blank_section_is_none(cls, v: str | None) -> str | None:
        """Treat a blank section as unset.

        :param v: Raw section name.
        :returns: Trimmed section name or None.
        """
        if v is None or not v.strip():
            return None
        return v.strip()


class WebConfig(BaseSettings):
    """Configuration for the web readability tool.

    :param allowlist: Comma-separated host suffixes. Empty allows every host.
    :param max_chars: Maximum characters of extracted text.
    :param timeout_secs: Request timeout in seconds.
    :param min_interval_ms: Minimum milliseconds between requests.
    :param user_agent: User-Agent header for requests.
    """

    model_config = _settings_config("NEWSAGENT_WEB_")

    allowlist: str = ""
    max_chars: int = Field(default=DEFAULT_MAX_CHARS, ge=0)
    timeout_secs: int = Field(default=DEFAULT_TIMEOUT_SECS, ge=1)
    min_interval_ms: int = Field(default=0, ge=0)
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("user_agent")
    @classmethod
    def default_blank_user_agent(cls, v: str) -> str:
        """Fall back to the default user agent when blank.

        :param v: Raw user agent.
        :returns: The user agent to send.
        """
        return v.strip() or DEFAULT_USER_AGENT

    @cached_property
    def allowlist_hosts(self) -> tuple[str, ...]:
        """Get the allowlist entries as normalised host suffixes.

        :returns: Lower-cased entries without a leading dot.
        """
        entries = (entry.strip().lower().lstrip(".") for entry in self.allowlist.split(","))
        return tuple(entry for entry in entries if entry)


class DiscourseConfig(BaseSettings):
    """Configuration for the Discourse forum tool.

    :param instances: Comma-separated ``host=api_key`` pairs.
    :param max_chars: Maximum characters of post text.
    :param timeout_secs: Request timeout in seconds.
    """

    model_config = _settings_config("NEWSAGENT_DISCOURSE_")

    instances: str = ""
    max_chars: int = Field(default=DEFAULT_MAX_CHARS, ge=0)
    timeout_secs: int = Field(default=DEFAULT_TIMEOUT_SECS, ge=1)

    @field_validator("instances")
    @classmethod
    def validate_instances(cls, v: str) -> str:
        """Validate that every entry is a ``host=api_key`` pair.

        :param v: Raw comma-separated string from environment.
        :returns: The validated string.
        :raises ValueError: If an entry has no '=' separator.
        """
        if not v.strip():
            return ""
        for entry in v.split(","):
            if "=" not in entry:
                raise ValueError(
                    f"invalid discourse instance '{entry.strip()}': expected 'host=api_key'"
                )
        return v

    @cached_property
    def parsed_instances(self) -> tuple[DiscourseInstance, ...]:
        """Get the configured instances in configuration order.

        :returns: Tuple of DiscourseInstance.
        """
        if not self.instances:
            return ()
        parsed = []
        for entry in self.instances.split(","):
            base_url, api_key = entry.strip().split("=", 1)
            parsed.append(DiscourseInstance(base_url=base_url.strip(), api_key=api_key.strip()))
        return tuple(parsed)


class GleanConfig(BaseSettings):
    """Configuration for the local Markdown style context.

    :param dir: Directory walked for Markdown files.
    :param filter: Optional filename substring filter.
    """

    model_config = _settings_config("NEWSAGENT_GLEAN_")

    dir: str = Field(..., min_length=1)
    filter: str | None = None


@dataclass(frozen=True)
class AppConfig:
    """All configuration for a single newsagent run."""

    bedrock: BedrockConfig
    todoist: TodoistConfig
    web: WebConfig
    discourse: DiscourseConfig
    glean: GleanConfig


def _describe_validation_error(prefix: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"])
        problems.append(f"{prefix}{field.upper()}: {item['msg']}")
    return "; ".join(problems)


def load_config() -> AppConfig:
    """Load the application configuration from the environment.

    :returns: Fully validated AppConfig.
    :raises ConfigError: If any setting is missing or invalid.
    """
    sections: dict[str, type[BaseSettings]] = {
        "bedrock": BedrockConfig,
        "todoist": TodoistConfig,
        "web": WebConfig,
        "discourse": DiscourseConfig,
        "glean": GleanConfig,
    }

    loaded: dict[str, BaseSettings] = {}
    problems: list[str] = []
    for name, settings_class in sections.items():
        try:
            loaded[name] = settings_class()
        except ValidationError as e:
            prefix = str(settings_class.model_config.get("env_prefix", ""))
            problems.append(_describe_validation_error(prefix, e))

    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))

    return AppConfig(**loaded)  # type: ignore[arg-type]


def dotenv_path() -> str:
    """Get the path of the .env file to load.

    :returns: NEWSAGENT_DOTENV_PATH, or ".env" when unset.
    """
    return os.environ.get("NEWSAGENT_DOTENV_PATH", ".env")
