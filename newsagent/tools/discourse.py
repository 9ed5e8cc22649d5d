"""Discourse forum tool for the AI agent.

Reads topics from configured Discourse instances through their JSON API so
that private or login-gated posts can be summarised.
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import ParseResult, urlparse

import requests
from pydantic import BaseModel, Field, ValidationError
from requests.exceptions import RequestException

from newsagent.agent.models import ToolDef
from newsagent.config import DEFAULT_USER_AGENT, DiscourseConfig, DiscourseInstance
from newsagent.tools.exceptions import (
    DiscourseAPIError,
    DiscourseFetchError,
    DiscourseParseError,
    InvalidUrlError,
    NoMatchingInstanceError,
    NoPostsFoundError,
    NotATopicUrlError,
)
from newsagent.tools.text import strip_html, truncate_chars

logger = logging.getLogger(__name__)

API_USERNAME = "system"


class Post(BaseModel):
    """A post within a topic's post stream."""

    model_config = {"extra": "ignore"}

    post_number: int
    username: str
    created_at: str
    cooked: str


class PostStream(BaseModel):
    """The post stream of a topic."""

    model_config = {"extra": "ignore"}

    posts: list[Post]


class TopicResponse(BaseModel):
    """Response body of ``GET /t/{topic_id}.json``."""

    model_config = {"extra": "ignore"}

    title: str
    post_stream: PostStream


class DiscourseArgs(BaseModel):
    """Arguments for fetching a Discourse topic."""

    url: str = Field(..., min_length=1, description="The Discourse topic URL to fetch.")


class DiscourseOutput(BaseModel):
    """A single Discourse post returned to the agent."""

    title: str
    author: str
    date: str
    text: str
    source_url: str
    truncated: bool


_ASCII_NUMBER = re.compile(r"[0-9]+")


def _is_ascii_number(segment: str) -> bool:
    # ASCII digits only; str.isdecimal() would accept "١٢٣"
    return _ASCII_NUMBER.fullmatch(segment) is not None


def parse_topic_path(path: str) -> tuple[int, int | None] | None:
    """Parse a Discourse topic path.

    Accepts ``/t/<slug>/<topic_id>`` and ``/t/<slug>/<topic_id>/<post_number>``.

    :param path: URL path.
    :returns: Tuple of (topic_id, post_number), or None if the path is not a topic.
    """
    segments = path.removeprefix("/").split("/")
    if len(segments) < 3 or segments[0] != "t" or not _is_ascii_number(segments[2]):
        return None

    topic_id = int(segments[2])
    post_number = None
    if len(segments) > 3 and _is_ascii_number(segments[3]):
        post_number = int(segments[3])
    return topic_id, post_number


def select_post(posts: list[Post], post_number: int | None) -> Post | None:
    """Pick the requested post, falling back to the first one.

    :param posts: Posts in stream order.
    :param post_number: Requested post number, if any.
    :returns: The selected post, or None if there are no posts.
    """
    if post_number is not None:
        for post in posts:
            if post.post_number == post_number:
                return post
    return posts[0] if posts else None


class DiscourseTool:
    """Agent tool that reads topics from configured Discourse instances."""

    NAME = "discourse_fetch"
    DESCRIPTION = (
        "Fetch a Discourse topic or post using the API. "
        "Use this for URLs matching configured Discourse instances."
    )

    def __init__(
        self,
        instances: tuple[DiscourseInstance, ...],
        max_chars: int,
        timeout: int,
    ) -> None:
        """Initialise the Discourse tool.

        :param instances: Configured instances, in match priority order.
        :param max_chars: Maximum characters of post text.
        :param timeout: Request timeout in seconds.
        """
        self.instances = instances
        self.max_chars = max_chars
        self.timeout = timeout

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": DEFAULT_USER_AGENT})

    @classmethod
    def from_config(cls, config: DiscourseConfig) -> DiscourseTool | None:
        """Create the tool if any instance is configured.

        :param config: Discourse configuration.
        :returns: Configured tool, or None when no instances are configured.
        """
        if not config.parsed_instances:
            logger.debug("No Discourse instances configured")
            return None
        return cls(config.parsed_instances, config.max_chars, config.timeout_secs)

    def base_urls(self) -> list[str]:
        """List the configured instance hosts.

        :returns: Hosts in configuration order.
        """
        return [instance.base_url for instance in self.instances]

    def find_instance(self, url: ParseResult) -> DiscourseInstance | None:
        """Find the configured instance serving a URL.

        An instance configured as ``host:port`` only matches URLs with that
        explicit port.

        :param url: Parsed request URL.
        :returns: Matching instance, or None.
        """
        host = url.hostname
        if not host:
            return None
        for instance in self.instances:
            if ":" in instance.base_url:
                cfg_host, cfg_port = instance.base_url.rsplit(":", 1)
                if host == cfg_host.lower() and url.port is not None and str(url.port) == cfg_port:
                    return instance
            elif host == instance.base_url.lower():
                return instance
        return None

    def fetch(self, url: str) -> DiscourseOutput:
        """Fetch a topic and return the requested post.

        :param url: Discourse topic URL, optionally ending in a post number.
        :returns: Title, author, date and text of the post.
        :raises InvalidUrlError: If the URL is malformed.
        :raises NoMatchingInstanceError: If no configured instance serves the host.
        :raises NotATopicUrlError: If the path is not a topic path.
        :raises DiscourseAPIError: If the API returns a non-success status.
        :raises DiscourseParseError: If the API response cannot be parsed.
        :raises NoPostsFoundError: If the topic has no posts.
        """
        logger.info(f"Fetching discourse topic {url}...")
        try:
            parsed = urlparse(url.strip())
            host, _port = parsed.hostname, parsed.port
        except ValueError as e:
            raise InvalidUrlError(url) from e
        if not parsed.scheme or not host:
            raise InvalidUrlError(url)

        instance = self.find_instance(parsed)
        if instance is None:
            raise NoMatchingInstanceError(host)

        topic = parse_topic_path(parsed.path)
        if topic is None:
            raise NotATopicUrlError(url)
        topic_id, post_number = topic

        api_url = f"{parsed.scheme}://{instance.base_url}/t/{topic_id}.json"
        topic_response = self._get_topic(api_url, instance)

        post = select_post(topic_response.post_stream.posts, post_number)
        if post is None:
            raise NoPostsFoundError(topic_id)

        text, truncated = truncate_chars(strip_html(post.cooked), self.max_chars)

        return DiscourseOutput(
            title=topic_response.title,
            author=post.username,
            date=post.created_at,
            text=text,
            source_url=url,
            truncated=truncated,
        )

    def _get_topic(self, api_url: str, instance: DiscourseInstance) -> TopicResponse:
        """Call the topic API of an instance.

        :param api_url: Full topic JSON URL.
        :param instance: Instance providing the API key.
        :returns: Parsed topic response.
        """
        headers = {"Api-Key": instance.api_key, "Api-Username": API_USERNAME}
        try:
            response = self._session.get(api_url, headers=headers, timeout=self.timeout)
        except RequestException as e:
            raise DiscourseFetchError(f"Discourse API request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"Discourse API request failed: {api_url} -> {response.status_code}")
            raise DiscourseAPIError(response.status_code, response.text)

        try:
            return TopicResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DiscourseParseError(f"Failed to parse Discourse API response: {e}") from e

    def call(self, args: DiscourseArgs) -> dict[str, Any]:
        """Tool handler.

        :param args: Validated tool arguments.
        :returns: Dictionary with title, author, date, text, source_url and truncated.
        """
        return self.fetch(args.url).model_dump()

    def tool_def(self) -> ToolDef:
        """Build the tool definition exposed to the agent.

        :returns: ToolDef for this tool.
        """
        return ToolDef(
            name=self.NAME,
            description=self.DESCRIPTION,
            args_model=DiscourseArgs,
            handler=self.call,
        )
