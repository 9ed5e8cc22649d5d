"""Web readability tool for the AI agent.

Fetches a page, reduces it to its main readable content and returns plain
text, subject to a host allowlist and a minimum interval between requests.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from lxml.etree import ParserError
from pydantic import BaseModel, Field
from readability import Document
from readability.readability import Unparseable
from requests.exceptions import RequestException

from newsagent.agent.models import ToolDef
from newsagent.config import WebConfig
from newsagent.tools.exceptions import DisallowedHostError, InvalidUrlError, WebFetchError
from newsagent.tools.rate_limit import RateLimiter
from newsagent.tools.text import truncate_chars

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https"})


def parse_http_url(url: str) -> tuple[str, str]:
    """Validate an absolute http(s) URL.

    :param url: URL supplied by the agent.
    :returns: Tuple of (normalised URL, lower-cased host).
    :raises InvalidUrlError: If the URL has no http(s) scheme or no host.
    """
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname
    except ValueError as e:
        raise InvalidUrlError(url) from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not host:
        raise InvalidUrlError(url)

    return parsed.geturl(), host


def is_host_allowed(host: str, allowlist: tuple[str, ...]) -> bool:
    """Check a host against the allowlist.

    A host is allowed when it equals an entry or is a subdomain of one.
    An empty allowlist allows every host.

    :param host: Lower-cased host name.
    :param allowlist: Normalised allowlist entries.
    :returns: True if the host may be fetched.
    """
    if not allowlist:
        return True
    host = host.lower()
    return any(host == entry or host.endswith(f".{entry}") for entry in allowlist)


def extract_readable(html: str | bytes) -> tuple[str, str]:
    """Extract the title and main body text from an HTML page.

    Bytes are decoded by readability, which honours ``<meta charset>`` and
    falls back to detection.

    :param html: HTML document, decoded or raw.
    :returns: Tuple of (title, body text).
    :raises WebFetchError: If the document cannot be parsed.
    """
    try:
        doc = Document(html)
        title = doc.title()
        summary = doc.summary(html_partial=True)
    except (Unparseable, ParserError, ValueError) as e:
        raise WebFetchError(f"Readability extract failed: {e}") from e

    soup = BeautifulSoup(summary, "lxml")
    text = soup.get_text(separator="\n", strip=True)
    return title, text


def response_markup(response: requests.Response) -> str | bytes:
    """Body to hand to the extractor.

    requests assumes ISO-8859-1 for ``text/*`` without a charset, so in that
    case the raw bytes are returned for readability to decode.
    """
    if "charset=" in response.headers.get("Content-Type", "").lower():
        return response.text
    return response.content


class WebReadabilityArgs(BaseModel):
    """Arguments for fetching a web page."""

    url: str = Field(..., min_length=1, description="The URL to fetch and extract content from.")


class WebReadabilityOutput(BaseModel):
    """Readable content of a fetched page."""

    title: str
    text: str
    source_url: str
    truncated: bool


class WebReadabilityTool:
    """Agent tool that fetches a web page and returns its readable text."""

    NAME = "browse_web"
    DESCRIPTION = (
        "Fetch a web page, extract the main content using Readability, and return plain text."
    )

    def __init__(self, config: WebConfig, rate_limiter: RateLimiter | None = None) -> None:
        """Initialise the web tool.

        :param config: Web configuration.
        :param rate_limiter: Shared rate limiter. Built from config if not provided.
        """
        self.allowlist = config.allowlist_hosts
        self.max_chars = config.max_chars
        self.timeout = config.timeout_secs
        self.rate_limiter = rate_limiter or RateLimiter.from_millis(config.min_interval_ms)

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": config.user_agent})

        logger.debug(
            f"WebReadabilityTool initialised: allowlist={list(self.allowlist) or '(any)'}, "
            f"max_chars={self.max_chars}, min_interval={self.rate_limiter.min_interval}s"
        )

    def fetch(self, url: str) -> WebReadabilityOutput:
        """Fetch a URL and extract its readable content.

        :param url: URL to fetch.
        :returns: Title, text and truncation flag.
        :raises InvalidUrlError: If the URL is malformed.
        :raises DisallowedHostError: If the host is not allowlisted.
        :raises WebFetchError: If the request fails or returns a non-success status.
        """
        logger.info(f"Fetching {url}...")
        source_url, host = parse_http_url(url)
        if not is_host_allowed(host, self.allowlist):
            raise DisallowedHostError(host)

        self.rate_limiter.wait()

        try:
            response = self._session.get(source_url, timeout=self.timeout)
        except RequestException as e:
            raise WebFetchError(f"Web request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise WebFetchError(
                f"Web request returned error status {response.status_code} for {source_url}",
                status_code=response.status_code,
            )

        title, text = extract_readable(response_markup(response))
        text, truncated = truncate_chars(text, self.max_chars)
        if truncated:
            logger.debug(f"Truncated content of {source_url} to {self.max_chars} chars")

        return WebReadabilityOutput(
            title=title,
            text=text,
            source_url=source_url,
            truncated=truncated,
        )

    def call(self, args: WebReadabilityArgs) -> dict[str, Any]:
        """Tool handler.

        :param args: Validated tool arguments.
        :returns: Dictionary with title, text, source_url and truncated.
        """
        return self.fetch(args.url).model_dump()

    def tool_def(self) -> ToolDef:
        """Build the tool definition exposed to the agent.

        :returns: ToolDef for this tool.
        """
        return ToolDef(
            name=self.NAME,
            description=self.DESCRIPTION,
            args_model=WebReadabilityArgs,
            handler=self.call,
        )
