"""Custom exceptions for the agent tools."""


class ToolError(Exception):
    """Base exception for errors raised by tool implementations."""


class InvalidUrlError(ToolError):
    """Raised when a URL cannot be parsed or has no host."""

    def __init__(self, url: str) -> None:
        """Initialise InvalidUrlError.

        :param url: The URL as supplied by the caller.
        """
        self.url = url
        super().__init__(f"Invalid URL: {url}")


class DisallowedHostError(ToolError):
    """Raised when a URL host is not covered by the web allowlist."""

    def __init__(self, host: str) -> None:
        """Initialise DisallowedHostError.

        :param host: The host that was rejected.
        """
        self.host = host
        super().__init__(f"Disallowed host: {host}")


class WebFetchError(ToolError):
    """Raised when a web page cannot be fetched or extracted."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialise WebFetchError.

        :param message: Error message.
        :param status_code: HTTP status code if a response was received.
        """
        super().__init__(message)
        self.status_code = status_code


class TodoistAPIError(ToolError):
    """Raised when the Todoist API returns a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        """Initialise TodoistAPIError.

        :param status_code: HTTP status code returned by Todoist.
        :param body: Raw response body.
        """
        self.status_code = status_code
        self.body = body
        super().__init__(f"Todoist API error (status {status_code}): {body}")


class TodoistFetchError(ToolError):
    """Raised when a Todoist request fails before a usable response is read."""


class NoMatchingInstanceError(ToolError):
    """Raised when a URL does not belong to any configured Discourse instance."""

    def __init__(self, host: str) -> None:
        """Initialise NoMatchingInstanceError.

        :param host: Host of the requested URL.
        """
        self.host = host
        super().__init__(f"No configured Discourse instance for host: {host}")


class NotATopicUrlError(ToolError):
    """Raised when a URL path is not shaped like a Discourse topic."""

    def __init__(self, url: str) -> None:
        """Initialise NotATopicUrlError.

        :param url: The offending URL.
        """
        self.url = url
        super().__init__(f"Not a Discourse topic URL: {url}")


class DiscourseAPIError(ToolError):
    """Raised when a Discourse instance returns a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        """Initialise DiscourseAPIError.

        :param status_code: HTTP status code returned by Discourse.
        :param body: Raw response body.
        """
        self.status_code = status_code
        self.body = body
        super().__init__(f"Discourse API error (status {status_code}): {body}")


class DiscourseFetchError(ToolError):
    """Raised when a Discourse request fails at the transport level."""


class DiscourseParseError(ToolError):
    """Raised when a Discourse response body cannot be parsed."""


class NoPostsFoundError(ToolError):
    """Raised when a Discourse topic has an empty post stream."""

    def __init__(self, topic_id: int) -> None:
        """Initialise NoPostsFoundError.

        :param topic_id: ID of the topic without posts.
        """
        self.topic_id = topic_id
        super().__init__(f"No posts found in topic {topic_id}")


class InvalidFilterError(ToolError):
    """Raised when the style context filename filter contains a path separator."""

    def __init__(self, value: str) -> None:
        """Initialise InvalidFilterError.

        :param value: The rejected filter value.
        """
        self.value = value
        super().__init__(f"Invalid NEWSAGENT_GLEAN_FILTER: {value}")


class MissingDirectoryError(ToolError):
    """Raised when the style context directory does not exist."""

    def __init__(self, path: str) -> None:
        """Initialise MissingDirectoryError.

        :param path: The directory that was not found.
        """
        self.path = path
        super().__init__(f"Glean directory not found: {path}")


class GleanReadError(ToolError):
    """Raised when a selected Markdown file cannot be read."""
