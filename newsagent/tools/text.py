"""Plain-text helpers shared by the content fetching tools."""

import re

# Entities decoded after tag removal, in a single pass so that "&amp;lt;"
# becomes "&lt;" rather than "<".
_ENTITY_PATTERN = re.compile(r"&(amp|lt|gt|quot|#39|nbsp);")
_ENTITY_MAP: dict[str, str] = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
    "nbsp": " ",
}


def truncate_chars(text: str, max_chars: int) -> tuple[str, bool]:
    """Truncate text to a maximum number of characters.

    Characters are Unicode code points, not bytes.

    :param text: Text to truncate.
    :param max_chars: Maximum number of characters to keep.
    :returns: Tuple of (possibly truncated text, whether truncation happened).
    """
    if len(text) > max_chars:
        return text[:max_chars], True
    return text, False


def strip_html(html: str) -> str:
    """Remove HTML tags and decode the basic entities.

    This is a character scan rather than a parser: everything between a '<'
    and the next '>' is dropped.

    :param html: HTML fragment.
    :returns: Plain text.
    """
    parts: list[str] = []
    in_tag = False
    for ch in html:
        if ch == "<":
            in_tag = True
        elif ch == ">":
            in_tag = False
        elif not in_tag:
            parts.append(ch)

    return _ENTITY_PATTERN.sub(lambda match: _ENTITY_MAP[match.group(1)], "".join(parts))
