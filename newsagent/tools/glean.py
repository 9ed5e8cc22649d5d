"""Local Markdown style context for the AI agent.

Collects example documents from a local directory so the model can match
their tone and structure.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from newsagent.agent.models import ToolDef
from newsagent.config import GleanConfig
from newsagent.tools.exceptions import GleanReadError, InvalidFilterError, MissingDirectoryError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"

# U+2028 would start a new line inside a heading in some renderers
LINE_SEPARATOR = "\u2028"


def display_path(relative: Path) -> str:
    """Format a relative path for use in a heading.

    :param relative: Path relative to the context root.
    :returns: POSIX-style path with line separators replaced by spaces.
    """
    return relative.as_posix().replace(LINE_SEPARATOR, " ")


class GleanArgs(BaseModel):
    """The style context tool takes no arguments."""


class GleanOutput(BaseModel):
    """Concatenated style context."""

    context: str


class GleanContext:
    """Gathers Markdown files from a directory into one context blob."""

    NAME = "local_markdown_context"
    DESCRIPTION = (
        "Collect markdown files from the configured local directory "
        "and return concatenated context."
    )

    def __init__(self, config: GleanConfig) -> None:
        """Initialise the gatherer.

        :param config: Style context configuration.
        :raises MissingDirectoryError: If the directory does not exist.
        :raises InvalidFilterError: If the filter contains a path separator.
        """
        self.root = Path(config.dir)
        if not self.root.is_dir():
            raise MissingDirectoryError(str(self.root))

        value = config.filter.strip() if config.filter else ""
        if "/" in value or "\\" in value:
            raise InvalidFilterError(value)
        self.filter = value or None

    def _matches(self, path: Path) -> bool:
        if path.suffix != MARKDOWN_SUFFIX:
            return False
        if self.filter is not None and self.filter not in path.name:
            return False
        return path.is_file() and not path.is_symlink()

    def _collect(self) -> list[Path]:
        files: list[Path] = []
        for dirpath, _dirnames, filenames in os.walk(self.root, followlinks=False):
            for filename in filenames:
                path = Path(dirpath) / filename
                if self._matches(path):
                    files.append(path)
        files.sort(key=lambda p: os.fsencode(p))
        return files

    def gather(self) -> str:
        """Concatenate the selected Markdown files.

        Each file is emitted under a level-one heading naming its path relative
        to the root. Files are ordered by path.

        :returns: The style context, or an empty string if nothing matched.
        :raises GleanReadError: If a selected file cannot be read.
        """
        if self.filter is not None:
            logger.info(f"Gathering context from '{self.root}' with filter '{self.filter}'")
        else:
            logger.info(f"Gathering context from '{self.root}' with no filter")

        files = self._collect()
        logger.info(f"Found {len(files)} documents to use as context")

        sections: list[str] = []
        for path in files:
            logger.debug(f"Using {path}")
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise GleanReadError(f"Reading {path}: {e}") from e
            heading = display_path(path.relative_to(self.root))
            sections.append(f"# {heading}\n\n{content.strip()}\n\n")

        return "".join(sections).strip()

    def call(self, _args: GleanArgs) -> dict[str, Any]:
        """Tool handler.

        :returns: Dictionary with the gathered 'context'.
        """
        return GleanOutput(context=self.gather()).model_dump()

    def tool_def(self) -> ToolDef:
        """Build the tool definition exposed to the agent.

        :returns: ToolDef for this tool.
        """
        return ToolDef(
            name=self.NAME,
            description=self.DESCRIPTION,
            args_model=GleanArgs,
            handler=self.call,
        )
