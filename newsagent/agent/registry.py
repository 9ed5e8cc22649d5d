"""Tool registry for the agent runtime."""

import logging
from collections.abc import Iterable
from typing import Any

from newsagent.agent.exceptions import DuplicateToolError, ToolNotFoundError
from newsagent.agent.models import ToolDef

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Tools offered to the model, keyed by name in registration order."""

    def __init__(self) -> None:
        """Initialise an empty registry."""
        self._tools: dict[str, ToolDef] = {}

    def register(self, tool: ToolDef) -> None:
        """Add a tool.

        :param tool: Tool to add.
        :raises DuplicateToolError: If the name is already taken.
        """
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: name={tool.name}")

    def register_all(self, tools: Iterable[ToolDef]) -> None:
        """Add several tools in order.

        :raises DuplicateToolError: If any name is already taken.
        """
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> ToolDef:
        """Look up a tool.

        :param name: Tool name.
        :returns: The tool.
        :raises ToolNotFoundError: If no tool has that name.
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def names(self) -> list[str]:
        """Tool names in registration order."""
        return list(self._tools)

    def list_all(self) -> list[ToolDef]:
        """Tools in registration order."""
        return list(self._tools.values())

    def tool_config(self) -> dict[str, Any] | None:
        """Build the Converse ``toolConfig`` for every registered tool.

        :returns: Tool configuration, or None when the registry is empty.
        """
        if not self._tools:
            return None
        return {"tools": [tool.tool_spec() for tool in self._tools.values()]}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
