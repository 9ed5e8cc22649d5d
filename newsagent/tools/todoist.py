"""Todoist task tool for the AI agent.

Fetches the tasks of the configured project and renders them as nested
Markdown checklists grouped by section.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import requests
from pydantic import BaseModel, Field, ValidationError, field_validator
from requests.exceptions import RequestException

from newsagent.agent.models import ToolDef
from newsagent.config import TodoistConfig
from newsagent.tools.exceptions import TodoistAPIError, TodoistFetchError

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/v1/tasks"
SECTIONS_PATH = "/api/v1/sections"

NO_SECTION_HEADING = "## (No Section)"


class Task(BaseModel):
    """A Todoist task as returned by the list endpoint."""

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    id: str
    content: str
    description: str = ""
    parent_id: str | None = None
    section_id: str | None = None
    order: int = Field(alias="child_order")
    is_completed: bool = Field(alias="checked")

    @field_validator("description", mode="before")
    @classmethod
    def null_description_is_empty(cls, v: Any) -> Any:
        """Treat a null description as empty."""
        return "" if v is None else v


class Section(BaseModel):
    """A Todoist project section."""

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    id: str
    order: int = Field(alias="section_order")
    name: str


class TodoistClient:
    """Read-only client for the Todoist REST API."""

    def __init__(self, config: TodoistConfig) -> None:
        """Initialise the Todoist client.

        :param config: Todoist configuration.
        """
        self.base_url = config.base_url.rstrip("/")
        self.project_id = config.project_id
        self.timeout = config.timeout_secs

        self._session = requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {config.api_token}"})

        logger.debug(f"TodoistClient initialised: base_url={self.base_url}")

    def fetch_tasks(self, section_id: str | None = None) -> list[Task]:
        """Fetch every task in the project, optionally limited to one section.

        :param section_id: Only fetch tasks in this section.
        :returns: List of tasks in API order.
        :raises TodoistAPIError: If Todoist returns a non-success status.
        :raises TodoistFetchError: If the request or response parsing fails.
        """
        params = {"project_id": self.project_id}
        if section_id is not None:
            params["section_id"] = section_id
        return [self._parse(Task, item) for item in self._list(TASKS_PATH, params)]

    def fetch_sections(self) -> list[Section]:
        """Fetch every section in the project.

        :returns: List of sections in API order.
        :raises TodoistAPIError: If Todoist returns a non-success status.
        :raises TodoistFetchError: If the request or response parsing fails.
        """
        params = {"project_id": self.project_id}
        return [self._parse(Section, item) for item in self._list(SECTIONS_PATH, params)]

    def _list(self, path: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """Collect results from a paginated list endpoint.

        :param path: API endpoint path.
        :param params: Query parameters sent with every page.
        :returns: Concatenated results across all pages.
        """
        results: list[dict[str, Any]] = []
        cursor: str | None = None

        while True:
            page_params = dict(params)
            if cursor:
                page_params["cursor"] = cursor

            data = self._get(path, page_params)
            results.extend(data.get("results") or [])

            cursor = data.get("next_cursor")
            if not cursor:
                break

        return results

    def _get(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        """Make a GET request and decode the JSON body.

        :param path: API endpoint path.
        :param params: Query parameters.
        :returns: Decoded JSON object.
        :raises TodoistAPIError: If Todoist returns a non-success status.
        :raises TodoistFetchError: If the request fails or the body is not a JSON object.
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"Todoist request: GET {path} params={params}")

        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except RequestException as e:
            raise TodoistFetchError(f"Todoist request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"Todoist request failed: GET {path} -> {response.status_code}")
            raise TodoistAPIError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise TodoistFetchError(f"Todoist response for {path} was not valid JSON") from e

        if not isinstance(data, dict):
            raise TodoistFetchError(f"Unexpected Todoist response for {path}")
        return data

    @staticmethod
    def _parse[T: BaseModel](model: type[T], item: dict[str, Any]) -> T:
        try:
            return model.model_validate(item)
        except ValidationError as e:
            raise TodoistFetchError(f"Unexpected Todoist {model.__name__.lower()}: {e}") from e

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()


def render_tasks(
    tasks: Iterable[Task],
    sections: Iterable[Section],
    hide_section_headers: bool,
) -> str:
    """Render tasks as Markdown checklists grouped by section.

    Root tasks are grouped under their section headings in section order, with
    subtasks nested beneath their parent. A task whose parent is not in
    ``tasks`` is treated as a root task. Root tasks whose section is not in
    ``sections`` are not rendered.

    :param tasks: Tasks to render.
    :param sections: Sections the tasks may belong to.
    :param hide_section_headers: Omit section headings and sectionless tasks.
    :returns: Markdown with surrounding whitespace stripped.
    """
    tasks = list(tasks)
    sections_sorted = sorted(sections, key=lambda s: s.order)
    task_ids = {task.id for task in tasks}

    # None is the key for root tasks, including orphans whose parent is missing
    tasks_by_parent: dict[str | None, list[Task]] = {}
    for task in tasks:
        parent_key = task.parent_id if task.parent_id in task_ids else None
        tasks_by_parent.setdefault(parent_key, []).append(task)

    for siblings in tasks_by_parent.values():
        siblings.sort(key=lambda t: t.order)

    root_tasks_by_section: dict[str | None, list[Task]] = {}
    for task in tasks_by_parent.get(None, []):
        root_tasks_by_section.setdefault(task.section_id, []).append(task)

    lines: list[str] = []

    for section in sections_sorted:
        section_tasks = root_tasks_by_section.get(section.id)
        if not section_tasks:
            continue
        if not hide_section_headers:
            lines.extend([f"## {section.name}", ""])
        for task in section_tasks:
            _format_task(task, tasks_by_parent, 0, lines)
        if not hide_section_headers:
            lines.append("")

    unsectioned = root_tasks_by_section.get(None)
    if not hide_section_headers and unsectioned:
        if sections_sorted:
            lines.extend([NO_SECTION_HEADING, ""])
        for task in unsectioned:
            _format_task(task, tasks_by_parent, 0, lines)

    return "\n".join(lines).strip()


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` and ``\\r\\n`` only.

    A single trailing line ending does not start an extra empty line, and a
    bare ``\\r`` at the very end is kept. Other Unicode line breaks stay
    inside their line.
    """
    *terminated, last = text.split("\n")
    lines = [line.removesuffix("\r") for line in terminated]
    if last:
        lines.append(last)
    return lines


def _format_task(
    task: Task,
    tasks_by_parent: dict[str | None, list[Task]],
    depth: int,
    lines: list[str],
) -> None:
    indent = "  " * depth
    checkbox = "[x]" if task.is_completed else "[ ]"
    lines.append(f"{indent}- {checkbox} {task.content}")

    if task.description:
        desc_indent = "  " * (depth + 1)
        first, *rest = split_lines(task.description) or [""]
        lines.append(f"{desc_indent}- **Description**: {first}")
        lines.extend(f"{desc_indent}  {line}" for line in rest)

    for child in tasks_by_parent.get(task.id, []):
        _format_task(child, tasks_by_parent, depth + 1, lines)


class TodoistTasksArgs(BaseModel):
    """Arguments for fetching Todoist tasks."""

    section: str | None = Field(
        default=None,
        description="Optional section name to filter by (case-insensitive).",
    )


class TodoistTasksOutput(BaseModel):
    """Rendered task list returned to the agent."""

    markdown: str


class TodoistTasksTool:
    """Agent tool that renders the configured project's tasks as Markdown."""

    NAME = "todoist_tasks"
    DESCRIPTION = "Fetch Todoist tasks for the configured project and return them as Markdown."

    def __init__(self, client: TodoistClient) -> None:
        """Initialise the tool.

        :param client: Todoist client for the configured project.
        """
        self._client = client

    @classmethod
    def from_config(cls, config: TodoistConfig) -> TodoistTasksTool:
        """Create the tool from configuration.

        :param config: Todoist configuration.
        :returns: Configured tool.
        """
        return cls(TodoistClient(config))

    def fetch_and_render(self, section: str | None = None) -> str:
        """Fetch tasks and render them as Markdown.

        With a section filter only that section's tasks are rendered, without
        headings. An unknown section yields an empty string.

        :param section: Optional section name, matched case-insensitively.
        :returns: Rendered Markdown.
        """
        section_filter = section.strip() if section and section.strip() else None

        if section_filter is None:
            logger.info(f"Fetching all tasks (project_id: {self._client.project_id})...")
            tasks = self._client.fetch_tasks()
            sections = self._client.fetch_sections()
            logger.info(f"Fetched {len(tasks)} tasks")
            return render_tasks(tasks, sections, hide_section_headers=False)

        all_sections = self._client.fetch_sections()
        matched = next(
            (s for s in all_sections if s.name.casefold() == section_filter.casefold()),
            None,
        )
        if matched is None:
            logger.warning(f"Section '{section_filter}' not found")
            return ""

        logger.info(f"Fetching tasks for section '{matched.name}' (section_id: {matched.id})...")
        tasks = self._client.fetch_tasks(section_id=matched.id)
        logger.info(f"Fetched {len(tasks)} tasks")
        return render_tasks(tasks, [matched], hide_section_headers=True)

    def call(self, args: TodoistTasksArgs) -> dict[str, Any]:
        """Tool handler.

        :param args: Validated tool arguments.
        :returns: Dictionary with the rendered 'markdown'.
        """
        return TodoistTasksOutput(markdown=self.fetch_and_render(args.section)).model_dump()

    def tool_def(self) -> ToolDef:
        """Build the tool definition exposed to the agent.

        :returns: ToolDef for this tool.
        """
        return ToolDef(
            name=self.NAME,
            description=self.DESCRIPTION,
            args_model=TodoistTasksArgs,
            handler=self.call,
        )
