"""Plain-text line form of a task, e.g. '- [ ] Pay rent ⏳ 2024-01-08 📅 2024-01-10'."""

import re
from datetime import date, datetime

from .config import (
    DONE_DATE_SIGNIFIER,
    DUE_DATE_SIGNIFIER,
    SCHEDULED_DATE_SIGNIFIER,
    START_DATE_SIGNIFIER,
)
from .models import Task, TaskStatus

_TASK_LINE = re.compile(r"^(?P<indent>\s*)(?P<marker>[-*+]|\d+[.)]) \[(?P<symbol>.)\] (?P<body>.*)$")

_SIGNIFIER_FIELDS = {
    DUE_DATE_SIGNIFIER: "due",
    SCHEDULED_DATE_SIGNIFIER: "scheduled",
    START_DATE_SIGNIFIER: "start",
    DONE_DATE_SIGNIFIER: "done",
}

_TRAILING_DATE = re.compile(
    r"\s*(?P<signifier>" + "|".join(_SIGNIFIER_FIELDS) + r")\ufe0f?\s*(?P<date>\d{4}-\d{2}-\d{2})\s*$"
)

# Tags and block ids written after the dates, e.g. "#home" or "^abc123"
_TRAILING_TAG = re.compile(r"\s+(?P<tag>#[^\s#]+|\^[A-Za-z0-9-]+)\s*$")

# Output order follows the order dates are written in a task line.
_OUTPUT_ORDER = (
    (START_DATE_SIGNIFIER, "start"),
    (SCHEDULED_DATE_SIGNIFIER, "scheduled"),
    (DUE_DATE_SIGNIFIER, "due"),
    (DONE_DATE_SIGNIFIER, "done"),
)


def parse_task_line(
    line: str, path: str | None = None, line_number: int | None = None
) -> Task | None:
    """
    Parse one line of a note into a Task.

    Args:
        line: Line text without the trailing newline
        path: Note the line was read from
        line_number: Zero-based index of the line in the note

    Returns:
        Task, or None if the line is not a checkbox item with a known status
    """
    match = _TASK_LINE.match(line)
    if match is None:
        return None

    try:
        status = TaskStatus.from_symbol(match.group("symbol"))
    except ValueError:
        return None

    body = match.group("body")
    tags: list[str] = []
    while True:
        tag = _TRAILING_TAG.search(body)
        if tag is None:
            break
        tags.insert(0, tag.group("tag"))
        body = body[: tag.start()]

    dates: dict[str, date] = {}
    while True:
        trailing = _TRAILING_DATE.search(body)
        if trailing is None:
            break
        try:
            value = datetime.strptime(trailing.group("date"), "%Y-%m-%d").date()
        except ValueError:
            break
        dates.setdefault(_SIGNIFIER_FIELDS[trailing.group("signifier")], value)
        body = body[: trailing.start()]

    # Tags stay in the description unless they come after the dates
    if not dates:
        body = match.group("body")
        tags = []

    return Task(
        description=body.strip(),
        status=status,
        path=path,
        line_number=line_number,
        indentation=match.group("indent"),
        list_marker=match.group("marker"),
        trailing_tags=" ".join(tags),
        original_markdown=line,
        **dates,
    )


def to_line_text(task: Task) -> str:
    """Render a task as the line it is stored as in a note."""
    parts = [f"{task.indentation}{task.list_marker} [{task.status.symbol}] {task.description}"]
    for signifier, attribute in _OUTPUT_ORDER:
        value = getattr(task, attribute)
        if value is not None:
            parts.append(f"{signifier} {value.strftime('%Y-%m-%d')}")
    if task.trailing_tags:
        parts.append(task.trailing_tags)
    return " ".join(parts)


def parse_tasks(content: str, path: str | None = None) -> list[Task]:
    """Parse every task line of a note."""
    tasks = []
    for line_number, line in enumerate(content.split("\n")):
        task = parse_task_line(line.removesuffix("\r"), path=path, line_number=line_number)
        if task is not None:
            tasks.append(task)
    return tasks
