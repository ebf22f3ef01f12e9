"""Data models for task postponement functionality."""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum


class TaskStatus(str, Enum):
    """Task status, identified by the symbol inside the checkbox."""

    TODO = " "
    DONE = "x"
    IN_PROGRESS = "/"
    CANCELLED = "-"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> "TaskStatus":
        """
        Look up a status by its checkbox symbol.

        Raises:
            ValueError: If the symbol is not a known status
        """
        if symbol == "X":
            return cls.DONE
        return cls(symbol)


class HappensDate(str, Enum):
    """Which date attribute of a task is being acted upon."""

    DUE = "due"
    SCHEDULED = "scheduled"
    START = "start"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class TimeUnit(str, Enum):
    """Calendar unit used for postponement arithmetic."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    @classmethod
    def parse(cls, value: str) -> "TimeUnit":
        """Parse a unit name, accepting singular spellings ('day', 'week', 'month')."""
        name = value.strip().lower()
        if not name.endswith("s"):
            name += "s"
        return cls(name)

    def describe(self, amount: int) -> str:
        """Human readable amount, e.g. 'a day', '2 weeks'."""
        singular = self.value[:-1]
        if amount == 1:
            return f"a {singular}"
        return f"{amount} {self.value}"


class PostponementKind(str, Enum):
    """Closed set of postponement variants."""

    FIXED = "fixed"
    RELATIVE = "relative"
    CLEAR = "clear"


_UNIT_KEYS = {"d": TimeUnit.DAYS, "w": TimeUnit.WEEKS, "m": TimeUnit.MONTHS}
_OFFSET_KEY = re.compile(r"^(\d+)\s*([a-z]+)$")


@dataclass(frozen=True)
class Task:
    """Represents one to-do item read from a note."""

    description: str
    status: TaskStatus = TaskStatus.TODO
    due: date | None = None
    scheduled: date | None = None
    start: date | None = None
    done: date | None = None
    path: str | None = None
    line_number: int | None = None
    indentation: str = ""
    list_marker: str = "-"
    trailing_tags: str = ""
    original_markdown: str | None = None

    def date_for(self, field: HappensDate) -> date | None:
        """Return the value of the given date attribute."""
        return getattr(self, field.value)


@dataclass(frozen=True)
class PostponementOption:
    """One postponement choice offered to the user."""

    kind: PostponementKind
    unit: TimeUnit = TimeUnit.DAYS
    amount: int = 0

    @property
    def key(self) -> str:
        """Short identifier used by the CLI and MCP tools."""
        if self.kind == PostponementKind.CLEAR:
            return "clear"
        if self.kind == PostponementKind.FIXED and self.unit == TimeUnit.DAYS:
            if self.amount == 0:
                return "today"
            if self.amount == 1:
                return "tomorrow"
        prefix = "=" if self.kind == PostponementKind.FIXED else ""
        return f"{prefix}{self.amount}{self.unit.value[0]}"

    @classmethod
    def from_key(cls, key: str) -> "PostponementOption":
        """
        Parse an option key such as 'today', 'tomorrow', '2d', '1 week', '=3d' or 'clear'.

        Raises:
            ValueError: If the key is not recognised
        """
        text = key.strip().lower()
        if text == "clear":
            return cls(PostponementKind.CLEAR)
        if text == "today":
            return cls(PostponementKind.FIXED, TimeUnit.DAYS, 0)
        if text == "tomorrow":
            return cls(PostponementKind.FIXED, TimeUnit.DAYS, 1)

        kind = PostponementKind.RELATIVE
        if text.startswith("="):
            kind = PostponementKind.FIXED
            text = text[1:]

        match = _OFFSET_KEY.match(text)
        if match is None:
            raise ValueError(f"Unknown postponement option: {key}")

        unit_name = match.group(2)
        try:
            unit = _UNIT_KEYS.get(unit_name) or TimeUnit.parse(unit_name)
        except ValueError:
            raise ValueError(f"Unknown postponement option: {key}") from None
        return cls(kind, unit, int(match.group(1)))


@dataclass(frozen=True)
class PostponementResult:
    """Outcome of a postponement computation."""

    new_date: date | None
    new_task: Task


@dataclass(frozen=True)
class MenuItemState:
    """Display state of one postponement menu item."""

    checked: bool
    title: str
    enabled: bool = True
    new_date: date | None = None


class PostponeMenuEntryType(str, Enum):
    """Kind of row in the postpone menu."""

    OPTION = "option"
    SEPARATOR = "separator"
    MOVE_HERE = "move_here"


@dataclass(frozen=True)
class PostponeMenuEntry:
    """One row of the postpone menu model."""

    entry_type: PostponeMenuEntryType
    option: PostponementOption | None = None
    state: MenuItemState | None = None
    title: str = ""
