"""Unit tests for postponement data models."""

import dataclasses
from datetime import date

import pytest

from note_tasks.postponement.models import (
    HappensDate,
    PostponementKind,
    PostponementOption,
    Task,
    TaskStatus,
    TimeUnit,
)


@pytest.mark.unit
class TestTask:
    """Test the Task value."""

    def test_task_is_immutable(self) -> None:
        task = Task("Pay rent", due=date(2024, 1, 10))
        with pytest.raises(dataclasses.FrozenInstanceError):
            task.due = date(2024, 1, 11)  # type: ignore[misc]

    def test_date_for(self) -> None:
        task = Task("Pay rent", scheduled=date(2024, 1, 8))
        assert task.date_for(HappensDate.SCHEDULED) == date(2024, 1, 8)
        assert task.date_for(HappensDate.DUE) is None


@pytest.mark.unit
class TestTaskStatus:
    """Test status symbols."""

    @pytest.mark.parametrize(
        ("symbol", "expected"),
        [(" ", TaskStatus.TODO), ("x", TaskStatus.DONE), ("X", TaskStatus.DONE),
         ("/", TaskStatus.IN_PROGRESS), ("-", TaskStatus.CANCELLED)],
    )
    def test_from_symbol(self, symbol: str, expected: TaskStatus) -> None:
        assert TaskStatus.from_symbol(symbol) == expected

    def test_unknown_symbol(self) -> None:
        with pytest.raises(ValueError):
            TaskStatus.from_symbol("?")


@pytest.mark.unit
class TestTimeUnit:
    """Test unit parsing and wording."""

    @pytest.mark.parametrize("name", ["day", "days", "Days"])
    def test_parse_accepts_singular(self, name: str) -> None:
        assert TimeUnit.parse(name) == TimeUnit.DAYS

    def test_describe(self) -> None:
        assert TimeUnit.WEEKS.describe(1) == "a week"
        assert TimeUnit.MONTHS.describe(3) == "3 months"


@pytest.mark.unit
class TestPostponementOption:
    """Test option keys."""

    @pytest.mark.parametrize(
        ("key", "option"),
        [
            ("today", PostponementOption(PostponementKind.FIXED, TimeUnit.DAYS, 0)),
            ("tomorrow", PostponementOption(PostponementKind.FIXED, TimeUnit.DAYS, 1)),
            ("2d", PostponementOption(PostponementKind.RELATIVE, TimeUnit.DAYS, 2)),
            ("1w", PostponementOption(PostponementKind.RELATIVE, TimeUnit.WEEKS, 1)),
            ("1m", PostponementOption(PostponementKind.RELATIVE, TimeUnit.MONTHS, 1)),
            ("=3d", PostponementOption(PostponementKind.FIXED, TimeUnit.DAYS, 3)),
            ("clear", PostponementOption(PostponementKind.CLEAR)),
        ],
    )
    def test_key_round_trip(self, key: str, option: PostponementOption) -> None:
        assert PostponementOption.from_key(key) == option
        assert option.key == key

    @pytest.mark.parametrize("key", ["", "soon", "2y", "d2"])
    def test_unknown_key(self, key: str) -> None:
        with pytest.raises(ValueError):
            PostponementOption.from_key(key)

    @pytest.mark.parametrize(
        ("key", "unit", "amount"),
        [("2 days", TimeUnit.DAYS, 2), ("1week", TimeUnit.WEEKS, 1), ("=1 month", TimeUnit.MONTHS, 1)],
    )
    def test_spelled_out_units(self, key: str, unit: TimeUnit, amount: int) -> None:
        option = PostponementOption.from_key(key)
        assert (option.unit, option.amount) == (unit, amount)
