"""Tests for the task change history journal."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from note_tasks.postponement.exceptions import HistoryError
from note_tasks.postponement.history import JournalingSaver, TaskHistory, changed_fields
from note_tasks.postponement.models import Task, TaskStatus

ORIGINAL = Task("Pay rent", due=date(2024, 1, 10), path="/vault/Inbox.md", line_number=1)


@pytest.mark.unit
class TestChangedFields:
    """Test change detection between task values."""

    def test_date_change(self) -> None:
        updated = Task("Pay rent", due=date(2024, 1, 12), path="/vault/Inbox.md", line_number=1)
        assert changed_fields(ORIGINAL, updated) == [("due", "2024-01-10", "2024-01-12")]

    def test_completed_and_linked(self) -> None:
        updated = Task(
            "Pay rent [[Daily]]",
            status=TaskStatus.DONE,
            due=date(2024, 1, 10),
            path="/vault/Inbox.md",
            line_number=1,
        )
        assert changed_fields(ORIGINAL, updated) == [
            ("status", " ", "x"),
            ("description", "Pay rent", "Pay rent [[Daily]]"),
        ]

    def test_no_change(self) -> None:
        assert changed_fields(ORIGINAL, ORIGINAL) == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestTaskHistory:
    """Test the SQLite journal."""

    async def test_schema_version(self) -> None:
        history = TaskHistory(":memory:")
        await history.initialize()

        assert await history.get_schema_version() == 1

        await history.close()

    async def test_initialize_twice(self) -> None:
        history = TaskHistory(":memory:")
        await history.initialize()
        await history.initialize()

        assert await history.get_schema_version() == 1

        await history.close()

    async def test_record_and_read(self) -> None:
        history = TaskHistory(":memory:")
        await history.initialize()

        updated = Task("Pay rent", due=None, path="/vault/Inbox.md", line_number=1)
        written = await history.record_change(ORIGINAL, updated)
        entries = await history.get_history()

        assert written == 1
        assert len(entries) == 1
        assert entries[0]["path"] == "/vault/Inbox.md"
        assert entries[0]["line_number"] == 1
        assert entries[0]["description"] == "Pay rent"
        assert entries[0]["field_name"] == "due"
        assert entries[0]["old_value"] == "2024-01-10"
        assert entries[0]["new_value"] is None

        await history.close()

    async def test_unchanged_task_writes_nothing(self) -> None:
        history = TaskHistory(":memory:")
        await history.initialize()

        assert await history.record_change(ORIGINAL, ORIGINAL) == 0
        assert await history.get_history() == []

        await history.close()

    async def test_filter_by_path_and_limit(self) -> None:
        history = TaskHistory(":memory:")
        await history.initialize()

        other = Task("Other", start=date(2024, 1, 1), path="/vault/Other.md")
        await history.record_change(other, Task("Other", path="/vault/Other.md"))
        for day in (11, 12, 13):
            await history.record_change(
                ORIGINAL, Task("Pay rent", due=date(2024, 1, day), path="/vault/Inbox.md")
            )

        inbox = await history.get_history(path="/vault/Inbox.md")
        latest = await history.get_history(limit=1)

        assert len(inbox) == 3
        assert inbox[0]["new_value"] == "2024-01-13"
        assert latest[0]["new_value"] == "2024-01-13"

        await history.close()

    async def test_file_database(self, tmp_path) -> None:
        db_path = str(tmp_path / "nested" / "history.db")
        history = TaskHistory(db_path)
        await history.initialize()
        await history.record_change(ORIGINAL, Task("Pay rent"))
        await history.close()

        reopened = TaskHistory(db_path)
        await reopened.initialize()
        assert len(await reopened.get_history()) == 1
        await reopened.close()

    async def test_uninitialized(self) -> None:
        with pytest.raises(HistoryError):
            await TaskHistory(":memory:").get_history()


@pytest.mark.unit
@pytest.mark.asyncio
class TestJournalingSaver:
    """Test the journaling saver wrapper."""

    async def test_saves_then_records(self) -> None:
        saver = AsyncMock()
        history = AsyncMock()
        updated = Task("Pay rent", due=date(2024, 1, 12))

        await JournalingSaver(saver, history)(ORIGINAL, updated)

        saver.assert_awaited_once_with(ORIGINAL, updated)
        history.record_change.assert_awaited_once_with(ORIGINAL, updated)

    async def test_failed_save_is_not_recorded(self) -> None:
        saver = AsyncMock(side_effect=OSError("disk full"))
        history = AsyncMock()

        with pytest.raises(OSError):
            await JournalingSaver(saver, history)(ORIGINAL, ORIGINAL)

        history.record_change.assert_not_awaited()

    async def test_journal_failure_does_not_fail_save(self) -> None:
        saver = AsyncMock()
        history = AsyncMock()
        history.record_change.side_effect = HistoryError("locked")

        await JournalingSaver(saver, history)(ORIGINAL, ORIGINAL)

        saver.assert_awaited_once()
