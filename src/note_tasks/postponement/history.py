"""Task change history journal using SQLite."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from .config import HISTORY_SCHEMA_VERSION
from .exceptions import HistoryError
from .interfaces import TaskSaver
from .models import Task, TaskStatus

logger = logging.getLogger(__name__)

TRACKED_FIELDS = ("status", "description", "due", "scheduled", "start", "done")


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, TaskStatus):
        return value.symbol
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def changed_fields(original: Task, updated: Task) -> list[tuple[str, str | None, str | None]]:
    """List (field, old, new) for every tracked field that differs."""
    changes = []
    for name in TRACKED_FIELDS:
        old_value = getattr(original, name)
        new_value = getattr(updated, name)
        if old_value != new_value:
            changes.append((name, _to_text(old_value), _to_text(new_value)))
    return changes


class TaskHistory:
    """SQLite journal of saved task changes."""

    def __init__(self, db_path: str) -> None:
        """
        Initialize history storage.

        Args:
            db_path: Path to SQLite database file (use ":memory:" for in-memory)
        """
        self.db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Open the connection and create the schema if needed."""
        if self._connection is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row

        await self._create_schema()

    async def _create_schema(self) -> None:
        async with self._get_connection() as conn:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

            cursor = await conn.execute("SELECT version FROM schema_version")
            result = await cursor.fetchone()
            current_version = result[0] if result else 0

            if current_version < HISTORY_SCHEMA_VERSION:
                await self._apply_migrations(conn, current_version)

            await conn.commit()

    async def _apply_migrations(self, conn: aiosqlite.Connection, from_version: int) -> None:
        if from_version < 1:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS task_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TIMESTAMP NOT NULL,
                    path TEXT,
                    line_number INTEGER,
                    description TEXT NOT NULL,
                    field_name TEXT NOT NULL,
                    old_value TEXT,
                    new_value TEXT
                )
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_history_path ON task_history(path)"
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_history_timestamp ON task_history(timestamp)"
            )
            await conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (HISTORY_SCHEMA_VERSION,),
            )

    @asynccontextmanager
    async def _get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Yields:
            Database connection

        Raises:
            HistoryError: If the connection is not initialized
        """
        if self._connection is None:
            raise HistoryError("Task history not initialized")
        yield self._connection

    async def get_schema_version(self) -> int:
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT version FROM schema_version")
            result = await cursor.fetchone()
            return result[0] if result else 0

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def record_change(self, original: Task, updated: Task) -> int:
        """
        Record one row per tracked field that changed between two task values.

        Returns:
            Number of rows written

        Raises:
            HistoryError: If writing fails
        """
        changes = changed_fields(original, updated)
        if not changes:
            return 0

        timestamp = datetime.now().isoformat()
        try:
            async with self._get_connection() as conn:
                await conn.executemany(
                    """
                    INSERT INTO task_history (
                        timestamp, path, line_number, description,
                        field_name, old_value, new_value
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            timestamp,
                            original.path,
                            original.line_number,
                            original.description,
                            name,
                            old_value,
                            new_value,
                        )
                        for name, old_value, new_value in changes
                    ],
                )
                await conn.commit()
        except HistoryError:
            raise
        except Exception as e:
            raise HistoryError(f"Failed to record task change: {e}") from e

        return len(changes)

    async def get_history(self, path: str | None = None, limit: int = 50) -> list[dict[str, Any]]:
        """
        Get the most recent history entries, newest first.

        Args:
            path: Only entries for tasks in this note
            limit: Maximum number of entries
        """
        query = (
            "SELECT timestamp, path, line_number, description, field_name, old_value, new_value"
            " FROM task_history"
        )
        params: list[Any] = []
        if path is not None:
            query += " WHERE path = ?"
            params.append(path)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        async with self._get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()

        return [
            {
                "timestamp": row["timestamp"],
                "path": row["path"],
                "line_number": row["line_number"],
                "description": row["description"],
                "field_name": row["field_name"],
                "old_value": row["old_value"],
                "new_value": row["new_value"],
            }
            for row in rows
        ]


class JournalingSaver:
    """Task saver that records every successful save in a TaskHistory."""

    def __init__(self, saver: TaskSaver, history: TaskHistory) -> None:
        self._saver = saver
        self._history = history

    async def __call__(self, original: Task, updated: Task) -> None:
        await self._saver(original, updated)
        try:
            await self._history.record_change(original, updated)
        except HistoryError as e:
            # Task is saved already, only the journal row is lost.
            logger.error(f"Error recording task history: {e}")
