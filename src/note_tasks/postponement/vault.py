"""Markdown vault: a folder of notes acting as document host and task store."""

import asyncio
from pathlib import Path

from ..logging_utils import get_logger
from .config import NOTE_ENCODING, NOTE_FILE_SUFFIX
from .exceptions import PersistenceError, TaskLineNotFoundError
from .interfaces import DocumentHost
from .models import Task
from .task_line import parse_task_line, parse_tasks, to_line_text

logger = get_logger(__name__)


class MarkdownVault(DocumentHost):
    """
    Notes stored as Markdown files under one root directory.

    Documents are Path objects. Blocking file access runs in the default
    executor so callers on the event loop are not blocked. Notes are read
    and written without newline translation, so CRLF notes keep their
    line endings.
    """

    def __init__(self, root: str | Path, active_note: str | Path | None = None) -> None:
        """
        Initialize the vault.

        Args:
            root: Vault directory
            active_note: Note treated as the active one, relative to root
        """
        self.root = Path(root).expanduser()
        self._active: Path | None = None
        if active_note is not None:
            self.set_active_document(active_note)

    def resolve(self, note: str | Path) -> Path:
        """
        Resolve a note name or path inside the vault.

        Raises:
            PersistenceError: If the path points outside the vault
        """
        path = Path(note)
        if path.suffix != NOTE_FILE_SUFFIX:
            path = path.with_name(path.name + NOTE_FILE_SUFFIX)
        if not path.is_absolute():
            path = self.root / path

        resolved = path.resolve()
        if not resolved.is_relative_to(self.root.resolve()):
            raise PersistenceError(f"Note {note} is outside the vault")
        return resolved

    def set_active_document(self, note: str | Path | None) -> None:
        self._active = self.resolve(note) if note is not None else None
        logger.debug(f"Active note set to {self._active}")

    def get_active_document(self) -> Path | None:
        return self._active

    def basename(self, document: Path) -> str:
        return Path(document).stem

    async def read_content(self, document: Path) -> str:
        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(None, _read_text, Path(document))
        except OSError as e:
            raise PersistenceError(f"Failed to read {document}: {e}") from e
        logger.trace(f"Read {len(text)} characters from {document}")
        return text

    async def write_content(self, document: Path, text: str) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _write_text, Path(document), text)
        except OSError as e:
            raise PersistenceError(f"Failed to write {document}: {e}") from e
        logger.debug(f"Wrote {len(text)} characters to {document}")

    async def list_tasks(self, note: str | Path) -> list[Task]:
        """Parse every task in a note."""
        path = self.resolve(note)
        return parse_tasks(await self.read_content(path), path=str(path))

    async def load_task(self, note: str | Path, line_number: int) -> Task:
        """
        Load the task on a given line of a note.

        Args:
            note: Note name or path
            line_number: Zero-based line index

        Raises:
            TaskLineNotFoundError: If the line does not exist or is not a task
        """
        path = self.resolve(note)
        lines = _split_lines(await self.read_content(path))
        if not 0 <= line_number < len(lines):
            raise TaskLineNotFoundError(f"{path.name} has no line {line_number}")

        task = parse_task_line(lines[line_number], path=str(path), line_number=line_number)
        if task is None:
            raise TaskLineNotFoundError(f"Line {line_number} of {path.name} is not a task")
        return task

    async def save_task(self, original: Task, updated: Task) -> None:
        """
        Replace the original task's line with the updated task.

        The line is looked up at the original line number first, then
        anywhere in the note, so edits above the task do not lose it.

        Raises:
            TaskLineNotFoundError: If the original line is no longer in the note
            PersistenceError: If reading or writing the note fails
        """
        if original.path is None:
            raise PersistenceError(f"Task '{original.description}' has no note path")

        path = Path(original.path)
        expected = original.original_markdown or to_line_text(original)
        lines = (await self.read_content(path)).split("\n")
        bare = [line.removesuffix("\r") for line in lines]

        index = original.line_number
        if index is None or not 0 <= index < len(bare) or bare[index] != expected:
            try:
                index = bare.index(expected)
            except ValueError:
                raise TaskLineNotFoundError(
                    f"Task '{original.description}' not found in {path.name}"
                ) from None
            logger.debug(f"Task line moved from {original.line_number} to {index}")

        # Keep the line's own "\r" when the note uses CRLF endings
        lines[index] = to_line_text(updated) + lines[index][len(bare[index]) :]
        await self.write_content(path, "\n".join(lines))
        logger.info(f"Saved task on line {index} of {path.name}")


def _read_text(path: Path) -> str:
    with path.open(encoding=NOTE_ENCODING, newline="") as f:
        return f.read()


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding=NOTE_ENCODING, newline="")


def _split_lines(text: str) -> list[str]:
    return [line.removesuffix("\r") for line in text.split("\n")]
