"""Abstract collaborator interfaces for the postponement engine."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

from .models import Task

logger = logging.getLogger(__name__)

# save(original, updated): writes the updated task where the original was read from
TaskSaver = Callable[[Task, Task], Awaitable[None]]

# to_line_text(task): the plain-text line a task is stored as
TaskFormatter = Callable[[Task], str]

Clock = Callable[[], date]


class DocumentHost(ABC):
    """Abstract interface for the notes the user has open."""

    @abstractmethod
    def get_active_document(self) -> Any | None:
        """
        Return a reference to the currently active note.

        Returns:
            Opaque document reference, or None if no note is active
        """
        pass

    @abstractmethod
    async def read_content(self, document: Any) -> str:
        """
        Read the full text of a note.

        Raises:
            PersistenceError: If the note cannot be read
        """
        pass

    @abstractmethod
    async def write_content(self, document: Any, text: str) -> None:
        """
        Replace the full text of a note.

        Raises:
            PersistenceError: If the note cannot be written
        """
        pass

    @abstractmethod
    def basename(self, document: Any) -> str:
        """Return the note name used in links, without folder or extension."""
        pass


class Notifier(ABC):
    """Abstract interface for user-facing notices."""

    @abstractmethod
    def notify(self, message: str, duration_ms: int) -> None:
        """Show a message for duration_ms milliseconds. Fire and forget."""
        pass


class InteractionControl(ABC):
    """The control (button) a postponement or move was started from."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        pass

    @abstractmethod
    def disable(self) -> None:
        pass

    @abstractmethod
    def enable(self) -> None:
        pass


class ToggleControl(InteractionControl):
    """In-memory control holding only its enabled flag."""

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def disable(self) -> None:
        self._enabled = False

    def enable(self) -> None:
        self._enabled = True


class CollectingNotifier(Notifier):
    """Notifier that keeps every notice, for callers that report them later."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str, duration_ms: int) -> None:
        logger.debug(f"Notice ({duration_ms} ms): {message}")
        self.messages.append(message)


@dataclass
class TaskEditingContext:
    """Collaborators a task editing workflow runs against."""

    saver: TaskSaver
    documents: DocumentHost
    notifier: Notifier
    formatter: TaskFormatter | None = None
