"""Moving a task into the active note."""

import dataclasses
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any

from .config import (
    DONE_STATUS_SYMBOL,
    MOVE_ERROR_TEMPLATE,
    MOVE_NOTICE_DURATION_MS,
    MOVE_SUCCESS_TEMPLATE,
    NO_ACTIVE_FILE_MESSAGE,
    SUCCESS_NOTICE_DURATION_MS,
)
from .exceptions import NoActiveDocumentError
from .interfaces import InteractionControl, TaskEditingContext
from .models import Task, TaskStatus
from .task_line import to_line_text

logger = logging.getLogger(__name__)


class RelocationOutcome(str, Enum):
    """Terminal state of one move request."""

    MOVED = "moved"
    NO_DESTINATION = "no_destination"
    FAILED = "failed"
    BUSY = "busy"


@asynccontextmanager
async def interaction_latch(control: InteractionControl) -> AsyncIterator[bool]:
    """
    Hold a control disabled for the duration of the block.

    Yields False without touching the control if it is already disabled,
    meaning another run holds it. Otherwise the control is re-enabled on
    exit, whether the block succeeds or raises.
    """
    if not control.enabled:
        yield False
        return

    control.disable()
    try:
        yield True
    finally:
        control.enable()


def completed_and_linked(task: Task, destination_name: str) -> Task:
    """Copy of task marked done, with a link to the note it moved to."""
    return dataclasses.replace(
        task,
        status=TaskStatus.from_symbol(DONE_STATUS_SYMBOL),
        description=f"{task.description} [[{destination_name}]]",
    )


class RelocationWorkflow:
    """
    Moves a task from its note into the active note.

    The original line is completed with a back link, then the unchanged
    task line is appended to the active note. The two writes are not
    atomic: if the append fails the original stays completed.
    """

    def __init__(self, context: TaskEditingContext) -> None:
        self._context = context
        self._formatter = context.formatter or to_line_text

    def _active_document(self) -> Any:
        document = self._context.documents.get_active_document()
        if document is None:
            raise NoActiveDocumentError("No active note to move the task into")
        return document

    async def move_task_here(self, task: Task, control: InteractionControl) -> RelocationOutcome:
        """
        Move a task to the end of the active note.

        Args:
            task: Task to move
            control: Control the request came from, held disabled while moving

        Returns:
            RelocationOutcome; failures are reported through the notifier,
            never raised
        """
        documents = self._context.documents
        notifier = self._context.notifier

        async with interaction_latch(control) as acquired:
            if not acquired:
                logger.debug(f"Move of '{task.description}' already in progress")
                return RelocationOutcome.BUSY

            try:
                destination = self._active_document()
                destination_name = documents.basename(destination)

                await self._context.saver(task, completed_and_linked(task, destination_name))

                content = await documents.read_content(destination)
                newline = "\r\n" if "\r\n" in content else "\n"
                await documents.write_content(
                    destination, content + newline + self._formatter(task)
                )

            except NoActiveDocumentError as e:
                logger.warning(str(e))
                notifier.notify(NO_ACTIVE_FILE_MESSAGE, MOVE_NOTICE_DURATION_MS)
                return RelocationOutcome.NO_DESTINATION
            except Exception as e:
                logger.error(f"Error moving task: {e}", exc_info=True)
                notifier.notify(MOVE_ERROR_TEMPLATE.format(error=e), MOVE_NOTICE_DURATION_MS)
                return RelocationOutcome.FAILED

            logger.info(f"Moved '{task.description}' to {destination_name}")
            notifier.notify(
                MOVE_SUCCESS_TEMPLATE.format(destination=destination_name),
                SUCCESS_NOTICE_DURATION_MS,
            )
            return RelocationOutcome.MOVED
