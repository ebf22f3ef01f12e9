"""Applying a postponement option to a task."""

import logging
from enum import Enum

from .config import (
    NOT_POSTPONABLE_MESSAGE,
    SUCCESS_NOTICE_DURATION_MS,
    WARNING_NOTICE_DURATION_MS,
)
from .date_fields import require_date_field
from .exceptions import NotPostponableError
from .interfaces import Clock, InteractionControl, Notifier, TaskSaver
from .models import PostponementOption, Task
from .postponer import (
    compute_postponement,
    current_day,
    is_current_value,
    postponement_success_message,
)

logger = logging.getLogger(__name__)


class PostponementOutcome(str, Enum):
    """Terminal state of one postponement request."""

    BLOCKED = "blocked"
    NO_OP = "no_op"
    POSTPONED = "postponed"


class PostponementApplier:
    """
    Resolves, computes, saves and confirms a postponement.

    Pure computation happens first; the save collaborator is the only
    await, and its failures are left to the caller.
    """

    def __init__(self, saver: TaskSaver, notifier: Notifier, clock: Clock | None = None) -> None:
        """
        Initialize the applier.

        Args:
            saver: Persists (original, updated) task pairs
            notifier: Shows user-facing notices
            clock: Returns the current day (defaults to the local calendar day)
        """
        self._saver = saver
        self._notifier = notifier
        self._clock = clock or current_day

    async def apply(
        self,
        task: Task,
        option: PostponementOption,
        control: InteractionControl | None = None,
    ) -> PostponementOutcome:
        """
        Apply a postponement option to a task.

        Args:
            task: Task to postpone
            option: Chosen postponement option
            control: Control the request came from; disabled after a save
                until the view showing the task is refreshed

        Returns:
            PostponementOutcome describing which terminal state was reached

        Raises:
            Exception: Whatever the save collaborator raises
        """
        if control is not None and not control.enabled:
            logger.debug(f"Ignoring {option.key} for '{task.description}': control is disabled")
            return PostponementOutcome.NO_OP

        try:
            field = require_date_field(task)
        except NotPostponableError as e:
            logger.warning(str(e))
            self._notifier.notify(NOT_POSTPONABLE_MESSAGE, WARNING_NOTICE_DURATION_MS)
            return PostponementOutcome.BLOCKED

        result = compute_postponement(task, field, option, today=self._clock())

        if is_current_value(task, field, result.new_date):
            logger.debug(f"Skipping {option.key} for '{task.description}': date unchanged")
            return PostponementOutcome.NO_OP

        await self._saver(task, result.new_task)
        logger.info(f"Postponed {field.value} of '{task.description}' to {result.new_date}")

        self._notifier.notify(
            postponement_success_message(result.new_date, field), SUCCESS_NOTICE_DURATION_MS
        )
        if control is not None:
            control.disable()
        return PostponementOutcome.POSTPONED
