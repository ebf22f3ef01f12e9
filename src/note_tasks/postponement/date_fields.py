"""Selection of the date attribute a postponement acts upon."""

from .exceptions import NotPostponableError
from .models import HappensDate, Task

# Due dates are acted upon most often, so they win when several are set.
DATE_FIELD_PRIORITY = (HappensDate.DUE, HappensDate.SCHEDULED, HappensDate.START)


def resolve_date_field(task: Task) -> HappensDate | None:
    """
    Decide which date attribute of a task should be postponed.

    Args:
        task: Task to inspect

    Returns:
        The first set field in priority order due, scheduled, start,
        or None if the task has none of them
    """
    for field in DATE_FIELD_PRIORITY:
        if task.date_for(field) is not None:
            return field
    return None


def require_date_field(task: Task) -> HappensDate:
    """
    Like resolve_date_field(), but raise when the task is not postponable.

    Raises:
        NotPostponableError: If the task has no due, scheduled or start date
    """
    field = resolve_date_field(task)
    if field is None:
        raise NotPostponableError(f"Task has no date to postpone: {task.description}")
    return field
