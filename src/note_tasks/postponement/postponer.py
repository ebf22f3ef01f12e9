"""Pure postponement computations and menu naming functions."""

import dataclasses
from datetime import date, datetime

import pendulum

from .config import CANNOT_POSTPONE_TITLE, MENU_DATE_FORMAT
from .models import (
    HappensDate,
    PostponementKind,
    PostponementOption,
    PostponementResult,
    Task,
    TimeUnit,
)


def current_day() -> date:
    """Current local calendar day."""
    return as_day(pendulum.today())


def as_day(value: date) -> date:
    """Truncate a date or datetime to a plain calendar date."""
    if isinstance(value, datetime):
        value = value.date()
    return date(value.year, value.month, value.day)


def add_to_date(start: date, unit: TimeUnit, amount: int) -> date:
    """Calendar arithmetic: weeks are 7 days, months clamp to the month end."""
    shifted = pendulum.date(start.year, start.month, start.day).add(**{unit.value: amount})
    return as_day(shifted)


def format_menu_date(value: date) -> str:
    """Format a date the way menu titles show it, e.g. 'Fri 12th Jan'."""
    return pendulum.date(value.year, value.month, value.day).format(MENU_DATE_FORMAT)


def is_current_value(task: Task, field: HappensDate, new_date: date | None) -> bool:
    """True if the task's field is set and falls on the same day as new_date."""
    current = task.date_for(field)
    if current is None or new_date is None:
        return False
    return as_day(current) == as_day(new_date)


def _base_day(today: date | None) -> date:
    return as_day(today) if today is not None else current_day()


def _with_date(task: Task, field: HappensDate, new_date: date | None) -> Task:
    return dataclasses.replace(task, **{field.value: new_date})


def _fixed_date(unit: TimeUnit, amount: int, today: date | None) -> date:
    return add_to_date(_base_day(today), unit, amount)


def _relative_date(
    task: Task, field: HappensDate, unit: TimeUnit, amount: int, today: date | None
) -> date:
    base = _base_day(today)
    current = task.date_for(field)
    if current is not None and as_day(current) > base:
        base = as_day(current)
    return add_to_date(base, unit, amount)


def compute_fixed(
    task: Task,
    field: HappensDate,
    unit: TimeUnit,
    amount: int,
    today: date | None = None,
) -> PostponementResult:
    """
    Set the field to today plus amount of unit, ignoring its current value.

    An amount of 0 gives exactly today.
    """
    new_date = _fixed_date(unit, amount, today)
    return PostponementResult(new_date=new_date, new_task=_with_date(task, field, new_date))


def compute_relative(
    task: Task,
    field: HappensDate,
    unit: TimeUnit,
    amount: int,
    today: date | None = None,
) -> PostponementResult:
    """
    Postpone from the later of today and the field's current value.

    A date already in the future is pushed further out; an overdue or
    missing date is postponed from today, so the result never goes backwards.
    """
    new_date = _relative_date(task, field, unit, amount, today)
    return PostponementResult(new_date=new_date, new_task=_with_date(task, field, new_date))


def compute_cleared(
    task: Task,
    field: HappensDate,
    unit: TimeUnit | None = None,
    amount: int | None = None,
    today: date | None = None,
) -> PostponementResult:
    """Remove the field's date; unit and amount are ignored."""
    return PostponementResult(new_date=None, new_task=_with_date(task, field, None))


_COMPUTATIONS = {
    PostponementKind.FIXED: compute_fixed,
    PostponementKind.RELATIVE: compute_relative,
    PostponementKind.CLEAR: compute_cleared,
}


def compute_postponement(
    task: Task,
    field: HappensDate,
    option: PostponementOption,
    today: date | None = None,
) -> PostponementResult:
    """Compute the postponement described by option."""
    computation = _COMPUTATIONS[option.kind]
    return computation(task, field, option.unit, option.amount, today=today)


# Naming functions


def fixed_date_menu_item_title(
    task: Task, field: HappensDate | None, option: PostponementOption, today: date | None = None
) -> str:
    if field is None:
        return CANNOT_POSTPONE_TITLE

    formatted = format_menu_date(_fixed_date(option.unit, option.amount, today))

    if option.unit == TimeUnit.DAYS and option.amount == 0:
        return f"{field.label} today, on {formatted}"
    if option.unit == TimeUnit.DAYS and option.amount == 1:
        return f"{field.label} tomorrow, on {formatted}"
    return f"{field.label} in {option.unit.describe(option.amount)}, on {formatted}"


def postpone_menu_item_title(
    task: Task, field: HappensDate | None, option: PostponementOption, today: date | None = None
) -> str:
    if field is None:
        return CANNOT_POSTPONE_TITLE

    base = _base_day(today)
    formatted = format_menu_date(_relative_date(task, field, option.unit, option.amount, base))
    offset = option.unit.describe(option.amount)

    current = task.date_for(field)
    if current is not None and as_day(current) >= base:
        return f"Postpone {field.value} by {offset}, to {formatted}"
    return f"{field.label} in {offset}, on {formatted}"


def remove_date_menu_item_title(
    task: Task, field: HappensDate | None, option: PostponementOption, today: date | None = None
) -> str:
    if field is None:
        return CANNOT_POSTPONE_TITLE
    return f"Remove {field.value} date"


_TITLES = {
    PostponementKind.FIXED: fixed_date_menu_item_title,
    PostponementKind.RELATIVE: postpone_menu_item_title,
    PostponementKind.CLEAR: remove_date_menu_item_title,
}


def menu_item_title(
    task: Task, field: HappensDate | None, option: PostponementOption, today: date | None = None
) -> str:
    """Title of the menu item for option, chosen by the option's kind."""
    return _TITLES[option.kind](task, field, option, today=today)


def postponement_success_message(new_date: date | None, field: HappensDate) -> str:
    """Confirmation shown after a postponement has been saved."""
    if new_date is None:
        return f"Task's {field.value} date removed"
    return f"Task's {field.value} date changed to {format_menu_date(new_date)}"
