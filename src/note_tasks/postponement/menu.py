"""Menu state derivation for postponement options."""

from collections.abc import Iterable
from datetime import date

from .config import DEFAULT_POSTPONE_MENU, MOVE_HERE_TITLE
from .date_fields import resolve_date_field
from .models import (
    HappensDate,
    MenuItemState,
    PostponeMenuEntry,
    PostponeMenuEntryType,
    PostponementOption,
    Task,
)
from .postponer import compute_postponement, current_day, is_current_value, menu_item_title


def derive_menu_item_state(
    task: Task,
    field: HappensDate | None,
    option: PostponementOption,
    today: date | None = None,
) -> MenuItemState:
    """
    Work out how a postponement option is shown for a task.

    The item is checked when applying the option would leave the task's
    date where it already is.

    Args:
        task: Task the menu is built for
        field: Date field to postpone, None if the task is not postponable
        option: Postponement option of the menu item
        today: Day to compute from (defaults to the current day)

    Returns:
        MenuItemState; disabled and unchecked when field is None
    """
    title = menu_item_title(task, field, option, today=today)
    if field is None:
        return MenuItemState(checked=False, title=title, enabled=False)

    result = compute_postponement(task, field, option, today=today)
    return MenuItemState(
        checked=is_current_value(task, field, result.new_date),
        title=title,
        new_date=result.new_date,
    )


def build_postpone_menu(
    task: Task,
    options: Iterable[PostponementOption | None] = DEFAULT_POSTPONE_MENU,
    today: date | None = None,
) -> list[PostponeMenuEntry]:
    """
    Build the postpone menu model for a task.

    None entries in options become separators. A trailing "Move here"
    action is always appended.
    """
    day = today if today is not None else current_day()
    field = resolve_date_field(task)

    entries: list[PostponeMenuEntry] = []
    for option in options:
        if option is None:
            entries.append(PostponeMenuEntry(PostponeMenuEntryType.SEPARATOR))
            continue
        state = derive_menu_item_state(task, field, option, today=day)
        entries.append(
            PostponeMenuEntry(
                PostponeMenuEntryType.OPTION, option=option, state=state, title=state.title
            )
        )

    entries.append(PostponeMenuEntry(PostponeMenuEntryType.SEPARATOR))
    entries.append(PostponeMenuEntry(PostponeMenuEntryType.MOVE_HERE, title=MOVE_HERE_TITLE))
    return entries
