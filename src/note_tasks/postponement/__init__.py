"""Postponement engine for to-do items in Markdown notes."""

from .applier import PostponementApplier, PostponementOutcome
from .date_fields import resolve_date_field
from .menu import build_postpone_menu, derive_menu_item_state
from .models import (
    HappensDate,
    MenuItemState,
    PostponementKind,
    PostponementOption,
    PostponementResult,
    Task,
    TaskStatus,
    TimeUnit,
)
from .postponer import compute_cleared, compute_fixed, compute_postponement, compute_relative
from .relocation import RelocationOutcome, RelocationWorkflow

__all__ = [
    "Task",
    "TaskStatus",
    "HappensDate",
    "TimeUnit",
    "PostponementKind",
    "PostponementOption",
    "PostponementResult",
    "MenuItemState",
    "resolve_date_field",
    "compute_fixed",
    "compute_relative",
    "compute_cleared",
    "compute_postponement",
    "derive_menu_item_state",
    "build_postpone_menu",
    "PostponementApplier",
    "PostponementOutcome",
    "RelocationWorkflow",
    "RelocationOutcome",
]
