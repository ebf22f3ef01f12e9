"""Configuration constants for task postponement functionality."""

import os

from .models import PostponementKind, PostponementOption, TimeUnit

# Notice durations (milliseconds)
WARNING_NOTICE_DURATION_MS = 10000
SUCCESS_NOTICE_DURATION_MS = 2000
MOVE_NOTICE_DURATION_MS = 5000

# User-facing messages
NOT_POSTPONABLE_MESSAGE = "⚠️ Postponement requires a date: due, scheduled or start."
NO_ACTIVE_FILE_MESSAGE = "⚠️ No active file found. Please open a note first."
MOVE_SUCCESS_TEMPLATE = '✅ Task moved to "{destination}"'
MOVE_ERROR_TEMPLATE = "⚠️ Error moving task: {error}"
CANNOT_POSTPONE_TITLE = "Cannot postpone"
MOVE_HERE_TITLE = "Move here"

# Status symbol applied to a task relocated elsewhere
DONE_STATUS_SYMBOL = "x"

# Menu date format (pendulum tokens)
MENU_DATE_FORMAT = "ddd Do MMM"

# Task line signifiers
DUE_DATE_SIGNIFIER = "📅"
SCHEDULED_DATE_SIGNIFIER = "⏳"
START_DATE_SIGNIFIER = "🛫"
DONE_DATE_SIGNIFIER = "✅"

# Postpone menu layout, None marks a separator
DEFAULT_POSTPONE_MENU: tuple[PostponementOption | None, ...] = (
    PostponementOption(PostponementKind.FIXED, TimeUnit.DAYS, 0),
    PostponementOption(PostponementKind.FIXED, TimeUnit.DAYS, 1),
    None,
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.DAYS, 2),
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.DAYS, 3),
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.DAYS, 4),
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.DAYS, 5),
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.DAYS, 6),
    None,
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.WEEKS, 1),
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.WEEKS, 2),
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.WEEKS, 3),
    PostponementOption(PostponementKind.RELATIVE, TimeUnit.MONTHS, 1),
    None,
    PostponementOption(PostponementKind.CLEAR),
)

# Storage Configuration
DEFAULT_VAULT_PATH = os.path.expanduser(os.environ.get("NOTE_TASKS_VAULT", "~/notes"))
DEFAULT_HISTORY_DB_PATH = os.path.expanduser(
    os.environ.get("NOTE_TASKS_HISTORY_DB", "~/.note-tasks/history.db")
)
NOTE_FILE_SUFFIX = ".md"
NOTE_ENCODING = "utf-8"

# History Schema Version
HISTORY_SCHEMA_VERSION = 1

# MCP Server Configuration
DEFAULT_MCP_HOST = "localhost"
DEFAULT_MCP_PORT = 3000
DEFAULT_MCP_SERVER_NAME = "note-tasks"
