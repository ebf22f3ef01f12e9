"""MCP Server for task postponement using FastMCP."""

import asyncio
import logging
from typing import Any

from fastmcp import FastMCP

from .applier import PostponementApplier
from .config import (
    DEFAULT_HISTORY_DB_PATH,
    DEFAULT_MCP_HOST,
    DEFAULT_MCP_PORT,
    DEFAULT_MCP_SERVER_NAME,
    DEFAULT_VAULT_PATH,
)
from .date_fields import resolve_date_field
from .exceptions import InvalidOptionError, PostponementError
from .history import JournalingSaver, TaskHistory
from .interfaces import CollectingNotifier, TaskEditingContext, TaskSaver, ToggleControl
from .menu import build_postpone_menu
from .models import PostponementOption, Task
from .relocation import RelocationOutcome, RelocationWorkflow
from .vault import MarkdownVault

logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(DEFAULT_MCP_SERVER_NAME)

# Global vault and history (initialized in cli_entry())
_vault: MarkdownVault | None = None
_history: TaskHistory | None = None
_history_ready = False


def get_vault() -> MarkdownVault:
    """Get the global vault instance."""
    if _vault is None:
        raise RuntimeError("Vault not initialized")
    return _vault


def set_vault(vault: MarkdownVault | None, history: TaskHistory | None = None) -> None:
    """
    Set the global vault and optional history journal.

    Raises:
        RuntimeError: If the current history journal is still open; await
            shutdown() before replacing it
    """
    global _vault, _history, _history_ready
    if _history_ready:
        raise RuntimeError("History journal is still open, call shutdown() first")
    _vault = vault
    _history = history
    _history_ready = False


async def _get_history() -> TaskHistory | None:
    """Get the history journal, opening it on first use."""
    global _history_ready
    if _history is not None and not _history_ready:
        await _history.initialize()
        _history_ready = True
    return _history


async def shutdown() -> None:
    """Close the history journal if it was opened."""
    global _history_ready
    if _history is not None and _history_ready:
        await _history.close()
    _history_ready = False


async def _get_saver(vault: MarkdownVault) -> TaskSaver:
    history = await _get_history()
    if history is None:
        return vault.save_task
    return JournalingSaver(vault.save_task, history)


def _parse_option(option: str) -> PostponementOption:
    try:
        return PostponementOption.from_key(option)
    except ValueError as e:
        raise InvalidOptionError(str(e)) from e


def _task_to_dict(task: Task) -> dict[str, Any]:
    field = resolve_date_field(task)
    return {
        "line_number": task.line_number,
        "description": task.description,
        "status": task.status.name.lower(),
        "due": task.due.isoformat() if task.due else None,
        "scheduled": task.scheduled.isoformat() if task.scheduled else None,
        "start": task.start.isoformat() if task.start else None,
        "postponable_field": field.value if field else None,
    }


async def _list_tasks_impl(note: str) -> dict[str, Any]:
    """Implementation of list_tasks tool."""
    try:
        tasks = await get_vault().list_tasks(note)
        return {"success": True, "tasks": [_task_to_dict(task) for task in tasks]}
    except Exception as e:
        logger.error(f"Error listing tasks: {e}")
        return {"success": False, "error": str(e)}


async def _postpone_menu_impl(note: str, line_number: int) -> dict[str, Any]:
    """Implementation of postpone_menu tool."""
    try:
        task = await get_vault().load_task(note, line_number)
        entries = build_postpone_menu(task)
        return {
            "success": True,
            "items": [
                {
                    "type": entry.entry_type.value,
                    "option": entry.option.key if entry.option else None,
                    "title": entry.title,
                    "checked": entry.state.checked if entry.state else False,
                    "enabled": entry.state.enabled if entry.state else True,
                }
                for entry in entries
            ],
        }
    except PostponementError as e:
        logger.warning(f"Cannot build postpone menu: {e}")
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.error(f"Error building postpone menu: {e}")
        return {"success": False, "error": str(e)}


async def _postpone_task_impl(note: str, line_number: int, option: str) -> dict[str, Any]:
    """Implementation of postpone_task tool."""
    try:
        vault = get_vault()
        postponement = _parse_option(option)
        task = await vault.load_task(note, line_number)

        notifier = CollectingNotifier()
        applier = PostponementApplier(await _get_saver(vault), notifier)
        outcome = await applier.apply(task, postponement, ToggleControl())

        return {"success": True, "outcome": outcome.value, "messages": notifier.messages}

    except PostponementError as e:
        logger.warning(f"Cannot postpone task: {e}")
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.error(f"Error postponing task: {e}")
        return {"success": False, "error": str(e)}


async def _move_task_here_impl(
    note: str, line_number: int, destination: str | None = None
) -> dict[str, Any]:
    """Implementation of move_task_here tool."""
    try:
        vault = get_vault()
        if destination is not None:
            vault.set_active_document(destination)
        task = await vault.load_task(note, line_number)

        notifier = CollectingNotifier()
        workflow = RelocationWorkflow(TaskEditingContext(await _get_saver(vault), vault, notifier))
        outcome = await workflow.move_task_here(task, ToggleControl())

        return {
            "success": outcome == RelocationOutcome.MOVED,
            "outcome": outcome.value,
            "messages": notifier.messages,
        }

    except PostponementError as e:
        logger.warning(f"Cannot move task: {e}")
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.error(f"Error moving task: {e}")
        return {"success": False, "error": str(e)}


async def _set_active_note_impl(note: str) -> dict[str, Any]:
    """Implementation of set_active_note tool."""
    try:
        vault = get_vault()
        vault.set_active_document(note)
        return {"success": True, "active_note": vault.basename(vault.get_active_document())}
    except Exception as e:
        logger.error(f"Error setting active note: {e}")
        return {"success": False, "error": str(e)}


async def _get_task_history_impl(note: str | None = None, limit: int = 50) -> dict[str, Any]:
    """Implementation of get_task_history tool."""
    try:
        history = await _get_history()
        if history is None:
            return {"success": False, "error": "Task history is disabled"}
        path = str(get_vault().resolve(note)) if note else None
        return {"success": True, "history": await history.get_history(path=path, limit=limit)}
    except Exception as e:
        logger.error(f"Error getting task history: {e}")
        return {"success": False, "error": str(e)}


# FastMCP decorated wrappers (for actual MCP server)
@mcp.tool()
async def list_tasks(note: str) -> dict[str, Any]:
    """
    List the tasks in a note.

    Args:
        note: Note name or path relative to the vault

    Returns:
        Dictionary with tasks list
    """
    return await _list_tasks_impl(note=note)


@mcp.tool()
async def postpone_menu(note: str, line_number: int) -> dict[str, Any]:
    """
    Show the postponement options for a task and which one is current.

    Args:
        note: Note name or path relative to the vault
        line_number: Zero-based line of the task

    Returns:
        Dictionary with menu items
    """
    return await _postpone_menu_impl(note=note, line_number=line_number)


@mcp.tool()
async def postpone_task(note: str, line_number: int, option: str) -> dict[str, Any]:
    """
    Postpone a task's due, scheduled or start date.

    Args:
        note: Note name or path relative to the vault
        line_number: Zero-based line of the task
        option: today, tomorrow, clear, or an offset such as 2d, 1w, 1m

    Returns:
        Dictionary with outcome and notices
    """
    return await _postpone_task_impl(note=note, line_number=line_number, option=option)


@mcp.tool()
async def move_task_here(
    note: str, line_number: int, destination: str | None = None
) -> dict[str, Any]:
    """
    Complete a task in place with a link and append it to the active note.

    Args:
        note: Note name or path holding the task
        line_number: Zero-based line of the task
        destination: Note to move into (defaults to the active note)

    Returns:
        Dictionary with outcome and notices
    """
    return await _move_task_here_impl(
        note=note, line_number=line_number, destination=destination
    )


@mcp.tool()
async def set_active_note(note: str) -> dict[str, Any]:
    """
    Set the note tasks are moved into.

    Args:
        note: Note name or path relative to the vault
    """
    return await _set_active_note_impl(note=note)


@mcp.tool()
async def get_task_history(note: str | None = None, limit: int = 50) -> dict[str, Any]:
    """
    Get recent task changes, newest first.

    Args:
        note: Only changes to tasks in this note
        limit: Maximum number of entries
    """
    return await _get_task_history_impl(note=note, limit=limit)


def cli_entry(
    transport: str = "stdio",
    vault_path: str = DEFAULT_VAULT_PATH,
    history_path: str | None = DEFAULT_HISTORY_DB_PATH,
) -> None:
    """
    Entry point for the MCP server.

    Args:
        transport: "stdio", or "sse" for HTTP/SSE
        vault_path: Vault directory
        history_path: SQLite journal path, None to disable history
    """
    history = TaskHistory(history_path) if history_path else None
    set_vault(MarkdownVault(vault_path), history)
    logger.info(f"MCP Server initialized for vault {vault_path} (transport={transport})")

    try:
        if transport == "stdio":
            mcp.run(transport="stdio")
        else:
            logger.info(f"Server will listen on http://{DEFAULT_MCP_HOST}:{DEFAULT_MCP_PORT}")
            mcp.run(transport="sse", host=DEFAULT_MCP_HOST, port=DEFAULT_MCP_PORT)
    finally:
        if _history_ready:
            asyncio.run(shutdown())


if __name__ == "__main__":
    cli_entry()
