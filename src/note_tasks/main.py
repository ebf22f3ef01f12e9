"""Command-line interface for postponing and moving tasks in a notes vault."""

import argparse
import asyncio
import sys

from .logging_utils import configure_logging
from .postponement.applier import PostponementApplier, PostponementOutcome
from .postponement.config import DEFAULT_HISTORY_DB_PATH, DEFAULT_VAULT_PATH
from .postponement.exceptions import PostponementError
from .postponement.history import JournalingSaver, TaskHistory
from .postponement.interfaces import Notifier, TaskEditingContext, TaskSaver, ToggleControl
from .postponement.menu import build_postpone_menu
from .postponement.models import PostponeMenuEntryType, PostponementOption
from .postponement.relocation import RelocationOutcome, RelocationWorkflow
from .postponement.vault import MarkdownVault


class ConsoleNotifier(Notifier):
    """Prints notices to standard output."""

    def notify(self, message: str, duration_ms: int) -> None:
        print(message)


class TaskCLI:
    """Runs one vault command."""

    def __init__(self, vault: MarkdownVault, history: TaskHistory | None = None) -> None:
        """
        Initialize the CLI.

        Args:
            vault: Vault holding the notes
            history: Optional journal recording every saved change
        """
        self._vault = vault
        self._history = history
        self._notifier = ConsoleNotifier()

    def _saver(self) -> TaskSaver:
        if self._history is None:
            return self._vault.save_task
        return JournalingSaver(self._vault.save_task, self._history)

    async def list_tasks(self, note: str) -> bool:
        tasks = await self._vault.list_tasks(note)
        if not tasks:
            print(f"No tasks in {note}")
        for task in tasks:
            print(f"{task.line_number:>4}: [{task.status.symbol}] {task.description}")
        return True

    async def show_menu(self, note: str, line_number: int) -> bool:
        task = await self._vault.load_task(note, line_number)
        for entry in build_postpone_menu(task):
            if entry.entry_type == PostponeMenuEntryType.SEPARATOR:
                print("  ----")
            elif entry.entry_type == PostponeMenuEntryType.MOVE_HERE:
                print(f"      {'move':<9} {entry.title}")
            elif entry.option is not None and entry.state is not None:
                mark = "✓" if entry.state.checked else " "
                print(f"  {mark}   {entry.option.key:<9} {entry.title}")
        return True

    async def postpone(self, note: str, line_number: int, option_key: str) -> bool:
        option = PostponementOption.from_key(option_key)
        task = await self._vault.load_task(note, line_number)

        applier = PostponementApplier(self._saver(), self._notifier)
        outcome = await applier.apply(task, option, ToggleControl())
        if outcome == PostponementOutcome.NO_OP:
            print("Nothing to change.")
        return outcome != PostponementOutcome.BLOCKED

    async def move(self, note: str, line_number: int, destination: str) -> bool:
        self._vault.set_active_document(destination)
        task = await self._vault.load_task(note, line_number)

        workflow = RelocationWorkflow(
            TaskEditingContext(self._saver(), self._vault, self._notifier)
        )
        outcome = await workflow.move_task_here(task, ToggleControl())
        return outcome == RelocationOutcome.MOVED


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Note Tasks CLI - postpone and move tasks in Markdown notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  note-tasks tasks Inbox                          # List tasks with line numbers
  note-tasks menu Inbox 4                         # Show postponement options
  note-tasks postpone Inbox 4 2d                  # Postpone by two days
  note-tasks postpone Inbox 4 today               # Set the date to today
  note-tasks move Inbox 4 --to "Daily/2024-01-10" # Move a task into another note
  note-tasks serve                                # Run the MCP server on stdio
        """,
    )

    parser.add_argument(
        "--vault",
        default=DEFAULT_VAULT_PATH,
        help=f"Vault directory (default: {DEFAULT_VAULT_PATH}, env NOTE_TASKS_VAULT)",
    )
    parser.add_argument(
        "--history-db",
        default=DEFAULT_HISTORY_DB_PATH,
        help="SQLite file recording task changes (env NOTE_TASKS_HISTORY_DB)",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Do not record task changes",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging and debug information",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace logging (most verbose, includes all debug info)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    tasks_parser = commands.add_parser("tasks", help="List the tasks in a note")
    tasks_parser.add_argument("note", help="Note name or path inside the vault")

    menu_parser = commands.add_parser("menu", help="Show the postpone menu for a task")
    menu_parser.add_argument("note", help="Note name or path inside the vault")
    menu_parser.add_argument("line", type=int, help="Zero-based line number of the task")

    postpone_parser = commands.add_parser("postpone", help="Postpone a task")
    postpone_parser.add_argument("note", help="Note name or path inside the vault")
    postpone_parser.add_argument("line", type=int, help="Zero-based line number of the task")
    postpone_parser.add_argument(
        "option", help="today, tomorrow, clear, or an offset such as 2d, 1w, 1m (=3d for fixed)"
    )

    move_parser = commands.add_parser("move", help="Move a task into another note")
    move_parser.add_argument("note", help="Note name or path holding the task")
    move_parser.add_argument("line", type=int, help="Zero-based line number of the task")
    move_parser.add_argument("--to", dest="destination", required=True, help="Destination note")

    serve_parser = commands.add_parser("serve", help="Run the MCP server")
    serve_parser.add_argument(
        "--transport", choices=("stdio", "sse"), default="stdio", help="MCP transport"
    )

    return parser


async def run_command(args: argparse.Namespace) -> bool:
    """
    Run a parsed vault command.

    Returns:
        True on success
    """
    vault = MarkdownVault(args.vault)
    history = None if args.no_history else TaskHistory(args.history_db)
    if history is not None:
        await history.initialize()

    cli = TaskCLI(vault, history)
    try:
        if args.command == "tasks":
            return await cli.list_tasks(args.note)
        if args.command == "menu":
            return await cli.show_menu(args.note, args.line)
        if args.command == "postpone":
            return await cli.postpone(args.note, args.line, args.option)
        if args.command == "move":
            return await cli.move(args.note, args.line, args.destination)
        raise ValueError(f"Unknown command: {args.command}")
    finally:
        if history is not None:
            await history.close()


def handle_arguments(args: argparse.Namespace) -> tuple[bool, bool]:
    """
    Handle parsed command line arguments.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Tuple of (success, should_continue) where should_continue is True
        when a vault command still has to run
    """
    configure_logging(verbose=args.verbose, trace=args.trace)

    if args.command == "serve":
        from .postponement.mcp_server import cli_entry

        history_path = None if args.no_history else args.history_db
        cli_entry(transport=args.transport, vault_path=args.vault, history_path=history_path)
        return True, False

    return True, True


def cli_entry_with_args() -> None:
    """CLI entry point with argument parsing."""
    parser = create_argument_parser()

    try:
        args = parser.parse_args()

        success, should_continue = handle_arguments(args)
        if not success:
            sys.exit(1)
        if not should_continue:
            sys.exit(0)

        if not asyncio.run(run_command(args)):
            sys.exit(1)

    except (PostponementError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        pass  # Graceful shutdown


if __name__ == "__main__":
    cli_entry_with_args()
