"""Example demonstrating the postponement MCP tools on a throwaway vault."""

import asyncio
import logging
import tempfile
from datetime import date
from pathlib import Path

from note_tasks.postponement import mcp_server
from note_tasks.postponement.history import TaskHistory
from note_tasks.postponement.vault import MarkdownVault

logging.basicConfig(level=logging.INFO)


async def main() -> None:
    """Demonstrate postponing and moving tasks."""
    with tempfile.TemporaryDirectory() as root:
        today = date.today().isoformat()
        (Path(root) / "Inbox.md").write_text(
            f"# Inbox\n- [ ] Write documentation 📅 {today}\n- [ ] Call plumber\n",
            encoding="utf-8",
        )
        (Path(root) / "Daily.md").write_text("# Daily", encoding="utf-8")

        mcp_server.set_vault(MarkdownVault(root), TaskHistory(":memory:"))

        # Example 1: List tasks
        print("=== Listing tasks ===")
        result = await mcp_server._list_tasks_impl("Inbox")
        print(f"Tasks: {result['tasks']}")
        print()

        # Example 2: Show the postpone menu
        print("=== Postpone menu ===")
        result = await mcp_server._postpone_menu_impl("Inbox", 1)
        for item in result["items"]:
            mark = "x" if item["checked"] else " "
            print(f"[{mark}] {item['option'] or '':<9} {item['title']}")
        print()

        # Example 3: Postpone by two days
        print("=== Postponing by two days ===")
        result = await mcp_server._postpone_task_impl("Inbox", 1, "2d")
        print(f"Postpone result: {result}")
        print()

        # Example 4: Move a task into the daily note
        print("=== Moving a task ===")
        result = await mcp_server._move_task_here_impl("Inbox", 2, destination="Daily")
        print(f"Move result: {result}")
        print((Path(root) / "Daily.md").read_text(encoding="utf-8"))
        print()

        # Example 5: Review the history
        print("=== Task history ===")
        result = await mcp_server._get_task_history_impl()
        for entry in result["history"]:
            print(f"{entry['field_name']}: {entry['old_value']} -> {entry['new_value']}")

        # Cleanup
        await mcp_server.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
