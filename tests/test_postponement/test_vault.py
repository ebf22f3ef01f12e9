"""Tests for the Markdown vault."""

import dataclasses
from datetime import date
from pathlib import Path

import pytest

from note_tasks.postponement.exceptions import PersistenceError, TaskLineNotFoundError
from note_tasks.postponement.models import Task, TaskStatus
from note_tasks.postponement.vault import MarkdownVault


@pytest.fixture
def vault(tmp_path: Path) -> MarkdownVault:
    """Create a vault with an Inbox note and a daily note."""
    (tmp_path / "Inbox.md").write_text(
        "# Inbox\n- [ ] Pay rent 📅 2024-01-10\nNotes\n- [ ] Call plumber\n", encoding="utf-8"
    )
    (tmp_path / "Daily").mkdir()
    (tmp_path / "Daily" / "2024-01-10.md").write_text("# Wednesday", encoding="utf-8")
    return MarkdownVault(tmp_path)


@pytest.mark.unit
class TestVaultDocuments:
    """Test the document host side of the vault."""

    def test_no_active_note_by_default(self, vault: MarkdownVault) -> None:
        assert vault.get_active_document() is None

    def test_active_note(self, vault: MarkdownVault, tmp_path: Path) -> None:
        vault.set_active_document("Daily/2024-01-10")

        active = vault.get_active_document()
        assert active == (tmp_path / "Daily" / "2024-01-10.md").resolve()
        assert vault.basename(active) == "2024-01-10"

    def test_active_note_from_constructor(self, tmp_path: Path) -> None:
        vault = MarkdownVault(tmp_path, active_note="Inbox.md")
        assert vault.basename(vault.get_active_document()) == "Inbox"

    def test_rejects_paths_outside_vault(self, vault: MarkdownVault) -> None:
        with pytest.raises(PersistenceError):
            vault.resolve("../elsewhere")

    @pytest.mark.asyncio
    async def test_read_and_write(self, vault: MarkdownVault) -> None:
        note = vault.resolve("Projects/New")
        await vault.write_content(note, "hello")
        assert await vault.read_content(note) == "hello"

    @pytest.mark.asyncio
    async def test_read_missing_note(self, vault: MarkdownVault) -> None:
        with pytest.raises(PersistenceError):
            await vault.read_content(vault.resolve("Missing"))


@pytest.mark.unit
@pytest.mark.asyncio
class TestVaultTasks:
    """Test loading and saving tasks."""

    async def test_list_tasks(self, vault: MarkdownVault) -> None:
        tasks = await vault.list_tasks("Inbox")
        assert [(t.line_number, t.description) for t in tasks] == [
            (1, "Pay rent"),
            (3, "Call plumber"),
        ]

    async def test_load_task(self, vault: MarkdownVault) -> None:
        task = await vault.load_task("Inbox", 1)
        assert task.due == date(2024, 1, 10)

    @pytest.mark.parametrize("line_number", [0, 2, 99, -1])
    async def test_load_non_task_line(self, vault: MarkdownVault, line_number: int) -> None:
        with pytest.raises(TaskLineNotFoundError):
            await vault.load_task("Inbox", line_number)

    async def test_save_task_replaces_line(self, vault: MarkdownVault, tmp_path: Path) -> None:
        task = await vault.load_task("Inbox", 1)
        updated = dataclasses.replace(task, due=date(2024, 1, 12))

        await vault.save_task(task, updated)

        content = (tmp_path / "Inbox.md").read_text(encoding="utf-8")
        assert content == "# Inbox\n- [ ] Pay rent 📅 2024-01-12\nNotes\n- [ ] Call plumber\n"

    async def test_save_task_after_line_moved(self, vault: MarkdownVault, tmp_path: Path) -> None:
        task = await vault.load_task("Inbox", 3)
        note = tmp_path / "Inbox.md"
        note.write_text("New first line\n" + note.read_text(encoding="utf-8"), encoding="utf-8")

        await vault.save_task(task, dataclasses.replace(task, status=TaskStatus.DONE))

        assert note.read_text(encoding="utf-8").split("\n")[4] == "- [x] Call plumber"

    async def test_save_task_line_gone(self, vault: MarkdownVault, tmp_path: Path) -> None:
        task = await vault.load_task("Inbox", 3)
        (tmp_path / "Inbox.md").write_text("# Inbox\n", encoding="utf-8")

        with pytest.raises(TaskLineNotFoundError):
            await vault.save_task(task, task)

    async def test_save_task_without_path(self, vault: MarkdownVault) -> None:
        task = Task("Loose task", due=date(2024, 1, 10))
        with pytest.raises(PersistenceError):
            await vault.save_task(task, task)

    async def test_save_task_keeps_crlf_endings(self, tmp_path: Path) -> None:
        note = tmp_path / "Windows.md"
        note.write_bytes("# T\r\n- [ ] Pay 📅 2024-01-10\r\nend\r\n".encode("utf-8"))
        vault = MarkdownVault(tmp_path)

        task = await vault.load_task("Windows", 1)
        assert task.description == "Pay"
        await vault.save_task(task, dataclasses.replace(task, due=date(2024, 1, 12)))

        assert note.read_bytes().decode("utf-8") == "# T\r\n- [ ] Pay 📅 2024-01-12\r\nend\r\n"

    async def test_list_tasks_in_crlf_note(self, tmp_path: Path) -> None:
        (tmp_path / "Windows.md").write_bytes(b"- [ ] First\r\n- [x] Second\r\n")
        vault = MarkdownVault(tmp_path)

        tasks = await vault.list_tasks("Windows")

        assert [t.description for t in tasks] == ["First", "Second"]
        assert tasks[0].original_markdown == "- [ ] First"

    async def test_save_task_with_tags(self, tmp_path: Path) -> None:
        note = tmp_path / "Home.md"
        note.write_text("- [ ] Pay rent 📅 2024-01-10 #home ^rent\n", encoding="utf-8")
        vault = MarkdownVault(tmp_path)

        task = await vault.load_task("Home", 0)
        await vault.save_task(task, dataclasses.replace(task, due=date(2024, 1, 12)))

        assert note.read_text(encoding="utf-8") == "- [ ] Pay rent 📅 2024-01-12 #home ^rent\n"
