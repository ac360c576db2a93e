"""
Integration Tests for the CLI.

Runs the Typer app in-process against a throwaway SQLite file.
"""

import logging

import pytest
from typer.testing import CliRunner

from agentic_notes.cli import app
from agentic_notes.core.config import get_settings

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_database(tmp_path, monkeypatch):
    """Point the CLI at a database file under tmp_path."""
    monkeypatch.setenv("AGENTIC_NOTES_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    get_settings.cache_clear()
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    get_settings.cache_clear()
    # the CLI reconfigures logging onto the runner's captured stderr
    root.handlers[:] = handlers
    root.setLevel(level)


def _invoke(*args):
    return runner.invoke(app, list(args))


def _create(title, content=""):
    result = _invoke("new", "--title", title, "--content", content)
    assert result.exit_code == 0, result.output
    return result.stdout.split()[-1]


class TestCli:
    def test_migrate(self):
        result = _invoke("migrate")

        assert result.exit_code == 0
        assert "Database at revision 0002" in result.output

    def test_empty_list(self):
        result = _invoke("list")

        assert result.exit_code == 0
        assert "No notes yet" in result.output

    def test_new_blank_note(self):
        result = _invoke("new", "--title", "  ")

        assert result.exit_code == 0
        assert "Nothing to save" in result.output

    def test_new_then_show(self):
        note_id = _create("Groceries", "milk")

        result = _invoke("show", note_id)

        assert result.exit_code == 0
        assert "Groceries" in result.output
        assert "milk" in result.output

    def test_show_missing(self):
        result = _invoke("show", "ghost")

        assert result.exit_code == 1
        assert "Note not found: ghost" in result.output

    def test_edit_keeps_unspecified_fields(self):
        note_id = _create("Groceries", "milk")

        assert _invoke("edit", note_id, "--title", "Shopping").exit_code == 0

        result = _invoke("show", note_id)
        assert "Shopping" in result.output
        assert "milk" in result.output

    def test_list_with_query(self):
        _create("Groceries", "milk")
        _create("Ideas", "novel")

        result = _invoke("list", "--query", "MILK")

        assert result.exit_code == 0
        assert "Groceries" in result.output
        assert "Ideas" not in result.output

    def test_bin_and_restore(self):
        note_id = _create("Groceries")

        result = _invoke("bin", note_id, "ghost")
        assert result.exit_code == 0
        assert "Moved 1 note(s) to the bin." in result.output
        assert "Note not found: ghost" in result.output

        result = _invoke("list", "--bin")
        assert "Groceries" in result.output
        assert "30 days" in result.output

        result = _invoke("restore", note_id)
        assert result.exit_code == 0
        assert "Restored note" in result.output

        assert "The bin is empty." in _invoke("list", "--bin").output

    def test_bin_listed_when_no_active_notes_remain(self):
        note_id = _create("Only")
        assert _invoke("bin", note_id).exit_code == 0

        result = _invoke("list", "--bin")

        assert result.exit_code == 0
        assert "Only" in result.stdout
        assert "No notes yet" not in result.stdout
        assert "No notes yet" in _invoke("list").stdout

    def test_list_query_without_matches(self):
        _create("Groceries", "milk")

        result = _invoke("list", "--query", "bread")

        assert result.exit_code == 0
        assert "No notes match 'bread'." in result.stdout

    def test_restore_missing(self):
        result = _invoke("restore", "ghost")

        assert result.exit_code == 1

    def test_config_section(self):
        result = _invoke("config", "application")

        assert result.exit_code == 0
        assert "retention_days" in result.output

    def test_config_unknown_section(self):
        result = _invoke("config", "nope")

        assert result.exit_code == 1
        assert "Unknown section" in result.output
