"""
Tests for the SQLite persistence collaborator.

Tests:
- Database path resolution
- Save/load round trip through a fresh board
- Cascading deletes leave no rows behind
- Failure reporting as PersistenceError
- Failed saves roll back whole and stay queued for the next save
"""

import pytest

from jiraclone.core import repository, service
from jiraclone.core.constants import Priority, Status
from jiraclone.core.exceptions import PersistenceError
from jiraclone.core.repository import SQLiteStore, get_connection
from jiraclone.core.service import Board


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "board.db"


def reopen(path) -> Board:
    return Board.open(SQLiteStore(path))


def test_resolve_db_path_prefers_environment(monkeypatch, tmp_path):
    custom = tmp_path / "custom.db"
    monkeypatch.setenv("JIRACLONE_DB", str(custom))
    assert repository.resolve_db_path() == custom


def test_resolve_db_path_uses_module_default(temp_db):
    assert repository.resolve_db_path() == temp_db


def test_get_connection_creates_schema(tmp_path):
    path = tmp_path / "nested" / "dir" / "board.db"
    conn = get_connection(path)
    tables = {
        row["name"]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }
    conn.close()

    assert path.exists()
    assert {"projects", "tickets", "instructions"} <= tables


def test_round_trip(db_path):
    store = SQLiteStore(db_path)
    board = Board(store)
    project = board.create_project("Site")
    ticket = board.create_ticket(
        project, "Bug", "Safari only", status="To Test", priority="Critical",
        instruction_texts=["Repro", "Fix", "Verify"],
    )
    board.toggle_instruction(ticket.instructions[1])
    board.create_ticket(project, "Second")
    store.close()

    loaded = reopen(db_path)

    assert [p.name for p in loaded.projects] == ["Site"]
    site = loaded.projects[0]
    assert [t.title for t in site.tickets] == ["Bug", "Second"]
    bug = site.tickets[0]
    assert bug.id == ticket.id
    assert bug.description == "Safari only"
    assert bug.status is Status.TO_TEST
    assert bug.priority is Priority.CRITICAL
    assert bug.created_at == ticket.created_at
    assert [(i.text, i.completed) for i in bug.instructions] == [
        ("Repro", False), ("Fix", True), ("Verify", False)
    ]
    assert bug.project is site
    assert all(i.ticket is bug for i in bug.instructions)


def test_in_place_edits_are_persisted(db_path):
    store = SQLiteStore(db_path)
    board = Board(store)
    project = board.create_project("Site")
    ticket = board.create_ticket(project, "Bug", instruction_texts=["Repro"])
    board.rename_project(project, "Shop")
    board.update_ticket(ticket, title="Login bug", description="Details")
    board.set_ticket_status(ticket, "Done")
    board.set_ticket_priority(ticket, "Low")
    board.edit_instruction(ticket.instructions[0], "Reproduce")
    store.close()

    shop = reopen(db_path).projects[0]
    loaded = shop.tickets[0]

    assert shop.name == "Shop"
    assert loaded.title == "Login bug"
    assert loaded.description == "Details"
    assert loaded.status is Status.DONE
    assert loaded.priority is Priority.LOW
    assert loaded.instructions[0].text == "Reproduce"


def test_ids_continue_after_reopen(db_path):
    store = SQLiteStore(db_path)
    board = Board(store)
    project = board.create_project("Site")
    ticket = board.create_ticket(project, "Bug", instruction_texts=["a"])
    store.close()

    board = reopen(db_path)
    site = board.projects[0]
    newer = board.create_ticket(site, "Another", instruction_texts=["b"])

    assert newer.id == ticket.id + 1
    assert newer.instructions[0].id == ticket.instructions[0].id + 1
    assert board.create_project("Next").id == project.id + 1


def test_delete_project_leaves_no_rows(db_path):
    store = SQLiteStore(db_path)
    board = Board(store)
    project = board.create_project("Site")
    board.create_ticket(project, "one", instruction_texts=["a", "b"])
    board.create_ticket(project, "two", instruction_texts=["c"])
    other = board.create_project("Other")
    board.create_ticket(other, "kept", instruction_texts=["d"])

    board.delete_project(project)

    assert store.count_rows("projects") == 1
    assert store.count_rows("tickets") == 1
    assert store.count_rows("instructions") == 1
    store.close()

    loaded = reopen(db_path)
    assert [p.name for p in loaded.projects] == ["Other"]


def test_delete_ticket_and_instruction_rows(db_path):
    store = SQLiteStore(db_path)
    board = Board(store)
    project = board.create_project("Site")
    keep = board.create_ticket(project, "keep", instruction_texts=["a", "b"])
    drop = board.create_ticket(project, "drop", instruction_texts=["c"])

    board.delete_ticket(drop)
    board.remove_instruction(keep, keep.instructions[0])

    assert store.count_rows("tickets") == 1
    assert store.count_rows("instructions") == 1
    store.close()

    loaded = reopen(db_path).projects[0]
    assert [t.title for t in loaded.tickets] == ["keep"]
    assert [i.text for i in loaded.tickets[0].instructions] == ["b"]


def test_failed_cascade_delete_rolls_back_and_retries(db_path):
    store = SQLiteStore(db_path)
    board = Board(store)
    project = board.create_project("Site")
    board.create_ticket(project, "Bug", instruction_texts=["Repro", "Fix"])
    store.connection.executescript(
        """
        CREATE TRIGGER keep_projects BEFORE DELETE ON projects
        BEGIN SELECT RAISE(ABORT, 'projects are locked'); END;
        """
    )

    board.delete_project(project)

    # Children were deleted first in the same transaction; all rolled back
    assert isinstance(board.last_persistence_error, PersistenceError)
    assert store.count_rows("projects") == 1
    assert store.count_rows("tickets") == 1
    assert store.count_rows("instructions") == 2

    store.connection.executescript("DROP TRIGGER keep_projects;")
    board.create_project("Next")

    assert board.last_persistence_error is None
    assert store.count_rows("projects") == 1
    assert store.count_rows("tickets") == 0
    assert store.count_rows("instructions") == 0
    store.close()

    assert [p.name for p in reopen(db_path).projects] == ["Next"]


def test_count_rows_rejects_unknown_table(db_path):
    with pytest.raises(ValueError):
        SQLiteStore(db_path).count_rows("sqlite_master")


def test_unopenable_database_raises_persistence_error(tmp_path):
    # A directory cannot be opened as a database file
    store = SQLiteStore(tmp_path)
    with pytest.raises(PersistenceError):
        store.load()


def test_get_board_uses_default_store(temp_db):
    board = service.get_board()
    board.create_project("Site")
    assert service.get_board() is board

    service.reset_board()

    assert [p.name for p in service.get_board().projects] == ["Site"]
    assert temp_db.exists()
