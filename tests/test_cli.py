"""
Tests for the one-shot CLI commands.

Runs the Typer app in-process with CliRunner against a temporary database.
"""

import json

import pytest
from typer.testing import CliRunner

from jiraclone.cli.main import app
from jiraclone.core import service
from jiraclone.core.constants import Status
from jiraclone.core.repository import get_connection

runner = CliRunner()


@pytest.fixture(autouse=True)
def _db(temp_db):
    yield temp_db


def invoke(*args, input=None):
    return runner.invoke(app, list(args), input=input)


def make_ticket():
    board = service.get_board()
    project = board.create_project("Site")
    return board.create_ticket(project, "Bug", instruction_texts=["Repro", "Fix"])


def test_version():
    result = invoke("version")
    assert result.exit_code == 0
    assert "jiraclone v0.1.0" in result.output


def test_project_add_and_ls():
    result = invoke("project", "add", "Site")
    assert result.exit_code == 0
    assert "Created project 1: Site" in result.output

    result = invoke("project", "ls")
    assert result.exit_code == 0
    assert "Site" in result.output
    assert "Total: 1 project(s)" in result.output


def test_project_add_rejects_blank_name():
    result = invoke("project", "add", "   ")
    assert result.exit_code == 1
    assert "Project name cannot be empty" in result.output
    assert service.get_board().projects == []


def test_project_ls_json():
    invoke("project", "add", "Site")
    result = invoke("project", "ls", "--json")

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [p["name"] for p in data] == ["Site"]


def test_project_ls_empty():
    result = invoke("project", "ls")
    assert "No projects found" in result.output


def test_project_rename():
    invoke("project", "add", "Site")
    result = invoke("project", "rename", "site", "Shop")

    assert result.exit_code == 0
    assert service.get_board().projects[0].name == "Shop"


def test_project_rm_cancelled():
    make_ticket()
    result = invoke("project", "rm", "Site", input="n\n")

    assert result.exit_code == 0
    assert "1 ticket(s)" in result.output
    assert "Cancelled" in result.output
    assert len(service.get_board().projects) == 1


def test_project_rm_confirmed():
    make_ticket()
    result = invoke("project", "rm", "1", input="y\n")

    assert result.exit_code == 0
    assert "Deleted project 1" in result.output
    assert service.get_board().projects == []


def test_project_rm_unknown():
    result = invoke("project", "rm", "Nope", "--yes")
    assert result.exit_code == 1
    assert "Project Nope not found" in result.output


def test_add_ticket():
    invoke("project", "add", "Site")
    result = invoke(
        "add", "Site", "Login bug", "-d", "Safari only", "-s", "todo", "-p", "high",
        "-i", "Repro", "-i", "Fix",
    )

    assert result.exit_code == 0
    assert "Created ticket 1: Login bug (To Do, High)" in result.output
    ticket = service.get_board().get_ticket(1)
    assert ticket.description == "Safari only"
    assert [i.text for i in ticket.instructions] == ["Repro", "Fix"]


def test_add_ticket_json():
    invoke("project", "add", "Site")
    result = invoke("add", "Site", "Bug", "--json")

    data = json.loads(result.output)
    assert data["title"] == "Bug"
    assert data["status"] == "Backlog"
    assert data["priority"] == "Medium"


def test_add_ticket_rejects_empty_title():
    invoke("project", "add", "Site")
    result = invoke("add", "Site", "")

    assert result.exit_code == 1
    assert service.get_board().projects[0].ticket_count == 0


def test_add_ticket_unknown_project():
    result = invoke("add", "Nope", "Bug")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_show_ticket():
    make_ticket()
    result = invoke("show", "1")

    assert result.exit_code == 0
    assert "Bug" in result.output
    assert "Instructions 0/2" in result.output


def test_show_missing_ticket():
    result = invoke("show", "42")
    assert result.exit_code == 1
    assert "Ticket 42 not found" in result.output


def test_mv_any_direction():
    ticket = make_ticket()

    result = invoke("mv", "1", "done")
    assert result.exit_code == 0
    assert "Moved ticket 1 to Done" in result.output

    result = invoke("mv", "1", "Backlog")
    assert result.exit_code == 0
    assert ticket.status is Status.BACKLOG

    result = invoke("mv", "1", "backlog")
    assert "already in Backlog" in result.output


def test_mv_invalid_status():
    make_ticket()
    result = invoke("mv", "1", "blocked")
    assert result.exit_code == 1
    assert "Invalid status" in result.output


def test_priority():
    ticket = make_ticket()
    result = invoke("priority", "1", "crit")
    assert result.exit_code == 0
    assert ticket.priority.value == "Critical"


def test_edit_requires_a_field():
    make_ticket()
    result = invoke("edit", "1")
    assert result.exit_code == 1
    assert "Nothing to change" in result.output


def test_edit_title_and_description():
    ticket = make_ticket()
    result = invoke("edit", "1", "--title", "Login bug", "--desc", "Details")

    assert result.exit_code == 0
    assert ticket.title == "Login bug"
    assert ticket.description == "Details"


def test_rm_multiple_with_missing():
    board = service.get_board()
    project = board.create_project("Site")
    board.create_ticket(project, "one")
    board.create_ticket(project, "two")

    result = invoke("rm", "1,99")

    assert result.exit_code == 1
    assert "Deleted ticket 1" in result.output
    assert "Ticket 99 not found" in result.output
    assert [t.title for t in project.tickets] == ["two"]


def test_rm_invalid_ids():
    result = invoke("rm", "a,b")
    assert result.exit_code == 1
    assert "Invalid ticket ID(s)" in result.output


def test_instruction_commands():
    ticket = make_ticket()

    result = invoke("instruction", "add", "1", "Verify")
    assert result.exit_code == 0
    assert ticket.instruction_count == 3

    result = invoke("instruction", "toggle", "1,2")
    assert result.exit_code == 0
    assert ticket.completed_instruction_count == 2

    result = invoke("instruction", "edit", "3", "Verify on Safari")
    assert result.exit_code == 0
    assert ticket.instructions[2].text == "Verify on Safari"

    result = invoke("instruction", "rm", "1")
    assert result.exit_code == 0
    assert [i.text for i in ticket.instructions] == ["Fix", "Verify on Safari"]


def test_instruction_add_rejects_blank_text():
    make_ticket()
    result = invoke("instruction", "add", "1", "  ")
    assert result.exit_code == 1
    assert "Instruction text cannot be empty" in result.output


def test_board_command():
    make_ticket()
    result = invoke("board", "Site")

    assert result.exit_code == 0
    assert "Backlog" in result.output
    assert "Bug" in result.output


def test_board_json():
    make_ticket()
    result = invoke("board", "1", "--json")

    data = json.loads(result.output)
    assert data["columns"]["Backlog"][0]["title"] == "Bug"


def test_seed():
    result = invoke("seed")
    assert result.exit_code == 0
    assert "E-commerce Website" in result.output

    result = invoke("seed")
    assert "nothing seeded" in result.output


def test_changes_survive_restart():
    invoke("project", "add", "Site")
    invoke("add", "Site", "Bug", "-i", "Repro")
    service.reset_board()

    result = invoke("show", "1", "--json")

    data = json.loads(result.output)
    assert data["title"] == "Bug"
    assert data["instructions"][0]["text"] == "Repro"


def test_failed_save_exits_with_error(temp_db):
    make_ticket()
    conn = get_connection(temp_db)
    conn.executescript(
        """
        CREATE TRIGGER reject_ticket_updates BEFORE UPDATE ON tickets
        BEGIN SELECT RAISE(ABORT, 'tickets are read-only'); END;
        """
    )
    conn.close()

    result = invoke("mv", "1", "done")

    assert result.exit_code == 1
    assert "Change not saved" in result.output
    assert "Moved ticket" not in result.output
    service.reset_board()
    assert service.get_board().get_ticket(1).status is Status.BACKLOG


def test_failed_project_add_exits_with_error(temp_db):
    conn = get_connection(temp_db)
    conn.executescript(
        """
        CREATE TRIGGER reject_projects BEFORE INSERT ON projects
        BEGIN SELECT RAISE(ABORT, 'no new projects'); END;
        """
    )
    conn.close()

    result = invoke("project", "add", "Site")

    assert result.exit_code == 1
    assert "no new projects" in result.output
