"""
Tests for shared formatting helpers.

Renders through a recording Rich console so assertions run on plain text.
"""

import json

import pytest
from rich.console import Console

from jiraclone.core.constants import Status
from jiraclone.formatting import (
    BoardFormatter,
    board_columns,
    format_date,
    parse_ids,
    progress_bar,
)


def render(renderable) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


@pytest.fixture
def site(board):
    project = board.create_project("Site")
    bug = board.create_ticket(
        project, "Login bug", "Safari only", status="To Do", priority="High",
        instruction_texts=["Repro", "Fix"],
    )
    board.toggle_instruction(bug.instructions[0])
    board.create_ticket(project, "Docs", status="Done", priority="Low")
    return project


def test_progress_bar():
    assert progress_bar(0.0) == "░" * 10
    assert progress_bar(1.0) == "█" * 10
    assert progress_bar(0.5, width=4) == "██░░"
    assert progress_bar(2.0, width=3) == "███"


def test_format_date(board):
    project = board.create_project("Site")
    assert format_date(project.created_at) == project.created_at.strftime("%b %d, %Y")


def test_parse_ids():
    assert parse_ids("1") == [1]
    assert parse_ids("1, 2,3,") == [1, 2, 3]
    with pytest.raises(ValueError):
        parse_ids("1,abc")


def test_board_columns_in_rank_order(board, site):
    columns = board_columns(board, site)
    assert list(columns) == Status.ordered()
    assert [t.title for t in columns[Status.TODO]] == ["Login bug"]
    assert columns[Status.BACKLOG] == []


def test_board_render(board, site):
    text = render(BoardFormatter.board(site, board_columns(board, site)))

    assert "Site" in text
    assert "Backlog (0)" in text
    assert "To Do (1)" in text
    assert "Done (1)" in text
    assert "#1 Login bug" in text
    assert "1/2" in text


def test_projects_table_marks_selection(board, site):
    other = board.create_project("Other")
    text = render(BoardFormatter.projects_table([site, other], selected=other))

    assert "Projects" in text
    assert "▸ Other" in text
    assert "▸ Site" not in text


def test_ticket_detail(site):
    bug = site.tickets[0]
    text = render(BoardFormatter.ticket_detail(bug))

    assert "#1 Login bug" in text
    assert "To Do" in text
    assert "High" in text
    assert "Safari only" in text
    assert "Instructions 1/2" in text
    assert "☑" in text and "☐" in text


def test_ticket_detail_without_instructions(site):
    docs = site.tickets[1]
    assert "No instructions" in render(BoardFormatter.ticket_detail(docs))


def test_user_text_is_not_treated_as_markup(board):
    project = board.create_project("[bold]Sneaky[/bold]")
    text = render(BoardFormatter.projects_table([project]))
    assert "[bold]Sneaky[/bold]" in text


def test_board_to_json(board, site):
    data = json.loads(BoardFormatter.board_to_json(site, board_columns(board, site)))

    assert data["name"] == "Site"
    assert list(data["columns"]) == ["Backlog", "To Do", "To Test", "Done"]
    assert data["columns"]["To Do"][0]["completed_instructions"] == 1


def test_projects_to_json(board, site):
    data = json.loads(BoardFormatter.projects_to_json([site]))
    assert data == [site.to_dict()]
