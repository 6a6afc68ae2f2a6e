"""Tests for REPL autocomplete."""

import pytest
from prompt_toolkit.document import Document

from jiraclone.core import service
from jiraclone.repl.completer import create_completer


def complete(text: str):
    completer = create_completer()
    doc = Document(text, cursor_position=len(text))
    return [c.text for c in completer.get_completions(doc, None)]


@pytest.fixture
def seeded(temp_db):
    board = service.get_board()
    project = board.create_project("Mobile App")
    board.create_project("Site")
    board.create_ticket(project, "Touch ID login")
    return board


def test_command_completion():
    assert "project" in complete("pr")
    assert "projects" in complete("pr")
    assert complete("m") == ["mv"]
    assert "exit" in complete("")


def test_project_subcommand_completion():
    assert complete("project ") == ["add", "ls", "rm", "rename"]
    assert complete("project re") == ["rename"]


def test_instruction_subcommand_completion():
    assert complete("instruction t") == ["toggle"]


def test_status_completion_after_ticket_id(temp_db):
    assert complete("mv 3 ") == ["Backlog", '"To Do"', '"To Test"', "Done"]
    assert complete("mv 3 to") == ['"To Do"', '"To Test"']


def test_priority_completion(temp_db):
    assert complete("priority 3 c") == ["Critical"]
    assert complete("add Bug --priority h") == ["High"]


def test_flag_completion():
    flags = complete("add Bug --")
    assert "--priority" in flags
    assert "--instruction" in flags


def test_project_name_completion(seeded):
    assert complete("use ") == ["none", "clear", '"Mobile App"', "Site"]
    assert complete("board s") == ["Site"]


def test_ticket_id_completion(seeded):
    assert complete("show ") == ["1"]
    assert complete("instruction add ") == ["1"]


def test_no_suggestions_while_typing_title():
    assert complete("add Fix the") == []
