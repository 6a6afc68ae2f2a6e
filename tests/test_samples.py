"""Tests for demo data seeding."""

from jiraclone.core.constants import Status
from jiraclone.core.samples import SAMPLE_PROJECTS, seed_sample_data


def test_seed_empty_board(board):
    created = seed_sample_data(board)

    assert [p.name for p in created] == list(SAMPLE_PROJECTS)
    assert board.projects == created
    shop = created[0]
    assert shop.ticket_count == len(SAMPLE_PROJECTS["E-commerce Website"])

    payment = shop.tickets[0]
    assert payment.title == "Payment integration"
    assert payment.instruction_count == 4
    assert payment.completed_instruction_count == 2
    assert payment.completion_ratio == 0.5


def test_seed_covers_every_column(board):
    seed_sample_data(board)
    statuses = {ticket.status for ticket in board.iter_tickets()}
    assert statuses == set(Status)


def test_seed_skips_non_empty_board(board):
    board.create_project("Mine")

    assert seed_sample_data(board) == []
    assert [p.name for p in board.projects] == ["Mine"]


def test_seed_emits_events(board):
    events = []
    board.subscribe(events.append)

    seed_sample_data(board)

    assert len(events) > len(SAMPLE_PROJECTS)
