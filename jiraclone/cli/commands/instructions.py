"""
FILE: jiraclone/cli/commands/instructions.py
PURPOSE: Checklist commands (instruction add/toggle/rm/edit)
"""

import typer
from rich.markup import escape

from ..main import console, error_console, ensure_saved, instruction_app, open_board
from ...core.exceptions import (
    JiraCloneError,
    NotFoundError,
    ValidationError,
)
from ...formatting import parse_ids


@instruction_app.command("add")
def instruction_add(
    ticket_id: int = typer.Argument(..., help="Ticket ID"),
    text: str = typer.Argument(..., help="Instruction text"),
):
    """
    Append an instruction to a ticket's checklist.

    Example:
        jiraclone instruction add 3 "Write regression test"
    """
    try:
        kanban = open_board()
        ticket = kanban.get_ticket_or_raise(ticket_id)
        instruction = kanban.add_instruction(ticket, text)
        ensure_saved(kanban)
        console.print(
            f"[green]✓[/green] Added instruction {instruction.id} to ticket {ticket.id}: "
            f"{escape(instruction.text)}"
        )

    except (ValidationError, NotFoundError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@instruction_app.command("toggle")
def instruction_toggle(
    instruction_ids: str = typer.Argument(..., help="Instruction ID(s) (comma-separated)"),
):
    """
    Check or uncheck checklist instructions.

    Example:
        jiraclone instruction toggle 4
        jiraclone instruction toggle 4,5
    """
    try:
        ids = parse_ids(instruction_ids)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid instruction ID(s): {escape(instruction_ids)}")
        raise typer.Exit(1)

    kanban = open_board()
    errors = []
    for instruction_id in ids:
        instruction = kanban.get_instruction(instruction_id)
        if instruction is None:
            errors.append(f"Instruction {instruction_id} not found")
            continue
        kanban.toggle_instruction(instruction)
        ensure_saved(kanban)
        box = "☑" if instruction.completed else "☐"
        ticket = instruction.ticket
        console.print(
            f"{box} {instruction.id}: {escape(instruction.text)} "
            f"[dim](ticket {ticket.id}: {ticket.completed_instruction_count}/"
            f"{ticket.instruction_count})[/dim]"
        )

    for error in errors:
        error_console.print(f"[red]Error:[/red] {error}")
    if errors:
        raise typer.Exit(1)


@instruction_app.command("rm")
def instruction_rm(
    instruction_id: int = typer.Argument(..., help="Instruction ID"),
):
    """
    Remove an instruction from its ticket.

    Example:
        jiraclone instruction rm 4
    """
    try:
        kanban = open_board()
        instruction = kanban.get_instruction_or_raise(instruction_id)
        ticket = instruction.ticket
        kanban.remove_instruction(ticket, instruction)
        ensure_saved(kanban)
        console.print(
            f"[red]✗[/red] Removed instruction {instruction.id} from ticket {ticket.id}"
        )

    except NotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@instruction_app.command("edit")
def instruction_edit(
    instruction_id: int = typer.Argument(..., help="Instruction ID"),
    text: str = typer.Argument(..., help="New instruction text"),
):
    """
    Change an instruction's text.

    Example:
        jiraclone instruction edit 4 "Write two regression tests"
    """
    try:
        kanban = open_board()
        instruction = kanban.get_instruction_or_raise(instruction_id)
        kanban.edit_instruction(instruction, text)
        ensure_saved(kanban)
        console.print(f"[green]✓[/green] Updated instruction {instruction.id}: {escape(instruction.text)}")

    except (ValidationError, NotFoundError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
