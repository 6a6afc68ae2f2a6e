"""
FILE: jiraclone/cli/commands/tickets.py
PURPOSE: Ticket commands (add, show, mv, priority, edit, rm)
"""

from typing import List, Optional

import typer
from rich.markup import escape

from ..main import app, console, error_console, ensure_saved, open_board
from ...core.exceptions import (
    JiraCloneError,
    NotFoundError,
    ValidationError,
)
from ...formatting import BoardFormatter, parse_ids


@app.command()
def add(
    project_ref: str = typer.Argument(..., help="Project ID or name"),
    title: str = typer.Argument(..., help="Ticket title"),
    description: str = typer.Option("", "--desc", "-d", help="Ticket description"),
    status: str = typer.Option("Backlog", "--status", "-s", help="Backlog, To Do, To Test or Done"),
    priority: str = typer.Option("Medium", "--priority", "-p", help="Low, Medium, High or Critical"),
    instructions: Optional[List[str]] = typer.Option(
        None, "--instruction", "-i", help="Checklist item (repeatable)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Create a new ticket in a project.

    Example:
        jiraclone add Website "Fix login bug" -p High -i "Reproduce" -i "Fix"
    """
    try:
        kanban = open_board()
        project = kanban.find_project_or_raise(project_ref)
        ticket = kanban.create_ticket(
            project,
            title,
            description,
            status=status,
            priority=priority,
            instruction_texts=instructions or [],
        )
        ensure_saved(kanban)

        if json_output:
            typer.echo(ticket.to_json())
        else:
            console.print(
                f"[green]✓[/green] Created ticket {ticket.id}: {escape(ticket.title)} "
                f"[dim]({ticket.status.value}, {ticket.priority.value})[/dim]"
            )

    except (ValidationError, NotFoundError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    ticket_id: int = typer.Argument(..., help="Ticket ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    View full ticket details with its checklist.

    Example:
        jiraclone show 3
    """
    try:
        ticket = open_board().get_ticket_or_raise(ticket_id)

        if json_output:
            typer.echo(ticket.to_json())
        else:
            console.print(BoardFormatter.ticket_detail(ticket))

    except NotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def mv(
    ticket_id: int = typer.Argument(..., help="Ticket ID"),
    status: str = typer.Argument(..., help="Target column: Backlog, To Do, To Test or Done"),
):
    """
    Move a ticket to another column.

    Any column can be reached from any other.

    Example:
        jiraclone mv 3 done
        jiraclone mv 3 "To Test"
    """
    try:
        kanban = open_board()
        ticket = kanban.get_ticket_or_raise(ticket_id)

        if kanban.set_ticket_status(ticket, status):
            ensure_saved(kanban)
            console.print(
                f"[green]✓[/green] Moved ticket {ticket.id} to [cyan]{ticket.status.value}[/cyan]"
            )
        else:
            console.print(f"[dim]Ticket {ticket.id} is already in {ticket.status.value}[/dim]")

    except (ValidationError, NotFoundError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def priority(
    ticket_id: int = typer.Argument(..., help="Ticket ID"),
    level: str = typer.Argument(..., help="Low, Medium, High or Critical"),
):
    """
    Change a ticket's priority.

    Example:
        jiraclone priority 3 critical
    """
    try:
        kanban = open_board()
        ticket = kanban.get_ticket_or_raise(ticket_id)
        kanban.set_ticket_priority(ticket, level)
        ensure_saved(kanban)

        color = ticket.priority.color
        console.print(
            f"[green]✓[/green] Ticket {ticket.id} priority: "
            f"[{color}]{ticket.priority.value}[/{color}]"
        )

    except (ValidationError, NotFoundError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def edit(
    ticket_id: int = typer.Argument(..., help="Ticket ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="New description"),
):
    """
    Update a ticket's title and/or description.

    Example:
        jiraclone edit 3 --title "Fix login on Safari"
        jiraclone edit 3 --desc ""
    """
    if title is None and description is None:
        error_console.print("[red]Error:[/red] Nothing to change (use --title and/or --desc)")
        raise typer.Exit(1)

    try:
        kanban = open_board()
        ticket = kanban.get_ticket_or_raise(ticket_id)
        kanban.update_ticket(ticket, title=title, description=description)
        ensure_saved(kanban)
        console.print(f"[green]✓[/green] Updated ticket {ticket.id}: {escape(ticket.title)}")

    except (ValidationError, NotFoundError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def rm(
    ticket_ids: str = typer.Argument(..., help="Ticket ID(s) to delete (comma-separated)"),
):
    """
    Delete one or more tickets with their checklists.

    Example:
        jiraclone rm 5
        jiraclone rm 3,5,7
    """
    try:
        ids = parse_ids(ticket_ids)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid ticket ID(s): {escape(ticket_ids)}")
        raise typer.Exit(1)

    kanban = open_board()
    errors = []
    for ticket_id in ids:
        ticket = kanban.get_ticket(ticket_id)
        if ticket is None:
            errors.append(f"Ticket {ticket_id} not found")
            continue
        kanban.delete_ticket(ticket)
        ensure_saved(kanban)
        console.print(f"[red]✗[/red] Deleted ticket {ticket.id}: {escape(ticket.title)}")

    for error in errors:
        error_console.print(f"[red]Error:[/red] {error}")
    if errors:
        raise typer.Exit(1)
