"""
FILE: jiraclone/repl/commands/tickets.py
PURPOSE: Ticket command handlers for REPL (add, show, mv, priority, edit, desc, rm)
"""

from typing import Optional

from rich.markup import escape

from ..main import console, repl_context
from ..parser import ParseResult
from ...core import service
from ...core.exceptions import ValidationError
from ...core.models import Ticket
from ...formatting import BoardFormatter, parse_ids


def parse_id(value: str, what: str) -> Optional[int]:
    """Parse a single numeric ID, printing an error if it isn't one."""
    try:
        return int(value)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid {what} ID: {escape(value)}")
        return None


def resolve_ticket(value: str) -> Optional[Ticket]:
    """Look up a ticket by user-typed ID, printing an error if it doesn't resolve."""
    ticket_id = parse_id(value, "ticket")
    if ticket_id is None:
        return None
    ticket = service.get_board().get_ticket(ticket_id)
    if ticket is None:
        console.print(f"[red]Error:[/red] Ticket {ticket_id} not found")
    return ticket


def handle_add_command(result: ParseResult) -> None:
    """
    Handle 'add' command - create a ticket in the selected project.

    Usage:
        add Fix login bug
        add "Fix login bug" --priority high --status todo
        add "Fix login bug" -d "Safari only" -i Reproduce -i Fix
        add "Fix login bug" --project Website
    """
    if not result.args:
        console.print("[red]Error:[/red] Ticket title required")
        console.print("[dim]Usage: add <title> [--desc ..] [--status ..] [--priority ..] [-i <instruction>]...[/dim]")
        return

    board = service.get_board()
    project_ref = result.flags.get("project")
    if isinstance(project_ref, str):
        project = board.find_project(project_ref)
        if project is None:
            console.print(f"[red]Error:[/red] Project '{escape(project_ref)}' not found")
            return
    else:
        project = repl_context.current_project
        if project is None:
            console.print("[red]Error:[/red] No project selected")
            console.print("[dim]Use 'use <project>' first or pass --project <name>[/dim]")
            return

    description = result.flags.get("desc")
    try:
        ticket = board.create_ticket(
            project,
            result.text(),
            description if isinstance(description, str) else "",
            status=result.flags.get("status", "Backlog"),
            priority=result.flags.get("priority", "Medium"),
            instruction_texts=result.flag_list("instruction"),
        )
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    console.print(
        f"[green]✓ Created ticket:[/green] [cyan]{ticket.id}[/cyan]: {escape(ticket.title)} "
        f"[dim]({ticket.status.value}, {ticket.priority.value})[/dim]"
    )


def handle_show_command(result: ParseResult) -> None:
    """
    Handle 'show' command - ticket detail sheet.

    Usage:
        show 3
    """
    if not result.args:
        console.print("[red]Error:[/red] Ticket ID required")
        console.print("[dim]Usage: show <ticket_id>[/dim]")
        return

    ticket = resolve_ticket(result.args[0])
    if ticket is not None:
        console.print(BoardFormatter.ticket_detail(ticket))


def handle_mv_command(result: ParseResult) -> None:
    """
    Handle 'mv' command - move ticket to another column.

    Any column can be reached from any other.

    Usage:
        mv 3 done
        mv 3 To Test
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Ticket ID and status required")
        console.print("[dim]Usage: mv <ticket_id> <Backlog|To Do|To Test|Done>[/dim]")
        return

    ticket = resolve_ticket(result.args[0])
    if ticket is None:
        return

    try:
        moved = service.get_board().set_ticket_status(ticket, result.text(1))
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    if moved:
        console.print(f"✓ Moved ticket {ticket.id} to [cyan]{ticket.status.value}[/cyan]")
    else:
        console.print(f"[dim]Ticket {ticket.id} is already in {ticket.status.value}[/dim]")


def handle_priority_command(result: ParseResult) -> None:
    """
    Handle 'priority' command.

    Usage:
        priority 3 critical
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Ticket ID and priority required")
        console.print("[dim]Usage: priority <ticket_id> <Low|Medium|High|Critical>[/dim]")
        return

    ticket = resolve_ticket(result.args[0])
    if ticket is None:
        return

    try:
        service.get_board().set_ticket_priority(ticket, result.args[1])
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    color = ticket.priority.color
    console.print(f"✓ Ticket {ticket.id} priority: [{color}]{ticket.priority.value}[/{color}]")


def handle_edit_command(result: ParseResult) -> None:
    """
    Handle 'edit' command - change ticket title.

    Usage:
        edit 3 Fix login on Safari
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Ticket ID and new title required")
        console.print("[dim]Usage: edit <ticket_id> <new title>[/dim]")
        return

    ticket = resolve_ticket(result.args[0])
    if ticket is None:
        return

    try:
        service.get_board().update_ticket(ticket, title=result.text(1))
        console.print(f"✓ Updated ticket {ticket.id}: {escape(ticket.title)}")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_desc_command(result: ParseResult) -> None:
    """
    Handle 'desc' command - replace ticket description (empty clears it).

    Usage:
        desc 3 Happens on Safari 17 only
        desc 3
    """
    if not result.args:
        console.print("[red]Error:[/red] Ticket ID required")
        console.print("[dim]Usage: desc <ticket_id> [text][/dim]")
        return

    ticket = resolve_ticket(result.args[0])
    if ticket is None:
        return

    service.get_board().update_ticket(ticket, description=result.text(1))
    if ticket.description:
        console.print(f"✓ Updated description of ticket {ticket.id}")
    else:
        console.print(f"✓ Cleared description of ticket {ticket.id}")


def handle_rm_command(result: ParseResult) -> None:
    """
    Handle 'rm' command - delete ticket(s) with their checklists.

    Usage:
        rm 3
        rm 3,5,7
    """
    if not result.args:
        console.print("[red]Error:[/red] Ticket ID(s) required")
        console.print("[dim]Usage: rm <ticket_id>[,<ticket_id>...][/dim]")
        return

    try:
        ids = parse_ids(result.args[0])
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid ticket ID(s): {escape(result.args[0])}")
        return

    board = service.get_board()
    for ticket_id in ids:
        ticket = board.get_ticket(ticket_id)
        if ticket is None:
            console.print(f"[red]Error:[/red] Ticket {ticket_id} not found")
            continue
        board.delete_ticket(ticket)
        console.print(f"[red]✗[/red] Deleted ticket {ticket.id}: {escape(ticket.title)}")
