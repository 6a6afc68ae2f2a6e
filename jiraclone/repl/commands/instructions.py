"""
FILE: jiraclone/repl/commands/instructions.py
PURPOSE: Checklist command handlers for REPL (check, instruction add/toggle/rm/edit)
"""

from typing import Optional

from rich.markup import escape

from ..main import console
from ..parser import ParseResult
from ...core import service
from ...core.exceptions import ValidationError
from ...core.models import Instruction
from ...formatting import parse_ids
from .tickets import parse_id, resolve_ticket


def resolve_instruction(value: str) -> Optional[Instruction]:
    instruction_id = parse_id(value, "instruction")
    if instruction_id is None:
        return None
    instruction = service.get_board().get_instruction(instruction_id)
    if instruction is None:
        console.print(f"[red]Error:[/red] Instruction {instruction_id} not found")
    return instruction


def handle_check_command(result: ParseResult) -> None:
    """
    Handle 'check' command - toggle checklist instruction(s).

    Usage:
        check 4
        check 4,5,6
    """
    if not result.args:
        console.print("[red]Error:[/red] Instruction ID(s) required")
        console.print("[dim]Usage: check <instruction_id>[,<instruction_id>...][/dim]")
        return

    try:
        ids = parse_ids(result.args[0])
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid instruction ID(s): {escape(result.args[0])}")
        return

    board = service.get_board()
    for instruction_id in ids:
        instruction = board.get_instruction(instruction_id)
        if instruction is None:
            console.print(f"[red]Error:[/red] Instruction {instruction_id} not found")
            continue
        board.toggle_instruction(instruction)
        ticket = instruction.ticket
        box = "☑" if instruction.completed else "☐"
        console.print(
            f"{box} {escape(instruction.text)} "
            f"[dim]({ticket.completed_instruction_count}/{ticket.instruction_count})[/dim]"
        )


def handle_instruction_add_command(result: ParseResult) -> None:
    """
    Usage:
        instruction add 3 Write regression test
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Ticket ID and text required")
        console.print("[dim]Usage: instruction add <ticket_id> <text>[/dim]")
        return

    ticket = resolve_ticket(result.args[0])
    if ticket is None:
        return

    try:
        instruction = service.get_board().add_instruction(ticket, result.text(1))
        console.print(f"✓ Added instruction [cyan]{instruction.id}[/cyan]: {escape(instruction.text)}")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_instruction_rm_command(result: ParseResult) -> None:
    """
    Usage:
        instruction rm 4
    """
    if not result.args:
        console.print("[red]Error:[/red] Instruction ID required")
        return

    instruction = resolve_instruction(result.args[0])
    if instruction is None:
        return

    ticket = instruction.ticket
    service.get_board().remove_instruction(ticket, instruction)
    console.print(f"[red]✗[/red] Removed instruction {instruction.id} from ticket {ticket.id}")


def handle_instruction_edit_command(result: ParseResult) -> None:
    """
    Usage:
        instruction edit 4 Write two regression tests
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Instruction ID and text required")
        console.print("[dim]Usage: instruction edit <instruction_id> <text>[/dim]")
        return

    instruction = resolve_instruction(result.args[0])
    if instruction is None:
        return

    try:
        service.get_board().edit_instruction(instruction, result.text(1))
        console.print(f"✓ Updated instruction {instruction.id}: {escape(instruction.text)}")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_instruction_command(result: ParseResult) -> None:
    """
    Handle 'instruction' command - dispatch to subcommands.

    Usage:
        instruction add <ticket_id> <text>
        instruction toggle <id>[,<id>...]
        instruction rm <id>
        instruction edit <id> <text>
    """
    if not result.args:
        console.print("[red]Error:[/red] Subcommand required")
        console.print("[dim]Usage: instruction add|toggle|rm|edit ...[/dim]")
        return

    subcommand = result.args[0].lower()
    sub_result = ParseResult(
        command=f"instruction {subcommand}",
        args=result.args[1:],
        flags=result.flags,
        raw_input=result.raw_input,
    )

    handlers = {
        "add": handle_instruction_add_command,
        "toggle": handle_check_command,
        "rm": handle_instruction_rm_command,
        "edit": handle_instruction_edit_command,
    }
    handler = handlers.get(subcommand)
    if handler is None:
        console.print(f"[red]Unknown instruction subcommand:[/red] {escape(subcommand)}")
        console.print("[dim]Available: add, toggle, rm, edit[/dim]")
        return

    handler(sub_result)
