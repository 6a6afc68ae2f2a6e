"""
FILE: jiraclone/repl/commands/system.py
PURPOSE: System command handlers for REPL
"""

from rich.markup import escape
from rich.panel import Panel

from ..main import console, repl_context
from ..parser import ParseResult
from ...core import service
from ...core.samples import seed_sample_data


def handle_help_command(result: ParseResult) -> None:
    """
    Handle 'help' command - show available commands.

    Args:
        result: Parsed command (unused)
    """
    help_text = """
[bold cyan]Available Commands:[/bold cyan]

  [cyan]projects[/cyan] or [cyan]ls[/cyan]               List projects (selected one marked ▸)
  [cyan]use <project>[/cyan]             Select the working project (by ID or name)
  [cyan]board [<project>][/cyan]          Show the kanban board
  [cyan]project add <name>[/cyan]        Create and select a project
  [cyan]project rename <p> <name>[/cyan] Rename a project
  [cyan]project rm <p> [--yes][/cyan]     Delete a project with all its tickets
  [cyan]add <title> [flags][/cyan]        Create a ticket in the selected project
  [cyan]show <id>[/cyan]                 View ticket details and checklist
  [cyan]mv <id> <status>[/cyan]          Move ticket to another column
  [cyan]priority <id> <level>[/cyan]     Change ticket priority
  [cyan]edit <id> <title>[/cyan]         Change ticket title
  [cyan]desc <id> [text][/cyan]          Replace ticket description
  [cyan]rm <id>[,<id>...][/cyan]         Delete ticket(s)
  [cyan]check <id>[,<id>...][/cyan]      Toggle checklist instruction(s)
  [cyan]instruction add <id> <text>[/cyan]   Add a checklist instruction to a ticket
  [cyan]instruction edit <id> <text>[/cyan]  Change instruction text
  [cyan]instruction rm <id>[/cyan]           Remove an instruction
  [cyan]autoboard on|off[/cyan]          Redraw the board after changes
  [cyan]seed[/cyan]                      Create demo projects on an empty board
  [cyan]help[/cyan]                      Show this help
  [cyan]clear[/cyan]                     Clear the screen
  [cyan]exit[/cyan] or [cyan]quit[/cyan]             Exit REPL

[bold cyan]Flags for add:[/bold cyan]

  [cyan]--desc, -d <text>[/cyan]          Description
  [cyan]--status, -s <status>[/cyan]      Backlog (default), To Do, To Test, Done
  [cyan]--priority, -p <level>[/cyan]     Low, Medium (default), High, Critical
  [cyan]--instruction, -i <text>[/cyan]   Checklist item (repeatable)
  [cyan]--project <project>[/cyan]        Target project instead of the selected one

[bold cyan]Examples:[/bold cyan]

  [dim]project add "Mobile App"
  use 2
  add "Fix login bug" -p high -i Reproduce -i "Write test"
  mv 3 todo
  mv 3 To Test
  priority 3 critical
  check 4,5
  show 3
  rm 3,5[/dim]
"""
    console.print(Panel(help_text, title="jiraclone REPL Help", border_style="cyan"))


def handle_clear_command(result: ParseResult) -> None:
    """
    Clear the screen.

    Args:
        result: Parsed command (no arguments used)
    """
    console.clear()
    console.print("[dim]Screen cleared[/dim]")


def handle_seed_command(result: ParseResult) -> None:
    """
    Handle 'seed' command - create the demo projects when the board is empty.

    Usage:
        seed
    """
    board = service.get_board()
    created = seed_sample_data(board)
    if not created:
        console.print("[yellow]Board already has projects, nothing seeded[/yellow]")
        return

    for project in created:
        console.print(f"[green]✓ Created project:[/green] [cyan]{project.id}[/cyan]: {escape(project.name)}")
    if repl_context.current_project is None:
        repl_context.select(created[0])


def handle_autoboard_command(result: ParseResult) -> None:
    """
    Handle 'autoboard' command - toggle redrawing the board after changes.

    Usage:
        autoboard           # Show current setting
        autoboard on
        autoboard off
    """
    if not result.args:
        state = "on" if repl_context.auto_board else "off"
        console.print(f"Auto board: [cyan]{state}[/cyan]")
        return

    value = result.args[0].lower()
    if value not in ("on", "off"):
        console.print(f"[red]Error:[/red] Expected 'on' or 'off', got '{escape(value)}'")
        return

    repl_context.auto_board = value == "on"
    console.print(f"✓ Auto board {value}")
