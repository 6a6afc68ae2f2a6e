"""
FILE: jiraclone/repl/main.py
PURPOSE: Interactive REPL for the kanban board with prompt-toolkit
EXPORTS:
  - REPLContext (selected project + board refresh state)
  - repl_context (module-level context for the session)
  - execute_command(result) -> bool
  - show_board(project) -> None
  - run_repl() - Main REPL loop
  - main() - Entry point for REPL mode
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - jiraclone.core.service (board)
  - jiraclone.core.events (change notifications)
  - jiraclone.repl.parser (command parsing)
  - jiraclone.repl.completer (autocomplete)
NOTES:
  - The selected project plays the role of the sidebar selection
  - The REPL subscribes to board change events; after a command that
    touched the selected project the board is drawn again
  - An empty board is seeded with the demo projects on launch
  - Bottom toolbar shows ticket counts per column of the selected project
  - Ctrl+D or "exit"/"quit" to exit
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    if not isinstance(sys.stdout, io.TextIOWrapper) or sys.stdout.encoding != 'utf-8':
        try:
            sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
        except (AttributeError, ValueError):
            pass  # Already wrapped or unavailable

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console
from rich.markup import escape

from ..core import service
from ..core.events import ChangeEvent, ChangeKind
from ..core.exceptions import PersistenceError
from ..core.models import Project
from ..core.samples import seed_sample_data
from ..formatting import BoardFormatter, STATUS_STYLES, board_columns
from .parser import parse_command, ParseResult
from .completer import create_completer

logger = logging.getLogger(__name__)

# Rich console for formatted output
console = Console()


# --- REPL Context (Persistent State) ---


@dataclass
class REPLContext:
    """
    Persistent context for the REPL session.

    Attributes:
        current_project: Selected project (or None)
        auto_board: Redraw the board after commands that change it
        board_stale: Set by change events for the selected project
    """
    current_project: Optional[Project] = None
    auto_board: bool = True
    board_stale: bool = False

    def get_prompt(self) -> str:
        """
        Generate prompt string based on current context.

        Returns:
            "jiraclone> " or "jiraclone:[Website]> "
        """
        if self.current_project:
            return f"jiraclone:[{self.current_project.name}]> "
        return "jiraclone> "

    def select(self, project: Optional[Project]) -> None:
        self.current_project = project
        self.board_stale = project is not None

    def on_change(self, event: ChangeEvent) -> None:
        """Board listener: track whether the selected project needs redrawing."""
        if self.current_project is None:
            return
        if event.kind is ChangeKind.PROJECT_DELETED and event.entity is self.current_project:
            self.current_project = None
            self.board_stale = False
            return
        if event.project is self.current_project:
            self.board_stale = True


# Global REPL context (persists during session, resets on restart)
repl_context = REPLContext()


def format_prompt() -> HTML:
    """HTML prompt with the selected project in cyan."""
    if repl_context.current_project:
        return HTML("<b>jiraclone:[<cyan>{}</cyan>]&gt; </b>").format(repl_context.current_project.name)
    return HTML("<b>jiraclone&gt; </b>")


def get_bottom_toolbar() -> HTML:
    """Toolbar with ticket counts per column of the selected project."""
    project = repl_context.current_project
    if project is None:
        return HTML("<style bg='#444444' fg='#ffffff'> No project selected | 'use &lt;project&gt;' to pick one </style>")

    counts = service.get_board().column_counts(project)
    stats = " | ".join(
        f"{STATUS_STYLES[status][0]} {count} {status.value}" for status, count in counts.items()
    )
    return HTML(f"<style bg='#444444' fg='#ffffff'> {stats} | 'help' for commands </style>")


def show_board(project: Project) -> None:
    """Draw project's kanban board."""
    board = service.get_board()
    console.print(BoardFormatter.board(project, board_columns(board, project)))


# Import command handlers from command modules
from .commands import (  # noqa: E402
    # Project handlers
    handle_projects_command,
    handle_use_command,
    handle_board_command,
    handle_project_command,
    # Ticket handlers
    handle_add_command,
    handle_show_command,
    handle_mv_command,
    handle_priority_command,
    handle_edit_command,
    handle_desc_command,
    handle_rm_command,
    # Instruction handlers
    handle_check_command,
    handle_instruction_command,
    # System handlers
    handle_help_command,
    handle_clear_command,
    handle_seed_command,
    handle_autoboard_command,
)


HANDLERS = {
    "projects": handle_projects_command,
    "ls": handle_projects_command,
    "use": handle_use_command,
    "board": handle_board_command,
    "project": handle_project_command,
    "add": handle_add_command,
    "show": handle_show_command,
    "view": handle_show_command,
    "mv": handle_mv_command,
    "priority": handle_priority_command,
    "edit": handle_edit_command,
    "desc": handle_desc_command,
    "rm": handle_rm_command,
    "check": handle_check_command,
    "instruction": handle_instruction_command,
    "help": handle_help_command,
    "clear": handle_clear_command,
    "seed": handle_seed_command,
    "autoboard": handle_autoboard_command,
}


def execute_command(result: ParseResult) -> bool:
    """
    Execute a parsed command.

    Args:
        result: Parsed command from parser

    Returns:
        True to continue REPL loop, False to exit
    """
    command = result.command.lower()

    if command in ("exit", "quit"):
        console.print("[dim]Goodbye![/dim]")
        return False

    # Empty command (just Enter pressed)
    if not command:
        return True

    handler = HANDLERS.get(command)
    if handler is None:
        console.print(f"[red]Unknown command:[/red] {escape(command)}")
        console.print("[dim]Type 'help' for available commands[/dim]")
        console.print()
        return True

    handler(result)

    if repl_context.board_stale:
        repl_context.board_stale = False
        if repl_context.auto_board and repl_context.current_project is not None:
            console.print()
            show_board(repl_context.current_project)

    # Add whitespace after command output for readability
    console.print()
    return True


def run_repl() -> None:
    """
    Main REPL loop.

    Sets up prompt_toolkit session with:
    - Command history (in-memory, not persisted)
    - Autocomplete (commands, subcommands, statuses, priorities, projects)
    - Bottom toolbar with column counts

    Exits on:
    - Ctrl+D (EOFError)
    - "exit" or "quit" commands
    """
    try:
        board = service.get_board()
    except PersistenceError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    unsubscribe = board.subscribe(repl_context.on_change)

    if not board.projects:
        seed_sample_data(board)
        console.print("[dim]Created demo projects to get you started[/dim]")
    if repl_context.current_project is None and board.projects:
        repl_context.select(board.projects[0])

    # In piped/test environments, skip prompt_toolkit entirely
    has_tty = sys.stdin.isatty() and sys.stdout.isatty()
    session = None
    use_simple_input = not has_tty

    if has_tty:
        try:
            session = PromptSession(
                history=InMemoryHistory(),
                completer=create_completer(),
                complete_while_typing=True,
                bottom_toolbar=get_bottom_toolbar,
            )
        except Exception as e:
            # Fallback to simple input if prompt_toolkit fails
            console.print(f"[yellow]Warning:[/yellow] Running in simple input mode: {e}")
            use_simple_input = True

    console.print("[bold cyan]jiraclone REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if use_simple_input:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    if repl_context.current_project is not None:
        repl_context.board_stale = False
        show_board(repl_context.current_project)
        console.print()

    try:
        while True:
            try:
                if use_simple_input or session is None:
                    user_input = input(repl_context.get_prompt())
                else:
                    user_input = session.prompt(format_prompt())

                if not execute_command(parse_command(user_input)):
                    break

            except KeyboardInterrupt:
                console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
                continue
            except EOFError:
                console.print()
                console.print("[dim]Goodbye![/dim]")
                break
            except Exception as e:
                # Unexpected error - show but don't crash
                logger.exception("Command failed")
                console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
    finally:
        unsubscribe()


def main() -> None:
    """
    Entry point for REPL mode.

    Called when user runs: jiraclone (or jiraclone repl)
    """
    try:
        run_repl()
    except Exception as e:
        console.print(f"[red]Fatal error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
