"""
FILE: jiraclone/cli/main.py
PURPOSE: Typer-based CLI for one-shot board commands
EXPORTS:
  - app (Typer application)
  - project_app, instruction_app (sub-command groups)
  - main() (entry point)
  - open_board() -> Board
  - ensure_saved(board) -> None
  - configure_logging(verbose) -> None
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - logging (stdlib)
  - jiraclone.core.service (board)
  - jiraclone.core.exceptions (error handling)
  - jiraclone.repl (interactive mode)
NOTES:
  - Running `jiraclone` with no command launches the REPL
  - Listing/detail commands support --json
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Mutating commands call ensure_saved() before reporting success: the
    board only logs save failures, and the process ends right after
"""

import logging
import os
import sys

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console

from ..core import service
from ..core.constants import ENV_LOG_LEVEL
from ..core.exceptions import PersistenceError

# Typer app setup
app = typer.Typer(
    name="jiraclone",
    help="Single-user kanban board for projects and tickets",
    add_completion=False,
)

# Project sub-command group
project_app = typer.Typer(
    name="project",
    help="Project management commands",
)
app.add_typer(project_app, name="project")

# Instruction (checklist) sub-command group
instruction_app = typer.Typer(
    name="instruction",
    help="Ticket checklist commands",
)
app.add_typer(instruction_app, name="instruction")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
from .. import __version__  # noqa: E402,F401


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging once for the process.

    Level comes from --verbose (DEBUG) or JIRACLONE_LOG_LEVEL, default WARNING.
    """
    level_name = "DEBUG" if verbose else os.environ.get(ENV_LOG_LEVEL, "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


def open_board() -> service.Board:
    """Process-wide board; exits with code 1 if the database can't be opened."""
    try:
        return service.get_board()
    except PersistenceError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def ensure_saved(board: service.Board) -> None:
    """Exit with code 1 if the last change could not be written to the database."""
    error = board.last_persistence_error
    if error is not None:
        error_console.print(f"[red]Error:[/red] Change not saved: {error}")
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Default callback - launches REPL when no command is specified.

    If a subcommand is invoked, this only configures logging.
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        from ..repl import main as repl_main
        try:
            repl_main()
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {e}")
            raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # System commands
    version,
    repl,
    seed,
    # Project commands
    board,
    project_add,
    project_ls,
    project_rm,
    project_rename,
    # Ticket commands
    add,
    show,
    mv,
    priority,
    edit,
    rm,
    # Instruction commands
    instruction_add,
    instruction_toggle,
    instruction_rm,
    instruction_edit,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
