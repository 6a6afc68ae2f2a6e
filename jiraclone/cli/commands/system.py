"""
FILE: jiraclone/cli/commands/system.py
PURPOSE: System commands (version, repl, seed)
"""

import typer
from rich.markup import escape

from ..main import app, console, error_console, ensure_saved, open_board, __version__
from ...core.samples import seed_sample_data


@app.command()
def version():
    """Show jiraclone version."""
    console.print(f"jiraclone v{__version__}")


@app.command()
def repl():
    """
    Launch interactive REPL mode.

    The REPL provides:
    - Command history (up/down arrows)
    - Autocomplete (Tab key)
    - A board that redraws after every change
    - Exit with Ctrl+D or type 'exit'

    Example:
        jiraclone repl
    """
    # Import here to avoid loading REPL dependencies for one-shot commands
    from ...repl import main as repl_main

    try:
        repl_main()
    except Exception as e:
        error_console.print(f"[red]Error starting REPL:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def seed():
    """
    Create the demo projects on an empty board.

    Example:
        jiraclone seed
    """
    board = open_board()
    created = seed_sample_data(board)
    ensure_saved(board)

    if not created:
        console.print("[yellow]Board already has projects, nothing seeded[/yellow]")
        return

    for project in created:
        console.print(
            f"[green]✓[/green] Created project {project.id}: {escape(project.name)} "
            f"[dim]({project.ticket_count} tickets)[/dim]"
        )
