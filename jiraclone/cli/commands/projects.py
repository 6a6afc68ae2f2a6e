"""
FILE: jiraclone/cli/commands/projects.py
PURPOSE: Project commands (board, project add/ls/rm/rename)
"""

import typer
from rich.markup import escape

from ..main import app, console, error_console, ensure_saved, project_app, open_board
from ...core.exceptions import (
    JiraCloneError,
    NotFoundError,
    ValidationError,
)
from ...formatting import BoardFormatter, board_columns


@app.command()
def board(
    project_ref: str = typer.Argument(..., help="Project ID or name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show a project's kanban board.

    Example:
        jiraclone board 1
        jiraclone board "Mobile App" --json
    """
    try:
        kanban = open_board()
        project = kanban.find_project_or_raise(project_ref)
        columns = board_columns(kanban, project)

        if json_output:
            typer.echo(BoardFormatter.board_to_json(project, columns))
        else:
            console.print(BoardFormatter.board(project, columns))

    except NotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@project_app.command("add")
def project_add(
    name: str = typer.Argument(..., help="Project name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Create a new project.

    Example:
        jiraclone project add "Website"
    """
    try:
        kanban = open_board()
        project = kanban.create_project(name)
        ensure_saved(kanban)

        if json_output:
            typer.echo(project.to_json())
        else:
            console.print(f"[green]✓[/green] Created project {project.id}: {escape(project.name)}")

    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@project_app.command("ls")
def project_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List all projects.

    Example:
        jiraclone project ls
        jiraclone project ls --json
    """
    projects = open_board().list_projects()

    if json_output:
        typer.echo(BoardFormatter.projects_to_json(projects))
        return

    if not projects:
        console.print("[dim]No projects found[/dim]")
        return

    console.print(BoardFormatter.projects_table(projects))
    console.print(f"\n[dim]Total: {len(projects)} project(s)[/dim]")


@project_app.command("rm")
def project_rm(
    project_ref: str = typer.Argument(..., help="Project ID or name"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete a project with all of its tickets.

    Example:
        jiraclone project rm 2
        jiraclone project rm "Mobile App" --yes
    """
    try:
        kanban = open_board()
        project = kanban.find_project_or_raise(project_ref)

        if not yes:
            console.print(
                f"[yellow]About to delete project \"{escape(project.name)}\" with "
                f"{project.ticket_count} ticket(s). This cannot be undone.[/yellow]"
            )
            if not typer.confirm("Continue?", default=False):
                console.print("[yellow]Cancelled[/yellow]")
                raise typer.Exit(0)

        kanban.delete_project(project)
        ensure_saved(kanban)
        console.print(f"[red]✗[/red] Deleted project {project.id}: {escape(project.name)}")

    except NotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@project_app.command("rename")
def project_rename(
    project_ref: str = typer.Argument(..., help="Project ID or name"),
    name: str = typer.Argument(..., help="New project name"),
):
    """
    Rename a project.

    Example:
        jiraclone project rename 1 "Online Shop"
    """
    try:
        kanban = open_board()
        project = kanban.find_project_or_raise(project_ref)
        old_name = project.name
        kanban.rename_project(project, name)
        ensure_saved(kanban)
        console.print(
            f"[green]✓[/green] Renamed project {project.id}: "
            f"{escape(old_name)} → {escape(project.name)}"
        )

    except (ValidationError, NotFoundError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except JiraCloneError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
