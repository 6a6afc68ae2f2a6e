"""
FILE: jiraclone/repl/commands/projects.py
PURPOSE: Project command handlers for REPL (projects, use, board, project add/rm/rename)
"""

from rich.markup import escape

from ..main import console, repl_context, show_board
from ..parser import ParseResult
from ...core import service
from ...core.exceptions import JiraCloneError, ValidationError
from ...formatting import BoardFormatter


# Helper function
def ask_confirmation(message: str) -> bool:
    """Ask user for confirmation (y/n)."""
    response = input(f"{message} (y/n): ").strip().lower()
    return response in ('y', 'yes')


def handle_projects_command(result: ParseResult) -> None:
    """
    Handle 'projects' command - list projects (the sidebar).

    Usage:
        projects
    """
    projects = service.get_board().list_projects()
    if not projects:
        console.print("[dim]No projects found[/dim]")
        console.print("[dim]Usage: project add <name>[/dim]")
        return

    console.print(BoardFormatter.projects_table(projects, selected=repl_context.current_project))


def handle_use_command(result: ParseResult) -> None:
    """
    Handle 'use' command - select the working project.

    Usage:
        use                 # Show selected project
        use Website         # Select by name
        use 2               # Select by ID
        use none            # Clear selection
    """
    if not result.args:
        if repl_context.current_project:
            console.print(
                f"Current project: [cyan]{escape(repl_context.current_project.name)}[/cyan]"
            )
        else:
            console.print("[dim]No project selected[/dim]")
        return

    ref = result.text()
    if ref.lower() in ("none", "clear"):
        repl_context.select(None)
        console.print("✓ Cleared project selection")
        return

    project = service.get_board().find_project(ref)
    if project is None:
        console.print(f"[red]Error:[/red] Project '{escape(ref)}' not found")
        return

    repl_context.select(project)
    console.print(f"✓ Working in [cyan]{escape(project.name)}[/cyan]")


def handle_board_command(result: ParseResult) -> None:
    """
    Handle 'board' command - show a kanban board.

    Usage:
        board               # Selected project
        board Website       # Another project
    """
    if result.args:
        project = service.get_board().find_project(result.text())
        if project is None:
            console.print(f"[red]Error:[/red] Project '{escape(result.text())}' not found")
            return
    else:
        project = repl_context.current_project
        if project is None:
            console.print("[red]Error:[/red] No project selected")
            console.print("[dim]Usage: board <project> or use <project>[/dim]")
            return

    # Drawn here; no need to draw it again after the command
    repl_context.board_stale = False
    show_board(project)


def handle_project_add_command(result: ParseResult) -> None:
    """
    Handle 'project add' command - create and select a new project.

    Usage:
        project add Website
        project add "My Project"
    """
    if not result.args:
        console.print("[red]Error:[/red] Project name required")
        console.print("[dim]Usage: project add <name>[/dim]")
        return

    try:
        project = service.get_board().create_project(result.text())
        repl_context.select(project)
        console.print(f"[green]✓ Created project:[/green] [cyan]{project.id}[/cyan]: {escape(project.name)}")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
    except JiraCloneError as e:
        console.print(f"[red]Unexpected error:[/red] {e}")


def handle_project_rm_command(result: ParseResult) -> None:
    """
    Handle 'project rm' command - delete a project with all of its tickets.

    Always confirms unless --yes is given.

    Usage:
        project rm 2
        project rm Website --yes
    """
    if not result.args:
        console.print("[red]Error:[/red] Project ID or name required")
        console.print("[dim]Usage: project rm <project> [--yes][/dim]")
        return

    board = service.get_board()
    project = board.find_project(result.text())
    if project is None:
        console.print(f"[red]Error:[/red] Project '{escape(result.text())}' not found")
        return

    if not result.flags.get("yes"):
        question = (
            f"Delete project \"{project.name}\" with {project.ticket_count} ticket(s)? "
            "This cannot be undone."
        )
        if not ask_confirmation(question):
            console.print("[yellow]Cancelled[/yellow]")
            return

    board.delete_project(project)
    console.print(f"[red]✗[/red] Deleted project {project.id}: {escape(project.name)}")


def handle_project_rename_command(result: ParseResult) -> None:
    """
    Handle 'project rename' command.

    Usage:
        project rename 2 "Online Shop"
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Project and new name required")
        console.print("[dim]Usage: project rename <project> <new name>[/dim]")
        return

    board = service.get_board()
    project = board.find_project(result.args[0])
    if project is None:
        console.print(f"[red]Error:[/red] Project '{escape(result.args[0])}' not found")
        return

    try:
        board.rename_project(project, result.text(1))
        console.print(f"✓ Renamed project {project.id} to [cyan]{escape(project.name)}[/cyan]")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_project_command(result: ParseResult) -> None:
    """
    Handle 'project' command - dispatch to subcommands.

    Usage:
        project add <name>
        project ls
        project rm <project>
        project rename <project> <name>
    """
    if not result.args:
        console.print("[red]Error:[/red] Subcommand required")
        console.print("[dim]Usage: project add|ls|rm|rename ...[/dim]")
        return

    subcommand = result.args[0].lower()
    sub_result = ParseResult(
        command=f"project {subcommand}",
        args=result.args[1:],
        flags=result.flags,
        raw_input=result.raw_input,
    )

    handlers = {
        "add": handle_project_add_command,
        "ls": handle_projects_command,
        "rm": handle_project_rm_command,
        "rename": handle_project_rename_command,
    }
    handler = handlers.get(subcommand)
    if handler is None:
        console.print(f"[red]Unknown project subcommand:[/red] {escape(subcommand)}")
        console.print("[dim]Available: add, ls, rm, rename[/dim]")
        return

    handler(sub_result)
