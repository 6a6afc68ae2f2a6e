"""
FILE: jiraclone/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - BoardFormatter: Rich renderables for the sidebar, board and ticket detail
  - STATUS_STYLES: Column icon and colour per status
  - progress_bar(ratio, width) -> str
  - format_date(value) -> str
  - board_columns(board, project) -> Dict[Status, List[Ticket]]
  - parse_ids(id_string) -> List[int]
DEPENDENCIES:
  - rich (tables, panels, text)
  - json (for JSON serialization)
  - jiraclone.core.models (Project, Ticket)
  - jiraclone.core.constants (Status)
NOTES:
  - Centralized formatting logic for consistency
  - Used by both CLI and REPL
  - User text is escaped before it goes into Rich markup
"""

import json
from datetime import datetime
from itertools import zip_longest
from typing import Dict, List, Tuple

from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.constants import Status
from .core.models import Project, Ticket

# Column header icon and colour
STATUS_STYLES: Dict[Status, Tuple[str, str]] = {
    Status.BACKLOG: ("▤", "blue"),
    Status.TODO: ("▶", "green"),
    Status.TO_TEST: ("☰", "magenta"),
    Status.DONE: ("✔", "orange1"),
}


def progress_bar(ratio: float, width: int = 10) -> str:
    """Render a completion ratio as a fixed-width bar, e.g. '█████░░░░░'."""
    ratio = min(max(ratio, 0.0), 1.0)
    filled = round(ratio * width)
    return "█" * filled + "░" * (width - filled)


def format_date(value: datetime) -> str:
    """Abbreviated date, e.g. 'Jan 15, 2025'."""
    return value.strftime("%b %d, %Y")


def board_columns(board, project: Project) -> Dict[Status, List[Ticket]]:
    """Tickets of project per status, in column order, newest first."""
    return {status: board.tickets_in_column(project, status) for status in Status.ordered()}


def parse_ids(id_string: str) -> List[int]:
    """
    Parse comma-separated IDs.

    Raises:
        ValueError: If any ID is not a valid integer
    """
    ids = [part.strip() for part in id_string.split(",")]
    return [int(part) for part in ids if part]


class BoardFormatter:
    """Centralized board display formatting."""

    @staticmethod
    def projects_table(projects: List[Project], selected: Project = None) -> Table:
        """
        Sidebar listing: one row per project with ticket count and date.

        Args:
            projects: Projects to list
            selected: Project to highlight, if any
        """
        table = Table(title="Projects", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=4, no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Tickets", justify="right")
        table.add_column("Created", style="dim")

        for project in projects:
            marker = "▸ " if project is selected else ""
            table.add_row(
                str(project.id),
                f"{marker}{escape(project.name)}",
                str(project.ticket_count),
                format_date(project.created_at),
            )
        return table

    @staticmethod
    def card(ticket: Ticket) -> Text:
        """Compact ticket card used inside a board column."""
        card = Text()
        card.append(f"#{ticket.id} ", style="cyan")
        card.append(ticket.title, style="bold")
        card.append("\n● ", style=ticket.priority.color)
        card.append(ticket.priority.value, style=ticket.priority.color)
        if ticket.instruction_count:
            card.append(
                f"  ☑ {ticket.completed_instruction_count}/{ticket.instruction_count} "
                f"{progress_bar(ticket.completion_ratio, 6)}",
                style="dim",
            )
        return card

    @classmethod
    def board(cls, project: Project, columns: Dict[Status, List[Ticket]]) -> Table:
        """
        Kanban board: one column per status in rank order.

        Args:
            project: Project being shown (used for the title)
            columns: Tickets per status, already in display order
        """
        table = Table(
            title=escape(project.name),
            title_style="bold",
            show_header=True,
            show_lines=True,
            expand=True,
        )
        statuses = Status.ordered()
        for status in statuses:
            icon, color = STATUS_STYLES[status]
            count = len(columns.get(status, []))
            table.add_column(
                f"[{color}]{icon}[/{color}] {status.value} [dim]({count})[/dim]",
                ratio=1,
            )

        rows = zip_longest(*(columns.get(status, []) for status in statuses))
        for row in rows:
            table.add_row(*(cls.card(ticket) if ticket else "" for ticket in row))
        return table

    @staticmethod
    def ticket_detail(ticket: Ticket) -> Panel:
        """Full ticket view: fields, description and checklist."""
        header = Table.grid(padding=(0, 2))
        header.add_column(style="bold cyan")
        header.add_column()
        header.add_row("Status", ticket.status.value)
        header.add_row(
            "Priority",
            f"[{ticket.priority.color}]● {ticket.priority.value}[/{ticket.priority.color}]",
        )
        if ticket.project is not None:
            header.add_row("Project", escape(ticket.project.name))
        header.add_row("Created", format_date(ticket.created_at))

        parts = [header]
        if ticket.description:
            parts.append(Text(""))
            parts.append(Text(ticket.description))

        parts.append(Text(""))
        if ticket.instruction_count:
            parts.append(
                Text(
                    f"Instructions {ticket.completed_instruction_count}/{ticket.instruction_count} "
                    f"{progress_bar(ticket.completion_ratio)}",
                    style="bold",
                )
            )
            for instruction in ticket.instructions:
                box = "☑" if instruction.completed else "☐"
                line = Text(f"  {box} ")
                line.append(f"{instruction.id}: ", style="cyan")
                line.append(instruction.text, style="dim strike" if instruction.completed else "")
                parts.append(line)
        else:
            parts.append(Text("No instructions", style="dim"))

        return Panel(
            Group(*parts),
            title=f"[cyan]#{ticket.id}[/cyan] {escape(ticket.title)}",
            title_align="left",
        )

    @staticmethod
    def board_to_json(project: Project, columns: Dict[Status, List[Ticket]]) -> str:
        """Serialize a board (project plus tickets per column) to a JSON string."""
        data = project.to_dict()
        data["columns"] = {
            status.value: [ticket.to_dict() for ticket in columns.get(status, [])]
            for status in Status.ordered()
        }
        return json.dumps(data, indent=2)

    @staticmethod
    def projects_to_json(projects: List[Project]) -> str:
        return json.dumps([project.to_dict() for project in projects], indent=2)
