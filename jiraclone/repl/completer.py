"""
FILE: jiraclone/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - JiraCloneCompleter (Completer for command/arg completion)
  - create_completer() -> JiraCloneCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - jiraclone.core.service (for project names and ticket IDs)
  - jiraclone.core.constants (Status, Priority)
NOTES:
  - Suggests command names when at start of line
  - Suggests subcommands after "project" and "instruction"
  - Suggests ticket IDs for commands expecting one, with the title as meta
  - Suggests statuses after "mv <id>" and priorities after "priority <id>"
  - Suggests project names after "use" and "board"
  - Suggests flag values after --status/-s and --priority/-p
  - Case-insensitive matching
"""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import Priority, Status
from ..core.exceptions import JiraCloneError


class JiraCloneCompleter(Completer):
    """
    Custom completer for the jiraclone REPL.

    Provides context-aware autocomplete:
    - Command names at start of input
    - Subcommands, ticket IDs, statuses, priorities and project names after commands
    - Flags for 'add'
    """

    COMMANDS = [
        "projects", "ls", "use", "board", "project", "add", "show", "view",
        "mv", "priority", "edit", "desc", "rm", "check", "instruction",
        "autoboard", "seed", "help", "clear", "exit", "quit",
    ]

    PROJECT_SUBCOMMANDS = ["add", "ls", "rm", "rename"]

    INSTRUCTION_SUBCOMMANDS = ["add", "toggle", "rm", "edit"]

    COMMAND_FLAGS = {
        "add": ["--desc", "--status", "--priority", "--instruction", "--project"],
        "project": ["--yes"],
    }

    # Commands whose first argument is a ticket ID
    TICKET_ID_COMMANDS = {"show", "view", "mv", "priority", "edit", "desc", "rm"}

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on current input.

        Args:
            document: Current document with cursor position
            complete_event: Event that triggered completion

        Yields:
            Completion objects for matching suggestions
        """
        text_before_cursor = document.text_before_cursor
        words = text_before_cursor.split()
        at_new_word = text_before_cursor.endswith(" ")

        # Empty input or typing the first word -> commands
        if not words or (not at_new_word and len(words) == 1):
            word = words[0] if words else ""
            yield from self._complete_words(word, self.COMMANDS, self._get_command_description)
            return

        command = words[0].lower()
        # Index of the word being typed, and its partial text
        position = len(words) if at_new_word else len(words) - 1
        current = "" if at_new_word else words[-1]

        if command == "project" and position == 1:
            yield from self._complete_words(current, self.PROJECT_SUBCOMMANDS)
            return

        if command == "instruction" and position == 1:
            yield from self._complete_words(current, self.INSTRUCTION_SUBCOMMANDS)
            return

        if command == "instruction" and position == 2 and words[1].lower() == "add":
            yield from self._complete_ticket_ids(current)
            return

        if command in self.TICKET_ID_COMMANDS and position == 1:
            yield from self._complete_ticket_ids(current)
            return

        if command == "mv" and position >= 2:
            yield from self._complete_statuses(current)
            return

        if command == "priority" and position == 2:
            yield from self._complete_priorities(current)
            return

        if command in ("use", "board") and position == 1:
            yield from self._complete_project_names(current, include_clear_options=command == "use")
            return

        if command == "autoboard" and position == 1:
            yield from self._complete_words(current, ["on", "off"])
            return

        # Flag values
        previous = words[-1] if at_new_word else (words[-2] if len(words) >= 2 else "")
        if previous in ("--status", "-s"):
            yield from self._complete_statuses(current)
            return
        if previous in ("--priority", "-p"):
            yield from self._complete_priorities(current)
            return
        if previous == "--project":
            yield from self._complete_project_names(current)
            return

        # Otherwise only flags, once the user starts typing one
        if current.startswith("--"):
            yield from self._complete_words(current, self.COMMAND_FLAGS.get(command, []))

    def _complete_words(self, word: str, candidates, describe=None) -> Iterable[Completion]:
        word_lower = word.lower()
        for candidate in candidates:
            if candidate.startswith(word_lower):
                yield Completion(
                    candidate,
                    start_position=-len(word),
                    display=candidate,
                    display_meta=describe(candidate) if describe else "",
                )

    def _complete_statuses(self, word: str) -> Iterable[Completion]:
        """
        Complete status names. Multi-word names are quoted so the parser
        keeps them together.
        """
        word_stripped = word.strip('"').strip("'").lower()
        for status in Status.ordered():
            if status.value.lower().startswith(word_stripped):
                text = f'"{status.value}"' if " " in status.value else status.value
                yield Completion(
                    text,
                    start_position=-len(word),
                    display=status.value,
                    display_meta=f"Column {status.rank + 1}",
                )

    def _complete_priorities(self, word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for priority in Priority:
            if priority.value.lower().startswith(word_lower):
                yield Completion(
                    priority.value,
                    start_position=-len(word),
                    display=priority.value,
                )

    def _complete_project_names(self, word: str, include_clear_options: bool = False) -> Iterable[Completion]:
        """
        Complete project names for use/board/--project.

        Notes:
            - Automatically quotes project names with spaces
            - Handles partial matches even when user is typing inside quotes
        """
        # Import here to avoid circular dependency
        from ..core import service

        word_stripped = word.strip('"').strip("'")
        word_lower = word_stripped.lower()

        if include_clear_options:
            for option in ("none", "clear"):
                if option.startswith(word_lower):
                    yield Completion(
                        option,
                        start_position=-len(word),
                        display=option,
                        display_meta="Clear project selection",
                    )

        try:
            projects = service.get_board().list_projects()
        except JiraCloneError:
            projects = []

        for project in projects:
            if project.name.lower().startswith(word_lower):
                text = f'"{project.name}"' if " " in project.name else project.name
                yield Completion(
                    text,
                    start_position=-len(word),
                    display=text,
                    display_meta=f"Project #{project.id}",
                )

    def _complete_ticket_ids(self, word: str) -> Iterable[Completion]:
        """Complete ticket IDs with title and column as meta."""
        from ..core import service

        try:
            tickets = list(service.get_board().iter_tickets())
        except JiraCloneError:
            tickets = []

        for ticket in tickets[:200]:  # cap for responsiveness
            id_str = str(ticket.id)
            if id_str.startswith(word):
                title = ticket.title if len(ticket.title) <= 40 else ticket.title[:37] + "..."
                yield Completion(
                    id_str,
                    start_position=-len(word),
                    display=id_str,
                    display_meta=f"{title} [{ticket.status.value}]",
                )

    @staticmethod
    def _get_command_description(command: str) -> str:
        """Get description for a command (shown in autocomplete menu)."""
        descriptions = {
            "projects": "List projects",
            "ls": "List projects",
            "use": "Select working project",
            "board": "Show kanban board",
            "project": "Manage projects",
            "add": "Create a ticket",
            "show": "View ticket details",
            "view": "View ticket details",
            "mv": "Move ticket to column",
            "priority": "Change ticket priority",
            "edit": "Change ticket title",
            "desc": "Replace ticket description",
            "rm": "Delete ticket",
            "check": "Toggle checklist item",
            "instruction": "Manage checklist items",
            "autoboard": "Redraw board after changes",
            "seed": "Create demo projects",
            "help": "Show available commands",
            "clear": "Clear the screen",
            "exit": "Exit REPL",
            "quit": "Exit REPL",
        }
        return descriptions.get(command, "")


def create_completer() -> JiraCloneCompleter:
    """
    Create and return a JiraCloneCompleter instance.

    Usage:
        completer = create_completer()
        session = PromptSession(completer=completer)
    """
    return JiraCloneCompleter()
