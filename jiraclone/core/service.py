"""
FILE: jiraclone/core/service.py
PURPOSE: Business logic layer: the in-memory board of projects, tickets and instructions
EXPORTS:
  - Board (in-memory repository with change events)
  - get_board() -> Board (process-wide board backed by the default SQLite store)
  - reset_board() -> None
DEPENDENCIES:
  - itertools, logging (stdlib)
  - jiraclone.core.models (Project, Ticket, Instruction)
  - jiraclone.core.constants (Status, Priority, defaults)
  - jiraclone.core.events (EventHub, ChangeEvent, ChangeKind)
  - jiraclone.core.exceptions (ValidationError, NotFoundError subclasses, PersistenceError)
  - jiraclone.core.repository (SQLiteStore)
NOTES:
  - Every mutation validates first, then mutates, persists and emits a
    ChangeEvent, in that order
  - Validation failures raise ValidationError before anything changes
  - Operating on an entity that is no longer attached to the board is a
    silent no-op (returns False)
  - Persistence failures are logged and swallowed; the in-memory graph
    stays authoritative for the session
  - The last swallowed failure is kept on Board.last_persistence_error
  - Status transitions are unrestricted (any status to any other)
"""

import itertools
import logging
from typing import Callable, Dict, Iterable, List, Optional

from .constants import Status, Priority, DEFAULT_STATUS, DEFAULT_PRIORITY
from .events import ChangeEvent, ChangeKind, EventHub, Listener
from .exceptions import (
    InstructionNotFoundError,
    PersistenceError,
    ProjectNotFoundError,
    TicketNotFoundError,
    ValidationError,
)
from .models import Instruction, Project, Ticket

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], what: str) -> str:
    """Strip value and reject it if nothing is left."""
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{what} cannot be empty")
    return value


class Board:
    """
    The live project collection and every operation that mutates it.

    Args:
        store: Persistence collaborator exposing insert(entity),
            delete(entity) and save(). None keeps the board in memory only.

    Attributes:
        last_persistence_error: PersistenceError from the most recent save,
            or None once a save succeeds. Lets callers that exit right after
            a mutation find out the change never reached storage.
    """

    def __init__(self, store=None):
        self.store = store
        self.projects: List[Project] = []
        self.last_persistence_error: Optional[PersistenceError] = None
        self._events = EventHub()
        self._ids: Dict[type, itertools.count] = {
            Project: itertools.count(1),
            Ticket: itertools.count(1),
            Instruction: itertools.count(1),
        }

    @classmethod
    def open(cls, store) -> "Board":
        """Create a board holding everything the store has persisted."""
        board = cls(store)
        board.projects = list(store.load())
        board._continue_ids()
        logger.debug("Opened board with %d project(s)", len(board.projects))
        return board

    # --- Observation ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Function that unsubscribes the listener
        """
        return self._events.subscribe(listener)

    # --- Queries ---

    def list_projects(self) -> List[Project]:
        return list(self.projects)

    def iter_tickets(self) -> Iterable[Ticket]:
        for project in self.projects:
            yield from project.tickets

    def iter_instructions(self) -> Iterable[Instruction]:
        for ticket in self.iter_tickets():
            yield from ticket.instructions

    def get_project(self, project_id: int) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def find_project(self, ref) -> Optional[Project]:
        """
        Find project by ID or by name (case-insensitive).

        Args:
            ref: Project ID (int or digit string) or project name

        Returns:
            Project if found, None otherwise
        """
        if isinstance(ref, int):
            return self.get_project(ref)
        ref = str(ref).strip()
        if ref.isdigit():
            project = self.get_project(int(ref))
            if project is not None:
                return project
        return next((p for p in self.projects if p.name.lower() == ref.lower()), None)

    def find_project_or_raise(self, ref) -> Project:
        project = self.find_project(ref)
        if project is None:
            raise ProjectNotFoundError(ref)
        return project

    def get_ticket(self, ticket_id: int) -> Optional[Ticket]:
        return next((t for t in self.iter_tickets() if t.id == ticket_id), None)

    def get_ticket_or_raise(self, ticket_id: int) -> Ticket:
        ticket = self.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    def get_instruction(self, instruction_id: int) -> Optional[Instruction]:
        return next((i for i in self.iter_instructions() if i.id == instruction_id), None)

    def get_instruction_or_raise(self, instruction_id: int) -> Instruction:
        instruction = self.get_instruction(instruction_id)
        if instruction is None:
            raise InstructionNotFoundError(instruction_id)
        return instruction

    def tickets_in_column(self, project: Project, status) -> List[Ticket]:
        """Tickets of project with the given status, newest first."""
        status = Status.parse(status)
        tickets = [t for t in project.tickets if t.status is status]
        return sorted(tickets, key=lambda t: (t.created_at, t.id or 0), reverse=True)

    def column_counts(self, project: Project) -> Dict[Status, int]:
        counts = {status: 0 for status in Status.ordered()}
        for ticket in project.tickets:
            counts[ticket.status] += 1
        return counts

    # --- Projects ---

    def create_project(self, name: str) -> Project:
        """
        Create a new project.

        Raises:
            ValidationError: If name is empty or whitespace-only
        """
        name = _require_text(name, "Project name")

        project = Project(name=name, id=self._next_id(Project))
        self.projects.append(project)
        if self.store is not None:
            self.store.insert(project)
        self._commit(ChangeEvent(ChangeKind.PROJECT_CREATED, project, project))
        return project

    def rename_project(self, project: Project, name: str) -> bool:
        name = _require_text(name, "Project name")
        if not self._is_live_project(project):
            return False
        project.name = name
        self._commit(ChangeEvent(ChangeKind.PROJECT_RENAMED, project, project))
        return True

    def delete_project(self, project: Project) -> bool:
        """
        Delete a project, every ticket in it and their instructions.

        All deletions are handed to the store before a single save(), so
        the chain is written in one transaction.
        """
        if not self._is_live_project(project):
            return False

        for ticket in list(project.tickets):
            self._forget_ticket(ticket)
        self.projects.remove(project)
        if self.store is not None:
            self.store.delete(project)
        self._commit(ChangeEvent(ChangeKind.PROJECT_DELETED, project, project))
        return True

    # --- Tickets ---

    def create_ticket(
        self,
        project: Project,
        title: str,
        description: str = "",
        status=DEFAULT_STATUS,
        priority=DEFAULT_PRIORITY,
        instruction_texts: Iterable[str] = (),
    ) -> Optional[Ticket]:
        """
        Create a ticket at the end of project's ticket collection.

        Args:
            project: Owning project
            title: Ticket title (required, must not be empty)
            description: Free text, may be empty
            status: Initial status (defaults to Backlog)
            priority: Initial priority (defaults to Medium)
            instruction_texts: One uncompleted instruction is created per text

        Returns:
            The new Ticket, or None if project is no longer on the board

        Raises:
            ValidationError: If title or any instruction text is empty,
                instruction_texts is a bare string, or status/priority is
                not a known value
        """
        title = _require_text(title, "Ticket title")
        status = Status.parse(status)
        priority = Priority.parse(priority)
        if isinstance(instruction_texts, str):
            raise ValidationError("instruction_texts must be a list of strings, not a string")
        texts = [_require_text(text, "Instruction text") for text in instruction_texts]
        if not self._is_live_project(project):
            return None

        ticket = Ticket(
            title=title,
            description=description or "",
            status=status,
            priority=priority,
            id=self._next_id(Ticket),
        )
        for text in texts:
            ticket.instructions.append(Instruction(text=text, id=self._next_id(Instruction)))
        project.tickets.append(ticket)
        if self.store is not None:
            self.store.insert(ticket)
        self._commit(ChangeEvent(ChangeKind.TICKET_CREATED, ticket, project))
        return ticket

    def update_ticket(
        self,
        ticket: Ticket,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> bool:
        """Edit title and/or description in place; None leaves a field as is."""
        if title is not None:
            title = _require_text(title, "Ticket title")
        if not self._is_live_ticket(ticket):
            return False

        if title is not None:
            ticket.title = title
        if description is not None:
            ticket.description = description
        self._commit(ChangeEvent(ChangeKind.TICKET_UPDATED, ticket, ticket.project))
        return True

    def set_ticket_status(self, ticket: Ticket, status) -> bool:
        """
        Move ticket to another column.

        Any status may move to any other. Whether transitions should follow
        the column order is an open product question; until it is decided
        the board accepts every move, e.g. Backlog straight to Done.

        Returns:
            True if the status changed
        """
        status = Status.parse(status)
        if not self._is_live_ticket(ticket):
            return False
        if ticket.status is status:
            return False

        previous = ticket.status
        ticket.status = status
        logger.debug("Ticket %s: %s -> %s", ticket.id, previous.value, status.value)
        self._commit(ChangeEvent(ChangeKind.TICKET_STATUS_CHANGED, ticket, ticket.project))
        return True

    def set_ticket_priority(self, ticket: Ticket, priority) -> bool:
        priority = Priority.parse(priority)
        if not self._is_live_ticket(ticket):
            return False

        ticket.priority = priority
        self._commit(ChangeEvent(ChangeKind.TICKET_PRIORITY_CHANGED, ticket, ticket.project))
        return True

    def delete_ticket(self, ticket: Ticket) -> bool:
        """Remove ticket from its project and delete it with its instructions."""
        if not self._is_live_ticket(ticket):
            return False

        project = ticket.project
        self._forget_ticket(ticket)
        self._commit(ChangeEvent(ChangeKind.TICKET_DELETED, ticket, project))
        return True

    # --- Instructions ---

    def add_instruction(self, ticket: Ticket, text: str) -> Optional[Instruction]:
        """
        Append an uncompleted instruction to ticket's checklist.

        Raises:
            ValidationError: If text is empty or whitespace-only
        """
        text = _require_text(text, "Instruction text")
        if not self._is_live_ticket(ticket):
            return None

        instruction = Instruction(text=text, id=self._next_id(Instruction))
        ticket.instructions.append(instruction)
        if self.store is not None:
            self.store.insert(instruction)
        self._commit(ChangeEvent(ChangeKind.INSTRUCTION_ADDED, instruction, ticket.project))
        return instruction

    def toggle_instruction(self, instruction: Instruction) -> bool:
        if not self._is_live_instruction(instruction):
            return False

        instruction.completed = not instruction.completed
        self._commit(
            ChangeEvent(ChangeKind.INSTRUCTION_TOGGLED, instruction, instruction.ticket.project)
        )
        return True

    def edit_instruction(self, instruction: Instruction, text: str) -> bool:
        text = _require_text(text, "Instruction text")
        if not self._is_live_instruction(instruction):
            return False

        instruction.text = text
        self._commit(
            ChangeEvent(ChangeKind.INSTRUCTION_UPDATED, instruction, instruction.ticket.project)
        )
        return True

    def remove_instruction(self, ticket: Ticket, instruction: Instruction) -> bool:
        """Remove instruction from ticket's checklist; no-op if it is not there."""
        if not self._is_live_ticket(ticket) or instruction not in ticket.instructions:
            return False

        ticket.instructions.remove(instruction)
        if self.store is not None:
            self.store.delete(instruction)
        self._commit(ChangeEvent(ChangeKind.INSTRUCTION_REMOVED, instruction, ticket.project))
        return True

    # --- Internals ---

    def _forget_ticket(self, ticket: Ticket) -> None:
        """Detach ticket and hand it plus its instructions to the store for deletion."""
        if self.store is not None:
            for instruction in ticket.instructions:
                self.store.delete(instruction)
            self.store.delete(ticket)
        ticket.project.tickets.remove(ticket)

    def _commit(self, event: ChangeEvent) -> None:
        if self.store is not None:
            try:
                self.store.save()
            except PersistenceError as e:
                logger.exception("Could not persist %s", event.kind.value)
                self.last_persistence_error = e
            else:
                self.last_persistence_error = None
        self._events.emit(event)

    def _is_live_project(self, project: Project) -> bool:
        if any(p is project for p in self.projects):
            return True
        logger.debug("Ignoring operation on detached project %r", project.name)
        return False

    def _is_live_ticket(self, ticket: Ticket) -> bool:
        if ticket.project is not None and self._is_live_project(ticket.project):
            return True
        logger.debug("Ignoring operation on detached ticket %r", ticket.title)
        return False

    def _is_live_instruction(self, instruction: Instruction) -> bool:
        return instruction.ticket is not None and self._is_live_ticket(instruction.ticket)

    def _next_id(self, model: type) -> int:
        return next(self._ids[model])

    def _continue_ids(self) -> None:
        highest = {
            Project: max((p.id for p in self.projects), default=0),
            Ticket: max((t.id for t in self.iter_tickets()), default=0),
            Instruction: max((i.id for i in self.iter_instructions()), default=0),
        }
        for model, top in highest.items():
            self._ids[model] = itertools.count(top + 1)


# --- Process-wide board ---

_board: Optional[Board] = None


def get_board() -> Board:
    """
    Get the process-wide board, opening the default SQLite store on first use.

    Raises:
        PersistenceError: If the database cannot be opened or read
    """
    global _board
    if _board is None:
        from .repository import SQLiteStore
        _board = Board.open(SQLiteStore())
    return _board


def reset_board() -> None:
    """Drop the process-wide board (closing its store)."""
    global _board
    if _board is not None and _board.store is not None:
        _board.store.close()
    _board = None
