"""
FILE: jiraclone/core/models.py
PURPOSE: Domain models for projects, tickets, and checklist instructions
EXPORTS:
  - OwnedCollection (ordered child collection that owns back-references)
  - Instruction (dataclass)
  - Ticket (dataclass)
  - Project (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib)
  - json (stdlib)
  - jiraclone.core.constants (Status, Priority, defaults)
NOTES:
  - Each parent owns its children through one OwnedCollection; the child's
    back-reference (ticket.project, instruction.ticket) is read-only and
    only the collection sets or clears it
  - Models compare by identity (eq=False): two checklist lines with the
    same text are still different instructions
  - All models have from_row() for SQLite row conversion
  - All models have to_dict()/to_json() for serialization
  - Timestamps are datetime objects, stored as ISO-8601 strings
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Iterator, List, Optional, TypeVar
import json

from .constants import Status, Priority, DEFAULT_STATUS, DEFAULT_PRIORITY


T = TypeVar("T")


class OwnedCollection(Generic[T]):
    """
    Ordered collection of child entities owned by a parent.

    Appending a child attaches it (sets its back-reference to the owner),
    removing it detaches it. A child can belong to one collection at a time.
    """

    def __init__(self, owner):
        self._owner = owner
        self._items: List[T] = []

    def append(self, child: T) -> None:
        current = child._owner
        if current is self._owner:
            return
        if current is not None:
            raise ValueError(f"{child!r} already belongs to {current!r}")
        child._owner = self._owner
        self._items.append(child)

    def extend(self, children) -> None:
        for child in children:
            self.append(child)

    def remove(self, child: T) -> bool:
        """Detach child; returns False if it was not in this collection."""
        index = self.index(child)
        if index is None:
            return False
        del self._items[index]
        child._owner = None
        return True

    def clear(self) -> None:
        for child in self._items:
            child._owner = None
        self._items = []

    def index(self, child: T) -> Optional[int]:
        for i, item in enumerate(self._items):
            if item is child:
                return i
        return None

    def __contains__(self, child) -> bool:
        return self.index(child) is not None

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"OwnedCollection({self._items!r})"


@dataclass(eq=False)
class Instruction:
    """A single checklist line item belonging to a ticket."""

    text: str
    completed: bool = False
    id: Optional[int] = None
    _owner: Optional["Ticket"] = field(default=None, init=False, repr=False)

    @property
    def ticket(self) -> Optional["Ticket"]:
        return self._owner

    @classmethod
    def from_row(cls, row) -> "Instruction":
        """Convert SQLite row to Instruction object."""
        return cls(
            id=row["id"],
            text=row["text"],
            completed=bool(row["completed"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "ticket_id": self._owner.id if self._owner else None,
        }

    def to_json(self) -> str:
        """Serialize instruction to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass(eq=False)
class Ticket:
    """A unit of work with status, priority, description, and a checklist."""

    title: str
    description: str = ""
    status: Status = DEFAULT_STATUS
    priority: Priority = DEFAULT_PRIORITY
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    instructions: OwnedCollection[Instruction] = field(init=False, repr=False)
    _owner: Optional["Project"] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.instructions = OwnedCollection(self)

    @property
    def project(self) -> Optional["Project"]:
        return self._owner

    @property
    def instruction_count(self) -> int:
        return len(self.instructions)

    @property
    def completed_instruction_count(self) -> int:
        return sum(1 for instruction in self.instructions if instruction.completed)

    @property
    def completion_ratio(self) -> float:
        """Completed / total checklist items, 0.0 for an empty checklist."""
        total = self.instruction_count
        if total == 0:
            return 0.0
        return self.completed_instruction_count / total

    @classmethod
    def from_row(cls, row) -> "Ticket":
        """Convert SQLite row to Ticket object (without instructions)."""
        return cls(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            status=Status(row["status"]),
            priority=Priority(row["priority"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "created_at": self.created_at.isoformat(),
            "project_id": self._owner.id if self._owner else None,
            "completed_instructions": self.completed_instruction_count,
            "total_instructions": self.instruction_count,
            "instructions": [instruction.to_dict() for instruction in self.instructions],
        }

    def to_json(self) -> str:
        """Serialize ticket (with its checklist) to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass(eq=False)
class Project:
    """Top-level container of tickets, named by the user."""

    name: str
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    tickets: OwnedCollection[Ticket] = field(init=False, repr=False)

    def __post_init__(self):
        self.tickets = OwnedCollection(self)

    @property
    def ticket_count(self) -> int:
        return len(self.tickets)

    @classmethod
    def from_row(cls, row) -> "Project":
        """Convert SQLite row to Project object (without tickets)."""
        return cls(
            id=row["id"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def to_dict(self, include_tickets: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "ticket_count": self.ticket_count,
        }
        if include_tickets:
            data["tickets"] = [ticket.to_dict() for ticket in self.tickets]
        return data

    def to_json(self) -> str:
        """Serialize project to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
