"""
FILE: jiraclone/core/events.py
PURPOSE: Change notifications emitted by the board after every mutation
EXPORTS:
  - ChangeKind (enum of mutation kinds)
  - ChangeEvent (dataclass)
  - EventHub (listener registry)
DEPENDENCIES:
  - dataclasses, enum, logging (stdlib)
NOTES:
  - Views subscribe to the board instead of observing model fields
  - A failing listener is logged and skipped; the mutation already happened
    and other listeners still run
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    PROJECT_CREATED = "project_created"
    PROJECT_RENAMED = "project_renamed"
    PROJECT_DELETED = "project_deleted"
    TICKET_CREATED = "ticket_created"
    TICKET_UPDATED = "ticket_updated"
    TICKET_STATUS_CHANGED = "ticket_status_changed"
    TICKET_PRIORITY_CHANGED = "ticket_priority_changed"
    TICKET_DELETED = "ticket_deleted"
    INSTRUCTION_ADDED = "instruction_added"
    INSTRUCTION_TOGGLED = "instruction_toggled"
    INSTRUCTION_UPDATED = "instruction_updated"
    INSTRUCTION_REMOVED = "instruction_removed"


@dataclass(frozen=True)
class ChangeEvent:
    """
    A single board mutation.

    Attributes:
        kind: What happened
        entity: The project, ticket or instruction that changed
        project: Project the change belongs to (kept for deletions, where
            the entity's back-reference is already cleared)
    """

    kind: ChangeKind
    entity: Any
    project: Optional[Any] = None


Listener = Callable[[ChangeEvent], None]


class EventHub:
    """Registry of change listeners."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed on %s", event.kind.value)

    def __len__(self) -> int:
        return len(self._listeners)
