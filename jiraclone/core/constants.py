"""
FILE: jiraclone/core/constants.py
PURPOSE: Status/priority enumerations and constants used throughout the application
EXPORTS:
  - Status: Kanban column states (Backlog, To Do, To Test, Done)
  - Priority: Ticket urgency levels (Low, Medium, High, Critical)
  - DEFAULT_STATUS, DEFAULT_PRIORITY: Defaults for new tickets
  - ENV_DB_PATH, ENV_LOG_LEVEL: Environment variable names
DEPENDENCIES:
  - enum (stdlib)
  - jiraclone.core.exceptions (ValidationError)
NOTES:
  - Single source of truth for status and priority values
  - Status rank defines left-to-right column order
  - Priority colour is presentation-only (Rich colour names)
"""

from enum import Enum

from .exceptions import ValidationError


def _normalize(value: str) -> str:
    return "".join(ch for ch in value.strip().lower() if ch.isalnum())


class Status(str, Enum):
    """A kanban column state."""

    BACKLOG = "Backlog"
    TODO = "To Do"
    TO_TEST = "To Test"
    DONE = "Done"

    @property
    def rank(self) -> int:
        """Column position, 0 for the leftmost column."""
        return _STATUS_RANKS[self]

    @classmethod
    def ordered(cls) -> list:
        """All statuses in column order."""
        return sorted(cls, key=lambda status: status.rank)

    @classmethod
    def parse(cls, value) -> "Status":
        """
        Coerce user input to a Status.

        Accepts a Status, its display value ("To Do"), its member name
        ("TO_TEST") or a loose alias ("todo", "to-test", "3").

        Raises:
            ValidationError: If value names no status
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = _normalize(value)
            for status in cls:
                if key in (_normalize(status.value), _normalize(status.name)):
                    return status
            if key in STATUS_ALIASES:
                return cls(STATUS_ALIASES[key])
        valid = ", ".join(status.value for status in cls.ordered())
        raise ValidationError(f"Invalid status '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


class Priority(str, Enum):
    """A ticket urgency level."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def color(self) -> str:
        return _PRIORITY_COLORS[self]

    @property
    def level(self) -> int:
        return list(Priority).index(self)

    @classmethod
    def parse(cls, value) -> "Priority":
        """
        Coerce user input to a Priority.

        Raises:
            ValidationError: If value names no priority
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = _normalize(value)
            for priority in cls:
                if key == _normalize(priority.value):
                    return priority
            if key in PRIORITY_ALIASES:
                return cls(PRIORITY_ALIASES[key])
        valid = ", ".join(priority.value for priority in cls)
        raise ValidationError(f"Invalid priority '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


_STATUS_RANKS = {
    Status.BACKLOG: 0,
    Status.TODO: 1,
    Status.TO_TEST: 2,
    Status.DONE: 3,
}

_PRIORITY_COLORS = {
    Priority.LOW: "green",
    Priority.MEDIUM: "blue",
    Priority.HIGH: "orange1",
    Priority.CRITICAL: "red",
}

# Loose input aliases (keys are normalized: lowercase alphanumerics only)
STATUS_ALIASES = {
    "0": "Backlog",
    "b": "Backlog",
    "1": "To Do",
    "t": "To Do",
    "2": "To Test",
    "test": "To Test",
    "testing": "To Test",
    "3": "Done",
    "d": "Done",
}

PRIORITY_ALIASES = {
    "l": "Low",
    "m": "Medium",
    "med": "Medium",
    "h": "High",
    "c": "Critical",
    "crit": "Critical",
}

# Defaults for new tickets
DEFAULT_STATUS = Status.BACKLOG
DEFAULT_PRIORITY = Priority.MEDIUM

# Environment variables
ENV_DB_PATH = "JIRACLONE_DB"
ENV_LOG_LEVEL = "JIRACLONE_LOG_LEVEL"
