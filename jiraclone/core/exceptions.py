"""
FILE: jiraclone/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - JiraCloneError (base exception)
  - ValidationError
  - NotFoundError
  - ProjectNotFoundError
  - TicketNotFoundError
  - InstructionNotFoundError
  - PersistenceError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from JiraCloneError for easy catching
  - ValidationError is raised before any mutation (graph unchanged)
  - Board operations treat NotFoundError as a silent no-op; only the
    CLI/REPL raise it, when a user-typed ID does not resolve
"""


class JiraCloneError(Exception):
    """Base exception for all jiraclone errors."""
    pass


class ValidationError(JiraCloneError):
    """Input validation failed (e.g. empty required text)."""

    def __init__(self, message: str):
        super().__init__(message)


class NotFoundError(JiraCloneError):
    """Entity is no longer present in its parent collection."""
    pass


class ProjectNotFoundError(NotFoundError):
    """Project with given ID or name doesn't exist."""

    def __init__(self, project_ref):
        self.project_ref = project_ref
        super().__init__(f"Project {project_ref} not found")


class TicketNotFoundError(NotFoundError):
    """Ticket with given ID doesn't exist."""

    def __init__(self, ticket_id: int):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} not found")


class InstructionNotFoundError(NotFoundError):
    """Instruction with given ID doesn't exist."""

    def __init__(self, instruction_id: int):
        self.instruction_id = instruction_id
        super().__init__(f"Instruction {instruction_id} not found")


class PersistenceError(JiraCloneError):
    """The persistence collaborator failed to load or save."""
    pass
