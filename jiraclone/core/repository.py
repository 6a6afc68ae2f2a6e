"""
FILE: jiraclone/core/repository.py
PURPOSE: SQLite persistence collaborator for the project/ticket/instruction graph
EXPORTS:
  - resolve_db_path() -> Path
  - get_connection(db_path) -> Connection
  - init_database(conn) -> None
  - SQLiteStore (insert / delete / save / load)
DEPENDENCIES:
  - sqlite3 (stdlib)
  - pathlib (stdlib)
  - os, logging (stdlib)
  - jiraclone.core.models (Project, Ticket, Instruction)
  - jiraclone.core.exceptions (PersistenceError)
NOTES:
  - Database stored at ~/.jiraclone/jiraclone.db (override with JIRACLONE_DB)
  - Auto-creates directory and initializes schema on first run
  - Works as a unit of work: insert()/delete() only record intent,
    save() flushes everything in one transaction
  - Collection order is kept in a position column per parent
  - Returns domain objects, never raw rows
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .constants import ENV_DB_PATH
from .exceptions import PersistenceError
from .models import Project, Ticket, Instruction

logger = logging.getLogger(__name__)


# Database file location (cross-platform)
DB_DIR = Path.home() / ".jiraclone"
DB_PATH = DB_DIR / "jiraclone.db"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS projects (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS tickets (
    id INTEGER PRIMARY KEY,
    project_id INTEGER NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    position INTEGER NOT NULL DEFAULT 0,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL,
    priority TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS instructions (
    id INTEGER PRIMARY KEY,
    ticket_id INTEGER NOT NULL REFERENCES tickets(id) ON DELETE CASCADE,
    position INTEGER NOT NULL DEFAULT 0,
    text TEXT NOT NULL DEFAULT '',
    completed INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_tickets_project ON tickets(project_id, position);
CREATE INDEX IF NOT EXISTS idx_instructions_ticket ON instructions(ticket_id, position);
"""

# Child tables first: deletes are flushed in this order
_TABLES = {
    Instruction: "instructions",
    Ticket: "tickets",
    Project: "projects",
}


def resolve_db_path() -> Path:
    """Database path from JIRACLONE_DB, falling back to DB_PATH."""
    override = os.environ.get(ENV_DB_PATH)
    if override:
        return Path(override).expanduser()
    return DB_PATH


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """
    Get SQLite connection to the jiraclone database.

    Creates the database directory if it doesn't exist.
    Enables row_factory for dict-like row access.
    Enables foreign key constraints.
    Initializes database schema on first connection.
    """
    path = Path(db_path) if db_path else resolve_db_path()

    # Ensure directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row

    # Enable foreign key constraints (required for ON DELETE CASCADE)
    conn.execute("PRAGMA foreign_keys = ON")

    init_database(conn)

    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS).
    """
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def _key(entity) -> Tuple[type, int]:
    return type(entity), entity.id


class SQLiteStore:
    """
    Persistence collaborator backed by a SQLite file.

    insert() registers an entity (with its children) as live, delete()
    queues it for removal, save() writes both in a single transaction.
    Live entities are upserted on every save, so in-place field edits
    need no extra bookkeeping.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._live: Dict[Tuple[type, int], object] = {}
        self._deleted: Dict[Tuple[type, int], object] = {}

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = get_connection(self.db_path)
            except (sqlite3.Error, OSError) as e:
                raise PersistenceError(f"Cannot open database: {e}") from e
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # --- Collaborator contract ---

    def insert(self, entity) -> None:
        """Register entity and its current children as live."""
        for item in _walk(entity):
            key = _key(item)
            self._deleted.pop(key, None)
            self._live[key] = item

    def delete(self, entity) -> None:
        """Queue entity for deletion on the next save()."""
        key = _key(entity)
        self._live.pop(key, None)
        self._deleted[key] = entity

    def save(self) -> None:
        """
        Flush pending deletes and upsert all live entities.

        Raises:
            PersistenceError: If SQLite rejects the transaction (nothing
                is written; pending deletes stay queued)
        """
        conn = self.connection
        try:
            with conn:
                for model, table in _TABLES.items():
                    ids = [entity_id for (kind, entity_id) in self._deleted if kind is model]
                    conn.executemany(
                        f"DELETE FROM {table} WHERE id = ?",
                        [(entity_id,) for entity_id in ids],
                    )
                for project in self._live_of(Project):
                    _upsert_project(conn, project)
                for ticket in self._live_of(Ticket):
                    if ticket.project is not None:
                        _upsert_ticket(conn, ticket)
                for instruction in self._live_of(Instruction):
                    if instruction.ticket is not None:
                        _upsert_instruction(conn, instruction)
        except sqlite3.Error as e:
            raise PersistenceError(f"Save failed: {e}") from e

        self._deleted.clear()
        logger.debug("Saved %d live entities to %s", len(self._live), self.db_path or resolve_db_path())

    # --- Loading ---

    def load(self) -> List[Project]:
        """
        Rebuild the object graph from the database.

        Returns:
            Projects ordered by creation date (oldest first), each with its
            tickets and instructions in stored order
        """
        conn = self.connection
        try:
            project_rows = conn.execute(
                "SELECT * FROM projects ORDER BY created_at, id"
            ).fetchall()
            ticket_rows = conn.execute(
                "SELECT * FROM tickets ORDER BY project_id, position, id"
            ).fetchall()
            instruction_rows = conn.execute(
                "SELECT * FROM instructions ORDER BY ticket_id, position, id"
            ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Load failed: {e}") from e

        projects = {row["id"]: Project.from_row(row) for row in project_rows}
        tickets = {}
        for row in ticket_rows:
            project = projects.get(row["project_id"])
            if project is None:
                continue
            ticket = Ticket.from_row(row)
            project.tickets.append(ticket)
            tickets[ticket.id] = ticket
        for row in instruction_rows:
            ticket = tickets.get(row["ticket_id"])
            if ticket is None:
                continue
            ticket.instructions.append(Instruction.from_row(row))

        loaded = list(projects.values())
        for project in loaded:
            self.insert(project)
        return loaded

    def count_rows(self, table: str) -> int:
        """Number of stored rows in one of the board tables."""
        if table not in _TABLES.values():
            raise ValueError(f"Unknown table: {table}")
        return self.connection.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def _live_of(self, model: type) -> list:
        return [entity for (kind, _), entity in self._live.items() if kind is model]


def _walk(entity):
    yield entity
    if isinstance(entity, Project):
        for ticket in entity.tickets:
            yield from _walk(ticket)
    elif isinstance(entity, Ticket):
        yield from entity.instructions


def _upsert_project(conn: sqlite3.Connection, project: Project) -> None:
    conn.execute(
        """
        INSERT INTO projects (id, name, created_at) VALUES (?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET name = excluded.name
        """,
        (project.id, project.name, project.created_at.isoformat()),
    )


def _upsert_ticket(conn: sqlite3.Connection, ticket: Ticket) -> None:
    conn.execute(
        """
        INSERT INTO tickets
            (id, project_id, position, title, description, status, priority, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            project_id = excluded.project_id,
            position = excluded.position,
            title = excluded.title,
            description = excluded.description,
            status = excluded.status,
            priority = excluded.priority
        """,
        (
            ticket.id,
            ticket.project.id,
            ticket.project.tickets.index(ticket),
            ticket.title,
            ticket.description,
            ticket.status.value,
            ticket.priority.value,
            ticket.created_at.isoformat(),
        ),
    )


def _upsert_instruction(conn: sqlite3.Connection, instruction: Instruction) -> None:
    conn.execute(
        """
        INSERT INTO instructions (id, ticket_id, position, text, completed)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            ticket_id = excluded.ticket_id,
            position = excluded.position,
            text = excluded.text,
            completed = excluded.completed
        """,
        (
            instruction.id,
            instruction.ticket.id,
            instruction.ticket.instructions.index(instruction),
            instruction.text,
            int(instruction.completed),
        ),
    )
