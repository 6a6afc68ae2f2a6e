"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from jiraclone.core import repository, service  # noqa: E402
from jiraclone.core.constants import ENV_DB_PATH  # noqa: E402
from jiraclone.core.service import Board  # noqa: E402


@pytest.fixture
def temp_db(monkeypatch, tmp_path):
    """Use temporary database and a fresh process-wide board."""
    db_path = tmp_path / "test_jiraclone.db"
    monkeypatch.delenv(ENV_DB_PATH, raising=False)
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DB_DIR", tmp_path)
    service.reset_board()
    yield db_path
    service.reset_board()


@pytest.fixture
def board():
    """In-memory board with no persistence collaborator."""
    return Board()


class RecordingStore:
    """Persistence double that records the collaborator calls it receives."""

    def __init__(self, fail_on_save=False):
        self.fail_on_save = fail_on_save
        self.calls = []
        self.inserted = []
        self.deleted = []
        self.saves = 0

    def insert(self, entity):
        self.calls.append(("insert", entity))
        self.inserted.append(entity)

    def delete(self, entity):
        self.calls.append(("delete", entity))
        self.deleted.append(entity)

    def save(self):
        self.calls.append(("save", None))
        self.saves += 1
        if self.fail_on_save:
            from jiraclone.core.exceptions import PersistenceError
            raise PersistenceError("disk full")


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def failing_store():
    """Store whose save() always raises PersistenceError."""
    return RecordingStore(fail_on_save=True)
