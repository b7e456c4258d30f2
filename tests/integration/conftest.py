"""Fixtures for integration tests against a file-backed SQLite store."""

from pathlib import Path

import pytest

from traindesk.registrations import Database


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite file."""
    return f"sqlite:///{tmp_path / 'traindesk.db'}"


@pytest.fixture
def file_database(database_url: str):
    """Create a file-backed Database with tables."""
    db = Database(database_url)
    db.create_tables()
    yield db
    db.close()
