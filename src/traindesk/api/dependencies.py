"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from traindesk.approval import ApprovalService
from traindesk.registrations import Database

# Global Database instance (initialized on app startup)
_database: Database | None = None

# Global ApprovalService instance (initialized on app startup)
_approval_service: ApprovalService | None = None


def init_database(url: str = "sqlite:///traindesk.db", store_retries: int = 2) -> Database:
    """Initialize the global Database and the ApprovalService built on it."""
    global _database, _approval_service  # noqa: PLW0603
    _database = Database(url)
    _database.create_tables()
    _approval_service = ApprovalService.from_database(_database, retries=store_retries)
    return _database


def close_database() -> None:
    """Close the global Database instance."""
    global _database, _approval_service  # noqa: PLW0603
    if _database is not None:
        _database.close()
        _database = None
    _approval_service = None


def get_database() -> Generator[Database, None, None]:
    """Dependency that provides the Database instance."""
    if _database is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    yield _database


def get_approval_service() -> Generator[ApprovalService, None, None]:
    """Dependency that provides the ApprovalService instance."""
    if _approval_service is None:
        raise RuntimeError("ApprovalService not initialized. Call init_database() first.")
    yield _approval_service


# Type aliases for dependency injection
DatabaseDep = Annotated[Database, Depends(get_database)]
ApprovalServiceDep = Annotated[ApprovalService, Depends(get_approval_service)]
