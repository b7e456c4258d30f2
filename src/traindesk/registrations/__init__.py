"""Registration store - persistence and typed access for registrations."""

from traindesk.registrations.catalog import Catalog
from traindesk.registrations.database import Database
from traindesk.registrations.exceptions import (
    CatalogEntryExistsError,
    CatalogEntryNotFoundError,
    RegistrationError,
    RegistrationNotFoundError,
    StoreError,
)
from traindesk.registrations.models import (
    Decision,
    RegistrationKind,
    RegistrationStatus,
    RegistrationView,
    StatusCounts,
)
from traindesk.registrations.repository import RegistrationRepository

__all__ = [
    "Catalog",
    "CatalogEntryExistsError",
    "CatalogEntryNotFoundError",
    "Database",
    "Decision",
    "RegistrationError",
    "RegistrationKind",
    "RegistrationNotFoundError",
    "RegistrationRepository",
    "RegistrationStatus",
    "RegistrationView",
    "StatusCounts",
    "StoreError",
]
