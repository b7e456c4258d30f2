"""Custom exceptions for the registration store."""


class RegistrationError(Exception):
    """Base exception for registration store errors."""


class RegistrationNotFoundError(RegistrationError):
    """Registration with given ID does not exist."""

    def __init__(self, kind: str, registration_id: int) -> None:
        super().__init__(f"Registration {registration_id} not found in {kind}")
        self.kind = kind
        self.registration_id = registration_id


class StoreError(RegistrationError):
    """The database could not be reached or the query failed."""


class CatalogEntryNotFoundError(RegistrationError):
    """Referenced student, course, class or exam does not exist."""


class CatalogEntryExistsError(RegistrationError):
    """A user with this email or a course with this code already exists."""
