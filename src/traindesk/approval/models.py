"""Data models for the approval workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from traindesk.registrations.models import RegistrationKind, RegistrationStatus


class Outcome(StrEnum):
    """Result of deciding one registration within a bulk action."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    STORE_ERROR = "store_error"


@dataclass(frozen=True)
class DecisionResult:
    """A registration that was decided.

    Attributes:
        registration_id: The decided registration.
        kind: Registration kind.
        status: Status the registration now holds.
    """

    registration_id: int
    kind: RegistrationKind
    status: RegistrationStatus


@dataclass(frozen=True)
class BulkItemResult:
    """Outcome for one ID of a bulk decision.

    Attributes:
        registration_id: The registration this outcome is for.
        outcome: Success or the specific failure kind.
        status: New status on success, otherwise None.
        message: User-displayable failure message, otherwise None.
    """

    registration_id: int
    outcome: Outcome
    status: RegistrationStatus | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS


@dataclass
class BulkResult:
    """Per-ID outcomes of a bulk decision, in request order."""

    kind: RegistrationKind
    items: list[BulkItemResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[BulkItemResult]:
        return [item for item in self.items if item.ok]

    @property
    def failed(self) -> list[BulkItemResult]:
        return [item for item in self.items if not item.ok]

    def by_id(self) -> dict[int, BulkItemResult]:
        """Index outcomes by registration ID."""
        return {item.registration_id: item for item in self.items}
