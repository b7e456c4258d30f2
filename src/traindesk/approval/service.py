"""ApprovalService - decides pending registrations, singly or in bulk."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from traindesk.approval.exceptions import InvalidTransitionError
from traindesk.approval.models import BulkItemResult, BulkResult, DecisionResult, Outcome
from traindesk.registrations import (
    RegistrationKind,
    RegistrationNotFoundError,
    RegistrationRepository,
    RegistrationStatus,
    StoreError,
)

if TYPE_CHECKING:
    from traindesk.registrations import Database, Decision

logger = logging.getLogger(__name__)


class ApprovalService:
    """Applies approve/reject decisions to registrations.

    The only allowed transitions are pending -> approved and
    pending -> rejected. The status check is re-evaluated by a conditional
    update, so two concurrent decisions on the same registration cannot
    both succeed.
    """

    def __init__(self, repositories: Mapping[RegistrationKind, RegistrationRepository]) -> None:
        """Initialize the service.

        Args:
            repositories: One repository per registration kind.
        """
        self._repositories = dict(repositories)

    @classmethod
    def from_database(cls, database: Database, retries: int = 2) -> ApprovalService:
        """Build a service with a repository for every registration kind."""
        return cls(
            {
                kind: RegistrationRepository(database, kind, retries=retries)
                for kind in RegistrationKind
            }
        )

    def repository(self, kind: RegistrationKind) -> RegistrationRepository:
        """Get the repository serving a registration kind."""
        return self._repositories[kind]

    def decide(
        self,
        registration_id: int,
        kind: RegistrationKind,
        decision: Decision,
    ) -> DecisionResult:
        """Approve or reject one pending registration.

        Args:
            registration_id: The registration's ID.
            kind: Registration kind.
            decision: Approved or rejected.

        Returns:
            DecisionResult with the new status.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
            InvalidTransitionError: If the registration is not pending, including
                when a concurrent decision got there first.
        """
        repository = self.repository(kind)
        current = repository.get(registration_id)
        if current.status is not RegistrationStatus.PENDING:
            logger.warning(
                "Refused to %s %s registration %d: already %s",
                decision,
                kind,
                registration_id,
                current.status,
            )
            raise InvalidTransitionError(kind, registration_id, current.status)

        updated = repository.set_status(
            registration_id,
            decision.status,
            expected_status=RegistrationStatus.PENDING,
        )
        if not updated:
            # Another request decided it between the read and the write
            latest = repository.get(registration_id)
            logger.warning(
                "Lost race deciding %s registration %d: now %s",
                kind,
                registration_id,
                latest.status,
            )
            raise InvalidTransitionError(kind, registration_id, latest.status)

        logger.info("%s registration %d -> %s", kind, registration_id, decision.status)
        return DecisionResult(registration_id=registration_id, kind=kind, status=decision.status)

    def decide_bulk(
        self,
        registration_ids: Iterable[int],
        kind: RegistrationKind,
        decision: Decision,
    ) -> BulkResult:
        """Apply the same decision to many registrations independently.

        A failure on one ID never prevents the others from being decided.
        Duplicate IDs are decided once, in first-seen order.

        Args:
            registration_ids: IDs to decide.
            kind: Registration kind.
            decision: Approved or rejected.

        Returns:
            BulkResult with exactly one outcome per distinct ID.
        """
        result = BulkResult(kind=kind)
        for registration_id in dict.fromkeys(registration_ids):
            result.items.append(self._decide_isolated(registration_id, kind, decision))

        logger.info(
            "Bulk %s on %s: %d succeeded, %d failed",
            decision,
            kind,
            len(result.succeeded),
            len(result.failed),
        )
        return result

    def _decide_isolated(
        self,
        registration_id: int,
        kind: RegistrationKind,
        decision: Decision,
    ) -> BulkItemResult:
        try:
            decided = self.decide(registration_id, kind, decision)
        except RegistrationNotFoundError as e:
            return BulkItemResult(registration_id, Outcome.NOT_FOUND, message=str(e))
        except InvalidTransitionError as e:
            return BulkItemResult(registration_id, Outcome.INVALID_TRANSITION, message=str(e))
        except StoreError:
            logger.exception("Store error deciding %s registration %d", kind, registration_id)
            return BulkItemResult(
                registration_id, Outcome.STORE_ERROR, message="Internal server error"
            )
        return BulkItemResult(registration_id, Outcome.SUCCESS, status=decided.status)
