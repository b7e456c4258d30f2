"""Registration list and decision endpoints.

Paths keep the ``.php`` names the training frontend already calls.
"""

from fastapi import APIRouter, Query

from traindesk.api.dependencies import ApprovalServiceDep
from traindesk.api.models import (
    BulkDecideRequest,
    BulkDecisionResponse,
    DecideRequest,
    DecisionResponse,
    Envelope,
    RegistrationResponse,
    StatusCountsResponse,
    bulk_result_to_response,
    decision_to_response,
    registration_to_response,
    status_counts_to_response,
)
from traindesk.registrations import RegistrationKind, RegistrationStatus

router = APIRouter(prefix="/{kind}", tags=["registrations"])


@router.get("/read.php", response_model=Envelope[list[RegistrationResponse]])
def list_registrations(
    kind: RegistrationKind,
    service: ApprovalServiceDep,
    status: str | None = Query(
        default=None, description="pending, approved or rejected (case-insensitive)"
    ),
) -> Envelope[list[RegistrationResponse]]:
    """List registrations of a kind; an unrecognized status lists everything."""
    registrations = service.repository(kind).list_by_status(RegistrationStatus.parse(status))
    return Envelope.success([registration_to_response(r) for r in registrations])


@router.post("/approve.php", response_model=Envelope[DecisionResponse])
def decide_registration(
    kind: RegistrationKind,
    request: DecideRequest,
    service: ApprovalServiceDep,
) -> Envelope[DecisionResponse]:
    """Approve or reject one pending registration."""
    result = service.decide(request.registration_id, kind, request.status)
    return Envelope.success(decision_to_response(result))


@router.post("/bulk-approve.php", response_model=Envelope[BulkDecisionResponse])
def decide_registrations(
    kind: RegistrationKind,
    request: BulkDecideRequest,
    service: ApprovalServiceDep,
) -> Envelope[BulkDecisionResponse]:
    """Apply one decision to many registrations, reporting each outcome."""
    result = service.decide_bulk(request.registration_ids, kind, request.status)
    return Envelope.success(bulk_result_to_response(result))


@router.get("/stats.php", response_model=Envelope[StatusCountsResponse])
def registration_stats(
    kind: RegistrationKind,
    service: ApprovalServiceDep,
) -> Envelope[StatusCountsResponse]:
    """Count registrations of a kind per status."""
    counts = service.repository(kind).count_by_status()
    return Envelope.success(status_counts_to_response(counts))
