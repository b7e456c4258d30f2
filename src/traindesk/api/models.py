"""Pydantic models for the REST API."""

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
)

from traindesk.approval import BulkResult, DecisionResult, Outcome
from traindesk.registrations import Decision, RegistrationKind, RegistrationStatus

T = TypeVar("T")

SUCCESS = "success"
ERROR = "error"

MAX_BULK_IDS = 500


class Envelope(BaseModel, Generic[T]):
    """Standard response wrapper.

    Success bodies carry ``data``, error bodies carry ``message``; the
    unused key is left out of the JSON.
    """

    status: Literal["success", "error"]
    data: T | None = None
    message: str | None = None

    @model_serializer(mode="wrap")
    def _omit_unused(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        payload: dict[str, Any] = handler(self)
        if self.status == ERROR:
            payload.pop("data", None)
        if self.message is None:
            payload.pop("message", None)
        return payload

    @classmethod
    def success(cls, data: Any) -> "Envelope[Any]":
        return cls(status=SUCCESS, data=data)

    @classmethod
    def error(cls, message: str) -> "Envelope[Any]":
        return cls(status=ERROR, message=message)


def _lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


# Request models


class DecideRequest(BaseModel):
    """Request model for approving or rejecting one registration."""

    registration_id: int = Field(..., ge=1)
    status: Decision

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        return _lower(value)


class BulkDecideRequest(BaseModel):
    """Request model for applying one decision to many registrations."""

    registration_ids: list[int] = Field(..., min_length=1, max_length=MAX_BULK_IDS)
    status: Decision

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        return _lower(value)


# Registration models


class RegistrationResponse(BaseModel):
    """Response model for a registration row in an approval list."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    registration_id: int = Field(validation_alias="id")
    kind: RegistrationKind
    student_id: int
    student_name: str
    target_id: int
    course_name: str
    class_name: str | None
    exam_name: str | None
    previous_grade: str | None
    reason: str | None
    status: RegistrationStatus
    request_date: datetime = Field(validation_alias="requested_at")


def registration_to_response(registration: Any) -> RegistrationResponse:
    """Convert a RegistrationView to RegistrationResponse."""
    return RegistrationResponse.model_validate(registration)


class DecisionResponse(BaseModel):
    """Response model for a single decision."""

    registration_id: int
    status: RegistrationStatus


def decision_to_response(result: DecisionResult) -> DecisionResponse:
    """Convert a DecisionResult to DecisionResponse."""
    return DecisionResponse(registration_id=result.registration_id, status=result.status)


class BulkItemResponse(BaseModel):
    """Outcome of one ID in a bulk decision."""

    registration_id: int
    outcome: Outcome
    status: RegistrationStatus | None = None
    message: str | None = None


class BulkDecisionResponse(BaseModel):
    """Response model for a bulk decision."""

    results: list[BulkItemResponse]
    succeeded: int
    failed: int


def bulk_result_to_response(result: BulkResult) -> BulkDecisionResponse:
    """Convert a BulkResult to BulkDecisionResponse."""
    return BulkDecisionResponse(
        results=[
            BulkItemResponse(
                registration_id=item.registration_id,
                outcome=item.outcome,
                status=item.status,
                message=item.message,
            )
            for item in result.items
        ],
        succeeded=len(result.succeeded),
        failed=len(result.failed),
    )


class StatusCountsResponse(BaseModel):
    """Response model for per-status registration counts."""

    model_config = ConfigDict(from_attributes=True)

    kind: RegistrationKind
    pending: int
    approved: int
    rejected: int
    total: int


def status_counts_to_response(counts: Any) -> StatusCountsResponse:
    """Convert StatusCounts to StatusCountsResponse."""
    return StatusCountsResponse.model_validate(counts)


class HealthResponse(BaseModel):
    """Response model for the health check."""

    database: str
