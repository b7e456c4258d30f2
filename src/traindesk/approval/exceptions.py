"""Exceptions for the approval workflow."""


class ApprovalError(Exception):
    """Base exception for approval workflow errors."""

    pass


class InvalidTransitionError(ApprovalError):
    """Registration is no longer pending and cannot be decided."""

    def __init__(self, kind: str, registration_id: int, current_status: str) -> None:
        super().__init__(
            f"Registration {registration_id} in {kind} is already {current_status}; "
            "only pending registrations can be approved or rejected"
        )
        self.kind = kind
        self.registration_id = registration_id
        self.current_status = current_status
