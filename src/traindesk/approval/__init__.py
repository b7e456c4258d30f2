"""Approval package - the pending/approved/rejected workflow."""

from traindesk.approval.exceptions import ApprovalError, InvalidTransitionError
from traindesk.approval.models import BulkItemResult, BulkResult, DecisionResult, Outcome
from traindesk.approval.service import ApprovalService

__all__ = [
    "ApprovalError",
    "ApprovalService",
    "BulkItemResult",
    "BulkResult",
    "DecisionResult",
    "InvalidTransitionError",
    "Outcome",
]
