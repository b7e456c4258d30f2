"""REST API for TrainDesk."""

from traindesk.api.app import create_app
from traindesk.api.models import (
    BulkDecideRequest,
    DecideRequest,
    Envelope,
    RegistrationResponse,
)

__all__ = [
    "BulkDecideRequest",
    "DecideRequest",
    "Envelope",
    "RegistrationResponse",
    "create_app",
]
