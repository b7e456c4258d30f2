"""Client for the TrainDesk API and the list/bulk-action screen state."""

from traindesk.client.api_client import ItemOutcome, RegistrationClient
from traindesk.client.exceptions import (
    ClientError,
    RemoteInvalidTransitionError,
    RemoteNotFoundError,
)
from traindesk.client.view import RegistrationListView

__all__ = [
    "ClientError",
    "ItemOutcome",
    "RegistrationClient",
    "RegistrationListView",
    "RemoteInvalidTransitionError",
    "RemoteNotFoundError",
]
