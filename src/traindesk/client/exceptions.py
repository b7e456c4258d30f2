"""Exceptions raised by the TrainDesk API client."""


class ClientError(Exception):
    """Base exception for API client errors."""


class RemoteNotFoundError(ClientError):
    """The server reported that the registration does not exist."""


class RemoteInvalidTransitionError(ClientError):
    """The server reported that the registration is no longer pending."""
