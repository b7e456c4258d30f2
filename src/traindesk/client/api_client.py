"""RegistrationClient - talks to the TrainDesk HTTP API."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import httpx

from traindesk.api.models import RegistrationResponse
from traindesk.client.exceptions import (
    ClientError,
    RemoteInvalidTransitionError,
    RemoteNotFoundError,
)
from traindesk.logging import get_logger
from traindesk.registrations.models import Decision, RegistrationKind, RegistrationStatus

logger = get_logger("client")

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class ItemOutcome:
    """Result of one decision request sent as part of a bulk action.

    Attributes:
        registration_id: The registration the request was for.
        status: New status when the request succeeded.
        error: The error raised when it failed.
    """

    registration_id: int
    status: RegistrationStatus | None = None
    error: ClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        return str(self.error) if self.error is not None else None


def _error_from_message(message: str) -> ClientError:
    """Map a 200 error envelope's message to the matching exception type."""
    lowered = message.lower()
    if "not found" in lowered:
        return RemoteNotFoundError(message)
    if "only pending registrations" in lowered:
        return RemoteInvalidTransitionError(message)
    return ClientError(message)


class RegistrationClient:
    """Client for the registration list and decision endpoints."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 30.0) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the TrainDesk API
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client (shared by decide_many's threads)."""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    base_url=self.base_url,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
            return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and unwrap the response envelope.

        Returns:
            The envelope's data

        Raises:
            ClientError: If the request fails or the envelope reports an error
        """
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise ClientError(f"Request to {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise ClientError(
                f"Unexpected response from {path}: HTTP {response.status_code}"
            ) from e

        if body.get("status") == "success":
            return body.get("data")

        message = body.get("message") or f"HTTP {response.status_code}"
        if response.status_code != httpx.codes.OK:
            # Routing and server failures, never a statement about a registration
            raise ClientError(f"HTTP {response.status_code} from {path}: {message}")
        raise _error_from_message(message)

    def list_registrations(
        self,
        kind: RegistrationKind,
        status: RegistrationStatus | None = None,
    ) -> list[RegistrationResponse]:
        """Fetch registrations of a kind, optionally for one status tab."""
        params = {"status": status.value} if status is not None else None
        data = self._request("GET", f"/{kind.value}/read.php", params=params)
        return [RegistrationResponse.model_validate(item) for item in data or []]

    def decide(
        self,
        kind: RegistrationKind,
        registration_id: int,
        decision: Decision,
    ) -> RegistrationStatus:
        """Approve or reject one registration.

        Returns:
            The registration's new status

        Raises:
            RemoteNotFoundError: If the registration doesn't exist
            RemoteInvalidTransitionError: If it is no longer pending
            ClientError: For any other failure
        """
        data = self._request(
            "POST",
            f"/{kind.value}/approve.php",
            json={"registration_id": registration_id, "status": decision.value},
        )
        return RegistrationStatus(data["status"])

    def decide_many(
        self,
        kind: RegistrationKind,
        registration_ids: Iterable[int],
        decision: Decision,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> dict[int, ItemOutcome]:
        """Send one decision request per ID concurrently.

        Failed requests are reported in the result rather than raised, so
        one bad ID never hides the outcome of the others.

        Returns:
            Outcome per distinct registration ID, in first-seen order
        """
        ids = list(dict.fromkeys(registration_ids))
        if not ids:
            return {}

        def send(registration_id: int) -> ItemOutcome:
            try:
                status = self.decide(kind, registration_id, decision)
            except ClientError as e:
                return ItemOutcome(registration_id=registration_id, error=e)
            return ItemOutcome(registration_id=registration_id, status=status)

        with ThreadPoolExecutor(max_workers=min(max_workers, len(ids))) as pool:
            outcomes = list(pool.map(send, ids))

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        if failed:
            logger.warning("%d of %d %s decisions failed", failed, len(ids), kind.value)
        return {outcome.registration_id: outcome for outcome in outcomes}
