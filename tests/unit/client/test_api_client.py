"""Unit tests for RegistrationClient."""

import time
from unittest.mock import MagicMock, patch

import httpx
import pytest

from traindesk.client import (
    ClientError,
    RegistrationClient,
    RemoteInvalidTransitionError,
    RemoteNotFoundError,
)
from traindesk.registrations import Decision, RegistrationKind, RegistrationStatus

ROW = {
    "registration_id": 3,
    "kind": "course-registrations",
    "student_id": 1,
    "student_name": "Alice Nguyen",
    "target_id": 1,
    "course_name": "Intro to Programming",
    "class_name": "CS101-A",
    "exam_name": None,
    "previous_grade": None,
    "reason": None,
    "status": "pending",
    "request_date": "2026-03-01T09:30:00",
}


def _response(body: dict, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    return response


@pytest.fixture
def http() -> MagicMock:
    return MagicMock(spec=httpx.Client)


@pytest.fixture
def client(http: MagicMock) -> RegistrationClient:
    c = RegistrationClient("http://api.test/")
    c._client = http
    return c


@pytest.mark.unit
class TestListRegistrations:
    """Tests for list_registrations."""

    def test_parses_rows(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.return_value = _response({"status": "success", "data": [ROW]})

        rows = client.list_registrations(RegistrationKind.COURSE, RegistrationStatus.PENDING)

        http.request.assert_called_once_with(
            "GET", "/course-registrations/read.php", params={"status": "pending"}
        )
        assert rows[0].registration_id == 3
        assert rows[0].student_name == "Alice Nguyen"

    def test_without_status(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.return_value = _response({"status": "success", "data": []})

        assert client.list_registrations(RegistrationKind.RETAKE_EXAM) == []
        http.request.assert_called_once_with("GET", "/retake-exams/read.php", params=None)


@pytest.mark.unit
class TestDecide:
    """Tests for decide."""

    def test_success(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.return_value = _response(
            {"status": "success", "data": {"registration_id": 3, "status": "approved"}}
        )

        status = client.decide(RegistrationKind.COURSE, 3, Decision.APPROVED)

        assert status is RegistrationStatus.APPROVED
        http.request.assert_called_once_with(
            "POST",
            "/course-registrations/approve.php",
            json={"registration_id": 3, "status": "approved"},
        )

    def test_not_found(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.return_value = _response(
            {"status": "error", "message": "Registration 3 not found in course-registrations"}
        )

        with pytest.raises(RemoteNotFoundError):
            client.decide(RegistrationKind.COURSE, 3, Decision.APPROVED)

    def test_invalid_transition(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.return_value = _response(
            {
                "status": "error",
                "message": "Registration 3 in course-registrations is already approved; "
                "only pending registrations can be approved or rejected",
            }
        )

        with pytest.raises(RemoteInvalidTransitionError, match="already approved"):
            client.decide(RegistrationKind.COURSE, 3, Decision.REJECTED)

    def test_server_error(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.return_value = _response(
            {"status": "error", "message": "Internal server error"}, status_code=500
        )

        with pytest.raises(ClientError) as exc_info:
            client.decide(RegistrationKind.COURSE, 3, Decision.APPROVED)

        assert type(exc_info.value) is ClientError

    def test_unrouted_404_is_not_a_missing_registration(
        self, client: RegistrationClient, http: MagicMock
    ) -> None:
        """A 404 from a bad base URL must not look like a registration lookup miss."""
        http.request.return_value = _response(
            {"status": "error", "message": "Not Found"}, status_code=404
        )

        with pytest.raises(ClientError, match="HTTP 404") as exc_info:
            client.decide(RegistrationKind.COURSE, 3, Decision.APPROVED)

        assert type(exc_info.value) is ClientError

    def test_transport_error(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(ClientError, match="approve.php"):
            client.decide(RegistrationKind.COURSE, 3, Decision.APPROVED)

    def test_non_json_body(self, client: RegistrationClient, http: MagicMock) -> None:
        response = _response({}, status_code=502)
        response.json.side_effect = ValueError("not json")
        http.request.return_value = response

        with pytest.raises(ClientError, match="HTTP 502"):
            client.decide(RegistrationKind.COURSE, 3, Decision.APPROVED)


@pytest.mark.unit
class TestDecideMany:
    """Tests for decide_many."""

    def test_collects_every_outcome(self, client: RegistrationClient, http: MagicMock) -> None:
        def answer(method, path, json):
            if json["registration_id"] == 8:
                return _response(
                    {"status": "error", "message": "Registration 8 not found in retake-exams"}
                )
            return _response(
                {
                    "status": "success",
                    "data": {"registration_id": json["registration_id"], "status": "approved"},
                }
            )

        http.request.side_effect = answer

        outcomes = client.decide_many(RegistrationKind.RETAKE_EXAM, [7, 8, 9], Decision.APPROVED)

        assert list(outcomes) == [7, 8, 9]
        assert outcomes[7].ok and outcomes[7].status is RegistrationStatus.APPROVED
        assert not outcomes[8].ok
        assert isinstance(outcomes[8].error, RemoteNotFoundError)
        assert "not found" in outcomes[8].message
        assert outcomes[9].ok

    def test_duplicates_sent_once(self, client: RegistrationClient, http: MagicMock) -> None:
        http.request.return_value = _response(
            {"status": "success", "data": {"registration_id": 1, "status": "rejected"}}
        )

        outcomes = client.decide_many(RegistrationKind.COURSE, [1, 1], Decision.REJECTED)

        assert list(outcomes) == [1]
        assert http.request.call_count == 1

    def test_no_ids(self, client: RegistrationClient, http: MagicMock) -> None:
        assert client.decide_many(RegistrationKind.COURSE, [], Decision.APPROVED) == {}
        http.request.assert_not_called()

    def test_fresh_client_builds_one_http_client(self) -> None:
        """Concurrent first requests share a single lazily built httpx.Client."""
        built: list[MagicMock] = []
        real_client_cls = httpx.Client

        def build(**kwargs) -> MagicMock:
            time.sleep(0.05)
            http = MagicMock(spec=real_client_cls)
            http.request.side_effect = lambda method, path, json: _response(
                {
                    "status": "success",
                    "data": {"registration_id": json["registration_id"], "status": "approved"},
                }
            )
            built.append(http)
            return http

        client = RegistrationClient("http://api.test/")
        with patch("traindesk.client.api_client.httpx.Client", side_effect=build):
            outcomes = client.decide_many(
                RegistrationKind.COURSE, range(1, 9), Decision.APPROVED, max_workers=8
            )

        assert all(outcome.ok for outcome in outcomes.values())
        assert len(built) == 1
        assert built[0].request.call_count == 8

        client.close()
        built[0].close.assert_called_once()


@pytest.mark.unit
def test_close_releases_http_client(client: RegistrationClient, http: MagicMock) -> None:
    client.close()

    http.close.assert_called_once()
    assert client._client is None
