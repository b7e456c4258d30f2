"""RegistrationListView - state behind an approval list screen."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from traindesk.client.exceptions import ClientError
from traindesk.registrations.models import Decision, RegistrationKind, RegistrationStatus

if TYPE_CHECKING:
    from traindesk.api.models import RegistrationResponse
    from traindesk.client.api_client import ItemOutcome, RegistrationClient

DEFAULT_PER_PAGE = 10


class RegistrationListView:
    """One status tab of a registration list with search, paging and selection.

    Bulk actions send one request per selected registration. Registrations
    that were decided leave the list; the ones that failed stay listed and
    are flagged in ``failures`` with the server's message.
    """

    def __init__(
        self,
        client: RegistrationClient,
        kind: RegistrationKind,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self.client = client
        self.kind = kind
        self.per_page = per_page
        self.status_filter: RegistrationStatus | None = RegistrationStatus.PENDING
        self.rows: list[RegistrationResponse] = []
        self.search_term = ""
        self.current_page = 1
        self.selected: list[int] = []
        self.failures: dict[int, str] = {}

    # --- Loading and filtering ---

    def refresh(self, status: RegistrationStatus | None = None) -> list[RegistrationResponse]:
        """Reload rows, switching to another status tab when one is given."""
        if status is not None:
            self.status_filter = status
        self.rows = self.client.list_registrations(self.kind, self.status_filter)
        self.current_page = 1
        self.selected = []
        self.failures = {}
        return self.rows

    @property
    def filtered(self) -> list[RegistrationResponse]:
        """Rows matching the search term on student, course, class or exam name."""
        term = self.search_term.strip().lower()
        if not term:
            return list(self.rows)
        return [
            row
            for row in self.rows
            if any(
                term in (name or "").lower()
                for name in (row.student_name, row.course_name, row.class_name, row.exam_name)
            )
        ]

    def search(self, term: str) -> list[RegistrationResponse]:
        self.search_term = term
        self.current_page = 1
        return self.filtered

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.filtered) / self.per_page)

    def page(self, number: int, per_page: int | None = None) -> list[RegistrationResponse]:
        """Rows shown on a page, numbered from 1."""
        if per_page is not None:
            self.per_page = per_page
        self.current_page = max(1, number)
        start = (self.current_page - 1) * self.per_page
        return self.filtered[start : start + self.per_page]

    # --- Selection ---

    def select(self, registration_id: int) -> None:
        if registration_id not in self.selected:
            self.selected.append(registration_id)

    def deselect(self, registration_id: int) -> None:
        if registration_id in self.selected:
            self.selected.remove(registration_id)

    def toggle(self, registration_id: int) -> None:
        if registration_id in self.selected:
            self.deselect(registration_id)
        else:
            self.select(registration_id)

    def select_all(self) -> None:
        """Select every row that matches the current search."""
        self.selected = [row.registration_id for row in self.filtered]

    def clear_selection(self) -> None:
        self.selected = []

    # --- Decisions ---

    def approve(self, registration_id: int) -> bool:
        return self._decide_one(registration_id, Decision.APPROVED)

    def reject(self, registration_id: int) -> bool:
        return self._decide_one(registration_id, Decision.REJECTED)

    def approve_selected(self) -> dict[int, ItemOutcome]:
        return self._decide_selected(Decision.APPROVED)

    def reject_selected(self) -> dict[int, ItemOutcome]:
        return self._decide_selected(Decision.REJECTED)

    def _decide_one(self, registration_id: int, decision: Decision) -> bool:
        try:
            self.client.decide(self.kind, registration_id, decision)
        except ClientError as e:
            self.failures[registration_id] = str(e)
            return False
        self._remove(registration_id)
        return True

    def _decide_selected(self, decision: Decision) -> dict[int, ItemOutcome]:
        if not self.selected:
            return {}

        outcomes = self.client.decide_many(self.kind, self.selected, decision)
        for registration_id, outcome in outcomes.items():
            if outcome.ok:
                self._remove(registration_id)
            else:
                self.failures[registration_id] = outcome.message or "Request failed"
        return outcomes

    def _remove(self, registration_id: int) -> None:
        self.rows = [row for row in self.rows if row.registration_id != registration_id]
        self.deselect(registration_id)
        self.failures.pop(registration_id, None)
