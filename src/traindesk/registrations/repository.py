"""RegistrationRepository - data access for one registration kind."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from traindesk.registrations.exceptions import (
    CatalogEntryNotFoundError,
    RegistrationNotFoundError,
    StoreError,
)
from traindesk.registrations.models import (
    Course,
    CourseRegistration,
    Exam,
    RegistrationKind,
    RegistrationStatus,
    RegistrationView,
    RetakeCourseRegistration,
    RetakeExamRegistration,
    StatusCounts,
    TrainingClass,
    User,
)

if TYPE_CHECKING:
    from sqlalchemy import Row, Select
    from sqlalchemy.orm import Session

    from traindesk.registrations.database import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")

RegistrationModel = CourseRegistration | RetakeExamRegistration | RetakeCourseRegistration

MODELS: dict[RegistrationKind, type[RegistrationModel]] = {
    RegistrationKind.COURSE: CourseRegistration,
    RegistrationKind.RETAKE_EXAM: RetakeExamRegistration,
    RegistrationKind.RETAKE_COURSE: RetakeCourseRegistration,
}

# Column holding the target reference, and the table it points to
TARGETS: dict[RegistrationKind, tuple[str, type[Any]]] = {
    RegistrationKind.COURSE: ("class_id", TrainingClass),
    RegistrationKind.RETAKE_EXAM: ("exam_id", Exam),
    RegistrationKind.RETAKE_COURSE: ("course_id", Course),
}

DEFAULT_RETRY_DELAY = 0.1


class RegistrationRepository:
    """Typed access to the table of one registration kind.

    Every operation runs in its own session. Lost connections are retried
    a bounded number of times; any other database failure surfaces as
    StoreError.
    """

    def __init__(
        self,
        database: Database,
        kind: RegistrationKind,
        retries: int = 2,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        """Initialize the repository.

        Args:
            database: Database handle shared by all repositories.
            kind: Registration kind this repository serves.
            retries: Extra attempts after an OperationalError.
            retry_delay: Base delay in seconds between attempts.
        """
        self._db = database
        self.kind = kind
        self.model = MODELS[kind]
        self._target_attr, self._target_model = TARGETS[kind]
        self._retries = retries
        self._retry_delay = retry_delay

    # --- Transport boundary ---

    def _run(self, action: str, operation: Callable[[Session], T]) -> T:
        attempt = 0
        while True:
            attempt += 1
            session = self._db.get_session()
            try:
                return operation(session)
            except OperationalError as e:
                session.rollback()
                if attempt > self._retries:
                    logger.error(
                        "Store unavailable while %s %s after %d attempts: %s",
                        action,
                        self.kind,
                        attempt,
                        e,
                    )
                    raise StoreError(f"Store unavailable while {action}") from e
                logger.warning(
                    "Lost store connection while %s %s (attempt %d), retrying",
                    action,
                    self.kind,
                    attempt,
                )
                time.sleep(self._retry_delay * attempt)
            except SQLAlchemyError as e:
                session.rollback()
                logger.exception("Store query failed while %s %s", action, self.kind)
                raise StoreError(f"Store query failed while {action}") from e
            finally:
                session.close()

    # --- Queries ---

    def _view_query(self) -> Select[Any]:
        model = self.model
        stmt = select(model, User.name.label("student_name")).join(
            User, User.id == model.student_id
        )
        if self.kind is RegistrationKind.COURSE:
            stmt = (
                stmt.add_columns(
                    Course.course_name.label("course_name"),
                    TrainingClass.class_name.label("class_name"),
                )
                .join(TrainingClass, TrainingClass.id == CourseRegistration.class_id)
                .join(Course, Course.id == TrainingClass.course_id)
            )
        elif self.kind is RegistrationKind.RETAKE_EXAM:
            stmt = (
                stmt.add_columns(
                    Course.course_name.label("course_name"),
                    Exam.exam_name.label("exam_name"),
                )
                .join(Exam, Exam.id == RetakeExamRegistration.exam_id)
                .join(Course, Course.id == Exam.course_id)
            )
        else:
            stmt = stmt.add_columns(Course.course_name.label("course_name")).join(
                Course, Course.id == RetakeCourseRegistration.course_id
            )
        return stmt

    def _to_view(self, row: Row[Any]) -> RegistrationView:
        registration = row[0]
        columns = row._mapping
        return RegistrationView(
            id=registration.id,
            kind=self.kind,
            student_id=registration.student_id,
            student_name=columns["student_name"],
            target_id=getattr(registration, self._target_attr),
            course_name=columns["course_name"],
            status=RegistrationStatus(registration.status),
            requested_at=registration.requested_at,
            class_name=columns.get("class_name"),
            exam_name=columns.get("exam_name"),
            previous_grade=getattr(registration, "previous_grade", None),
            reason=getattr(registration, "reason", None),
        )

    def list_by_status(self, status: RegistrationStatus | None = None) -> list[RegistrationView]:
        """List registrations of this kind, optionally filtered by status.

        Args:
            status: Only return rows in this status (None = all rows)

        Returns:
            Registrations with display names, ordered by id ascending
        """

        def operation(session: Session) -> list[RegistrationView]:
            stmt = self._view_query()
            if status is not None:
                stmt = stmt.where(self.model.status == status.value)
            stmt = stmt.order_by(self.model.id.asc())
            return [self._to_view(row) for row in session.execute(stmt)]

        return self._run("listing", operation)

    def get(self, registration_id: int) -> RegistrationView:
        """Get one registration by ID.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist
        """

        def operation(session: Session) -> RegistrationView:
            stmt = self._view_query().where(self.model.id == registration_id)
            row = session.execute(stmt).one_or_none()
            if row is None:
                raise RegistrationNotFoundError(self.kind, registration_id)
            return self._to_view(row)

        return self._run("loading", operation)

    def set_status(
        self,
        registration_id: int,
        new_status: RegistrationStatus,
        expected_status: RegistrationStatus | None = None,
    ) -> bool:
        """Update the status of a single row.

        With ``expected_status`` the update is conditional on the row still
        holding that status, so concurrent writers cannot both succeed.

        Args:
            registration_id: The registration's ID
            new_status: Status to write
            expected_status: Status the row must currently hold (optional)

        Returns:
            True if the row was updated, False if expected_status did not match

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist
            StoreError: If the connection drops during the commit
        """
        model = self.model

        def operation(session: Session) -> bool:
            stmt = update(model).where(model.id == registration_id)
            if expected_status is not None:
                stmt = stmt.where(model.status == expected_status.value)
            stmt = stmt.values(status=new_status.value).execution_options(
                synchronize_session=False
            )
            result = session.execute(stmt)
            if result.rowcount == 1:
                # Not retried: the commit may have landed before the connection dropped
                try:
                    session.commit()
                except OperationalError as e:
                    logger.error(
                        "Lost store connection committing %s registration %d: %s",
                        self.kind,
                        registration_id,
                        e,
                    )
                    raise StoreError(
                        f"Store connection lost while committing {self.kind} "
                        f"registration {registration_id}; outcome unknown"
                    ) from e
                return True

            session.rollback()
            exists = session.execute(select(model.id).where(model.id == registration_id)).first()
            if exists is None:
                raise RegistrationNotFoundError(self.kind, registration_id)
            return False

        return self._run("updating", operation)

    def count_by_status(self) -> StatusCounts:
        """Count registrations of this kind per status."""

        def operation(session: Session) -> StatusCounts:
            stmt = select(self.model.status, func.count(self.model.id)).group_by(
                self.model.status
            )
            counts = {status: total for status, total in session.execute(stmt)}
            return StatusCounts(
                kind=self.kind,
                pending=counts.get(RegistrationStatus.PENDING.value, 0),
                approved=counts.get(RegistrationStatus.APPROVED.value, 0),
                rejected=counts.get(RegistrationStatus.REJECTED.value, 0),
            )

        return self._run("counting", operation)

    def create(
        self,
        student_id: int,
        target_id: int,
        previous_grade: str | None = None,
        reason: str | None = None,
    ) -> RegistrationView:
        """Submit a new pending registration.

        Args:
            student_id: The requesting student's user ID
            target_id: Class ID, exam ID or course ID depending on kind
            previous_grade: Earlier grade (retake kinds only)
            reason: Justification (retake kinds only)

        Returns:
            The created registration

        Raises:
            CatalogEntryNotFoundError: If the student or target doesn't exist
        """

        def operation(session: Session) -> int:
            if session.get(User, student_id) is None:
                raise CatalogEntryNotFoundError(f"Student {student_id} not found")
            if session.get(self._target_model, target_id) is None:
                raise CatalogEntryNotFoundError(
                    f"{self._target_model.__tablename__} entry {target_id} not found"
                )

            fields: dict[str, Any] = {"student_id": student_id, self._target_attr: target_id}
            if self.kind is not RegistrationKind.COURSE:
                fields["previous_grade"] = previous_grade
                fields["reason"] = reason or ""
            registration = self.model(**fields)
            session.add(registration)
            session.commit()
            return registration.id

        registration_id = self._run("creating", operation)
        logger.debug("Created %s registration %d", self.kind, registration_id)
        return self.get(registration_id)
