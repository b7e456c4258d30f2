"""SQLAlchemy models for the registration store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


class RegistrationStatus(StrEnum):
    """Registration status enum."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        """Approved and rejected registrations are never decided again."""
        return self is not RegistrationStatus.PENDING

    @classmethod
    def parse(cls, value: str | None) -> RegistrationStatus | None:
        """Parse a status filter case-insensitively.

        Returns None for empty or unrecognized values.
        """
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Decision(StrEnum):
    """Outcome an approver can apply to a pending registration."""

    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def status(self) -> RegistrationStatus:
        """Status the registration ends up in."""
        return RegistrationStatus(self.value)


class RegistrationKind(StrEnum):
    """Registration kinds, valued by their URL slug."""

    COURSE = "course-registrations"
    RETAKE_EXAM = "retake-exams"
    RETAKE_COURSE = "retake-courses"


class UserRole(StrEnum):
    """Role of a user record."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """User model - students, teachers and administrators."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        name: str,
        email: str,
        role: str = UserRole.STUDENT.value,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.name = name
        self.email = email
        self.role = role

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, name={self.name!r}, role={self.role!r})>"


class Course(Base):
    """Course model - a subject offered by the department."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        course_code: str,
        course_name: str,
        credits: int = 3,
        description: str = "",
        is_active: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.course_code = course_code
        self.course_name = course_name
        self.credits = credits
        self.description = description
        self.is_active = is_active

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, course_code={self.course_code!r})>"


class TrainingClass(Base):
    """Class model - a scheduled group of a course."""

    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id"), nullable=False)
    class_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(self, course_id: int, class_name: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.course_id = course_id
        self.class_name = class_name

    def __repr__(self) -> str:
        return f"<TrainingClass(id={self.id!r}, class_name={self.class_name!r})>"


class Exam(Base):
    """Exam model - an examination of a course."""

    __tablename__ = "exams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id"), nullable=False)
    exam_name: Mapped[str] = mapped_column(String(255), nullable=False)
    exam_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def __init__(
        self,
        course_id: int,
        exam_name: str,
        exam_date: datetime | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.course_id = course_id
        self.exam_name = exam_name
        self.exam_date = exam_date

    def __repr__(self) -> str:
        return f"<Exam(id={self.id!r}, exam_name={self.exam_name!r})>"


class CourseRegistration(Base):
    """Course registration - a student asking to join a class."""

    __tablename__ = "course_registrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    class_id: Mapped[int] = mapped_column(Integer, ForeignKey("classes.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(self, student_id: int, class_id: int, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.class_id = class_id
        self.status = RegistrationStatus.PENDING.value

    def __repr__(self) -> str:
        return f"<CourseRegistration(id={self.id!r}, status={self.status!r})>"


class RetakeExamRegistration(Base):
    """Retake exam registration - a student asking to sit an exam again."""

    __tablename__ = "retake_exam_registrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    exam_id: Mapped[int] = mapped_column(Integer, ForeignKey("exams.id"), nullable=False)
    previous_grade: Mapped[str | None] = mapped_column(String(10), nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        student_id: int,
        exam_id: int,
        previous_grade: str | None = None,
        reason: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.exam_id = exam_id
        self.previous_grade = previous_grade
        self.reason = reason
        self.status = RegistrationStatus.PENDING.value

    def __repr__(self) -> str:
        return f"<RetakeExamRegistration(id={self.id!r}, status={self.status!r})>"


class RetakeCourseRegistration(Base):
    """Retake course registration - a student asking to repeat a course."""

    __tablename__ = "retake_course_registrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id"), nullable=False)
    previous_grade: Mapped[str | None] = mapped_column(String(10), nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        student_id: int,
        course_id: int,
        previous_grade: str | None = None,
        reason: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_id = course_id
        self.previous_grade = previous_grade
        self.reason = reason
        self.status = RegistrationStatus.PENDING.value

    def __repr__(self) -> str:
        return f"<RetakeCourseRegistration(id={self.id!r}, status={self.status!r})>"


@dataclass(frozen=True)
class RegistrationView:
    """A registration joined with the names shown in the approval lists.

    Attributes:
        id: Registration ID, unique within its kind.
        kind: Which registration table the row lives in.
        student_id: The requesting student.
        student_name: Display name of the student.
        target_id: Class ID, exam ID or course ID depending on kind.
        course_name: Name of the course the request concerns.
        class_name: Class name (course registrations only).
        exam_name: Exam name (retake exam registrations only).
        previous_grade: Grade obtained before (retake kinds only).
        reason: Student's justification (retake kinds only).
        status: Current registration status.
        requested_at: When the registration was submitted.
    """

    id: int
    kind: RegistrationKind
    student_id: int
    student_name: str
    target_id: int
    course_name: str
    status: RegistrationStatus
    requested_at: datetime
    class_name: str | None = None
    exam_name: str | None = None
    previous_grade: str | None = None
    reason: str | None = None


@dataclass
class StatusCounts:
    """Number of registrations per status for one kind."""

    kind: RegistrationKind
    pending: int
    approved: int
    rejected: int

    @property
    def total(self) -> int:
        return self.pending + self.approved + self.rejected
