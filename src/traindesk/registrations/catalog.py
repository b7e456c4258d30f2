"""Catalog - users, courses, classes and exams that registrations refer to."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from traindesk.registrations.exceptions import (
    CatalogEntryExistsError,
    CatalogEntryNotFoundError,
)
from traindesk.registrations.models import (
    Course,
    Exam,
    TrainingClass,
    User,
    UserRole,
)

if TYPE_CHECKING:
    from datetime import datetime

    from traindesk.registrations.database import Database


class Catalog:
    """Creates the reference rows a registration points at.

    Maintaining the catalog is peripheral CRUD; this class covers what the
    approval workflow needs to have something to decide on.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def create_student(self, name: str, email: str) -> User:
        """Create a student user.

        Raises:
            CatalogEntryExistsError: If the email is already taken
        """
        session = self._db.get_session()
        try:
            user = User(name=name, email=email, role=UserRole.STUDENT.value)
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
        except IntegrityError as e:
            session.rollback()
            raise CatalogEntryExistsError(f"User with email '{email}' already exists") from e
        finally:
            session.close()

    def create_course(
        self,
        course_code: str,
        course_name: str,
        credits: int = 3,
        description: str = "",
    ) -> Course:
        """Create a course.

        Raises:
            CatalogEntryExistsError: If the course code is already taken
        """
        session = self._db.get_session()
        try:
            course = Course(
                course_code=course_code,
                course_name=course_name,
                credits=credits,
                description=description,
            )
            session.add(course)
            session.commit()
            session.refresh(course)
            return course
        except IntegrityError as e:
            session.rollback()
            raise CatalogEntryExistsError(f"Course '{course_code}' already exists") from e
        finally:
            session.close()

    def create_class(self, course_id: int, class_name: str) -> TrainingClass:
        """Create a class of an existing course.

        Raises:
            CatalogEntryNotFoundError: If the course doesn't exist
        """
        session = self._db.get_session()
        try:
            if session.get(Course, course_id) is None:
                raise CatalogEntryNotFoundError(f"Course {course_id} not found")
            training_class = TrainingClass(course_id=course_id, class_name=class_name)
            session.add(training_class)
            session.commit()
            session.refresh(training_class)
            return training_class
        finally:
            session.close()

    def create_exam(
        self,
        course_id: int,
        exam_name: str,
        exam_date: datetime | None = None,
    ) -> Exam:
        """Create an exam of an existing course.

        Raises:
            CatalogEntryNotFoundError: If the course doesn't exist
        """
        session = self._db.get_session()
        try:
            if session.get(Course, course_id) is None:
                raise CatalogEntryNotFoundError(f"Course {course_id} not found")
            exam = Exam(course_id=course_id, exam_name=exam_name, exam_date=exam_date)
            session.add(exam)
            session.commit()
            session.refresh(exam)
            return exam
        finally:
            session.close()
