"""Unit tests for Catalog."""

import pytest

from traindesk.registrations import (
    Catalog,
    CatalogEntryExistsError,
    CatalogEntryNotFoundError,
    Database,
)


@pytest.fixture
def catalog(database: Database) -> Catalog:
    return Catalog(database)


@pytest.mark.unit
class TestCatalog:
    """Tests for catalog entry creation."""

    def test_create_student(self, catalog: Catalog) -> None:
        student = catalog.create_student("Chi Le", "chi@example.edu")

        assert student.id is not None
        assert student.role == "student"

    def test_duplicate_email_raises(self, catalog: Catalog) -> None:
        catalog.create_student("Chi Le", "chi@example.edu")

        with pytest.raises(CatalogEntryExistsError, match="chi@example.edu"):
            catalog.create_student("Another Chi", "chi@example.edu")

    def test_create_course_defaults(self, catalog: Catalog) -> None:
        course = catalog.create_course("MA201", "Linear Algebra")

        assert course.credits == 3
        assert course.description == ""
        assert course.is_active is True

    def test_duplicate_course_code_raises(self, catalog: Catalog) -> None:
        catalog.create_course("MA201", "Linear Algebra")

        with pytest.raises(CatalogEntryExistsError, match="MA201"):
            catalog.create_course("MA201", "Linear Algebra II")

    def test_create_class_and_exam(self, catalog: Catalog) -> None:
        course = catalog.create_course("MA201", "Linear Algebra")

        training_class = catalog.create_class(course.id, "MA201-B")
        exam = catalog.create_exam(course.id, "MA201 Midterm")

        assert training_class.course_id == course.id
        assert exam.course_id == course.id
        assert exam.exam_date is None

    def test_class_for_missing_course_raises(self, catalog: Catalog) -> None:
        with pytest.raises(CatalogEntryNotFoundError):
            catalog.create_class(404, "Nowhere")

    def test_exam_for_missing_course_raises(self, catalog: Catalog) -> None:
        with pytest.raises(CatalogEntryNotFoundError):
            catalog.create_exam(404, "Nothing")
