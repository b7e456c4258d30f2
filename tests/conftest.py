"""Shared pytest fixtures and configuration."""

from dataclasses import dataclass

import pytest

from traindesk.approval import ApprovalService
from traindesk.registrations import Catalog, Database, RegistrationKind, RegistrationRepository


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


@dataclass
class Seed:
    """IDs of the catalog rows every registration test needs."""

    student_id: int
    other_student_id: int
    course_id: int
    class_id: int
    exam_id: int


def seed_catalog(database: Database) -> Seed:
    """Create two students, a course, a class and an exam."""
    catalog = Catalog(database)
    alice = catalog.create_student("Alice Nguyen", "alice@example.edu")
    bob = catalog.create_student("Bob Tran", "bob@example.edu")
    course = catalog.create_course("CS101", "Intro to Programming")
    training_class = catalog.create_class(course.id, "CS101-A")
    exam = catalog.create_exam(course.id, "CS101 Final")
    return Seed(
        student_id=alice.id,
        other_student_id=bob.id,
        course_id=course.id,
        class_id=training_class.id,
        exam_id=exam.id,
    )


def target_for(kind: RegistrationKind, seed: Seed) -> int:
    """Target ID a registration of this kind points at."""
    return {
        RegistrationKind.COURSE: seed.class_id,
        RegistrationKind.RETAKE_EXAM: seed.exam_id,
        RegistrationKind.RETAKE_COURSE: seed.course_id,
    }[kind]


@pytest.fixture
def database():
    """Create an in-memory Database with tables."""
    db = Database(":memory:")
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def seed(database: Database) -> Seed:
    """Populate the catalog."""
    return seed_catalog(database)


@pytest.fixture
def service(database: Database) -> ApprovalService:
    """Create an ApprovalService over the in-memory database."""
    return ApprovalService.from_database(database, retries=0)


@pytest.fixture
def course_repo(database: Database) -> RegistrationRepository:
    """Repository for course registrations."""
    return RegistrationRepository(database, RegistrationKind.COURSE, retries=0)


@pytest.fixture
def retake_exam_repo(database: Database) -> RegistrationRepository:
    """Repository for retake exam registrations."""
    return RegistrationRepository(database, RegistrationKind.RETAKE_EXAM, retries=0)


@pytest.fixture
def seeder():
    """Seed the catalog of another Database (e.g. a file-backed one)."""
    return seed_catalog


@pytest.fixture
def targets(seed: Seed) -> dict[RegistrationKind, int]:
    """Target ID per registration kind for the seeded catalog."""
    return {kind: target_for(kind, seed) for kind in RegistrationKind}
