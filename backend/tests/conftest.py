from datetime import date

import pytest

from student_manager.database import create_db_engine, create_session_factory, create_tables
from student_manager.models.student import Student
from student_manager.services.student_dao import StudentDAO

TODAY = date(2025, 6, 1)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def database_url(tmp_path):
    return "sqlite:///{}".format(tmp_path / "students.db")


@pytest.fixture
def engine(database_url):
    engine = create_db_engine(database_url)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def dao(session_factory):
    return StudentDAO(session_factory)


@pytest.fixture
def make_student():
    """Build a valid, unsaved student; keyword arguments override fields."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "first_name": "Student",
            "last_name": "Number{}".format(counter["n"]),
            "email": "student{}@university.edu".format(counter["n"]),
            "age": 20,
            "gpa": 3.0,
            "major": "Computer Science",
            "phone_number": "+1234567890",
            "enrollment_date": date(2022, 9, 1),
        }
        fields.update(overrides)
        return Student(**fields)

    return _make


class FakeEmailStore:
    """In-memory stand-in for the DAO's email lookup."""

    def __init__(self, taken=None):
        # email -> id of the student using it
        self.taken = dict(taken or {})
        self.calls = []

    def exists_by_email(self, email, exclude_id):
        self.calls.append((email, exclude_id))
        owner = self.taken.get(email)
        return owner is not None and owner != exclude_id


@pytest.fixture
def email_store():
    return FakeEmailStore()
