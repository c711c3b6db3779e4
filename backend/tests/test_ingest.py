from datetime import date

from student_manager.sample_data import SAMPLE_STUDENTS, seed_if_empty
from student_manager.services.ingest import (
    STATUS_ERROR, STATUS_IMPORTED, STATUS_REJECTED, import_students,
)


def _record(**overrides):
    record = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@university.edu",
        "age": 20,
        "gpa": 3.9,
        "major": "Mathematics",
        "phone_number": "+1234567890",
        "enrollment_date": "2023-09-01",
    }
    record.update(overrides)
    return record


def test_valid_records_are_imported(dao, today):
    summary = import_students(dao, [_record(), _record(email="grace@university.edu")], today=today)

    assert summary.total_received == 2
    assert summary.imported == 2
    assert summary.rejected == 0
    assert summary.errors == 0
    assert [d["status"] for d in summary.details] == [STATUS_IMPORTED, STATUS_IMPORTED]
    assert dao.count() == 2
    assert len(dao.list()) == 2


def test_camel_case_keys_are_accepted(dao, today):
    record = {
        "firstName": "Carlos", "lastName": "Mendez", "email": "Carlos.Mendez@University.edu",
        "age": "23", "gpa": "3.456", "major": "Economics", "phoneNumber": "",
        "enrollmentDate": "2021-09-01",
    }
    summary = import_students(dao, [record], today=today)

    assert summary.imported == 1
    student = dao.list()[0]
    assert student.email == "carlos.mendez@university.edu"
    assert student.gpa == 3.46
    assert student.enrollment_date == date(2021, 9, 1)


def test_invalid_records_are_rejected_with_all_messages(dao, today):
    summary = import_students(dao, [_record(first_name="", age=15, phone_number="12-34")], today=today)

    assert summary.rejected == 1
    assert summary.imported == 0
    detail = summary.details[0]
    assert detail["status"] == STATUS_REJECTED
    assert detail["reason"] == [
        "First name is required",
        "Age must be between 16 and 100",
        "Phone number format is invalid",
    ]
    assert dao.count() == 0


def test_duplicate_email_within_batch_is_rejected(dao, today):
    summary = import_students(dao, [_record(), _record(email="ADA@university.edu")], today=today)

    assert summary.imported == 1
    assert summary.rejected == 1
    assert summary.details[1]["reason"] == ["Email already exists"]


def test_unparseable_record_is_an_error(dao, today):
    summary = import_students(dao, [_record(age="twenty"), _record(email="ok@university.edu")], today=today)

    assert summary.errors == 1
    assert summary.imported == 1
    assert summary.details[0]["status"] == STATUS_ERROR
    assert "age" in summary.details[0]["reason"]


def test_seed_if_empty_inserts_samples_once(dao):
    first = seed_if_empty(dao)
    assert first.imported == len(SAMPLE_STUDENTS)
    assert dao.count() == len(SAMPLE_STUDENTS)

    second = seed_if_empty(dao)
    assert second.total_received == 0
    assert dao.count() == len(SAMPLE_STUDENTS)


def test_seeded_statistics(dao):
    seed_if_empty(dao)
    stats = dao.aggregate_statistics()
    assert stats.total_count == 8
    assert stats.honor_student_count == 5
    assert stats.max_gpa == 4.0
    assert stats.min_gpa == 2.8
