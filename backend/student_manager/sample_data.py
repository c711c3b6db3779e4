"""
Sample students inserted into an empty database so a fresh install has
something to browse.
"""

from student_manager.services.ingest import import_students, ImportSummary
from student_manager.logging_config import get_logger, log_with_context

logger = get_logger("db")

SAMPLE_STUDENTS = [
    {"first_name": "John", "last_name": "Doe", "email": "john.doe@university.edu", "age": 20,
     "gpa": 3.7, "major": "Computer Science", "phone_number": "+1234567890", "enrollment_date": "2022-09-01"},
    {"first_name": "Jane", "last_name": "Smith", "email": "jane.smith@university.edu", "age": 19,
     "gpa": 3.9, "major": "Mathematics", "phone_number": "+1234567891", "enrollment_date": "2023-09-01"},
    {"first_name": "Mike", "last_name": "Johnson", "email": "mike.johnson@university.edu", "age": 21,
     "gpa": 3.2, "major": "Physics", "phone_number": "+1234567892", "enrollment_date": "2021-09-01"},
    {"first_name": "Sarah", "last_name": "Williams", "email": "sarah.williams@university.edu", "age": 20,
     "gpa": 3.8, "major": "Biology", "phone_number": "+1234567893", "enrollment_date": "2022-09-01"},
    {"first_name": "David", "last_name": "Brown", "email": "david.brown@university.edu", "age": 22,
     "gpa": 3.1, "major": "Chemistry", "phone_number": "+1234567894", "enrollment_date": "2020-09-01"},
    {"first_name": "Emily", "last_name": "Davis", "email": "emily.davis@university.edu", "age": 19,
     "gpa": 4.0, "major": "Computer Science", "phone_number": "+1234567895", "enrollment_date": "2023-09-01"},
    {"first_name": "Robert", "last_name": "Miller", "email": "robert.miller@university.edu", "age": 21,
     "gpa": 2.8, "major": "History", "phone_number": "+1234567896", "enrollment_date": "2021-09-01"},
    {"first_name": "Lisa", "last_name": "Wilson", "email": "lisa.wilson@university.edu", "age": 20,
     "gpa": 3.6, "major": "English", "phone_number": "+1234567897", "enrollment_date": "2022-09-01"},
]


def seed_if_empty(dao) -> ImportSummary:
    """Insert SAMPLE_STUDENTS when the students table has no rows."""
    if dao.count() > 0:
        return ImportSummary()

    log_with_context(logger, "INFO", "Inserting sample data...")
    summary = import_students(dao, SAMPLE_STUDENTS)
    dao.refresh()
    return summary
