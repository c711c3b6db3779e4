"""
CSV export of student records.

Format (one row per student):
    ID,First Name,Last Name,Email,Age,GPA,Major,Phone,Enrollment Date,Academic Status
Text fields are double-quoted, GPA is written with two decimals and a
missing enrollment date becomes an empty quoted field.
"""

import csv
import os
import time
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from student_manager import config
from student_manager.models.student import Student
from student_manager.logging_config import get_logger, log_with_context

logger = get_logger("export")

EXPORT_HEADER = [
    "ID", "First Name", "Last Name", "Email", "Age", "GPA",
    "Major", "Phone", "Enrollment Date", "Academic Status",
]


def default_export_filename(now: datetime = None) -> str:
    """Suggested file name, e.g. students_20240115_093000.csv"""
    now = now or datetime.now()
    return "students_{}.csv".format(now.strftime("%Y%m%d_%H%M%S"))


def student_to_row(student: Student) -> list:
    """
    Build one CSV row. Numbers stay numeric so QUOTE_NONNUMERIC leaves
    them bare; GPA goes through Decimal to keep exactly two decimals.
    """
    enrolled = student.enrollment_date.strftime(config.DATE_FORMAT) if student.enrollment_date else ""
    return [
        student.id,
        student.first_name or "",
        student.last_name or "",
        student.email or "",
        student.age_or_zero(),
        Decimal("{:.2f}".format(student.gpa_or_zero())),
        student.major or "",
        student.phone_number or "",
        enrolled,
        student.academic_status,
    ]


def write_students_csv(students: Iterable[Student], stream) -> int:
    """
    Write the header and one row per student to an open text stream.

    Returns:
        Number of student rows written
    """
    # The header is written bare; QUOTE_NONNUMERIC would quote it
    stream.write(",".join(EXPORT_HEADER) + "\n")
    writer = csv.writer(stream, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    count = 0
    for student in students:
        writer.writerow(student_to_row(student))
        count += 1
    return count


def export_students_csv(students: Iterable[Student], path) -> int:
    """
    Export students to a CSV file at `path`, overwriting it.

    Returns:
        Number of student rows written
    """
    start_time = time.time()
    with open(path, "w", newline="", encoding="utf-8") as f:
        count = write_students_csv(students, f)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO", "Students exported to {}".format(os.path.abspath(path)),
                     extra_data={"rows": count, "duration_ms": round(duration_ms, 2)})
    return count
