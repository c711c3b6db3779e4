"""
Statistics Service - aggregate figures over student records.

Two scopes are supported and deliberately kept apart:
- compute_statistics(): a fold over an in-memory working set, e.g. the
  records left after a search or filter
- aggregate_statistics(): one SQL aggregate query over the whole table

Every aggregate over an empty set is reported as 0 rather than failing.
"""

import time
from dataclasses import dataclass
from sqlalchemy import func, case
from sqlalchemy.orm import Session

from student_manager import config
from student_manager.models.student import Student
from student_manager.logging_config import get_logger, log_with_context

logger = get_logger("stats")


@dataclass(frozen=True)
class StudentStatistics:
    """Summary figures for a set of students."""
    total_count: int = 0
    average_gpa: float = 0.0
    min_gpa: float = 0.0
    max_gpa: float = 0.0
    honor_student_count: int = 0
    average_age: float = 0.0

    @property
    def honor_student_percentage(self) -> float:
        """Share of honor students in percent, 0.0 when there are no students."""
        if self.total_count <= 0:
            return 0.0
        return self.honor_student_count * 100.0 / self.total_count

    def as_dict(self) -> dict:
        return {
            "total_count": self.total_count,
            "average_gpa": self.average_gpa,
            "min_gpa": self.min_gpa,
            "max_gpa": self.max_gpa,
            "honor_student_count": self.honor_student_count,
            "honor_student_percentage": self.honor_student_percentage,
            "average_age": self.average_age,
        }


EMPTY_STATISTICS = StudentStatistics()


def compute_statistics(students) -> StudentStatistics:
    """
    Fold a working set of students into summary statistics.

    Args:
        students: Any iterable of Student records (typically a filtered view)

    Returns:
        StudentStatistics for exactly those records
    """
    students = list(students)
    if not students:
        return EMPTY_STATISTICS

    gpas = [s.gpa_or_zero() for s in students]
    ages = [s.age_or_zero() for s in students]
    honor_count = sum(1 for s in students if s.is_honor_student)

    return StudentStatistics(
        total_count=len(students),
        average_gpa=sum(gpas) / len(gpas),
        min_gpa=min(gpas),
        max_gpa=max(gpas),
        honor_student_count=honor_count,
        average_age=sum(ages) / len(ages),
    )


def aggregate_statistics(db: Session) -> StudentStatistics:
    """
    Compute statistics over every persisted student with a single query.

    AVG/MIN/MAX return NULL on an empty table; those are reported as 0.
    """
    start_time = time.time()

    row = db.query(
        func.count(Student.id),
        func.avg(Student.gpa),
        func.min(Student.gpa),
        func.max(Student.gpa),
        func.count(case((Student.gpa >= config.HONOR_GPA_THRESHOLD, 1))),
        func.avg(Student.age),
    ).one()

    total_count, avg_gpa, min_gpa, max_gpa, honor_count, avg_age = row
    stats = StudentStatistics(
        total_count=int(total_count or 0),
        average_gpa=float(avg_gpa or 0.0),
        min_gpa=float(min_gpa or 0.0),
        max_gpa=float(max_gpa or 0.0),
        honor_student_count=int(honor_count or 0),
        average_age=float(avg_age or 0.0),
    )

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "DEBUG",
        "Aggregated statistics over {} students".format(stats.total_count),
        extra_data={"duration_ms": round(duration_ms, 2), "honor_count": stats.honor_student_count})
    return stats
