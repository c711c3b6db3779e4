"""
Save/delete orchestration used by the front end.

A save validates first and only reaches the database when every rule
passes; records without an id are inserted, records with one are updated.
"""

from dataclasses import dataclass, field
from datetime import date

from student_manager.models.student import Student
from student_manager.services.validation import ValidationResult, validate_student
from student_manager.logging_config import get_logger, log_with_context

logger = get_logger("db")


@dataclass
class SaveResult:
    validation: ValidationResult = field(default_factory=ValidationResult)
    saved: bool = False

    @property
    def ok(self) -> bool:
        return self.validation.is_valid and self.saved


def save_student(dao, student: Student, today: date = None) -> SaveResult:
    """
    Validate `student` and persist it through `dao`.

    Returns:
        SaveResult; `saved` is False when validation failed or the
        database rejected the write
    """
    validation = validate_student(student, dao, today=today)
    if not validation.is_valid:
        return SaveResult(validation=validation, saved=False)

    if student.id is None:
        saved = dao.insert(student) is not None
    else:
        saved = dao.update(student)

    if not saved:
        log_with_context(logger, "WARNING", "Failed to save student",
                         context={"student_id": student.id, "email": student.email})
    return SaveResult(validation=validation, saved=saved)


def delete_student(dao, student: Student) -> bool:
    """
    Delete a persisted student.

    Raises:
        ValueError: if the student was never saved
    """
    if student is None or student.id is None:
        raise ValueError("Cannot delete a student that has not been saved")
    return dao.remove(student)
