"""
Student data access - persistence plus the in-memory working set.

StudentDAO owns two things that must never drift apart:
1. the `students` table, reached through a SQLAlchemy session factory
2. `students`, the in-memory list the front end displays

Writes go to the database first. The working set is only changed after the
database reports success, and each operation is attempted exactly once.
Database errors are logged and reported as None/False to the caller.
"""

import time
from typing import List, Optional
from sqlalchemy import or_, func
from sqlalchemy.exc import SQLAlchemyError

from student_manager import config
from student_manager.database import session_scope
from student_manager.models.student import Student
from student_manager.services.statistics import StudentStatistics, EMPTY_STATISTICS, aggregate_statistics
from student_manager.logging_config import get_logger, log_with_context

logger = get_logger("db")

_NAME_ORDER = (Student.last_name, Student.first_name)


def _escape_like(term: str) -> str:
    # LIKE wildcards in a search term match literally.
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class StudentDAO:
    """
    Data access handle for student records.

    Args:
        session_factory: A sessionmaker created by database.create_session_factory
        load: Populate the working set from the store on construction
    """

    def __init__(self, session_factory, load: bool = True):
        self._session_factory = session_factory
        self.students: List[Student] = []
        if load:
            self.refresh()

    # ── Working set ───────────────────────────────────────────

    def list(self) -> List[Student]:
        """The current working set: loaded in name order, records inserted since appended."""
        return self.students

    def refresh(self) -> List[Student]:
        """Reload the working set from the database."""
        start_time = time.time()
        try:
            with session_scope(self._session_factory) as db:
                loaded = db.query(Student).order_by(*_NAME_ORDER).all()
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error loading students from database: {}".format(e),
                             exc_info=e)
            return self.students

        self.students[:] = loaded
        duration_ms = (time.time() - start_time) * 1000
        log_with_context(logger, "INFO", "Loaded {} students from database".format(len(loaded)),
                         extra_data={"duration_ms": round(duration_ms, 2)})
        return self.students

    def get(self, student_id: int) -> Optional[Student]:
        """Fetch one student straight from the database."""
        try:
            with session_scope(self._session_factory) as db:
                return db.get(Student, student_id)
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error fetching student: {}".format(e),
                             context={"student_id": student_id}, exc_info=e)
            return None

    def majors(self) -> List[str]:
        """Distinct majors present in the working set, sorted."""
        return sorted({s.major for s in self.students if s.major})

    # ── Writes ────────────────────────────────────────────────

    def insert(self, student: Student) -> Optional[int]:
        """
        Insert a new student.

        On success the store-assigned id is set on `student`, the record is
        appended to the working set and the id is returned. On failure the
        record keeps id=None, the working set is unchanged and None is returned.
        """
        if student.id is not None:
            raise ValueError("Cannot insert a student that already has id {}".format(student.id))

        with session_scope(self._session_factory) as db:
            try:
                db.add(student)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                db.expunge_all()
                student.id = None
                log_with_context(logger, "ERROR", "Error adding student: {}".format(e),
                                 context={"email": student.email}, exc_info=e)
                return None

        self.students.append(student)
        log_with_context(logger, "INFO", "Student added successfully: {}".format(student.full_name),
                         context={"student_id": student.id, "email": student.email})
        return student.id

    def update(self, student: Student) -> bool:
        """
        Write an edited student back to the database.

        The record in the working set with the same id is replaced by
        `student` only after the database confirms the change.

        Raises:
            ValueError: if the student has never been saved
        """
        if student.id is None:
            raise ValueError("Cannot update a student without an id")

        with session_scope(self._session_factory) as db:
            try:
                existing = db.get(Student, student.id)
                if existing is None:
                    log_with_context(logger, "WARNING", "Student to update no longer exists",
                                     context={"student_id": student.id})
                    return False
                for column in Student.__table__.columns.keys():
                    if column != "id":
                        setattr(existing, column, getattr(student, column))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Error updating student: {}".format(e),
                                 context={"student_id": student.id, "email": student.email}, exc_info=e)
                return False

        self._replace_in_working_set(student)
        log_with_context(logger, "INFO", "Student updated successfully: {}".format(student.full_name),
                         context={"student_id": student.id})
        return True

    def remove(self, student_or_id) -> bool:
        """
        Delete a student by record or id from both the database and the working set.

        Raises:
            ValueError: if no id is available (unsaved draft)
        """
        student_id = student_or_id.id if isinstance(student_or_id, Student) else student_or_id
        if student_id is None:
            raise ValueError("Cannot delete a student without an id")

        with session_scope(self._session_factory) as db:
            try:
                affected = db.query(Student).filter(Student.id == student_id).delete(
                    synchronize_session=False)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log_with_context(logger, "ERROR", "Error deleting student: {}".format(e),
                                 context={"student_id": student_id}, exc_info=e)
                return False

        if affected == 0:
            log_with_context(logger, "WARNING", "No student deleted, id not found",
                             context={"student_id": student_id})
            return False

        self.students[:] = [s for s in self.students if s.id != student_id]
        log_with_context(logger, "INFO", "Student deleted successfully",
                         context={"student_id": student_id})
        return True

    def _replace_in_working_set(self, student: Student):
        for index, current in enumerate(self.students):
            if current == student:
                self.students[index] = student
                return
        self.students.append(student)

    # ── Queries ───────────────────────────────────────────────

    def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """
        Check whether another student already uses `email`.

        The record with `exclude_id` is ignored so a student being edited
        does not collide with itself. A failed lookup is logged and reported
        as False; the UNIQUE constraint still guards the insert.
        """
        if not email:
            return False
        try:
            with session_scope(self._session_factory) as db:
                query = db.query(func.count(Student.id)).filter(
                    Student.email == email.strip().lower())
                if exclude_id is not None:
                    query = query.filter(Student.id != exclude_id)
                return query.scalar() > 0
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error checking email existence: {}".format(e),
                             context={"email": email}, exc_info=e)
            return False

    def search(self, term: str) -> List[Student]:
        """Students whose name, email or major contains `term` (case-insensitive)."""
        pattern = "%{}%".format(_escape_like((term or "").lower()))
        try:
            with session_scope(self._session_factory) as db:
                return db.query(Student).filter(or_(
                    Student.first_name.ilike(pattern, escape="\\"),
                    Student.last_name.ilike(pattern, escape="\\"),
                    Student.email.ilike(pattern, escape="\\"),
                    Student.major.ilike(pattern, escape="\\"),
                )).order_by(*_NAME_ORDER).all()
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error searching students: {}".format(e),
                             extra_data={"term": term}, exc_info=e)
            return []

    def by_major(self, major: str) -> List[Student]:
        """Students in `major`, best GPA first."""
        try:
            with session_scope(self._session_factory) as db:
                return db.query(Student).filter(Student.major == major).order_by(
                    Student.gpa.desc(), *_NAME_ORDER).all()
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error getting students by major: {}".format(e),
                             extra_data={"major": major}, exc_info=e)
            return []

    def honor_students(self) -> List[Student]:
        """Students with GPA >= 3.5, best GPA first."""
        try:
            with session_scope(self._session_factory) as db:
                return db.query(Student).filter(Student.gpa >= config.HONOR_GPA_THRESHOLD).order_by(
                    Student.gpa.desc(), *_NAME_ORDER).all()
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error getting honor students: {}".format(e), exc_info=e)
            return []

    def count(self) -> int:
        """Number of students in the database."""
        try:
            with session_scope(self._session_factory) as db:
                return db.query(func.count(Student.id)).scalar() or 0
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error counting students: {}".format(e), exc_info=e)
            return 0

    def aggregate_statistics(self) -> StudentStatistics:
        """Statistics over every persisted student (not just the working set)."""
        try:
            with session_scope(self._session_factory) as db:
                return aggregate_statistics(db)
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Error getting statistics: {}".format(e), exc_info=e)
            return EMPTY_STATISTICS
