"""
Working-set filters: narrow the in-memory list the way the search box,
major selector and honor-students shortcut do.
"""

from typing import Iterable, List, Optional

from student_manager.config import ALL_MAJORS_LABEL
from student_manager.models.student import Student


def matches_search(student: Student, text: str) -> bool:
    """Case-insensitive substring match on first/last name, email and major."""
    needle = text.lower()
    return any(needle in (value or "").lower() for value in (
        student.first_name, student.last_name, student.email, student.major))


def filter_students(students: Iterable[Student], search: Optional[str] = None,
                    major: Optional[str] = None, honors_only: bool = False) -> List[Student]:
    """
    Apply search text, major and honor filters together, keeping order.

    An empty search, no major or the "All Majors" label disables that filter.
    """
    if major == ALL_MAJORS_LABEL:
        major = None

    result = []
    for student in students:
        if major and student.major != major:
            continue
        if search and not matches_search(student, search):
            continue
        if honors_only and not student.is_honor_student:
            continue
        result.append(student)
    return result
