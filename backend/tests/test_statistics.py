import pytest

from student_manager.models.student import Student
from student_manager.services.statistics import StudentStatistics, compute_statistics


def test_empty_working_set_reports_zeros():
    stats = compute_statistics([])
    assert stats.total_count == 0
    assert stats.average_gpa == 0.0
    assert stats.min_gpa == 0.0
    assert stats.max_gpa == 0.0
    assert stats.honor_student_count == 0
    assert stats.average_age == 0.0
    assert stats.honor_student_percentage == 0.0


def test_empty_store_reports_zeros(dao):
    stats = dao.aggregate_statistics()
    assert stats == StudentStatistics()
    assert stats.honor_student_percentage == 0.0


def test_in_memory_fold():
    students = [
        Student(id=1, gpa=3.8, age=20),
        Student(id=2, gpa=2.5, age=30),
        Student(id=3, gpa=3.5, age=22),
    ]
    stats = compute_statistics(students)
    assert stats.total_count == 3
    assert stats.average_gpa == pytest.approx((3.8 + 2.5 + 3.5) / 3)
    assert stats.min_gpa == 2.5
    assert stats.max_gpa == 3.8
    assert stats.honor_student_count == 2
    assert stats.average_age == pytest.approx(24.0)
    assert stats.honor_student_percentage == pytest.approx(200 / 3)


def test_end_to_end_aggregate(dao, make_student):
    assert dao.insert(make_student(gpa=3.8, age=20)) is not None
    assert dao.insert(make_student(gpa=2.5, age=30)) is not None

    stats = dao.aggregate_statistics()
    assert stats.total_count == 2
    assert stats.average_gpa == pytest.approx(3.15)
    assert stats.min_gpa == pytest.approx(2.5)
    assert stats.max_gpa == pytest.approx(3.8)
    assert stats.honor_student_count == 1
    assert stats.honor_student_percentage == pytest.approx(50.0)
    assert stats.average_age == pytest.approx(25.0)


def test_view_and_global_scopes_differ(dao, make_student):
    dao.insert(make_student(gpa=3.9, major="Physics"))
    dao.insert(make_student(gpa=2.1, major="History"))

    physics_only = [s for s in dao.list() if s.major == "Physics"]
    view = compute_statistics(physics_only)
    whole = dao.aggregate_statistics()

    assert view.total_count == 1
    assert view.honor_student_percentage == 100.0
    assert whole.total_count == 2
    assert whole.honor_student_percentage == 50.0


def test_as_dict_includes_percentage():
    data = StudentStatistics(total_count=4, honor_student_count=1).as_dict()
    assert data["honor_student_percentage"] == 25.0
    assert data["total_count"] == 4
