from student_manager.models.student import Student

__all__ = ["Student"]
