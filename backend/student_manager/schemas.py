"""
Pydantic schemas for student data coming from outside the application
(JSON import files, command-line arguments).

These only coerce types. Business rules (ranges, formats, uniqueness)
belong to the validation service so every entry path reports the same
messages.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from student_manager.models.student import Student


class StudentPayload(BaseModel):
    """Schema for a single student record in an import file."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    first_name: Optional[str] = Field(None, alias="firstName", description="Given name")
    last_name: Optional[str] = Field(None, alias="lastName", description="Family name")
    email: Optional[str] = Field(None, description="Email address (lowercased on save)")
    age: int = Field(0, description="Age in years")
    gpa: float = Field(0.0, description="Grade point average on a 4.0 scale")
    major: Optional[str] = Field(None, description="Declared major")
    phone_number: Optional[str] = Field(None, alias="phoneNumber", description="Optional phone number")
    enrollment_date: Optional[date] = Field(None, alias="enrollmentDate",
                                            description="Enrollment date as YYYY-MM-DD")

    def to_student(self) -> Student:
        """Build an unsaved Student draft from this payload."""
        return Student(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            age=self.age,
            gpa=self.gpa,
            major=self.major,
            phone_number=self.phone_number,
            enrollment_date=self.enrollment_date,
        )

    def apply_to(self, student: Student) -> Student:
        """Copy the fields explicitly set on this payload onto `student`."""
        for name in self.model_fields_set:
            setattr(student, name, getattr(self, name))
        return student
