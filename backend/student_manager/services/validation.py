"""
Validation Service - field-level and cross-field checks for student records.

Rules are evaluated in form order and failures accumulate, so a single
submission reports every problem at once:
1. first name required
2. last name required
3. email required / well-formed / not used by another student
4. major required
5. enrollment date required / not in the future
6. age within 16-100
7. GPA within 0.0-4.0
8. phone number well-formed (only when provided)

Email is the exception to accumulation: only the first failing email
check is reported. Invalid input never raises here; the returned
ValidationResult is the only output channel.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from numbers import Integral, Real
from typing import Optional, Protocol

from student_manager import config
from student_manager.models.student import Student
from student_manager.logging_config import get_logger, log_with_context

logger = get_logger("validation")

_EMAIL_RE = re.compile(config.EMAIL_PATTERN)
_PHONE_RE = re.compile(config.PHONE_PATTERN)

# ──────────────────────────────────────────────────────────────
# Failure codes and the short per-field markers shown beside inputs
# ──────────────────────────────────────────────────────────────
REQUIRED = "required"
INVALID_FORMAT = "invalid format"
ALREADY_EXISTS = "already exists"
FUTURE_DATE = "cannot be a future date"
INVALID_RANGE = "invalid range"
INVALID = "invalid"

FIELD_MARKERS = {
    REQUIRED: "Required",
    INVALID_FORMAT: "Invalid format",
    ALREADY_EXISTS: "Already exists",
    FUTURE_DATE: "Cannot be future date",
    INVALID_RANGE: "Invalid range",
    INVALID: "Invalid",
}


class EmailLookup(Protocol):
    """Anything that can answer whether an email is taken by another student."""

    def exists_by_email(self, email: str, exclude_id: Optional[int]) -> bool:
        ...


@dataclass(frozen=True)
class FieldError:
    """A single validation failure attached to one field."""
    field: str
    code: str
    message: str

    @property
    def marker(self) -> str:
        return FIELD_MARKERS.get(self.code, self.code)


@dataclass
class ValidationResult:
    """Ordered list of failures for one candidate record."""
    errors: list = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list:
        return [e.message for e in self.errors]

    def summary(self) -> str:
        """All failure messages, one per line, for a combined notice."""
        return "\n".join(self.messages)

    def field_markers(self) -> dict:
        """Map each failing field to its short marker text."""
        return {e.field: e.marker for e in self.errors}

    def for_field(self, name: str) -> list:
        return [e for e in self.errors if e.field == name]


def is_valid_email(email) -> bool:
    return bool(email) and _EMAIL_RE.fullmatch(email) is not None


def is_valid_phone(phone) -> bool:
    """Empty phone numbers are valid; the field is optional."""
    if phone is None or not phone.strip():
        return True
    return _PHONE_RE.fullmatch(phone.strip()) is not None


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


# ── Individual rules ─────────────────────────────────────────
# Each rule returns a list of FieldError (empty when the field is fine).

def _check_first_name(student, store, today):
    if _is_blank(student.first_name):
        return [FieldError("first_name", REQUIRED, "First name is required")]
    return []


def _check_last_name(student, store, today):
    if _is_blank(student.last_name):
        return [FieldError("last_name", REQUIRED, "Last name is required")]
    return []


def _check_email(student, store, today):
    email = student.email
    if _is_blank(email):
        return [FieldError("email", REQUIRED, "Email is required")]
    email = email.strip().lower()
    if not is_valid_email(email):
        return [FieldError("email", INVALID_FORMAT, "Email format is invalid")]
    if store is not None and store.exists_by_email(email, student.id):
        return [FieldError("email", ALREADY_EXISTS, "Email already exists")]
    return []


def _check_major(student, store, today):
    if _is_blank(student.major):
        return [FieldError("major", REQUIRED, "Major is required")]
    return []


def _check_enrollment_date(student, store, today):
    enrolled = student.enrollment_date
    if _is_blank(enrolled):
        return [FieldError("enrollment_date", REQUIRED, "Enrollment date is required")]
    if isinstance(enrolled, datetime) or not isinstance(enrolled, date):
        return [FieldError("enrollment_date", INVALID, "Enrollment date is invalid")]
    if enrolled > today:
        return [FieldError("enrollment_date", FUTURE_DATE, "Enrollment date cannot be in the future")]
    return []


def _check_age(student, store, today):
    age = student.age
    if isinstance(age, bool) or not isinstance(age, Integral):
        return [FieldError("age", INVALID, "Age is invalid")]
    if not config.MIN_AGE <= age <= config.MAX_AGE:
        return [FieldError("age", INVALID_RANGE,
                           "Age must be between {} and {}".format(config.MIN_AGE, config.MAX_AGE))]
    return []


def _check_gpa(student, store, today):
    gpa = student.gpa
    if isinstance(gpa, bool) or not isinstance(gpa, Real) or gpa != gpa:
        return [FieldError("gpa", INVALID, "GPA is invalid")]
    if not config.MIN_GPA <= gpa <= config.MAX_GPA:
        return [FieldError("gpa", INVALID_RANGE,
                           "GPA must be between {} and {}".format(config.MIN_GPA, config.MAX_GPA))]
    return []


def _check_phone_number(student, store, today):
    if not is_valid_phone(student.phone_number):
        return [FieldError("phone_number", INVALID_FORMAT, "Phone number format is invalid")]
    return []


# Form order; this is also the order failures are reported in
RULES = [
    ("first_name", _check_first_name),
    ("last_name", _check_last_name),
    ("email", _check_email),
    ("major", _check_major),
    ("enrollment_date", _check_enrollment_date),
    ("age", _check_age),
    ("gpa", _check_gpa),
    ("phone_number", _check_phone_number),
]

VALIDATED_FIELDS = [name for name, _ in RULES]


def validate_student(student: Student, store: Optional[EmailLookup],
                     today: date = None) -> ValidationResult:
    """
    Run every rule against a candidate record.

    Args:
        student: The draft or edit copy to check
        store: Email lookup used for the uniqueness rule; the candidate's
               own id is excluded so an unchanged email passes on edit
        today: Reference date for the future-date rule (defaults to today)

    Returns:
        ValidationResult holding every failure in form order
    """
    today = today or date.today()
    result = ValidationResult()
    for _, rule in RULES:
        result.errors.extend(rule(student, store, today))

    if result.is_valid:
        log_with_context(logger, "DEBUG", "Student passed validation",
                         context={"student_id": student.id, "email": student.email})
    else:
        log_with_context(logger, "INFO",
            "Student failed validation with {} error(s)".format(len(result.errors)),
            context={"student_id": student.id, "email": student.email},
            extra_data={"fields": [e.field for e in result.errors]})
    return result


def validate_field(student: Student, field_name: str, store: Optional[EmailLookup] = None,
                   today: date = None) -> ValidationResult:
    """
    Run the rule for a single field, as an entry form does when focus leaves it.

    Raises:
        KeyError: if `field_name` has no validation rule
    """
    rules = dict(RULES)
    if field_name not in rules:
        raise KeyError(field_name)
    return ValidationResult(errors=rules[field_name](student, store, today or date.today()))
