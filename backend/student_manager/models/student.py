"""
Student model - the single record type managed by the application.

Text fields are normalized on every write (trimmed, email lowercased) and
GPA is rounded to two decimals on every write. Derived attributes such as
academic status or honor standing are read-only properties computed from
the current field values and never stored.

Range checks on age and GPA are NOT done here: a record may hold
out-of-range values until the validation service rejects it.
"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from sqlalchemy import Column, Integer, Float, Text, Date, Index
from sqlalchemy.orm import validates

from student_manager import config
from student_manager.database import Base

_GPA_QUANTUM = Decimal(1).scaleb(-config.GPA_DECIMALS)


def round_gpa(value):
    """
    Round a GPA half-up to two decimals on its decimal representation.

    3.455 -> 3.46, 3.444 -> 3.44. Values that are not numbers are
    returned unchanged so validation can report them.

    This differs from floor(x * 100 + 0.5) / 100 on binary floats: 1.005
    rounds to 1.01 here (1.0 with the float formula) and negative halves
    round away from zero (-1.005 -> -1.01, not -1.0).
    """
    if value is None or isinstance(value, bool):
        return value
    try:
        rounded = Decimal(str(value)).quantize(_GPA_QUANTUM, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return value
    return float(rounded)


def _clean_text(value):
    return value.strip() if value is not None else ""


def _coerce_date(value):
    # Unparseable values are kept so validation can report them.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), config.DATE_FORMAT).date()
        except ValueError:
            return value
    return value


def whole_years_between(start: date, end: date) -> int:
    """Completed years from `start` to `end` (negative if `end` is earlier)."""
    years = end.year - start.year
    if years > 0 and (end.month, end.day) < (start.month, start.day):
        years -= 1
    elif years < 0 and (end.month, end.day) > (start.month, start.day):
        years += 1
    return years


class Student(Base):
    """
    SQLAlchemy model for the students table.

    Identity is the primary key alone: two Student objects compare equal
    when their ids match, whatever their other fields hold. Drafts that
    have never been saved carry id=None, are equal only to themselves and
    are unhashable until the store assigns an id.
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="Store-assigned identifier, None until inserted")
    first_name = Column(Text, nullable=False,
                        doc="Given name, trimmed")
    last_name = Column(Text, nullable=False,
                       doc="Family name, trimmed")
    email = Column(Text, nullable=False, unique=True,
                   doc="Lowercased email address, unique across all students")
    age = Column(Integer, nullable=False,
                 doc="Age in years, valid range 16-100")
    gpa = Column(Float, nullable=False,
                 doc="Grade point average rounded to 2 decimals, valid range 0.0-4.0")
    major = Column(Text, nullable=False,
                   doc="Declared major")
    phone_number = Column(Text, nullable=True,
                          doc="Optional international phone number")
    enrollment_date = Column(Date, nullable=False,
                             doc="Date the student enrolled (stored as YYYY-MM-DD)")

    # Indexes for search and filter queries
    __table_args__ = (
        Index("idx_student_email", "email"),
        Index("idx_student_name", "last_name", "first_name"),
        Index("idx_student_major", "major"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("first_name", "")
        kwargs.setdefault("last_name", "")
        kwargs.setdefault("email", "")
        kwargs.setdefault("age", 0)
        kwargs.setdefault("gpa", 0.0)
        kwargs.setdefault("major", "")
        kwargs.setdefault("phone_number", "")
        kwargs.setdefault("enrollment_date", None)
        super().__init__(**kwargs)

    # ── Normalization ─────────────────────────────────────────

    @validates("first_name", "last_name", "major", "phone_number")
    def _normalize_text(self, key, value):
        return _clean_text(value)

    @validates("email")
    def _normalize_email(self, key, value):
        return _clean_text(value).lower()

    @validates("gpa")
    def _normalize_gpa(self, key, value):
        return round_gpa(value)

    @validates("enrollment_date")
    def _normalize_enrollment_date(self, key, value):
        return _coerce_date(value)

    # ── Derived attributes ────────────────────────────────────

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}"

    @property
    def is_honor_student(self) -> bool:
        return self.gpa_or_zero() >= config.HONOR_GPA_THRESHOLD

    @property
    def is_valid_for_graduation(self) -> bool:
        return (self.gpa_or_zero() >= config.GRADUATION_MIN_GPA
                and self.age_or_zero() >= config.GRADUATION_MIN_AGE)

    @property
    def is_eligible_for_scholarship(self) -> bool:
        return (self.gpa_or_zero() >= config.SCHOLARSHIP_MIN_GPA
                and self.age_or_zero() <= config.SCHOLARSHIP_MAX_AGE)

    @property
    def academic_status(self) -> str:
        """Academic standing tier derived from GPA; never fails."""
        gpa = self.gpa_or_zero()
        for threshold, status in config.ACADEMIC_STATUS_TIERS:
            if gpa >= threshold:
                return status
        return config.ACADEMIC_PROBATION

    @property
    def years_enrolled(self) -> int:
        return self.years_enrolled_as_of(date.today())

    def years_enrolled_as_of(self, today: date) -> int:
        """Whole years between the enrollment date and `today` (0 if unset or unparseable)."""
        if not isinstance(self.enrollment_date, date):
            return 0
        return whole_years_between(self.enrollment_date, today)

    def gpa_or_zero(self) -> float:
        try:
            return float(self.gpa) if self.gpa is not None else 0.0
        except (TypeError, ValueError):
            return 0.0

    def age_or_zero(self) -> int:
        try:
            return int(self.age) if self.age is not None else 0
        except (TypeError, ValueError):
            return 0

    # ── Identity ──────────────────────────────────────────────

    def copy(self) -> "Student":
        """
        Return a detached edit copy carrying the same id.

        Edits go to the copy; the original stays untouched until the
        store confirms the update.
        """
        return Student(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            age=self.age,
            gpa=self.gpa,
            major=self.major,
            phone_number=self.phone_number,
            enrollment_date=self.enrollment_date,
        )

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Student):
            return NotImplemented
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self):
        # The id is assigned on insert, so a draft has no stable hash.
        if self.id is None:
            raise TypeError("Student instances without an id are unhashable")
        return hash(self.id)

    def __repr__(self):
        return "<Student(id={}, name='{}', email='{}', gpa={:.2f}, major='{}')>".format(
            self.id, self.full_name, self.email, self.gpa_or_zero(), self.major)
