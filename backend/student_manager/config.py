"""
Configuration constants for the student manager.

Domain rules (valid ranges, thresholds, patterns) and the list of majors
offered by the entry forms live here so policy changes touch one file.
"""

import os

# =============================================================================
# FIELD RANGES
# =============================================================================

MIN_AGE = 16
MAX_AGE = 100

MIN_GPA = 0.0
MAX_GPA = 4.0

# GPA is stored rounded to this many decimal places
GPA_DECIMALS = 2


# =============================================================================
# DERIVED ATTRIBUTE THRESHOLDS
# =============================================================================

HONOR_GPA_THRESHOLD = 3.5

GRADUATION_MIN_GPA = 2.0
GRADUATION_MIN_AGE = 18

SCHOLARSHIP_MIN_GPA = 3.5
SCHOLARSHIP_MAX_AGE = 25

# Evaluated top-down, first matching inclusive lower bound wins
ACADEMIC_STATUS_TIERS = [
    (3.7, "Summa Cum Laude"),
    (3.5, "Magna Cum Laude"),
    (3.3, "Cum Laude"),
    (3.0, "Dean's List"),
    (2.0, "Good Standing"),
]
ACADEMIC_PROBATION = "Academic Probation"


# =============================================================================
# PATTERNS
# =============================================================================

EMAIL_PATTERN = r"^[A-Za-z0-9+_.-]+@(.+)$"
PHONE_PATTERN = r"^\+?[1-9]?[0-9]{7,15}$"

DATE_FORMAT = "%Y-%m-%d"


# =============================================================================
# MAJORS
# =============================================================================
# Offered as choices when entering a student. The record model does not
# enforce membership; STUDENT_MAJORS (comma-separated) overrides the list.

DEFAULT_MAJORS = [
    "Computer Science", "Mathematics", "Physics", "Biology", "Chemistry",
    "History", "English", "Psychology", "Economics", "Business Administration",
    "Engineering", "Medicine", "Law", "Art", "Music", "Philosophy",
    "Political Science", "Sociology", "Anthropology", "Environmental Science",
]

ALL_MAJORS_LABEL = "All Majors"


def available_majors() -> list:
    """Return the configured majors, honouring the STUDENT_MAJORS override."""
    override = os.getenv("STUDENT_MAJORS")
    if override:
        majors = [m.strip() for m in override.split(",") if m.strip()]
        if majors:
            return majors
    return list(DEFAULT_MAJORS)
