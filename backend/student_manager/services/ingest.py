"""
Bulk import of student records (JSON files, sample data).

Processing pipeline for each raw record:
1. Parse and coerce it with the StudentPayload schema
2. Build an unsaved Student draft
3. Run the validation service (including the duplicate-email check,
   which also sees records inserted earlier in the same batch)
4. Insert valid records through the DAO
5. Collect an import summary with counts and per-record details
"""

import time
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping
from pydantic import ValidationError as PayloadError

from student_manager.schemas import StudentPayload
from student_manager.services.validation import validate_student
from student_manager.logging_config import get_logger, log_with_context

logger = get_logger("ingest")

STATUS_IMPORTED = "IMPORTED"
STATUS_REJECTED = "REJECTED"
STATUS_ERROR = "ERROR"


@dataclass
class ImportSummary:
    """Outcome of one import run."""
    total_received: int = 0
    imported: int = 0
    rejected: int = 0
    errors: int = 0
    details: list = field(default_factory=list)


def _describe_payload_error(exc: PayloadError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()))
        parts.append("{}: {}".format(location, err.get("msg", "invalid value")))
    return "; ".join(parts)


def import_students(dao, records: Iterable[Mapping], today: date = None) -> ImportSummary:
    """
    Validate and insert a batch of raw student records.

    Args:
        dao: StudentDAO that performs the inserts and email lookups
        records: Iterable of dicts (snake_case or camelCase keys)
        today: Reference date for the enrollment-date rule

    Returns:
        ImportSummary; records are never partially applied
    """
    start_time = time.time()
    summary = ImportSummary()

    for index, raw in enumerate(records):
        summary.total_received += 1

        try:
            payload = StudentPayload.model_validate(raw)
        except PayloadError as e:
            summary.errors += 1
            summary.details.append({
                "index": index,
                "status": STATUS_ERROR,
                "reason": _describe_payload_error(e),
            })
            log_with_context(logger, "WARNING", "Could not parse record {}".format(index),
                             extra_data={"error": str(e)})
            continue

        student = payload.to_student()
        result = validate_student(student, dao, today=today)
        if not result.is_valid:
            summary.rejected += 1
            summary.details.append({
                "index": index,
                "email": student.email,
                "status": STATUS_REJECTED,
                "reason": result.messages,
            })
            continue

        student_id = dao.insert(student)
        if student_id is None:
            summary.errors += 1
            summary.details.append({
                "index": index,
                "email": student.email,
                "status": STATUS_ERROR,
                "reason": "Failed to save student",
            })
            continue

        summary.imported += 1
        summary.details.append({
            "index": index,
            "student_id": student_id,
            "email": student.email,
            "status": STATUS_IMPORTED,
        })

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Import complete: {} imported, {} rejected, {} errors".format(
            summary.imported, summary.rejected, summary.errors),
        extra_data={"duration_ms": round(duration_ms, 2), "total_records": summary.total_received})
    return summary
