"""
Command-line front end for the student manager.

Usage:
    student-manager list [--search TEXT] [--major NAME] [--honors]
    student-manager show ID
    student-manager add --first-name Ada --last-name Lovelace --email ada@uni.edu \\
                        --age 20 --gpa 3.9 --major Mathematics --enrollment-date 2024-09-01
    student-manager update ID [--gpa 3.2] [...]
    student-manager delete ID
    student-manager stats [--scope view|global] [filters]
    student-manager export [PATH] [filters]
    student-manager load FILE
    student-manager majors

Global options (before the command): --database-url, --log-level, --no-seed.
Exit status is 1 when validation or a database write fails.
"""

import argparse
import json
import sys
from pydantic import ValidationError as PayloadError

from student_manager import config
from student_manager.main import create_app
from student_manager.schemas import StudentPayload
from student_manager.services.export import default_export_filename, export_students_csv
from student_manager.services.filters import filter_students
from student_manager.services.ingest import import_students
from student_manager.services.statistics import compute_statistics
from student_manager.services.student_service import save_student, delete_student
from student_manager.logging_config import get_logger, log_with_context, start_operation

logger = get_logger("cli")

# Maps CLI option dest -> StudentPayload field
STUDENT_OPTIONS = [
    ("first_name", "--first-name"),
    ("last_name", "--last-name"),
    ("email", "--email"),
    ("age", "--age"),
    ("gpa", "--gpa"),
    ("major", "--major"),
    ("phone_number", "--phone"),
    ("enrollment_date", "--enrollment-date"),
]


def _add_student_options(parser):
    for dest, flag in STUDENT_OPTIONS:
        parser.add_argument(flag, dest=dest, default=None)


def _add_filter_options(parser):
    parser.add_argument("--search", default=None, help="Match name, email or major")
    parser.add_argument("--major", default=None, help="Only this major")
    parser.add_argument("--honors", action="store_true", help="Only honor students (GPA >= 3.5)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="student-manager", description="Manage student records")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL (defaults to DATABASE_URL)")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    parser.add_argument("--no-seed", action="store_true", help="Do not insert sample data into an empty store")
    sub = parser.add_subparsers(dest="command", required=True)

    _add_filter_options(sub.add_parser("list", help="List students"))

    show = sub.add_parser("show", help="Show one student in detail")
    show.add_argument("id", type=int)

    _add_student_options(sub.add_parser("add", help="Add a student"))

    update = sub.add_parser("update", help="Edit a student")
    update.add_argument("id", type=int)
    _add_student_options(update)

    delete = sub.add_parser("delete", help="Delete a student")
    delete.add_argument("id", type=int)

    stats = sub.add_parser("stats", help="Show statistics")
    stats.add_argument("--scope", choices=["view", "global"], default="global")
    _add_filter_options(stats)

    export = sub.add_parser("export", help="Export students to CSV")
    export.add_argument("path", nargs="?", default=None)
    _add_filter_options(export)

    load = sub.add_parser("load", help="Import students from a JSON file")
    load.add_argument("file")

    sub.add_parser("majors", help="List available majors")
    return parser


def _payload_from_args(args) -> StudentPayload:
    values = {dest: getattr(args, dest) for dest, _ in STUDENT_OPTIONS
              if getattr(args, dest) is not None}
    return StudentPayload.model_validate(values)


def _working_view(dao, args):
    return filter_students(dao.list(), search=args.search, major=args.major, honors_only=args.honors)


def _find(dao, student_id):
    for student in dao.list():
        if student.id == student_id:
            return student
    return dao.get(student_id)


def format_row(student) -> str:
    return "{:>4}  {:<24} {:<32} {:>3}  {:.2f}  {:<22} {}".format(
        student.id, student.full_name, student.email, student.age_or_zero(),
        student.gpa_or_zero(), student.major, student.academic_status)


def format_details(student) -> str:
    return "\n".join([
        "ID: {}".format(student.id),
        "Name: {} {}".format(student.first_name, student.last_name),
        "Email: {}".format(student.email),
        "Phone: {}".format(student.phone_number or "Not provided"),
        "Age: {}".format(student.age),
        "Major: {}".format(student.major),
        "GPA: {:.2f}".format(student.gpa_or_zero()),
        "Academic Status: {}".format(student.academic_status),
        "Enrollment Date: {}".format(
            student.enrollment_date.strftime(config.DATE_FORMAT) if student.enrollment_date else "Not set"),
        "Years Enrolled: {}".format(student.years_enrolled),
        "Honor Student: {}".format("Yes" if student.is_honor_student else "No"),
        "Eligible for Graduation: {}".format("Yes" if student.is_valid_for_graduation else "No"),
        "Eligible for Scholarship: {}".format("Yes" if student.is_eligible_for_scholarship else "No"),
    ])


def _print_validation(result):
    print("Please correct the following errors:")
    for error in result.errors:
        print("  - {} ({})".format(error.message, error.field))


def _save(dao, student) -> int:
    result = save_student(dao, student)
    if not result.validation.is_valid:
        _print_validation(result.validation)
        return 1
    if not result.saved:
        print("Failed to save student: an error occurred while saving the student.")
        return 1
    print("Student saved successfully: {} (id {})".format(student.full_name, student.id))
    return 0


def cmd_list(dao, args) -> int:
    view = _working_view(dao, args)
    for student in view:
        print(format_row(student))
    print("{} student(s)".format(len(view)))
    return 0


def cmd_show(dao, args) -> int:
    student = _find(dao, args.id)
    if student is None:
        print("No student with id {}".format(args.id))
        return 1
    print(student.full_name)
    print(format_details(student))
    return 0


def cmd_add(dao, args) -> int:
    try:
        payload = _payload_from_args(args)
    except PayloadError as e:
        print("Invalid input: {}".format(e))
        return 1
    return _save(dao, payload.to_student())


def cmd_update(dao, args) -> int:
    current = _find(dao, args.id)
    if current is None:
        print("No student with id {}".format(args.id))
        return 1
    try:
        payload = _payload_from_args(args)
    except PayloadError as e:
        print("Invalid input: {}".format(e))
        return 1
    return _save(dao, payload.apply_to(current.copy()))


def cmd_delete(dao, args) -> int:
    student = _find(dao, args.id)
    if student is None:
        print("No student with id {}".format(args.id))
        return 1
    if not delete_student(dao, student):
        print("Failed to delete student: an error occurred while deleting the student.")
        return 1
    print("Student deleted successfully: {}".format(student.full_name))
    return 0


def cmd_stats(dao, args) -> int:
    if args.scope == "view":
        stats = compute_statistics(_working_view(dao, args))
    else:
        stats = dao.aggregate_statistics()
    print("Total Students:   {}".format(stats.total_count))
    print("Average GPA:      {:.2f}".format(stats.average_gpa))
    print("Min / Max GPA:    {:.2f} / {:.2f}".format(stats.min_gpa, stats.max_gpa))
    print("Honor Students:   {}".format(stats.honor_student_count))
    print("Honor Percentage: {:.1f}%".format(stats.honor_student_percentage))
    print("Average Age:      {:.1f}".format(stats.average_age))
    return 0


def cmd_export(dao, args) -> int:
    path = args.path or default_export_filename()
    try:
        count = export_students_csv(_working_view(dao, args), path)
    except OSError as e:
        log_with_context(logger, "ERROR", "Failed to export students: {}".format(e), exc_info=e)
        print("Failed to export students: {}".format(e))
        return 1
    print("{} student(s) exported to {}".format(count, path))
    return 0


def cmd_load(dao, args) -> int:
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        print("Error: could not read {}: {}".format(args.file, e))
        return 1
    if isinstance(records, dict):
        records = records.get("students", [])

    summary = import_students(dao, records)

    print("=" * 60)
    print("IMPORT SUMMARY")
    print("=" * 60)
    print("  Total Received: {}".format(summary.total_received))
    print("  Imported:       {}".format(summary.imported))
    print("  Rejected:       {}".format(summary.rejected))
    print("  Errors:         {}".format(summary.errors))
    print("=" * 60)
    for d in summary.details:
        reason = d.get("reason")
        if isinstance(reason, list):
            reason = "; ".join(reason)
        suffix = " ({})".format(reason) if reason else ""
        print("  #{} {}: {}{}".format(d["index"], d.get("email", "?"), d["status"], suffix))
    return 0 if summary.rejected == 0 and summary.errors == 0 else 1


def cmd_majors(dao, args) -> int:
    for major in sorted(set(config.available_majors()) | set(dao.majors())):
        print(major)
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "update": cmd_update,
    "delete": cmd_delete,
    "stats": cmd_stats,
    "export": cmd_export,
    "load": cmd_load,
    "majors": cmd_majors,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    app = create_app(args.database_url, seed=not args.no_seed, log_level=args.log_level)
    start_operation()
    log_with_context(logger, "DEBUG", "Running command: {}".format(args.command))
    try:
        return COMMANDS[args.command](app.dao, args)
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
