import json
import logging

import pytest

from student_manager.cli import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def run(database_url, capsys):
    def _run(*argv):
        code = main(["--database-url", database_url, "--no-seed", "--log-level", "WARNING", *argv])
        return code, capsys.readouterr().out
    return _run


ADA = ["--first-name", "Ada", "--last-name", "Lovelace", "--email", "Ada@University.edu",
       "--age", "20", "--gpa", "3.9", "--major", "Mathematics", "--enrollment-date", "2023-09-01"]


def test_add_list_show(run):
    code, out = run("add", *ADA)
    assert code == 0
    assert "Student saved successfully: Ada Lovelace" in out

    code, out = run("list")
    assert code == 0
    assert "ada@university.edu" in out
    assert "1 student(s)" in out

    code, out = run("show", "1")
    assert code == 0
    assert "Academic Status: Summa Cum Laude" in out
    assert "Phone: Not provided" in out
    assert "Honor Student: Yes" in out


def test_add_reports_every_validation_message(run):
    code, out = run("add", "--email", "broken", "--age", "12")
    assert code == 1
    assert "First name is required" in out
    assert "Email format is invalid" in out
    assert "Age must be between 16 and 100" in out
    assert "Enrollment date is required" in out


def test_add_rejects_unparseable_input(run):
    code, out = run("add", *ADA[:-2], "--enrollment-date", "yesterday")
    assert code == 1
    assert "Invalid input" in out


def test_update_and_delete(run):
    run("add", *ADA)

    code, out = run("update", "1", "--gpa", "2.5")
    assert code == 0
    code, out = run("show", "1")
    assert "GPA: 2.50" in out
    assert "Academic Status: Good Standing" in out

    code, out = run("delete", "1")
    assert code == 0
    code, out = run("list")
    assert "0 student(s)" in out


def test_unknown_id(run):
    code, out = run("delete", "42")
    assert code == 1
    assert "No student with id 42" in out


def test_stats_scopes(run):
    run("add", *ADA)
    run("add", "--first-name", "Bo", "--last-name", "Lee", "--email", "bo@university.edu", "--age", "30",
        "--gpa", "2.5", "--major", "History", "--enrollment-date", "2020-01-01")

    code, out = run("stats")
    assert "Total Students:   2" in out
    assert "Average GPA:      3.20" in out
    assert "Honor Percentage: 50.0%" in out

    code, out = run("stats", "--scope", "view", "--major", "History")
    assert "Total Students:   1" in out
    assert "Honor Percentage: 0.0%" in out


def test_export(run, tmp_path):
    run("add", *ADA)
    target = tmp_path / "export.csv"
    code, out = run("export", str(target))
    assert code == 0
    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("ID,First Name")
    assert '"ada@university.edu"' in lines[1]


def test_load(run, tmp_path):
    data = tmp_path / "students.json"
    data.write_text(json.dumps({"students": [
        {"firstName": "Aiko", "lastName": "Tanaka", "email": "aiko@university.edu", "age": 18,
         "gpa": 3.92, "major": "Physics", "enrollmentDate": "2024-09-01"},
        {"firstName": "", "lastName": "Nobody", "email": "nope", "age": 20, "gpa": 3.0,
         "major": "Art", "enrollmentDate": "2023-09-01"},
    ]}), encoding="utf-8")

    code, out = run("load", str(data))
    assert code == 1
    assert "Imported:       1" in out
    assert "Rejected:       1" in out
    assert "First name is required; Email format is invalid" in out


def test_majors_lists_configured_and_stored(run):
    run("add", *ADA[:-4], "--major", "Astrobiology", "--enrollment-date", "2023-09-01")
    code, out = run("majors")
    assert "Astrobiology" in out.splitlines()
    assert "Computer Science" in out.splitlines()
