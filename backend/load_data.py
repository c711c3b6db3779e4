"""
Data Loader Script - Loads a JSON file of students into the store.

Each record is validated exactly like a student entered by hand; rejected
records are listed with every validation message.

Usage:
    python load_data.py                                  # data/sample_students.json
    python load_data.py path/to/students.json            # Custom file
    DATABASE_URL=sqlite:///./other.db python load_data.py
"""

import json
import os
import sys

from student_manager.main import create_app
from student_manager.services.ingest import import_students, STATUS_IMPORTED, STATUS_REJECTED


def main():
    # Locate the data file
    default_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "sample_students.json")
    data_file = sys.argv[1] if len(sys.argv) > 1 else default_file

    if not os.path.exists(data_file):
        print(f"Error: Could not find {data_file}")
        sys.exit(1)

    print(f"Loading data from: {data_file}")
    with open(data_file, 'r', encoding='utf-8') as f:
        records = json.load(f)

    if isinstance(records, dict):
        records = records.get("students", [])

    print(f"Found {len(records)} students to import")
    print()

    app = create_app(seed=False)
    try:
        summary = import_students(app.dao, records)
    finally:
        app.close()

    # Display results
    print("=" * 60)
    print("IMPORT SUMMARY")
    print("=" * 60)
    print(f"  Total Received:  {summary.total_received}")
    print(f"  Imported:        {summary.imported}")
    print(f"  Rejected:        {summary.rejected}")
    print(f"  Errors:          {summary.errors}")
    print("=" * 60)
    print()

    for d in summary.details:
        status = d.get('status', '?')
        icon = '✅' if status == STATUS_IMPORTED else ('⚠️' if status == STATUS_REJECTED else '❌')
        extra = ''
        if status == STATUS_IMPORTED:
            extra = f" (id: {d.get('student_id')})"
        elif isinstance(d.get('reason'), list):
            extra = f" ({'; '.join(d['reason'])})"
        elif d.get('reason'):
            extra = f" ({d['reason']})"
        print(f"  {icon} #{d['index']} {d.get('email', '?')}: {status}{extra}")

    print()
    print("✅ Data loading complete!")


if __name__ == "__main__":
    main()
