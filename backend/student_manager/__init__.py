"""
Student Manager - local store of student records.

Package layout:
- models/: SQLAlchemy ORM model (Student) with derived attributes
- services/: validation, statistics, data access, import, export, filters
- schemas.py: pydantic payloads for data entering the application
- logging_config.py: structured JSON logging
- database.py: engine and session management
- main.py: application bootstrap
- cli.py: command-line front end
"""

__version__ = "1.0.0"
