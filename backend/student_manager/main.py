"""
Student Manager - application bootstrap.

Wires the pieces together in the order they depend on each other:
1. Structured JSON logging
2. Database engine and session factory
3. Table creation (SQLite only; server databases use Alembic)
4. The StudentDAO handle and its working set
5. Optional sample data for an empty store

The front end receives the resulting StudentManagerApp and never touches
module-level state.
"""

from dataclasses import dataclass

from student_manager.database import DATABASE_URL, create_db_engine, create_session_factory, create_tables
from student_manager.logging_config import setup_logging, get_logger, log_with_context
from student_manager.sample_data import seed_if_empty
from student_manager.services.student_dao import StudentDAO

logger = get_logger("db")


@dataclass
class StudentManagerApp:
    """Everything a front end needs: the engine and the data access handle."""
    database_url: str
    engine: object
    dao: StudentDAO

    def close(self):
        self.engine.dispose()


def create_app(database_url: str = None, seed: bool = True, configure_logging: bool = True,
               log_level: str = None) -> StudentManagerApp:
    """
    Build a ready-to-use application for `database_url` (DATABASE_URL by default).

    Args:
        database_url: SQLAlchemy URL of the store
        seed: Insert the sample students when the table is empty
        configure_logging: Install the JSON log handler on the root logger
        log_level: Override for the LOG_LEVEL environment variable
    """
    if configure_logging:
        setup_logging(log_level)

    url = database_url or DATABASE_URL
    engine = create_db_engine(url)

    # Auto-create tables for SQLite local use
    if url.startswith("sqlite"):
        log_with_context(logger, "INFO", "Using SQLite, creating tables directly")
        create_tables(engine)

    dao = StudentDAO(create_session_factory(engine))
    if seed:
        seed_if_empty(dao)

    log_with_context(logger, "INFO", "Database initialized successfully",
                     extra_data={"students": len(dao.students)})
    return StudentManagerApp(database_url=url, engine=engine, dao=dao)
