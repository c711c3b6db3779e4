"""
Database connection and session management module.

Uses SQLAlchemy for ORM operations. SQLite is the default local store;
any other SQLAlchemy URL (e.g. PostgreSQL) works through DATABASE_URL.
Engines and session factories are created explicitly and handed to the
data access layer, so tests can point everything at a throwaway file.
"""

import os
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

# Read database URL from environment, falling back to a local SQLite file
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./students.db"
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str = None, echo: bool = False):
    """
    Create a SQLAlchemy engine for the given URL.

    SQLite does not support pool_size, max_overflow, or pool_pre_ping,
    so those are only applied to server databases.
    """
    url = database_url or DATABASE_URL
    engine_kwargs = {"echo": echo}

    if url.startswith("postgresql"):
        engine_kwargs.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_pre_ping": True,
        })
    elif url.startswith("sqlite"):
        # Background work may touch the store from another thread
        engine_kwargs["connect_args"] = {"check_same_thread": False}

    engine = create_engine(url, **engine_kwargs)

    # Enable WAL mode and foreign keys for SQLite
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _set_sqlite_pragma)

    return engine


def create_session_factory(engine):
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps committed records readable after their
    session closes, which the in-memory working set relies on.
    """
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@contextmanager
def session_scope(session_factory):
    """
    Provide a session and guarantee it is closed afterwards.

    Commit and rollback stay with the caller so every write decides
    for itself what counts as success.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def create_tables(engine):
    """
    Create all database tables directly (used for SQLite).
    For server databases, use Alembic migrations instead.
    """
    # Import models so they are registered with Base.metadata
    from student_manager.models.student import Student  # noqa: F401
    Base.metadata.create_all(bind=engine)
