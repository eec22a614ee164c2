"""
Database connection and session management for the portal.

One engine serves the students, submissions and settings tables. PostgreSQL
in production (schema from the Alembic migrations), SQLite for local
development and the test suite (schema from ``create_tables``).
All queries go through ``portal.store.RecordStore``, which receives its
session from ``get_db``.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from portal import config

DATABASE_URL = config.DATABASE_URL

# SQLite does not support pool_size, max_overflow, or pool_pre_ping
engine_kwargs = {"echo": False}

if DATABASE_URL.startswith("postgresql"):
    engine_kwargs.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
    })
elif DATABASE_URL.startswith("sqlite"):
    # Sync endpoints run in FastAPI's thread pool
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **engine_kwargs)

if DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def get_db():
    """
    FastAPI dependency that provides a database session.

    Yields a session and closes it once the request is done, even if
    the endpoint raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Create the students, submissions and settings tables directly (SQLite).
    PostgreSQL gets the same schema from migrations/versions/001_initial.py.
    """
    # Models must be imported so they are registered on Base.metadata
    import portal.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drop the portal tables. Only used by the test suite."""
    import portal.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)
