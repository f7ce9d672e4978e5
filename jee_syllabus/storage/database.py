"""
Database access - engine and session factory for the syllabus tables.
"""

from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from jee_syllabus.config import DATABASE_URL
from jee_syllabus.storage.models import Base


def create_db_engine(database_url: str = DATABASE_URL) -> Engine:
    """
    Create an engine and make sure the tables exist.

    For file-based SQLite URLs the parent directory is created first.
    """
    if database_url.startswith("sqlite:///") and database_url != "sqlite:///:memory:":
        Path(database_url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(database_url: str = DATABASE_URL) -> sessionmaker:
    """Session factory bound to a fresh engine for `database_url`."""
    return sessionmaker(bind=create_db_engine(database_url), expire_on_commit=False)


def verify_database_connection(session: Session) -> None:
    """
    Run a trivial query so connection problems surface before any work.

    Raises:
        RuntimeError: If the database cannot be reached
    """
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise RuntimeError(f"Database connection failed: {e}") from e
