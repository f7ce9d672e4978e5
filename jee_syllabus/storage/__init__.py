"""
Storage module - Relational persistence of the syllabus hierarchy.
"""

from .database import create_db_engine, create_session_factory, verify_database_connection
from .models import Base, Lesson, Stream, Subject, Subtopic, Topic
from .upsert import HierarchyUpserter, UpsertError, UpsertResult

__all__ = [
    "create_db_engine",
    "create_session_factory",
    "verify_database_connection",
    "Base",
    "Stream",
    "Subject",
    "Lesson",
    "Topic",
    "Subtopic",
    "HierarchyUpserter",
    "UpsertError",
    "UpsertResult",
]
