"""
SQLAlchemy models for the syllabus hierarchy.

Stream -> Subject -> Lesson -> Topic -> Subtopic

Names are not unique at the database level; the upsert engine decides what
counts as a duplicate. Lesson and topic `order` values are kept unique per
parent by the same engine.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class Stream(Base):
    """Top-level exam track, e.g. JEE."""
    __tablename__ = "streams"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    code = Column(String(64), nullable=False, index=True)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    subjects = relationship("Subject", back_populates="stream")

    def __repr__(self):
        return f"<Stream(id={self.id}, name='{self.name}', code='{self.code}')>"


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    stream_id = Column(Integer, ForeignKey("streams.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=_utcnow)

    stream = relationship("Stream", back_populates="subjects")
    lessons = relationship("Lesson", back_populates="subject")

    def __repr__(self):
        return f"<Subject(id={self.id}, name='{self.name}')>"


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    subject = relationship("Subject", back_populates="lessons")
    topics = relationship("Topic", back_populates="lesson")

    def __repr__(self):
        return f"<Lesson(id={self.id}, order={self.order}, name='{self.name[:30]}')>"


class Topic(Base):
    """A unit of a lesson. `subject_id` mirrors the lesson's subject for querying."""
    __tablename__ = "topics"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=_utcnow)

    lesson = relationship("Lesson", back_populates="topics")
    subtopics = relationship("Subtopic", back_populates="topic")

    def __repr__(self):
        return f"<Topic(id={self.id}, order={self.order}, name='{self.name[:30]}')>"


class Subtopic(Base):
    __tablename__ = "subtopics"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=_utcnow)

    topic = relationship("Topic", back_populates="subtopics")

    def __repr__(self):
        return f"<Subtopic(id={self.id}, name='{self.name[:30]}')>"
