"""
JEE Syllabus Seeder - Turns the JEE syllabus into a Stream/Subject/Lesson/Topic tree.

This package provides:
- PDF text extraction for the official syllabus document
- Heuristic line classification and tree building
- String normalization for duplicate detection
- Find-or-create persistence of the hierarchy with SQLAlchemy
- Seeding reports as JSON artifacts
- CLI and admin web interfaces
"""

__version__ = "0.1.0"
