"""
Seeding module - Runs the syllabus into the database and reports on it.
"""

from .report import SeedingResults, SeedingSummary, build_report, generate_seeding_report
from .seeder import SyllabusSeeder
from .syllabus_files import (
    SyllabusFileError,
    get_import_stats,
    get_syllabus_preview,
    list_syllabus_files,
    read_syllabus_file,
    validate_syllabus_data,
)

__all__ = [
    "SeedingResults",
    "SeedingSummary",
    "build_report",
    "generate_seeding_report",
    "SyllabusSeeder",
    "SyllabusFileError",
    "get_import_stats",
    "get_syllabus_preview",
    "list_syllabus_files",
    "read_syllabus_file",
    "validate_syllabus_data",
]
