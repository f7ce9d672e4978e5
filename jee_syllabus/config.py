"""
Configuration settings for the JEE syllabus seeder.

This file centralizes all configuration so you can easily adjust parameters.
The UPPER_CASE constants are the defaults; the dataclasses at the bottom
bundle them into a SeederConfig that the CLI and web app can override.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Base directory (where this project lives)
BASE_DIR = Path(__file__).parent.parent

# Syllabus year, used in output file names and subject descriptions
SYLLABUS_YEAR = 2025

# The official syllabus PDF
PDF_PATH = BASE_DIR / "content" / "syllabus" / f"{SYLLABUS_YEAR}.pdf"

# Directory for the intermediate tree and the seeding report
JSON_OUTPUT_DIR = BASE_DIR / "json-output"

# Report file name written into JSON_OUTPUT_DIR
REPORT_JSON_NAME = "pdf-syllabus-seeding-report.json"

# Directory scanned by the admin import surface for *syllabus*.json files
SEEDS_DIR = BASE_DIR / "seeds"

# Data storage directory
DATA_DIR = BASE_DIR / "data"

# =============================================================================
# DATABASE CONFIGURATION
# =============================================================================

# Any SQLAlchemy URL works; SQLite keeps the seeder self-contained
DATABASE_URL = os.environ.get(
    "JEE_SYLLABUS_DATABASE_URL", f"sqlite:///{DATA_DIR / 'syllabus.db'}"
)

# =============================================================================
# STRUCTURE CONFIGURATION
# =============================================================================

# Name of the stream every parsed tree is attached to
STREAM_NAME = "JEE"

# Lines naming one of these (in upper case) start a new subject
SUBJECT_KEYWORDS = ("PHYSICS", "CHEMISTRY", "MATHEMATICS")

# Topics kept per lesson after post-processing (first N, in order)
MAX_TOPICS_PER_LESSON = 50

# Subtopics derived per topic, and the longest phrase accepted as one
MAX_SUBTOPICS_PER_TOPIC = 5
MAX_SUBTOPIC_LENGTH = 200

# Characters that separate subtopic phrases inside a topic line
SUBTOPIC_DELIMITERS = (",", ";", ".", ":", "(", ")", "[", "]")

# Topic lines seen before any lesson header are dropped by default.
# When kept, they go under a lesson with this name.
DROP_ORPHAN_TOPICS = True
ORPHAN_LESSON_NAME = "General"

# Names are clipped to this many characters in the report details
REPORT_NAME_LIMIT = 100

# =============================================================================
# DUPLICATE PREVENTION / NORMALIZATION
# =============================================================================

DUPLICATE_PREVENTION_ENABLED = True

# Exact and normalized matches are always checked. Fuzzy matching compares
# normalized sibling names with difflib and reuses anything at or above the
# threshold. Off by default so reruns stay strictly idempotent.
FUZZY_MATCHING = False
SIMILARITY_THRESHOLD = 0.85

NORMALIZATION_ENABLED = True
NORMALIZE_TRIM = True
NORMALIZE_EXTRA_SPACES = True
NORMALIZE_CASE = True
NORMALIZE_UNITS = True

# =============================================================================
# PROCESSING / LOGGING
# =============================================================================

# Stop the whole run on the first persistence error. When False, the failing
# subject is recorded in the report and the next subject is processed.
ABORT_ON_ERROR = True

# Levels that may be created when no matching record exists. A missing
# record whose level is disabled is reported and its children are skipped.
CREATE_MISSING_SUBJECTS = True
CREATE_MISSING_LESSONS = True
CREATE_MISSING_TOPICS = True

# Do not descend into records that already existed. Off for the seeder so a
# rerun still walks the whole tree; the admin import turns it on.
SKIP_DUPLICATES = False

VERBOSE = True
SAVE_PROGRESS = True
ERROR_REPORTING = True

# =============================================================================
# WEB CONFIGURATION
# =============================================================================

WEB_HOST = "127.0.0.1"
WEB_PORT = 8000


@dataclass
class NormalizationConfig:
    """Toggles for each step of the normalization pipeline."""
    enabled: bool = NORMALIZATION_ENABLED
    trim_whitespace: bool = NORMALIZE_TRIM
    remove_extra_spaces: bool = NORMALIZE_EXTRA_SPACES
    normalize_case: bool = NORMALIZE_CASE
    normalize_units: bool = NORMALIZE_UNITS


@dataclass
class DuplicatePreventionConfig:
    enabled: bool = DUPLICATE_PREVENTION_ENABLED
    fuzzy_matching: bool = FUZZY_MATCHING
    similarity_threshold: float = SIMILARITY_THRESHOLD


@dataclass
class ProcessingConfig:
    """Shape of the parsed tree and the failure policy of a run."""
    stream_name: str = STREAM_NAME
    syllabus_year: int = SYLLABUS_YEAR
    subject_keywords: tuple[str, ...] = SUBJECT_KEYWORDS
    max_topics_per_lesson: int = MAX_TOPICS_PER_LESSON
    max_subtopics_per_topic: int = MAX_SUBTOPICS_PER_TOPIC
    max_subtopic_length: int = MAX_SUBTOPIC_LENGTH
    drop_orphan_topics: bool = DROP_ORPHAN_TOPICS
    orphan_lesson_name: str = ORPHAN_LESSON_NAME
    abort_on_error: bool = ABORT_ON_ERROR
    create_missing_subjects: bool = CREATE_MISSING_SUBJECTS
    create_missing_lessons: bool = CREATE_MISSING_LESSONS
    create_missing_topics: bool = CREATE_MISSING_TOPICS
    skip_duplicates: bool = SKIP_DUPLICATES
    duplicate_prevention: DuplicatePreventionConfig = field(
        default_factory=DuplicatePreventionConfig
    )


@dataclass
class LoggingConfig:
    verbose: bool = VERBOSE
    save_progress: bool = SAVE_PROGRESS
    error_reporting: bool = ERROR_REPORTING


@dataclass
class SeederConfig:
    """
    Everything a seeding run needs.

    Attributes:
        pdf_path: Syllabus PDF to parse
        output_dir: Where the intermediate tree and report are written
        database_url: SQLAlchemy URL of the target database
        processing: Tree shape and failure policy
        normalization: Normalizer toggles
        logging: Console verbosity and artifact toggles
    """
    pdf_path: Path = PDF_PATH
    output_dir: Path = JSON_OUTPUT_DIR
    database_url: str = DATABASE_URL
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    normalization: NormalizationConfig = field(default_factory=NormalizationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def syllabus_json_path(self) -> Path:
        return self.output_dir / f"syllabus-{self.processing.syllabus_year}.json"

    @property
    def report_path(self) -> Path:
        return self.output_dir / REPORT_JSON_NAME


def default_config() -> SeederConfig:
    """Build a SeederConfig from the module-level defaults."""
    return SeederConfig()
