"""
Ingestion module - Turns syllabus text into a Subject -> Lesson -> Topic tree.

This module is responsible for:
1. Extracting text lines from the syllabus PDF
2. Classifying each line and building the tree
3. Normalizing names for duplicate detection
4. Splitting topics into subtopic phrases
"""

from .classifier import LineKind, classify
from .normalizer import Normalizer, normalize_string
from .pdf_parser import PDFParser, extract_lines_from_pdf
from .structure_builder import StructureBuilder, extract_syllabus_structure, post_process_subjects
from .subtopics import split_into_subtopics

__all__ = [
    "LineKind",
    "classify",
    "Normalizer",
    "normalize_string",
    "PDFParser",
    "extract_lines_from_pdf",
    "StructureBuilder",
    "extract_syllabus_structure",
    "post_process_subjects",
    "split_into_subtopics",
]
