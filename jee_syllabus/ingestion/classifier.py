"""
Line Classifier - Decides what a single syllabus line is.

The syllabus PDF has no markup, so every line is judged on its own using
position, length and keyword heuristics:

    PHYSICS                                   -> SUBJECT
    Units and measurements of physical ...    -> LESSON
    UNIT 1: PHYSICS AND MEASUREMENT           -> TOPIC

The classifier is a pure function of the line and the keyword set. Whether
a LESSON or TOPIC line is actually used depends on what is open at that
point, which is the structure builder's job.
"""

import re
from enum import Enum

from jee_syllabus.config import SUBJECT_KEYWORDS

_NUMBERED = re.compile(r'^\d+\.')
_CAPS_LABEL = re.compile(r'^[A-Z\s]+:$')
_LOWERCASE_START = re.compile(r'^[a-z]')


class LineKind(str, Enum):
    SUBJECT = "subject"
    LESSON = "lesson"
    TOPIC = "topic"
    NONE = "none"


def is_subject_header(line: str, keywords=SUBJECT_KEYWORDS) -> bool:
    """
    A subject header names a subject on its own, or in a short line.

    "PHYSICS" and "Physics Syllabus" qualify; "UNIT 1: PHYSICS AND
    MEASUREMENT" does not because it mentions UNIT.
    """
    upper_line = line.upper()
    return any(
        upper_line == keyword
        or (keyword in upper_line and len(line) < 30 and 'UNIT' not in line)
        for keyword in keywords
    )


def is_lesson_header(line: str, keywords=SUBJECT_KEYWORDS) -> bool:
    """Lesson headers are longer descriptive lines that are not numbered."""
    return (
        20 < len(line) < 500
        and not line.startswith('UNIT')
        and not _NUMBERED.match(line)
        and not _CAPS_LABEL.match(line)
        and not any(keyword in line for keyword in keywords)
    )


def is_topic_content(line: str) -> bool:
    """Topic content: UNIT headers, numbered items and descriptive text."""
    return len(line) > 5 and (
        line.startswith('UNIT')
        or bool(_NUMBERED.match(line))
        or bool(_LOWERCASE_START.match(line))
        or ':' in line
        or len(line) > 20
    )


def classify(line: str, keywords=SUBJECT_KEYWORDS) -> LineKind:
    """
    Classify a line, checking SUBJECT first, then LESSON, then TOPIC.

    Args:
        line: A trimmed, non-blank line
        keywords: Upper-case subject names

    Returns:
        The first matching LineKind, or LineKind.NONE
    """
    if is_subject_header(line, keywords):
        return LineKind.SUBJECT
    if is_lesson_header(line, keywords):
        return LineKind.LESSON
    if is_topic_content(line):
        return LineKind.TOPIC
    return LineKind.NONE
