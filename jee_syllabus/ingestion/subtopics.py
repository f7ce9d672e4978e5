"""
Subtopic Splitter - Breaks a topic line into short subtopic phrases.

Syllabus topics are usually comma/colon separated lists of concepts:

    "UNIT 1: Motion in a straight line, uniform motion (graphs)"
    -> ["UNIT 1", "Motion in a straight line", "uniform motion", "graphs"]

Every delimiter is treated as structural; there is no escaping.
"""

from jee_syllabus.config import (
    MAX_SUBTOPIC_LENGTH,
    MAX_SUBTOPICS_PER_TOPIC,
    SUBTOPIC_DELIMITERS,
)

_SEPARATOR = '|'


def split_into_subtopics(
    topic_text: str,
    max_subtopics: int = MAX_SUBTOPICS_PER_TOPIC,
    max_length: int = MAX_SUBTOPIC_LENGTH,
) -> list[str]:
    """
    Split topic text into at most `max_subtopics` phrases.

    Args:
        topic_text: The full topic line
        max_subtopics: How many phrases to keep (first N)
        max_length: Phrases this long or longer are dropped

    Returns:
        Trimmed, non-empty phrases in order of appearance
    """
    text = topic_text
    for delimiter in SUBTOPIC_DELIMITERS:
        text = text.replace(delimiter, _SEPARATOR)

    pieces = (piece.strip() for piece in text.split(_SEPARATOR))
    return [piece for piece in pieces if 0 < len(piece) < max_length][:max_subtopics]
