"""
Normalizer - Canonical form of names for duplicate detection.

Normalized strings are only ever compared, never stored or displayed:
a record is always created with its original name.

    "  UNIT   3:  Current  Electricity " -> "unit 3: current electricity"
"""

import re

from jee_syllabus.config import NormalizationConfig

_WHITESPACE = re.compile(r'\s+')
_NUMBERED_SECTION = re.compile(r'\b(unit|chapter|section|part)\s+(\d+)\b', re.IGNORECASE)


def _canonical_section(match: re.Match) -> str:
    return f"{match.group(1).lower()} {match.group(2)}"


class Normalizer:
    """
    Applies the enabled normalization steps in a fixed order:
    trim, collapse whitespace, lowercase, then "unit N" style spacing.
    """

    def __init__(self, config: NormalizationConfig | None = None):
        self.config = config or NormalizationConfig()

    def normalize(self, value) -> str:
        if not value or not isinstance(value, str):
            return ''

        config = self.config
        if not config.enabled:
            return value

        normalized = value
        if config.trim_whitespace:
            normalized = normalized.strip()
        if config.remove_extra_spaces:
            normalized = _WHITESPACE.sub(' ', normalized)
        if config.normalize_case:
            normalized = normalized.lower()
        if config.normalize_units:
            normalized = _NUMBERED_SECTION.sub(_canonical_section, normalized)
        return normalized


def normalize_string(value, config: NormalizationConfig | None = None) -> str:
    """Normalize a single string with the given (or default) settings."""
    return Normalizer(config).normalize(value)
