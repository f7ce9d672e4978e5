#!/usr/bin/env python3
"""
Seeding Script - Import the JEE syllabus PDF into the database.

This script:
1. Reads the syllabus PDF
2. Converts it to a structured JSON tree (saved under json-output/)
3. Seeds the tree into the database without creating duplicates
4. Writes json-output/pdf-syllabus-seeding-report.json

Run:
    python scripts/seed_pdf_syllabus.py
    python scripts/seed_pdf_syllabus.py --pdf-path ../content/syllabus/2025.pdf
    python scripts/seed_pdf_syllabus.py --help

Running it again against the same database creates nothing new.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jee_syllabus.interfaces.cli import main

if __name__ == "__main__":
    main()
