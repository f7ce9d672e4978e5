"""
Entry point for running the seeder as a module.

Run with:
    python -m jee_syllabus
"""

from jee_syllabus.interfaces.cli import main

if __name__ == "__main__":
    main()
