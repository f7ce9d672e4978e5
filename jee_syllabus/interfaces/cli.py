#!/usr/bin/env python3
"""
CLI Interface - Seed the JEE syllabus from the command line.

This module runs a full seeding run:
- From the configured syllabus PDF (default)
- From a pre-shaped syllabus JSON file (--json-input)
- Or only shows what is already in the database (--verify-only)

Run with:
    python -m jee_syllabus
    python -m jee_syllabus --pdf-path content/syllabus/2025.pdf --quiet
    python -m jee_syllabus --json-input seeds/jee-syllabus.json --continue-on-error
"""

import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jee_syllabus.config import SeederConfig, default_config
from jee_syllabus.seeding.seeder import SyllabusSeeder
from jee_syllabus.seeding.syllabus_files import get_import_stats
from jee_syllabus.storage.database import create_session_factory

# Rich console for beautiful output
console = Console()


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="Import the JEE syllabus (PDF or JSON) into the database"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--pdf-path", type=Path, help="Syllabus PDF to parse")
    source.add_argument("--json-input", type=Path, help="Seed from a syllabus JSON file instead of the PDF")
    parser.add_argument("--database-url", help="SQLAlchemy database URL")
    parser.add_argument("--output-dir", type=Path, help="Directory for the parsed tree and the report")
    parser.add_argument("--no-normalize", action="store_true", help="Disable string normalization")
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Record a failing subject in the report and carry on with the next one",
    )
    parser.add_argument(
        "--keep-orphan-topics",
        action="store_true",
        help="Keep topic lines that appear before any lesson under a placeholder lesson",
    )
    parser.add_argument("--fuzzy-matching", action="store_true", help="Also reuse records with similar names")
    parser.add_argument("--similarity-threshold", type=float, help="Fuzzy match threshold (0.0 to 1.0)")
    parser.add_argument("--quiet", action="store_true", help="Only print steps and the summary")
    parser.add_argument("--verify-only", action="store_true", help="Only show what is already seeded")
    parser.add_argument("--serve", action="store_true", help="Start the admin import API instead")
    return parser


def config_from_args(args) -> SeederConfig:
    """Apply command line overrides to the default configuration."""
    config = default_config()

    if args.pdf_path:
        config.pdf_path = args.pdf_path
    if args.database_url:
        config.database_url = args.database_url
    if args.output_dir:
        config.output_dir = args.output_dir
    if args.no_normalize:
        config.normalization.enabled = False
    if args.continue_on_error:
        config.processing.abort_on_error = False
    if args.keep_orphan_topics:
        config.processing.drop_orphan_topics = False
    if args.fuzzy_matching:
        config.processing.duplicate_prevention.fuzzy_matching = True
    if args.similarity_threshold is not None:
        if not 0.0 <= args.similarity_threshold <= 1.0:
            raise ValueError("Similarity threshold must be between 0.0 and 1.0")
        config.processing.duplicate_prevention.similarity_threshold = args.similarity_threshold
    if args.quiet:
        config.logging.verbose = False

    return config


def show_stats(session, config: SeederConfig) -> None:
    """Print the row counts under the configured stream."""
    stream_name = config.processing.stream_name
    stats = get_import_stats(session, stream_name)

    table = Table(title=f"{stream_name} Syllabus in Database")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Stream exists", "yes" if stats["streamExists"] else "no")
    for key in ("subjects", "lessons", "topics", "subtopics"):
        table.add_row(key.title(), str(stats[key]))

    console.print(table)


def run(args) -> None:
    config = config_from_args(args)

    if args.serve:
        from jee_syllabus.interfaces.web_app import serve

        serve(database_url=config.database_url)
        return

    session_factory = create_session_factory(config.database_url)
    with session_factory() as session:
        if args.verify_only:
            show_stats(session, config)
            return

        seeder = SyllabusSeeder(session, config, console)
        if args.json_input:
            seeder.seed_from_json(args.json_input)
        else:
            seeder.seed_from_pdf()

    console.print("\n[bold green]✅ Syllabus seeding completed successfully![/bold green]")


def main(argv=None) -> None:
    """Main entry point. Exits with status 1 on any error."""
    args = build_parser().parse_args(argv)

    try:
        run(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]❌ Syllabus seeding failed: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
