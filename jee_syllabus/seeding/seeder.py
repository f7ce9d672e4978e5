"""
Syllabus Seeder - Orchestrates a full seeding run.

This module ties the pipeline together:
1. Verify the database connection
2. Read the syllabus PDF (or a syllabus JSON file) into a tree
3. Save the tree as JSON for inspection
4. Walk the tree and find-or-create every stream/subject/lesson/topic/subtopic
5. Write the seeding report and print a summary

Everything runs sequentially: each subject is fully processed, children
included, before the next one starts.
"""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from sqlalchemy.orm import Session

from jee_syllabus.config import SeederConfig
from jee_syllabus.ingestion.pdf_parser import PDFParser
from jee_syllabus.ingestion.structure_builder import (
    extract_syllabus_structure,
    post_process_subjects,
)
from jee_syllabus.seeding.report import (
    SeedingResults,
    generate_seeding_report,
    print_summary,
    save_syllabus_json,
)
from jee_syllabus.seeding.syllabus_files import load_syllabus_file, validate_syllabus_data
from jee_syllabus.storage.database import verify_database_connection
from jee_syllabus.storage.upsert import HierarchyUpserter, UpsertError, UpsertResult


class SyllabusSeeder:
    """
    Seeds the syllabus hierarchy into the database.

    Example:
        Session = create_session_factory(config.database_url)
        with Session() as session:
            results = SyllabusSeeder(session, config).seed_from_pdf()
            print(results.summary)
    """

    def __init__(
        self,
        session: Session,
        config: SeederConfig | None = None,
        console: Console | None = None,
    ):
        self.session = session
        self.config = config or SeederConfig()
        self.console = console or Console()
        self.upserter = HierarchyUpserter(session, self.config, self.console)

        # Results of the most recent run, also available after an aborted run
        self.results: SeedingResults | None = None

    @property
    def verbose(self) -> bool:
        return self.config.logging.verbose

    # ------------------------------------------------------------------
    # Reading the syllabus
    # ------------------------------------------------------------------

    def process_pdf_to_json(self, pdf_path: str | Path | None = None) -> dict:
        """
        Parse the syllabus PDF into the stream tree.

        Raises:
            FileNotFoundError: If the PDF does not exist
            RuntimeError: If the PDF cannot be read or the tree cannot be built
        """
        pdf_path = Path(pdf_path or self.config.pdf_path)
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")

        self.console.print(f"📁 Processing PDF: {pdf_path}")
        content = PDFParser().parse_pdf(pdf_path)
        self.console.print(f"📊 PDF parsed: {len(content.full_text)} characters")

        syllabus = extract_syllabus_structure(
            content.full_text,
            config=self.config.processing,
            console=self.console,
            verbose=self.verbose,
        )
        self.console.print(
            f"[green]✅ Syllabus structure extracted: {len(syllabus['subjects'])} subjects[/green]"
        )
        return syllabus

    def load_json(self, path: str | Path) -> dict:
        """
        Load a syllabus JSON file and clean it like a PDF-derived tree.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is malformed or fails validation
        """
        data = load_syllabus_file(path)
        validation = validate_syllabus_data(data["subjects"])
        if not validation.is_valid:
            raise ValueError(f"Validation failed: {', '.join(validation.errors)}")

        processing = self.config.processing
        return {
            "stream": data["stream"] or processing.stream_name,
            "subjects": post_process_subjects(data["subjects"], processing.max_topics_per_lesson),
        }

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def process_syllabus_data(self, syllabus: dict) -> SeedingResults:
        """
        Find or create every entity of the tree.

        A persistence error inside a subject is recorded in `results.errors`.
        With `abort_on_error` it is then re-raised and ends the run;
        otherwise processing continues with the next subject.

        Args:
            syllabus: {"stream": str, "subjects": [...]}

        Returns:
            SeedingResults for the run

        Raises:
            UpsertError: If the stream cannot be found or created, or a
                subject fails while abort_on_error is set
        """
        results = SeedingResults()
        self.results = results
        self.console.print("🔄 Processing syllabus data...")

        stream_name = syllabus.get("stream") or self.config.processing.stream_name
        try:
            results.stream = self.upserter.find_or_create_stream(stream_name)
        except UpsertError as e:
            results.record_error(e)
            raise
        self.console.print(f"📚 Stream: {escape(results.stream.name)} ({results.stream.id})")

        for subject_data in syllabus["subjects"]:
            self.console.print(f"\n📖 Processing subject: {escape(subject_data['subject'])}")
            try:
                self._process_subject(subject_data, results.stream.id, results)
            except UpsertError as e:
                results.record_error(e, subject=subject_data["subject"])
                self.console.print(f"[red]❌ {escape(str(e))}[/red]")
                if self.config.processing.abort_on_error:
                    raise

        return results

    def _descend(
        self, result: UpsertResult | None, level: str, name: str, results: SeedingResults, subject: str
    ) -> bool:
        """
        Decide whether the children of a found-or-created record are processed.

        A record that was not created (its level is disabled) is reported;
        an existing one is skipped when `skip_duplicates` is set.
        """
        if result is None:
            entry = results.record_not_created(level, name, subject)
            self.console.print(f"[yellow]⚠️ {escape(entry['message'])}[/yellow]")
            return False
        return result.created or not self.config.processing.skip_duplicates

    def _process_subject(self, subject_data: dict, stream_id: int, results: SeedingResults) -> None:
        subject_name = subject_data["subject"]
        subject = self.upserter.find_or_create_subject(subject_name, stream_id)
        if subject is not None:
            results.subjects.append(subject)
        if not self._descend(subject, "subject", subject_name, results, subject_name):
            return

        for lesson_index, lesson_data in enumerate(subject_data["lessons"]):
            if self.verbose:
                self.console.print(f"  📝 Processing lesson: {escape(lesson_data['lesson'][:50])}...")

            lesson = self.upserter.find_or_create_lesson(
                lesson_data["lesson"], subject.id, lesson_index
            )
            if lesson is not None:
                results.lessons.append(lesson)
            if not self._descend(lesson, "lesson", lesson_data["lesson"], results, subject_name):
                continue

            for topic_index, topic_text in enumerate(lesson_data["topics"]):
                topic = self.upserter.find_or_create_topic(
                    topic_text, lesson.id, subject.id, topic_index
                )
                if topic is not None:
                    results.topics.append(topic)
                if not self._descend(topic, "topic", topic_text, results, subject_name):
                    continue
                results.subtopics.extend(
                    self.upserter.find_or_create_subtopics(topic_text, topic.id)
                )

    def seed(self, syllabus: dict, source: str) -> SeedingResults:
        """Seed an already built tree, then report and summarize."""
        self.console.print("\n🌱 Seeding JSON data to database...")
        results = self.process_syllabus_data(syllabus)

        generate_seeding_report(results, source, self.config.report_path, self.console)
        print_summary(results, self.console, show_errors=self.config.logging.error_reporting)
        return results

    def seed_from_pdf(self, pdf_path: str | Path | None = None) -> SeedingResults:
        """Full run from the syllabus PDF."""
        pdf_path = Path(pdf_path or self.config.pdf_path)
        self._print_banner(f"Seeding from PDF: {pdf_path}")

        self._verify_connection()
        self.console.print("📄 Step 1: Processing PDF to JSON...")
        syllabus = self.process_pdf_to_json(pdf_path)

        if self.config.logging.save_progress:
            save_syllabus_json(syllabus, self.config.syllabus_json_path, self.console)

        return self.seed(syllabus, source=str(pdf_path))

    def seed_from_json(self, json_path: str | Path) -> SeedingResults:
        """Full run from a syllabus JSON file (no intermediate tree is written)."""
        self._print_banner(f"Seeding from JSON: {json_path}")

        self._verify_connection()
        syllabus = self.load_json(json_path)
        return self.seed(syllabus, source=str(json_path))

    def _verify_connection(self) -> None:
        self.console.print("🔍 Verifying database connection...")
        verify_database_connection(self.session)
        self.console.print("[green]✅ Database connection verified[/green]")

    def _print_banner(self, detail: str) -> None:
        processing = self.config.processing
        self.console.print(
            Panel.fit(
                f"[bold blue]🌱 {processing.stream_name} {processing.syllabus_year} "
                f"Syllabus Seeding[/bold blue]\n{escape(detail)}",
                border_style="blue",
            )
        )
