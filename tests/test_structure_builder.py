"""Tests for the structure builder and post-processor."""

import pytest

from jee_syllabus.config import ProcessingConfig
from jee_syllabus.ingestion.classifier import LineKind
from jee_syllabus.ingestion.structure_builder import (
    BuilderState,
    StructureBuilder,
    build_structure,
    extract_syllabus_structure,
    post_process_subjects,
)

from conftest import SYLLABUS_LINES


class TestStateMachine:
    def test_starts_without_context(self):
        assert StructureBuilder().state is BuilderState.NO_CONTEXT

    def test_transitions(self):
        builder = StructureBuilder()
        builder.feed("PHYSICS")
        assert builder.state is BuilderState.IN_SUBJECT
        builder.feed("Kinematics and laws of motion")
        assert builder.state is BuilderState.IN_SUBJECT_AND_LESSON
        builder.feed("CHEMISTRY")
        assert builder.state is BuilderState.IN_SUBJECT

    def test_lesson_without_subject_is_discarded(self):
        builder = StructureBuilder()
        assert builder.feed("JEE (Main) 2025 Syllabus") is LineKind.NONE
        assert builder.state is BuilderState.NO_CONTEXT

    def test_topic_goes_into_open_lesson(self):
        builder = StructureBuilder()
        builder.feed("PHYSICS")
        builder.feed("Kinematics and laws of motion")
        assert builder.feed("speed, velocity") is LineKind.TOPIC

        subjects = builder.finish()
        assert subjects[0]["lessons"][0]["topics"] == ["speed, velocity"]


class TestBuildStructure:
    def test_builds_sample_tree(self):
        subjects = build_structure(SYLLABUS_LINES)

        assert [s["subject"] for s in subjects] == ["PHYSICS", "CHEMISTRY"]
        physics, chemistry = subjects
        assert physics["lessons"] == [
            {
                "lesson": "Kinematics and laws of motion",
                "topics": [
                    "UNIT 2: Motion in a straight line",
                    "1. Newton's first law",
                    "speed, velocity",
                ],
            },
            {"lesson": "Work, energy and power basics", "topics": ["UNIT 3: Work-energy theorem"]},
        ]
        assert chemistry["lessons"] == [
            {"lesson": "Some basic concepts in chemistry", "topics": ["mole concept"]},
        ]

    def test_subject_names_are_upper_cased(self):
        subjects = build_structure(["Physics", "Kinematics and laws of motion"])
        assert subjects[0]["subject"] == "PHYSICS"

    def test_subject_without_lessons_is_not_emitted(self):
        subjects = build_structure(["PHYSICS", "CHEMISTRY", "Some basic concepts in chemistry"])
        assert [s["subject"] for s in subjects] == ["CHEMISTRY"]

    def test_orphan_topics_are_dropped_by_default(self):
        subjects = build_structure(SYLLABUS_LINES)
        all_topics = [t for s in subjects for l in s["lessons"] for t in l["topics"]]
        assert "UNIT 1: Units and measurements" not in all_topics

    def test_orphan_topics_can_be_kept(self):
        subjects = build_structure(SYLLABUS_LINES, drop_orphan_topics=False)
        first_lesson = subjects[0]["lessons"][0]
        assert first_lesson == {"lesson": "General", "topics": ["UNIT 1: Units and measurements"]}
        assert len(subjects[0]["lessons"]) == 3

    def test_empty_input(self):
        assert build_structure([]) == []


class TestPostProcess:
    def test_trims_and_drops_empty_topics(self):
        subjects = [{"subject": "PHYSICS", "lessons": [
            {"lesson": "  Kinematics  ", "topics": ["  speed ", "", "   ", "velocity"]},
        ]}]

        processed = post_process_subjects(subjects)

        assert processed == [{"subject": "PHYSICS", "lessons": [
            {"lesson": "Kinematics", "topics": ["speed", "velocity"]},
        ]}]

    def test_caps_topics_keeping_the_first(self):
        topics = [f"Topic {i} concept" for i in range(75)]
        subjects = [{"subject": "PHYSICS", "lessons": [{"lesson": "Kinematics", "topics": topics}]}]

        processed = post_process_subjects(subjects)

        assert processed[0]["lessons"][0]["topics"] == topics[:50]

    def test_keeps_empty_lessons_and_subjects(self):
        subjects = [
            {"subject": "PHYSICS", "lessons": [{"lesson": "Kinematics", "topics": []}]},
            {"subject": "CHEMISTRY", "lessons": []},
        ]
        assert post_process_subjects(subjects) == subjects

    def test_skips_nameless_entries(self):
        subjects = [
            {"subject": "", "lessons": []},
            {"subject": "PHYSICS", "lessons": [{"lesson": "", "topics": ["speed"]}]},
        ]
        assert post_process_subjects(subjects) == [{"subject": "PHYSICS", "lessons": []}]

    def test_does_not_modify_input(self):
        subjects = [{"subject": "PHYSICS", "lessons": [{"lesson": " K ", "topics": [" a "]}]}]
        post_process_subjects(subjects)
        assert subjects[0]["lessons"][0]["lesson"] == " K "


class TestExtractSyllabusStructure:
    def test_returns_stream_tree(self):
        syllabus = extract_syllabus_structure("\n".join(SYLLABUS_LINES))

        assert syllabus["stream"] == "JEE"
        assert len(syllabus["subjects"]) == 2

    def test_applies_topic_cap_from_config(self):
        lines = ["PHYSICS", "Kinematics and laws of motion"]
        lines += [f"UNIT {i}: motion" for i in range(10)]

        syllabus = extract_syllabus_structure(
            "\n".join(lines), config=ProcessingConfig(max_topics_per_lesson=3)
        )

        assert syllabus["subjects"][0]["lessons"][0]["topics"] == [
            "UNIT 0: motion", "UNIT 1: motion", "UNIT 2: motion",
        ]

    def test_blank_and_padded_lines_are_ignored(self):
        text = "\n\n   PHYSICS  \n\n  Kinematics and laws of motion \n  speed, velocity\n"
        syllabus = extract_syllabus_structure(text)
        assert syllabus["subjects"][0]["lessons"][0]["topics"] == ["speed, velocity"]

    def test_failures_are_wrapped(self):
        with pytest.raises(RuntimeError, match="Failed to extract syllabus structure"):
            extract_syllabus_structure(None)
