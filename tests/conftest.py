"""Shared fixtures for the JEE syllabus seeder test suite."""

import io
import json

import fitz
import pytest
from fastapi.testclient import TestClient
from rich.console import Console
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jee_syllabus.config import default_config
from jee_syllabus.seeding.seeder import SyllabusSeeder
from jee_syllabus.storage.models import Base
from jee_syllabus.storage.upsert import HierarchyUpserter

# ---------------------------------------------------------------------------
# Sample syllabus data used across tests
# ---------------------------------------------------------------------------

SINGLE_SUBJECT_SYLLABUS = {
    "stream": "JEE",
    "subjects": [
        {
            "subject": "PHYSICS",
            "lessons": [
                {"lesson": "Kinematics", "topics": ["UNIT 1: Motion", "Speed and velocity"]},
            ],
        }
    ],
}

THREE_SUBJECT_SYLLABUS = {
    "stream": "JEE",
    "subjects": [
        {
            "subject": "PHYSICS",
            "lessons": [{"lesson": "Kinematics", "topics": ["Projectile motion"]}],
        },
        {
            "subject": "CHEMISTRY",
            "lessons": [{"lesson": "Atomic structure", "topics": ["Bohr model"]}],
        },
        {
            "subject": "MATHEMATICS",
            "lessons": [{"lesson": "Sets and relations", "topics": ["Types of relations"]}],
        },
    ],
}

# Lines as they come out of the syllabus PDF
SYLLABUS_LINES = [
    "JEE (Main) 2025 Syllabus",
    "PHYSICS",
    "UNIT 1: Units and measurements",
    "Kinematics and laws of motion",
    "UNIT 2: Motion in a straight line",
    "1. Newton's first law",
    "speed, velocity",
    "Work, energy and power basics",
    "UNIT 3: Work-energy theorem",
    "CHEMISTRY",
    "Some basic concepts in chemistry",
    "mole concept",
]


def write_pdf(path, lines) -> None:
    """Write a one-page PDF with one text line per row."""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((50, 72), "\n".join(lines), fontsize=11)
    doc.save(str(path))
    doc.close()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def quiet_console():
    """Console that writes into a buffer instead of the terminal."""
    return Console(file=io.StringIO(), width=120)


@pytest.fixture()
def session():
    """In-memory SQLite session with all syllabus tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    with factory() as db_session:
        yield db_session
    engine.dispose()


@pytest.fixture()
def config(tmp_path):
    """Default configuration pointed at a temporary output directory."""
    cfg = default_config()
    cfg.output_dir = tmp_path / "json-output"
    cfg.pdf_path = tmp_path / "syllabus.pdf"
    cfg.database_url = f"sqlite:///{tmp_path / 'syllabus.db'}"
    return cfg


@pytest.fixture()
def upserter(session, config, quiet_console):
    return HierarchyUpserter(session, config, quiet_console)


@pytest.fixture()
def seeder(session, config, quiet_console):
    return SyllabusSeeder(session, config, quiet_console)


@pytest.fixture()
def syllabus_pdf(config):
    """The sample syllabus written to the configured PDF path."""
    write_pdf(config.pdf_path, SYLLABUS_LINES)
    return config.pdf_path


@pytest.fixture()
def seeds_dir(tmp_path):
    """
    Seeds directory with:
      JEE/jee-syllabus.json   valid, full tree shape
      broken-syllabus.json    invalid JSON
      notes.json              ignored (no "syllabus" in the name)
    """
    root = tmp_path / "seeds"
    (root / "JEE").mkdir(parents=True)
    (root / "JEE" / "jee-syllabus.json").write_text(json.dumps(SINGLE_SUBJECT_SYLLABUS))
    (root / "broken-syllabus.json").write_text("{not json")
    (root / "notes.json").write_text("{}")
    return root


@pytest.fixture()
def test_client(tmp_path, seeds_dir):
    """TestClient for the admin import API backed by a temporary SQLite file."""
    from jee_syllabus.interfaces.web_app import create_app

    cfg = default_config()
    cfg.logging.verbose = False
    app = create_app(
        database_url=f"sqlite:///{tmp_path / 'web.db'}",
        seeds_dir=seeds_dir,
        config=cfg,
    )
    with TestClient(app) as client:
        yield client
