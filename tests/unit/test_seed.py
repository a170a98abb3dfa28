"""Tests for the YAML seed loader."""

import sqlite3
from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from alumni_recs.core.db import init_db
from alumni_recs.store.seed import SeedData, seed_db

SEED_YAML = dedent("""\
    profiles:
      - user_id: u1
        role: student
        skills: [python]
      - user_id: u2
        role: alumni
        is_mentor: true
    posts:
      - id: p1
        title: Data Intern
        content: SQL and Python
        tags: [internship, "company:Initech"]
        created_at: "2026-10-15T09:00:00Z"
    events:
      - id: e1
        title: Career Fair
        event_date: "2026-12-01T17:00:00Z"
""")


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    return init_db(tmp_path / "test.db")


@pytest.fixture
def seed_file(tmp_path: Path) -> Path:
    path = tmp_path / "seed.yaml"
    path.write_text(SEED_YAML)
    return path


class TestSeedData:
    def test_from_yaml(self, seed_file: Path) -> None:
        data = SeedData.from_yaml(seed_file)
        assert [p.user_id for p in data.profiles] == ["u1", "u2"]
        assert data.posts[0].tags == ["internship", "company:Initech"]
        assert data.events[0].status == "approved"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert SeedData.from_yaml(path) == SeedData()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SeedData.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_role(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("profiles:\n  - user_id: x\n    role: wizard\n")
        with pytest.raises(ValidationError):
            SeedData.from_yaml(path)

    def test_shipped_example_loads(self) -> None:
        example = Path(__file__).resolve().parents[2] / "config" / "seed.example.yaml"
        data = SeedData.from_yaml(example)
        assert data.profiles
        assert data.posts
        assert data.events


class TestSeedDb:
    def test_counts(self, db: sqlite3.Connection, seed_file: Path) -> None:
        assert seed_db(db, SeedData.from_yaml(seed_file)) == (2, 1, 1)

    def test_reseed_skips_existing_posts_and_events(
        self, db: sqlite3.Connection, seed_file: Path,
    ) -> None:
        data = SeedData.from_yaml(seed_file)
        seed_db(db, data)
        assert seed_db(db, data) == (2, 0, 0)
        assert db.execute("SELECT COUNT(*) FROM profiles").fetchone()[0] == 2
