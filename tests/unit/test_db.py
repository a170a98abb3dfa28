"""Tests for the database layer: init, profile upsert, post/event inserts, queries."""

import json
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from alumni_recs.core.db import (
    get_profile_row,
    init_db,
    insert_event,
    insert_post,
    list_event_rows,
    list_post_rows,
    list_profile_rows_excluding,
    to_timestamp,
    upsert_profile,
)
from alumni_recs.core.schemas import Event, PostRecord, UserProfile

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    return init_db(tmp_path / "test.db")


def _event(event_id: str, days_ahead: float, status: str = "approved") -> Event:
    return Event(
        id=event_id,
        title=f"Event {event_id}",
        event_date=NOW + timedelta(days=days_ahead),
        status=status,
    )


class TestInitDb:
    def test_creates_tables(self, db: sqlite3.Connection) -> None:
        tables = {
            row[0]
            for row in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        assert {"profiles", "posts", "events"} <= tables

    def test_idempotent(self, tmp_path: Path) -> None:
        """Calling init_db twice on the same path doesn't error."""
        p = tmp_path / "double.db"
        init_db(p).close()
        init_db(p).close()

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        init_db(tmp_path / "nested" / "dir" / "test.db").close()
        assert (tmp_path / "nested" / "dir" / "test.db").exists()


class TestTimestamp:
    def test_fixed_width_utc(self) -> None:
        assert to_timestamp(NOW) == "2026-10-18T12:00:00.000000+00:00"

    def test_converts_offset(self) -> None:
        tz = timezone(timedelta(hours=2))
        assert to_timestamp(datetime(2026, 10, 18, 14, 0, tzinfo=tz)) == to_timestamp(NOW)

    def test_naive_is_utc(self) -> None:
        assert to_timestamp(datetime(2026, 10, 18, 12, 0)) == to_timestamp(NOW)


class TestProfiles:
    def test_upsert_and_get(self, db: sqlite3.Connection) -> None:
        upsert_profile(db, UserProfile(user_id="u1", role="alumni", skills=["Python"], is_mentor=True))
        row = get_profile_row(db, "u1")
        assert row is not None
        assert row["role"] == "alumni"
        assert json.loads(row["skills"]) == ["Python"]
        assert row["is_mentor"] == 1

    def test_null_lists_stored_as_null(self, db: sqlite3.Connection) -> None:
        upsert_profile(db, UserProfile(user_id="u1"))
        row = get_profile_row(db, "u1")
        assert row["skills"] is None
        assert row["is_mentor"] is None

    def test_upsert_replaces(self, db: sqlite3.Connection) -> None:
        upsert_profile(db, UserProfile(user_id="u1", location="Austin"))
        upsert_profile(db, UserProfile(user_id="u1", location="Chicago"))
        assert get_profile_row(db, "u1")["location"] == "Chicago"
        assert db.execute("SELECT COUNT(*) FROM profiles").fetchone()[0] == 1

    def test_missing_profile(self, db: sqlite3.Connection) -> None:
        assert get_profile_row(db, "nobody") is None

    def test_list_excluding(self, db: sqlite3.Connection) -> None:
        for uid in ("u1", "u2", "u3"):
            upsert_profile(db, UserProfile(user_id=uid))
        rows = list_profile_rows_excluding(db, "u2")
        assert [r["user_id"] for r in rows] == ["u1", "u3"]


class TestPosts:
    def test_insert_new(self, db: sqlite3.Connection) -> None:
        post = PostRecord(id="p1", title="t", tags=["job"], created_at=NOW)
        assert insert_post(db, post) is True

    def test_duplicate_ignored(self, db: sqlite3.Connection) -> None:
        post = PostRecord(id="p1", title="t", created_at=NOW)
        insert_post(db, post)
        assert insert_post(db, post) is False

    def test_newest_first(self, db: sqlite3.Connection) -> None:
        insert_post(db, PostRecord(id="old", title="t", created_at=NOW - timedelta(days=3)))
        insert_post(db, PostRecord(id="new", title="t", created_at=NOW))
        insert_post(db, PostRecord(id="mid", title="t", created_at=NOW - timedelta(hours=1)))
        assert [r["id"] for r in list_post_rows(db)] == ["new", "mid", "old"]


class TestEvents:
    def test_duplicate_ignored(self, db: sqlite3.Connection) -> None:
        assert insert_event(db, _event("e1", 1)) is True
        assert insert_event(db, _event("e1", 1)) is False

    def test_filters_status_and_date(self, db: sqlite3.Connection) -> None:
        insert_event(db, _event("past", -1))
        insert_event(db, _event("later", 10))
        insert_event(db, _event("soon", 2))
        insert_event(db, _event("pending", 3, status="upcoming"))
        rows = list_event_rows(db, "approved", NOW)
        assert [r["id"] for r in rows] == ["soon", "later"]

    def test_event_at_now_included(self, db: sqlite3.Connection) -> None:
        insert_event(db, _event("now", 0))
        assert [r["id"] for r in list_event_rows(db, "approved", NOW)] == ["now"]
