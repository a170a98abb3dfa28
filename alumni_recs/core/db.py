"""SQLite database layer for profiles, feed posts, and events."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from alumni_recs.core.schemas import Event, PostRecord, UserProfile

_PROFILES_TABLE = """
CREATE TABLE IF NOT EXISTS profiles (
    user_id         TEXT    PRIMARY KEY,
    first_name      TEXT    NOT NULL DEFAULT '',
    last_name       TEXT    NOT NULL DEFAULT '',
    role            TEXT    NOT NULL DEFAULT 'student',
    graduation_year INTEGER,
    skills          TEXT,
    interests       TEXT,
    location        TEXT,
    job_title       TEXT,
    company         TEXT,
    is_mentor       INTEGER
);
"""

_POSTS_TABLE = """
CREATE TABLE IF NOT EXISTS posts (
    id          TEXT PRIMARY KEY,
    author_id   TEXT NOT NULL DEFAULT '',
    title       TEXT NOT NULL,
    content     TEXT NOT NULL DEFAULT '',
    tags        TEXT,
    created_at  TEXT NOT NULL
);
"""

_EVENTS_TABLE = """
CREATE TABLE IF NOT EXISTS events (
    id          TEXT PRIMARY KEY,
    title       TEXT NOT NULL,
    description TEXT,
    event_date  TEXT NOT NULL,
    location    TEXT,
    category    TEXT,
    created_by  TEXT NOT NULL DEFAULT '',
    status      TEXT NOT NULL DEFAULT 'approved'
);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_PROFILES_TABLE)
    conn.execute(_POSTS_TABLE)
    conn.execute(_EVENTS_TABLE)
    conn.commit()
    return conn


def to_timestamp(value: datetime) -> str:
    """Fixed-width UTC ISO text, so timestamps compare correctly as strings."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _json_list(values: list[str] | None) -> str | None:
    return None if values is None else json.dumps(values)


def upsert_profile(conn: sqlite3.Connection, profile: UserProfile) -> None:
    """Insert a profile, replacing any existing row for the same user_id."""
    conn.execute(
        """
        INSERT INTO profiles
            (user_id, first_name, last_name, role, graduation_year, skills,
             interests, location, job_title, company, is_mentor)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id) DO UPDATE SET
            first_name = excluded.first_name,
            last_name = excluded.last_name,
            role = excluded.role,
            graduation_year = excluded.graduation_year,
            skills = excluded.skills,
            interests = excluded.interests,
            location = excluded.location,
            job_title = excluded.job_title,
            company = excluded.company,
            is_mentor = excluded.is_mentor
        """,
        (
            profile.user_id,
            profile.first_name,
            profile.last_name,
            profile.role,
            profile.graduation_year,
            _json_list(profile.skills),
            _json_list(profile.interests),
            profile.location,
            profile.job_title,
            profile.company,
            None if profile.is_mentor is None else int(profile.is_mentor),
        ),
    )
    conn.commit()


def insert_post(conn: sqlite3.Connection, post: PostRecord) -> bool:
    """Insert a post, ignoring it if the id already exists.

    Returns True if a new row was inserted, False if it was a duplicate.
    """
    try:
        conn.execute(
            """
            INSERT INTO posts (id, author_id, title, content, tags, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                post.id,
                post.author_id,
                post.title,
                post.content,
                _json_list(post.tags),
                to_timestamp(post.created_at),
            ),
        )
        conn.commit()
        return True
    except sqlite3.IntegrityError:
        return False


def insert_event(conn: sqlite3.Connection, event: Event) -> bool:
    """Insert an event, ignoring it if the id already exists.

    Returns True if a new row was inserted, False if it was a duplicate.
    """
    try:
        conn.execute(
            """
            INSERT INTO events
                (id, title, description, event_date, location, category,
                 created_by, status)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event.id,
                event.title,
                event.description,
                to_timestamp(event.event_date),
                event.location,
                event.category,
                event.created_by,
                event.status,
            ),
        )
        conn.commit()
        return True
    except sqlite3.IntegrityError:
        return False


def get_profile_row(conn: sqlite3.Connection, user_id: str) -> sqlite3.Row | None:
    """Return the profile row for user_id, or None if there is none."""
    return conn.execute(
        "SELECT * FROM profiles WHERE user_id = ?",
        (user_id,),
    ).fetchone()


def list_profile_rows_excluding(
    conn: sqlite3.Connection,
    user_id: str,
) -> list[sqlite3.Row]:
    """Return every profile row except user_id's, in insertion order."""
    return conn.execute(
        "SELECT * FROM profiles WHERE user_id != ? ORDER BY rowid",
        (user_id,),
    ).fetchall()


def list_post_rows(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    """Return all posts, newest first."""
    return conn.execute(
        "SELECT * FROM posts ORDER BY created_at DESC",
    ).fetchall()


def list_event_rows(
    conn: sqlite3.Connection,
    status: str,
    since: datetime,
) -> list[sqlite3.Row]:
    """Return events with the given status dated at or after since, soonest first."""
    return conn.execute(
        """
        SELECT * FROM events
        WHERE status = ? AND event_date >= ?
        ORDER BY event_date ASC
        """,
        (status, to_timestamp(since)),
    ).fetchall()
