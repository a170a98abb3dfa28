"""Seed data loader: YAML file of profiles, posts, and events into SQLite."""

import logging
import sqlite3
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from alumni_recs.core.db import insert_event, insert_post, upsert_profile
from alumni_recs.core.schemas import Event, PostRecord, UserProfile

logger = logging.getLogger(__name__)


class SeedData(BaseModel):
    """Contents of a seed file."""

    profiles: list[UserProfile] = Field(default_factory=list)
    posts: list[PostRecord] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SeedData":
        """Load seed data from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Seed file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)


def seed_db(conn: sqlite3.Connection, data: SeedData) -> tuple[int, int, int]:
    """Write seed data to the database.

    Profiles are upserted; posts and events with an existing id are skipped.
    Returns (profiles_written, new_posts, new_events).
    """
    for profile in data.profiles:
        upsert_profile(conn, profile)
    new_posts = sum(1 for p in data.posts if insert_post(conn, p))
    new_events = sum(1 for e in data.events if insert_event(conn, e))
    logger.info(
        "Seeded %d profiles, %d new posts, %d new events",
        len(data.profiles), new_posts, new_events,
    )
    return (len(data.profiles), new_posts, new_events)
