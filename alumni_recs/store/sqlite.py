"""DataStore backed by the local SQLite database.

Rows are translated into domain models here, including breaking the
tag-encoded job metadata of feed posts out into structured fields.
"""

import json
import logging
import sqlite3
from datetime import datetime

from pydantic import ValidationError

from alumni_recs.core.db import (
    get_profile_row,
    list_event_rows,
    list_post_rows,
    list_profile_rows_excluding,
)
from alumni_recs.core.schemas import Event, JobPosting, PostRecord, UserProfile
from alumni_recs.store.base import DataStore, StoreError

logger = logging.getLogger(__name__)

_READ_ERRORS = (sqlite3.Error, ValidationError, json.JSONDecodeError)


class SQLiteStore(DataStore):
    """Serves profiles, postings, and events from an open sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def get_profile(self, user_id: str) -> UserProfile | None:
        try:
            row = get_profile_row(self._conn, user_id)
            return None if row is None else _row_to_profile(row)
        except _READ_ERRORS as e:
            msg = f"Failed to read profile '{user_id}': {e}"
            raise StoreError(msg) from e

    async def list_profiles_excluding(self, user_id: str) -> list[UserProfile]:
        try:
            rows = list_profile_rows_excluding(self._conn, user_id)
            profiles = [_row_to_profile(r) for r in rows]
        except _READ_ERRORS as e:
            msg = f"Failed to read profiles: {e}"
            raise StoreError(msg) from e
        logger.debug("Loaded %d candidate profiles", len(profiles))
        return profiles

    async def list_postings(self) -> list[JobPosting]:
        try:
            rows = list_post_rows(self._conn)
            postings = [JobPosting.from_post(_row_to_post(r)) for r in rows]
        except _READ_ERRORS as e:
            msg = f"Failed to read posts: {e}"
            raise StoreError(msg) from e
        logger.debug("Loaded %d posts", len(postings))
        return postings

    async def list_events(self, status: str, since: datetime) -> list[Event]:
        try:
            rows = list_event_rows(self._conn, status, since)
            events = [Event.model_validate(dict(r)) for r in rows]
        except _READ_ERRORS as e:
            msg = f"Failed to read events: {e}"
            raise StoreError(msg) from e
        logger.debug("Loaded %d '%s' events since %s", len(events), status, since.isoformat())
        return events


def _load_list(raw: str | None) -> list[str] | None:
    return None if raw is None else json.loads(raw)


def _row_to_profile(row: sqlite3.Row) -> UserProfile:
    data = dict(row)
    data["skills"] = _load_list(data["skills"])
    data["interests"] = _load_list(data["interests"])
    if data["is_mentor"] is not None:
        data["is_mentor"] = bool(data["is_mentor"])
    return UserProfile.model_validate(data)


def _row_to_post(row: sqlite3.Row) -> PostRecord:
    data = dict(row)
    data["tags"] = _load_list(data["tags"])
    return PostRecord.model_validate(data)
