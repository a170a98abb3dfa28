"""Abstract base class for the engine's data collaborator."""

from abc import ABC, abstractmethod
from datetime import datetime

from alumni_recs.core.schemas import Event, JobPosting, UserProfile


class StoreError(Exception):
    """A read against the backing data store failed."""


class DataStore(ABC):
    """Read-only queries the recommendation engine needs.

    Implementations raise StoreError when the backend cannot serve a read.
    """

    @abstractmethod
    async def get_profile(self, user_id: str) -> UserProfile | None:
        """Fetch one profile by user id, or None if it does not exist."""

    @abstractmethod
    async def list_profiles_excluding(self, user_id: str) -> list[UserProfile]:
        """Fetch every profile except the given user's."""

    @abstractmethod
    async def list_postings(self) -> list[JobPosting]:
        """Fetch all feed posts as postings, newest first."""

    @abstractmethod
    async def list_events(self, status: str, since: datetime) -> list[Event]:
        """Fetch events with the given status dated at or after since, soonest first."""
