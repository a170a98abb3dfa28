"""Recommendation engine: wires the data store, scorer, and ranker.

Data flow per recommendation kind:
  1. Actor gate (no profile loaded -> nothing to recommend)
  2. Store read -> candidates
  3. Scorer -> scored candidates
  4. Ranker -> threshold, order, limit

Failures are soft. A failed read is logged and yields an empty list from
the get_* methods; the fetch_* methods also report the error so a caller
can tell "no matches" apart from "could not fetch".
"""

import asyncio
import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from alumni_recs.core.config import ScoringConfig
from alumni_recs.core.schemas import (
    Event,
    JobPosting,
    RecommendationBundle,
    RecommendationResult,
    ScoredRecommendation,
    UserProfile,
)
from alumni_recs.pipeline.ranker import rank
from alumni_recs.pipeline.scorer import (
    score_event,
    score_posting,
    score_user_similarity,
    surfaced_user_reasons,
)
from alumni_recs.store.base import DataStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecommendationEngine:
    """Ranks connections, postings, and events for one user.

    Create one engine per user, initialize it, query it, then discard it::

        engine = RecommendationEngine(store)
        await engine.initialize("user-123")
        users = await engine.get_recommended_users(limit=5)
    """

    def __init__(
        self,
        store: DataStore,
        scoring: ScoringConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._scoring = scoring or ScoringConfig()
        self._clock = clock
        self._actor: UserProfile | None = None

    @property
    def actor(self) -> UserProfile | None:
        """The profile recommendations are computed for, if one was loaded."""
        return self._actor

    async def initialize(self, user_id: str) -> None:
        """Load the actor's profile. On failure the engine stays without one."""
        if self._actor is not None:
            logger.warning(
                "Engine already initialized for '%s' - ignoring '%s'",
                self._actor.user_id, user_id,
            )
            return
        try:
            profile = await self._store.get_profile(user_id)
        except Exception:
            logger.exception("Error fetching user profile '%s'", user_id)
            return
        if profile is None:
            logger.warning("No profile found for user '%s'", user_id)
            return
        self._actor = profile
        logger.debug("Engine initialized for '%s' (%s)", profile.user_id, profile.role)

    # ------------------------------------------------------------------
    # Result-returning queries
    # ------------------------------------------------------------------

    async def fetch_recommended_users(self, limit: int = 10) -> RecommendationResult[UserProfile]:
        """Rank other members as connections for the actor."""
        actor = self._actor
        if actor is None:
            return RecommendationResult[UserProfile]()
        try:
            users = await self._store.list_profiles_excluding(actor.user_id)
            scored = [
                ScoredRecommendation[UserProfile](
                    item=user,
                    score=score_user_similarity(actor, user)[0],
                    reasons=surfaced_user_reasons(actor, user),
                )
                for user in users
            ]
        except Exception as e:
            logger.exception("Error generating user recommendations")
            return RecommendationResult[UserProfile](error=_describe(e))
        ranked = rank(scored, self._scoring.user_min_score, limit)
        logger.info("User recommendations: %d of %d candidates", len(ranked), len(scored))
        return RecommendationResult[UserProfile](items=ranked)

    async def fetch_recommended_jobs(self, limit: int = 10) -> RecommendationResult[JobPosting]:
        """Rank job and internship postings for the actor."""
        actor = self._actor
        if actor is None:
            return RecommendationResult[JobPosting]()
        try:
            postings = await self._store.list_postings()
            now = self._clock()
            scored = []
            for posting in postings:
                if posting.kind is None:
                    continue
                score, reasons = score_posting(
                    actor, posting, now, self._scoring.recent_posting_days,
                )
                scored.append(
                    ScoredRecommendation[JobPosting](item=posting, score=score, reasons=reasons),
                )
        except Exception as e:
            logger.exception("Error generating job recommendations")
            return RecommendationResult[JobPosting](error=_describe(e))
        ranked = rank(scored, self._scoring.job_min_score, limit)
        logger.info("Job recommendations: %d of %d postings", len(ranked), len(scored))
        return RecommendationResult[JobPosting](items=ranked)

    async def fetch_recommended_events(self, limit: int = 8) -> RecommendationResult[Event]:
        """Rank approved upcoming events for the actor."""
        actor = self._actor
        if actor is None:
            return RecommendationResult[Event]()
        try:
            now = self._clock()
            events = await self._store.list_events(self._scoring.event_status, now)
            scored = []
            for event in events:
                score, reasons = score_event(
                    actor, event, now, self._scoring.upcoming_event_days,
                )
                scored.append(ScoredRecommendation[Event](item=event, score=score, reasons=reasons))
        except Exception as e:
            logger.exception("Error generating event recommendations")
            return RecommendationResult[Event](error=_describe(e))
        ranked = rank(scored, self._scoring.event_min_score, limit)
        logger.info("Event recommendations: %d of %d events", len(ranked), len(scored))
        return RecommendationResult[Event](items=ranked)

    # ------------------------------------------------------------------
    # List-returning queries
    # ------------------------------------------------------------------

    async def get_recommended_users(self, limit: int = 10) -> list[ScoredRecommendation[UserProfile]]:
        return (await self.fetch_recommended_users(limit)).items

    async def get_recommended_jobs(self, limit: int = 10) -> list[ScoredRecommendation[JobPosting]]:
        return (await self.fetch_recommended_jobs(limit)).items

    async def get_recommended_events(self, limit: int = 8) -> list[ScoredRecommendation[Event]]:
        return (await self.fetch_recommended_events(limit)).items

    async def get_all_recommendations(
        self,
        users_limit: int = 10,
        jobs_limit: int = 10,
        events_limit: int = 8,
    ) -> RecommendationBundle:
        """Run the three queries concurrently."""
        users, jobs, events = await asyncio.gather(
            self.get_recommended_users(users_limit),
            self.get_recommended_jobs(jobs_limit),
            self.get_recommended_events(events_limit),
        )
        return RecommendationBundle(users=users, jobs=jobs, events=events)

    def explain_user(self, candidate: UserProfile) -> tuple[int, list[str]]:
        """Full score breakdown for a candidate connection.

        Unlike the reasons attached to recommended users, this lists every
        rule that contributed to the score.
        """
        if self._actor is None:
            return 0, []
        return score_user_similarity(self._actor, candidate)


def export_results_json(bundle: RecommendationBundle) -> str:
    """Export recommendations as a JSON string, one entry per item."""
    data = []
    sections: list[tuple[str, list[ScoredRecommendation]]] = [  # type: ignore[type-arg]
        ("user", bundle.users),
        ("job", bundle.jobs),
        ("event", bundle.events),
    ]
    for kind, recommendations in sections:
        for rec in recommendations:
            data.append({
                "kind": kind,
                "score": rec.score,
                "reasons": rec.reasons,
                "item": rec.item.model_dump(mode="json"),
            })
    return json.dumps(data, indent=2)


def _describe(error: Exception) -> str:
    return f"{type(error).__name__}: {error}"
