"""Threshold filter and ranking for scored recommendations."""

import logging
from collections.abc import Iterable
from typing import TypeVar

from alumni_recs.core.schemas import ScoredRecommendation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def rank(
    scored: Iterable[ScoredRecommendation[T]],
    min_score: int,
    limit: int,
) -> list[ScoredRecommendation[T]]:
    """Keep recommendations scoring above min_score, best first, at most limit.

    The sort is stable, so equal scores keep their input order. limit is
    applied as a plain slice bound.
    """
    candidates = list(scored)
    kept = [s for s in candidates if s.score > min_score]
    dropped = len(candidates) - len(kept)
    if dropped:
        logger.debug("rank: %d candidates at or below %d removed", dropped, min_score)
    kept.sort(key=lambda s: s.score, reverse=True)
    return kept[:limit]
