"""Tests for threshold filtering and ranking."""

from alumni_recs.core.schemas import ScoredRecommendation, UserProfile
from alumni_recs.pipeline.ranker import rank


def _rec(user_id: str, score: int) -> ScoredRecommendation[UserProfile]:
    return ScoredRecommendation[UserProfile](item=UserProfile(user_id=user_id), score=score)


def _ids(recs: list[ScoredRecommendation[UserProfile]]) -> list[str]:
    return [r.item.user_id for r in recs]


class TestThreshold:
    def test_score_at_threshold_excluded(self) -> None:
        assert rank([_rec("a", 10)], min_score=10, limit=10) == []

    def test_score_above_threshold_included(self) -> None:
        assert _ids(rank([_rec("a", 11)], min_score=10, limit=10)) == ["a"]

    def test_zero_scores_excluded_with_zero_threshold(self) -> None:
        assert rank([_rec("a", 0)], min_score=0, limit=10) == []


class TestOrdering:
    def test_sorted_descending(self) -> None:
        recs = [_rec("a", 20), _rec("b", 50), _rec("c", 35)]
        assert _ids(rank(recs, min_score=10, limit=10)) == ["b", "c", "a"]

    def test_ties_keep_input_order(self) -> None:
        recs = [_rec("a", 30), _rec("b", 40), _rec("c", 30), _rec("d", 30)]
        assert _ids(rank(recs, min_score=10, limit=10)) == ["b", "a", "c", "d"]


class TestLimit:
    def test_limit_applied(self) -> None:
        recs = [_rec(str(i), 20 + i) for i in range(5)]
        assert len(rank(recs, min_score=10, limit=3)) == 3

    def test_zero_limit(self) -> None:
        assert rank([_rec("a", 50)], min_score=10, limit=0) == []

    def test_smaller_limit_is_prefix(self) -> None:
        recs = [_rec(str(i), s) for i, s in enumerate([15, 40, 40, 25, 60, 15])]
        full = rank(recs, min_score=10, limit=10)
        for k in range(len(full) + 1):
            assert rank(recs, min_score=10, limit=k) == full[:k]
