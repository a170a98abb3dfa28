"""Rule-based relevance scoring for connections, job postings, and events.

Every rule is additive and fires independently. Text comparisons are
case-insensitive, and a rule whose inputs are missing on either side
contributes nothing. Each scorer returns (score, reasons), where reasons
names the rules that fired, in rule order.
"""

import math
from datetime import datetime, timedelta

from alumni_recs.core.schemas import Event, JobPosting, UserProfile

ALUMNI_CONNECTION_BONUS = 30
SAME_ROLE_BONUS = 20
COMMON_SKILL_BONUS = 15
SHARED_INTEREST_BONUS = 10
SAME_LOCATION_BONUS = 15
GRADUATION_YEAR_BONUS = 20
GRADUATION_YEAR_STEP = 5
GRADUATION_YEAR_WINDOW = 2
SAME_COMPANY_BONUS = 25
MENTOR_BONUS = 40

INTERNSHIP_FIT_BONUS = 30
JOB_FIT_BONUS = 25
SKILL_MATCH_BONUS = 20
POSTING_LOCATION_BONUS = 25
INTEREST_MATCH_BONUS = 15
POSTING_COMPANY_BONUS = 30
RECENT_POSTING_BONUS = 15

EVENT_BASE_SCORE = 10
EVENT_INTEREST_BONUS = 25
LOCAL_EVENT_BONUS = 20
AUDIENCE_FOCUS_BONUS = 20
UPCOMING_EVENT_BONUS = 15

STUDENT_EVENT_KEYWORDS = ("student", "career", "internship")
ALUMNI_EVENT_KEYWORDS = ("alumni", "networking", "professional")

_SECONDS_PER_DAY = 60 * 60 * 24


def score_user_similarity(
    actor: UserProfile,
    candidate: UserProfile,
) -> tuple[int, list[str]]:
    """Score how relevant a candidate connection is for the actor."""
    score = 0
    reasons: list[str] = []

    # Students are steered towards alumni; otherwise peers of the same role
    if actor.role == "student" and candidate.role == "alumni":
        score += ALUMNI_CONNECTION_BONUS
        reasons.append("Alumni connection")
    elif actor.role == candidate.role:
        score += SAME_ROLE_BONUS
        reasons.append("Same role")

    if actor.skills and candidate.skills:
        common = _count_common(actor.skills, candidate.skills)
        score += common * COMMON_SKILL_BONUS
        if common:
            reasons.append(f"{common} common skills")

    if actor.interests and candidate.interests:
        shared = _count_common(actor.interests, candidate.interests)
        score += shared * SHARED_INTEREST_BONUS
        if shared:
            reasons.append(f"{shared} shared interests")

    if _same_text(actor.location, candidate.location):
        score += SAME_LOCATION_BONUS
        reasons.append("Same location")

    if actor.graduation_year and candidate.graduation_year:
        year_diff = abs(actor.graduation_year - candidate.graduation_year)
        if year_diff <= GRADUATION_YEAR_WINDOW:
            score += GRADUATION_YEAR_BONUS - year_diff * GRADUATION_YEAR_STEP
            reasons.append(f"Similar graduation year ({year_diff} years apart)")

    if _same_text(actor.company, candidate.company):
        score += SAME_COMPANY_BONUS
        reasons.append("Same company")

    if actor.role == "student" and candidate.is_mentor:
        score += MENTOR_BONUS
        reasons.append("Available mentor")

    return score, reasons


def surfaced_user_reasons(actor: UserProfile, candidate: UserProfile) -> list[str]:
    """Reasons shown alongside a recommended connection.

    Narrower than the score breakdown: only the alumni and mentor factors
    are reported, and the mentor flag is reported for any actor.
    """
    reasons: list[str] = []
    if actor.role == "student" and candidate.role == "alumni":
        reasons.append("Alumni connection")
    if candidate.is_mentor:
        reasons.append("Available mentor")
    return reasons


def score_posting(
    actor: UserProfile,
    posting: JobPosting,
    now: datetime,
    recent_days: int = 7,
) -> tuple[int, list[str]]:
    """Score how relevant a job or internship posting is for the actor."""
    score = 0
    reasons: list[str] = []

    if actor.role == "student" and posting.kind == "internship":
        score += INTERNSHIP_FIT_BONUS
        reasons.append("Internship suitable for students")
    elif actor.role == "alumni" and posting.kind == "job":
        score += JOB_FIT_BONUS
        reasons.append("Full-time position")

    # Keyword matches only apply to postings with a body
    if actor.skills and posting.content:
        matches = _count_mentions(actor.skills, posting)
        score += matches * SKILL_MATCH_BONUS
        if matches:
            reasons.append(f"Matches {matches} of your skills")

    if actor.location and posting.location and posting.location.lower() in actor.location.lower():
        score += POSTING_LOCATION_BONUS
        reasons.append("Location match")

    if actor.interests and posting.content:
        matches = _count_mentions(actor.interests, posting)
        score += matches * INTEREST_MATCH_BONUS
        if matches:
            reasons.append("Aligns with your interests")

    if _same_text(actor.company, posting.company):
        score += POSTING_COMPANY_BONUS
        reasons.append("Same company as your experience")

    if _whole_days(now - posting.created_at) <= recent_days:
        score += RECENT_POSTING_BONUS
        reasons.append("Recently posted")

    return score, reasons


def score_event(
    actor: UserProfile,
    event: Event,
    now: datetime,
    upcoming_days: int = 14,
) -> tuple[int, list[str]]:
    """Score how relevant an upcoming event is for the actor.

    Every event starts from EVENT_BASE_SCORE.
    """
    score = EVENT_BASE_SCORE
    reasons: list[str] = []

    if event.category and actor.interests:
        category = event.category.lower()
        if any(i.lower() in category or category in i.lower() for i in actor.interests):
            score += EVENT_INTEREST_BONUS
            reasons.append("Matches your interests")

    if actor.location and event.location and event.location.lower() in actor.location.lower():
        score += LOCAL_EVENT_BONUS
        reasons.append("Local event")

    if event.title or event.description:
        text = f"{event.title} {event.description or ''}".lower()
        if actor.role == "student" and any(kw in text for kw in STUDENT_EVENT_KEYWORDS):
            score += AUDIENCE_FOCUS_BONUS
            reasons.append("Student-focused")
        if actor.role == "alumni" and any(kw in text for kw in ALUMNI_EVENT_KEYWORDS):
            score += AUDIENCE_FOCUS_BONUS
            reasons.append("Alumni networking")

    if _whole_days(event.event_date - now) <= upcoming_days:
        score += UPCOMING_EVENT_BONUS
        reasons.append("Happening soon")

    return score, reasons


def _count_common(mine: list[str], theirs: list[str]) -> int:
    """Count entries of mine that appear in theirs, ignoring case."""
    lowered = {t.lower() for t in theirs}
    return sum(1 for m in mine if m.lower() in lowered)


def _count_mentions(keywords: list[str], posting: JobPosting) -> int:
    """Count keywords mentioned in the posting's title or body."""
    content = posting.content.lower()
    title = posting.title.lower()
    return sum(1 for kw in keywords if kw.lower() in content or kw.lower() in title)


def _same_text(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return a.lower() == b.lower()


def _whole_days(delta: timedelta) -> int:
    """Floor a timedelta to whole days."""
    return math.floor(delta.total_seconds() / _SECONDS_PER_DAY)
