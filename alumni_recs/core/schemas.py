"""Core data models for the recommendation engine."""

from datetime import datetime, timezone
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["student", "alumni", "admin"]
PostingKind = Literal["job", "internship"]

# Tags that carry structured job metadata as "<prefix><value>".
COMPANY_TAG = "company:"
LOCATION_TAG = "location:"
LINK_TAG = "link:"
_STRUCTURED_TAGS = (COMPANY_TAG, LOCATION_TAG, LINK_TAG)
_KIND_TAGS = ("job", "internship")

T = TypeVar("T")


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserProfile(BaseModel):
    """A platform member: the requesting user or a candidate connection."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    first_name: str = ""
    last_name: str = ""
    role: Role = "student"
    graduation_year: int | None = None
    skills: list[str] | None = None
    interests: list[str] | None = None
    location: str | None = None
    job_title: str | None = None
    company: str | None = None
    is_mentor: bool | None = None

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.user_id


class PostRecord(BaseModel):
    """A feed post as stored, with job metadata encoded in its tags."""

    model_config = ConfigDict(frozen=True)

    id: str
    author_id: str = ""
    title: str
    content: str = ""
    tags: list[str] | None = None
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class JobPosting(BaseModel):
    """A job or internship opening with its tag metadata broken out.

    ``kind`` is None for posts that carry neither a ``job`` nor an
    ``internship`` tag; those are not job postings.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""
    created_at: datetime
    kind: PostingKind | None = None
    company: str | None = None
    location: str | None = None
    link: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @classmethod
    def from_post(cls, post: PostRecord) -> "JobPosting":
        """Translate a tag-encoded post into a structured posting."""
        tags = list(post.tags or [])
        if "job" in tags:
            kind: PostingKind | None = "job"
        elif "internship" in tags:
            kind = "internship"
        else:
            kind = None
        free_tags = [
            t for t in tags
            if t not in _KIND_TAGS and not t.startswith(_STRUCTURED_TAGS)
        ]
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            created_at=post.created_at,
            kind=kind,
            company=_tag_value(tags, COMPANY_TAG),
            location=_tag_value(tags, LOCATION_TAG),
            link=_tag_value(tags, LINK_TAG),
            tags=free_tags,
        )


class Event(BaseModel):
    """A scheduled gathering."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str | None = None
    event_date: datetime
    location: str | None = None
    category: str | None = None
    created_by: str = ""
    status: str = "approved"

    @field_validator("event_date")
    @classmethod
    def event_date_as_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class ScoredRecommendation(BaseModel, Generic[T]):
    """Wrapper that pairs a candidate with its relevance score and reasons."""

    model_config = ConfigDict(frozen=True)

    item: T
    score: int = Field(default=0, ge=0)
    reasons: list[str] = Field(default_factory=list)


class RecommendationResult(BaseModel, Generic[T]):
    """Ranked recommendations, or the reason they could not be produced."""

    model_config = ConfigDict(frozen=True)

    items: list[ScoredRecommendation[T]] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RecommendationBundle(BaseModel):
    """All three recommendation kinds for one user."""

    model_config = ConfigDict(frozen=True)

    users: list[ScoredRecommendation[UserProfile]] = Field(default_factory=list)
    jobs: list[ScoredRecommendation[JobPosting]] = Field(default_factory=list)
    events: list[ScoredRecommendation[Event]] = Field(default_factory=list)


def _tag_value(tags: list[str], prefix: str) -> str | None:
    """Return the remainder of the first tag starting with ``prefix``."""
    for tag in tags:
        if tag.startswith(prefix):
            return tag[len(prefix):]
    return None
