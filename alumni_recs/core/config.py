"""Configuration models and YAML loader for the recommendation engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/alumni.db"


class LimitsConfig(BaseModel):
    """Default result counts per recommendation kind."""

    users: int = Field(default=10, ge=0)
    jobs: int = Field(default=10, ge=0)
    events: int = Field(default=8, ge=0)


class ScoringConfig(BaseModel):
    """Relevance thresholds and time windows for scoring.

    A candidate is recommended only when its score is strictly greater
    than the minimum for its kind.
    """

    user_min_score: int = Field(default=10, ge=0)
    job_min_score: int = Field(default=10, ge=0)
    event_min_score: int = Field(default=15, ge=0)
    recent_posting_days: int = Field(default=7, ge=0)
    upcoming_event_days: int = Field(default=14, ge=0)
    event_status: str = "approved"

    @field_validator("event_status")
    @classmethod
    def event_status_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "event_status must not be empty"
            raise ValueError(msg)
        return v.strip()


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
