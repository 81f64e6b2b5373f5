"""Core domain models for tender announcements.

This module defines the input the matcher works on:
- Announcement: a single procurement notice supplied by the caller
- ConfidenceTier / Recommendation: coarse labels derived from scores
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ConfidenceTier(str, Enum):
    """Coarse bucket derived from a total score, used for display and triage."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {
    ConfidenceTier.NONE: 0,
    ConfidenceTier.LOW: 1,
    ConfidenceTier.MEDIUM: 2,
    ConfidenceTier.HIGH: 3,
}


class Recommendation(str, Enum):
    """Binary triage signal for an announcement."""

    PROCEED = "proceed"
    SKIP = "skip"


class Announcement(BaseModel):
    """A tender announcement to evaluate against the product catalog.

    Title and organization are required by the upstream feeds but may be
    empty; the matcher treats empty text as "no evidence" rather than an
    error. Missing values are coerced to empty strings.
    """

    id: str = Field("", description="Announcement identifier from the source feed")
    title: str = Field("", description="Announcement title")
    organization: str = Field("", description="Issuing organization name")
    description: Optional[str] = Field(None, description="Free-text body of the notice")
    estimated_price: Optional[float] = Field(
        None, ge=0, description="Estimated contract price (currency-agnostic)"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "20251104-001",
                "title": "다회선 초음파유량계 설치 공사",
                "organization": "한국수자원공사 부산권지역본부",
                "description": "규격: DN 1000, DN 1200",
                "estimated_price": 50000000,
            }
        },
    }

    @field_validator("id", "title", "organization", mode="before")
    @classmethod
    def coerce_missing_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def combined_text(self) -> str:
        """Title, organization and description joined for keyword scanning."""
        parts = [self.title, self.organization, self.description or ""]
        return " ".join(part for part in parts if part)
