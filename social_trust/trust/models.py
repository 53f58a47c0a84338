from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ConnectionType(str, Enum):
    follow = "follow"
    trust = "trust"
    verified = "verified"


class InteractionType(str, Enum):
    upvote = "upvote"
    save = "save"
    share = "share"
    downvote = "downvote"


POSITIVE_INTERACTIONS = frozenset(
    {InteractionType.upvote.value, InteractionType.save.value, InteractionType.share.value}
)


class ConfidenceLevel(str, Enum):
    very_low = "very_low"
    low = "low"
    medium = "medium"
    high = "high"
    very_high = "very_high"


# ── Inputs ───────────────────────────────────────────────────────────────


class SocialConnection(BaseModel):
    """Directed edge: ``from_user_id`` follows ``to_user_id``."""

    from_user_id: str = Field(..., min_length=1)
    to_user_id: str = Field(..., min_length=1)
    connection_type: ConnectionType = ConnectionType.follow
    established_at: datetime
    trust_weight: float = Field(default=1.0, ge=0.0, allow_inf_nan=False)


class InteractionEvent(BaseModel):
    user_id: str = Field(..., min_length=1)
    content_id: str = Field(..., min_length=1)
    # Plain string so unknown types survive validation and score as 0.
    interaction_type: str
    timestamp: datetime
    social_distance: int = Field(
        ..., ge=0, description="Distance of user_id from the evaluating user, caller-supplied"
    )


class ContentMetadata(BaseModel):
    content_id: str = Field(..., min_length=1)
    author_id: str = Field(..., min_length=1)
    created_at: datetime
    category: str = ""
    tags: list[str] = Field(default_factory=list)


class TrustScoreInput(BaseModel):
    target_content_id: str = Field(..., min_length=1)
    evaluating_user_id: str = Field(..., min_length=1)
    social_connections: list[SocialConnection] = Field(default_factory=list)
    user_interactions: list[InteractionEvent] = Field(default_factory=list)
    content_metadata: ContentMetadata
    evaluated_at: datetime | None = Field(
        default=None, description="Reference time for recency; defaults to now (UTC)"
    )


# ── Outputs ──────────────────────────────────────────────────────────────


class SocialPathEntry(BaseModel):
    user_id: str
    distance: int
    contribution_weight: float


class TrustScoreBreakdown(BaseModel):
    social_trust_weight: float
    quality_signals: float
    recency_factor: float
    diversity_bonus: float


class TrustScoreResult(BaseModel):
    final_score: float
    breakdown: TrustScoreBreakdown
    social_path: list[SocialPathEntry] = Field(default_factory=list)
    confidence: float
    confidence_level: ConfidenceLevel
    category: str
    explanation: str = ""


class TrustScoreResponse(BaseModel):
    result: TrustScoreResult
    meets_threshold: bool
    contributions: dict[str, float] = Field(
        default_factory=dict, description="Percentage share of each weighted signal"
    )


class TrustCategoryResponse(BaseModel):
    score: float
    category: str
    meets_threshold: bool


# ── Feed ranking ─────────────────────────────────────────────────────────


class FeedItem(BaseModel):
    content: ContentMetadata
    interactions: list[InteractionEvent] = Field(default_factory=list)


class FeedRankRequest(BaseModel):
    evaluating_user_id: str = Field(..., min_length=1)
    social_connections: list[SocialConnection] = Field(default_factory=list)
    items: list[FeedItem] = Field(default_factory=list)
    limit: int | None = Field(default=None, ge=1, le=200)
    evaluated_at: datetime | None = None


class RankedFeedItem(BaseModel):
    content_id: str
    author_id: str
    result: TrustScoreResult


class RankedFeed(BaseModel):
    items: list[RankedFeedItem]
    total_candidates: int
    neighborhood_cached: bool = False
