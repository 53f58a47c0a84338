from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Sequence

from .config import DEFAULT_TRUST_CONFIG, TrustScoreConfig
from .models import POSITIVE_INTERACTIONS, InteractionEvent, InteractionType

_SECONDS_PER_DAY = 86400.0


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def age_in_days(timestamp: datetime, now: datetime) -> float:
    return (as_utc(now) - as_utc(timestamp)).total_seconds() / _SECONDS_PER_DAY


def content_interactions(
    content_id: str, interactions: Sequence[InteractionEvent]
) -> list[InteractionEvent]:
    return [i for i in interactions if i.content_id == content_id]


# ---------------------------------------------------------------------------
# Per-event weights
# ---------------------------------------------------------------------------


def social_distance_weight(
    distance: int | None, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG
) -> float:
    """1.0 for self, direct/second-hop weights for 1 and 2 hops, 0 beyond."""
    if distance == 0:
        return config.self_weight
    if distance == 1:
        return config.direct_follow_weight
    if distance == 2:
        return config.second_hop_weight
    return 0.0


def interaction_value(
    interaction_type: str, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG
) -> float:
    values = {
        InteractionType.upvote.value: config.upvote_value,
        InteractionType.save.value: config.save_value,
        InteractionType.share.value: config.share_value,
        InteractionType.downvote.value: config.downvote_value,
    }
    return values.get(interaction_type, 0.0)


# ---------------------------------------------------------------------------
# Social trust weight
# ---------------------------------------------------------------------------


def interaction_reinforcement(
    author_id: str,
    interactions: Sequence[InteractionEvent],
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> float:
    """Multiplier in [0.8, 1.2] from the share of the author's own interactions that are positive."""
    authored = [i for i in interactions if i.user_id == author_id]
    if not authored:
        return 1.0
    positive = sum(1 for i in authored if i.interaction_type in POSITIVE_INTERACTIONS)
    return config.reinforcement_base + config.reinforcement_span * (positive / len(authored))


def social_trust_weight(
    evaluator_id: str,
    author_id: str,
    distance: int | None,
    interactions: Sequence[InteractionEvent],
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> float:
    """Trust carried by the social path from evaluator to author, in [0, 1]."""
    if evaluator_id == author_id:
        return config.self_weight

    if distance is None or distance > config.max_social_distance:
        return 0.0

    if distance == 1:
        base_weight = config.direct_follow_weight
    elif distance == 2:
        base_weight = config.second_hop_weight
    else:
        base_weight = 0.0

    multiplier = interaction_reinforcement(author_id, interactions, config)
    return min(base_weight * multiplier, 1.0)


# ---------------------------------------------------------------------------
# Quality signal
# ---------------------------------------------------------------------------


def quality_signal(
    content_id: str,
    interactions: Sequence[InteractionEvent],
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> float:
    """Distance-weighted average interaction value on one content item.

    Not clamped: ranges from the downvote value up to the share value.
    """
    total = 0.0
    total_weight = 0.0
    for interaction in content_interactions(content_id, interactions):
        weight = social_distance_weight(interaction.social_distance, config)
        total += interaction_value(interaction.interaction_type, config) * weight
        total_weight += weight
    return total / total_weight if total_weight > 0 else 0.0


# ---------------------------------------------------------------------------
# Recency
# ---------------------------------------------------------------------------


def content_recency(age_days: float, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG) -> float:
    """Exponential half-life decay: 1.0 when new, 0.5 at one half-life."""
    return math.exp(-age_days * math.log(2) / config.recency_half_life_days)


def interaction_boost(
    interactions: Sequence[InteractionEvent],
    now: datetime,
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> float:
    recent = sum(
        1 for i in interactions
        if age_in_days(i.timestamp, now) <= config.recent_interaction_window_days
    )
    return min(recent * config.recent_interaction_boost, config.max_interaction_boost)


def recency_factor(
    created_at: datetime,
    interactions: Sequence[InteractionEvent],
    now: datetime,
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> float:
    recency = content_recency(age_in_days(created_at, now), config)
    return min(recency + interaction_boost(interactions, now, config), 1.0)


# ---------------------------------------------------------------------------
# Diversity
# ---------------------------------------------------------------------------


def diversity_bonus(
    content_id: str,
    interactions: Sequence[InteractionEvent],
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> float:
    """Reward for distinct endorsers, social distances and interaction types."""
    events = content_interactions(content_id, interactions)
    users = {i.user_id for i in events}
    distances = {i.social_distance for i in events}
    types = {i.interaction_type for i in events}

    user_div = min(len(users) * config.user_diversity_step, config.user_diversity_cap)
    distance_div = min(len(distances) * config.distance_diversity_step, config.distance_diversity_cap)
    type_div = min(len(types) * config.type_diversity_step, config.type_diversity_cap)
    return user_div + distance_div + type_div
