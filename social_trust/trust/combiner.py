from __future__ import annotations

from .config import DEFAULT_TRUST_CONFIG, TrustScoreConfig
from .models import ConfidenceLevel, TrustScoreBreakdown

# Lower bounds of each level, highest first
_CONFIDENCE_LEVELS: list[tuple[float, ConfidenceLevel]] = [
    (0.8, ConfidenceLevel.very_high),
    (0.6, ConfidenceLevel.high),
    (0.4, ConfidenceLevel.medium),
    (0.2, ConfidenceLevel.low),
]


def raw_score(breakdown: TrustScoreBreakdown, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG) -> float:
    weights = config.combination_weights
    weighted = sum(getattr(breakdown, name) * w for name, w in weights.items())
    return weighted * config.max_trust_score


def combine_score(breakdown: TrustScoreBreakdown, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG) -> float:
    """Weighted sum of the four signals on the 0-10 scale, clamped and rounded to 2 dp."""
    score = max(0.0, min(raw_score(breakdown, config), config.max_trust_score))
    return round(score, 2)


def estimate_confidence(
    social_trust_weight: float,
    interaction_count: int,
    path_length: int,
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> float:
    """Evidence behind a score: mean of social, interaction and path confidence."""
    social_conf = social_trust_weight
    interaction_conf = min(
        interaction_count * config.interaction_confidence_step,
        config.interaction_confidence_cap,
    )
    path_conf = 1.0 / path_length if path_length > 0 else 0.0

    confidence = (social_conf + interaction_conf + path_conf) / 3
    return min(max(confidence, config.min_confidence), config.max_confidence)


def get_confidence_level(confidence: float) -> ConfidenceLevel:
    for lower, level in _CONFIDENCE_LEVELS:
        if confidence >= lower:
            return level
    return ConfidenceLevel.very_low


def score_contributions(
    breakdown: TrustScoreBreakdown, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG
) -> dict[str, float]:
    """Percentage of the weighted total each signal accounts for.

    Signals are taken by magnitude so a negative quality signal still shows its
    share. Returns all zeros when every weighted signal is zero.
    """
    parts = {
        name: abs(getattr(breakdown, name) * w)
        for name, w in config.combination_weights.items()
    }
    total = sum(parts.values())
    if total == 0:
        return {name: 0.0 for name in parts}
    return {name: round(v / total * 100, 1) for name, v in parts.items()}
