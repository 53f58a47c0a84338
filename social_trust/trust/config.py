from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

from dotenv import load_dotenv

from .errors import InvalidInputError

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_ENV_PREFIX = "TRUST_"

# Every other field must be non-negative
_SIGNED_FIELDS = frozenset({"downvote_value"})


@dataclass(frozen=True)
class TrustScoreConfig:
    """
    Tunable constants of the trust engine.

    Combination weights must sum to 1.0. ``min_trust_threshold`` is kept on the
    0-1 scale it was defined on, while ``final_score`` and the category
    thresholds live on the 0-10 scale.
    """

    # Social graph
    direct_follow_weight: float = 0.75
    second_hop_weight: float = 0.25
    self_weight: float = 1.0
    max_social_distance: int = 2

    # Score bounds and thresholds
    max_trust_score: float = 10.0
    min_trust_threshold: float = 0.25
    highly_trusted_threshold: float = 8.0
    trusted_threshold: float = 6.0
    moderately_trusted_threshold: float = 4.0
    low_trust_threshold: float = 2.0

    # Combination weights
    social_weight: float = 0.4
    quality_weight: float = 0.3
    recency_weight: float = 0.2
    diversity_weight: float = 0.1

    # Interaction values
    upvote_value: float = 1.0
    save_value: float = 1.2
    share_value: float = 1.5
    downvote_value: float = -0.5

    # Author reinforcement multiplier: base + span * positive_fraction
    reinforcement_base: float = 0.8
    reinforcement_span: float = 0.4

    # Recency
    recency_half_life_days: float = 30.0
    recent_interaction_window_days: float = 7.0
    recent_interaction_boost: float = 0.1
    max_interaction_boost: float = 0.5

    # Diversity
    user_diversity_step: float = 0.05
    user_diversity_cap: float = 0.3
    distance_diversity_step: float = 0.1
    distance_diversity_cap: float = 0.2
    type_diversity_step: float = 0.05
    type_diversity_cap: float = 0.15

    # Confidence
    interaction_confidence_step: float = 0.1
    interaction_confidence_cap: float = 0.8
    min_confidence: float = 0.1
    max_confidence: float = 1.0

    @property
    def combination_weights(self) -> dict[str, float]:
        return {
            "social_trust_weight": self.social_weight,
            "quality_signals": self.quality_weight,
            "recency_factor": self.recency_weight,
            "diversity_bonus": self.diversity_weight,
        }

    def validate(self) -> TrustScoreConfig:
        """Raise ``InvalidInputError`` on an unusable configuration, else return self."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and not math.isfinite(value):
                raise InvalidInputError(f.name, "must be a finite number")
            if f.name not in _SIGNED_FIELDS and value < 0:
                raise InvalidInputError(f.name, "must not be negative")

        total = sum(self.combination_weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise InvalidInputError("combination_weights", f"must sum to 1.0, got {total}")

        thresholds = [
            self.highly_trusted_threshold,
            self.trusted_threshold,
            self.moderately_trusted_threshold,
            self.low_trust_threshold,
        ]
        if any(hi <= lo for hi, lo in zip(thresholds, thresholds[1:])):
            raise InvalidInputError("category_thresholds", "must be strictly descending")

        if self.recency_half_life_days <= 0:
            raise InvalidInputError("recency_half_life_days", "must be positive")
        if self.max_trust_score <= 0:
            raise InvalidInputError("max_trust_score", "must be positive")
        if not 0 < self.min_confidence <= self.max_confidence:
            raise InvalidInputError("min_confidence", "must be in (0, max_confidence]")
        return self

    @classmethod
    def from_env(cls, prefix: str = _ENV_PREFIX) -> TrustScoreConfig:
        """Build a config from ``TRUST_<FIELD>`` environment variables.

        Unset variables keep their defaults, e.g. ``TRUST_MAX_SOCIAL_DISTANCE=3``.
        """
        base = cls()
        overrides: dict[str, float | int] = {}
        for f in fields(cls):
            raw = os.getenv(f"{prefix}{f.name.upper()}")
            if raw is None or not raw.strip():
                continue
            caster = type(getattr(base, f.name))
            try:
                overrides[f.name] = caster(raw.strip())
            except ValueError as exc:
                raise InvalidInputError(f.name, f"cannot parse {raw!r}") from exc
        return replace(base, **overrides).validate()


DEFAULT_TRUST_CONFIG = TrustScoreConfig()
