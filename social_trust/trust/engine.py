"""
Trust score orchestration.

``TrustScoreEngine.calculate_trust_score`` is a pure function of its input and
the engine's config: no I/O, no shared mutable state, safe to call from any
number of threads. Pass ``evaluated_at`` for fully reproducible results.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from .combiner import combine_score, estimate_confidence, get_confidence_level
from .config import DEFAULT_TRUST_CONFIG, TrustScoreConfig
from .errors import InvalidInputError
from .explain import explain_trust_score
from .graph import (
    SocialNeighborhood,
    build_social_graph,
    find_social_distance,
    reconstruct_social_path,
)
from .models import TrustScoreBreakdown, TrustScoreInput, TrustScoreResult
from .signals import (
    age_in_days,
    as_utc,
    diversity_bonus,
    quality_signal,
    recency_factor,
    social_trust_weight,
)

logger = logging.getLogger(__name__)


def validate_input(data: TrustScoreInput, now: datetime) -> None:
    """Reject inputs that would otherwise produce NaN or meaningless scores."""
    if not data.evaluating_user_id:
        raise InvalidInputError("evaluating_user_id", "must not be empty")
    if not data.content_metadata.author_id:
        raise InvalidInputError("content_metadata.author_id", "must not be empty")

    if age_in_days(data.content_metadata.created_at, now) < 0:
        raise InvalidInputError(
            "content_metadata.created_at", "is later than the evaluation time"
        )

    for conn in data.social_connections:
        if not math.isfinite(conn.trust_weight) or conn.trust_weight < 0:
            raise InvalidInputError("social_connections.trust_weight", "must be a finite, non-negative number")

    for interaction in data.user_interactions:
        if interaction.social_distance < 0:
            raise InvalidInputError("user_interactions.social_distance", "must not be negative")


class TrustScoreEngine:
    """Personalised trust score for one recommendation, relative to one evaluating user."""

    def __init__(self, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG) -> None:
        self.config = config.validate()

    def calculate_trust_score(
        self,
        data: TrustScoreInput,
        neighborhood: SocialNeighborhood | None = None,
    ) -> TrustScoreResult:
        """Score ``data.content_metadata`` for ``data.evaluating_user_id``.

        ``neighborhood`` may be a precomputed BFS tree for the same evaluator
        (see ``build_neighborhood``); when given, ``social_connections`` is not
        re-traversed.
        """
        config = self.config
        now = as_utc(data.evaluated_at or datetime.now(timezone.utc))
        validate_input(data, now)

        evaluator = data.evaluating_user_id
        content = data.content_metadata
        interactions = data.user_interactions

        if neighborhood is not None:
            if neighborhood.evaluator_id != evaluator:
                raise InvalidInputError(
                    "neighborhood",
                    f"built for {neighborhood.evaluator_id!r}, not {evaluator!r}",
                )
            if neighborhood.max_distance != config.max_social_distance:
                raise InvalidInputError("neighborhood", "built with a different max_social_distance")
            distance = neighborhood.distance_to(content.author_id)
            social_path = neighborhood.path_to(content.author_id, config)
        else:
            graph = build_social_graph(data.social_connections)
            distance = find_social_distance(evaluator, content.author_id, graph, config)
            social_path = reconstruct_social_path(evaluator, content.author_id, graph, config)

        breakdown = TrustScoreBreakdown(
            social_trust_weight=social_trust_weight(
                evaluator, content.author_id, distance, interactions, config
            ),
            quality_signals=quality_signal(data.target_content_id, interactions, config),
            recency_factor=recency_factor(content.created_at, interactions, now, config),
            diversity_bonus=diversity_bonus(data.target_content_id, interactions, config),
        )
        final_score = combine_score(breakdown, config)
        confidence = estimate_confidence(
            breakdown.social_trust_weight, len(interactions), len(social_path), config
        )

        result = TrustScoreResult(
            final_score=final_score,
            breakdown=breakdown,
            social_path=social_path,
            confidence=confidence,
            confidence_level=get_confidence_level(confidence),
            category=self.get_trust_category(final_score),
        )
        result = result.model_copy(update={"explanation": explain_trust_score(result)})

        logger.debug(
            "Trust score %s for content %s (evaluator=%s, distance=%s): %s",
            final_score, data.target_content_id, evaluator, distance, breakdown.model_dump(),
        )
        return result

    def meets_trust_threshold(self, score: float) -> bool:
        # min_trust_threshold is on the 0-1 scale while scores are 0-10; kept as defined.
        return score >= self.config.min_trust_threshold

    def get_trust_category(self, score: float) -> str:
        config = self.config
        if score >= config.highly_trusted_threshold:
            return "Highly Trusted"
        if score >= config.trusted_threshold:
            return "Trusted"
        if score >= config.moderately_trusted_threshold:
            return "Moderately Trusted"
        if score >= config.low_trust_threshold:
            return "Low Trust"
        return "Untrusted"


def calculate_trust_score(
    data: TrustScoreInput, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG
) -> TrustScoreResult:
    """Module-level shortcut for a one-off score with the given config."""
    return TrustScoreEngine(config).calculate_trust_score(data)
