from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from ..config import DEFAULT_SERVICE_CONFIG, ServiceConfig
from .cache import cache_get, cache_set, make_key
from .engine import TrustScoreEngine
from .graph import SocialNeighborhood, build_neighborhood, build_social_graph
from .models import (
    FeedItem,
    RankedFeed,
    RankedFeedItem,
    SocialConnection,
    TrustScoreInput,
)
from .signals import as_utc

logger = logging.getLogger(__name__)


def get_neighborhood(
    evaluator_id: str,
    connections: Sequence[SocialConnection],
    engine: TrustScoreEngine,
    service_config: ServiceConfig = DEFAULT_SERVICE_CONFIG,
) -> tuple[SocialNeighborhood, bool]:
    """Return the evaluator's bounded neighbourhood and whether it came from cache."""
    max_distance = engine.config.max_social_distance
    key = make_key(evaluator_id, connections, max_distance)

    if service_config.neighborhood_cache_enabled:
        cached = cache_get(key, ttl=service_config.neighborhood_cache_ttl)
        if cached is not None:
            logger.debug("Neighbourhood cache hit for %s", evaluator_id)
            return cached, True

    neighborhood = build_neighborhood(evaluator_id, build_social_graph(connections), engine.config)
    if service_config.neighborhood_cache_enabled:
        cache_set(key, neighborhood, ttl=service_config.neighborhood_cache_ttl)
    return neighborhood, False


def rank_feed(
    evaluator_id: str,
    items: Sequence[FeedItem],
    connections: Sequence[SocialConnection],
    engine: TrustScoreEngine | None = None,
    limit: int | None = None,
    now: datetime | None = None,
    service_config: ServiceConfig = DEFAULT_SERVICE_CONFIG,
) -> RankedFeed:
    """Score every item for one evaluator and sort by trust score, best first.

    The social neighbourhood is traversed once for the whole feed. Ties on
    score are broken by ascending content ID.
    """
    engine = engine or TrustScoreEngine()
    reference_time = as_utc(now or datetime.now(timezone.utc))
    neighborhood, cached = get_neighborhood(evaluator_id, connections, engine, service_config)

    ranked: list[RankedFeedItem] = []
    for item in items:
        data = TrustScoreInput(
            target_content_id=item.content.content_id,
            evaluating_user_id=evaluator_id,
            user_interactions=item.interactions,
            content_metadata=item.content,
            evaluated_at=reference_time,
        )
        ranked.append(RankedFeedItem(
            content_id=item.content.content_id,
            author_id=item.content.author_id,
            result=engine.calculate_trust_score(data, neighborhood=neighborhood),
        ))

    ranked.sort(key=lambda r: (-r.result.final_score, r.content_id))
    if limit is not None:
        ranked = ranked[:limit]

    return RankedFeed(items=ranked, total_candidates=len(items), neighborhood_cached=cached)
