from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .analytics.aggregator import compute_analytics
from .analytics.store import FEED_RANK_EVENT, TRUST_SCORE_EVENT, get_events, record_event
from .config import DEFAULT_SERVICE_CONFIG
from .trust.cache import get_cache_stats
from .trust.combiner import score_contributions
from .trust.config import TrustScoreConfig
from .trust.engine import TrustScoreEngine
from .trust.errors import InvalidInputError
from .trust.models import (
    FeedRankRequest,
    RankedFeed,
    TrustCategoryResponse,
    TrustScoreInput,
    TrustScoreResponse,
)
from .trust.ranking import rank_feed

logger = logging.getLogger(__name__)

app = FastAPI(title="Social Trust Score API", version="1.0.0")
engine = TrustScoreEngine(TrustScoreConfig.from_env())


@app.exception_handler(InvalidInputError)
def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.reason, "field": exc.field},
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/trust-score", response_model=TrustScoreResponse)
def trust_score(body: TrustScoreInput) -> TrustScoreResponse:
    start_time = time.time()

    result = engine.calculate_trust_score(body)
    meets = engine.meets_trust_threshold(result.final_score)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event(TRUST_SCORE_EVENT, {
        "evaluating_user_id": body.evaluating_user_id,
        "content_id": body.target_content_id,
        "final_score": result.final_score,
        "confidence": result.confidence,
        "category": result.category,
        "meets_threshold": meets,
        "response_time_ms": elapsed_ms,
    })

    return TrustScoreResponse(
        result=result,
        meets_threshold=meets,
        contributions=score_contributions(result.breakdown, engine.config),
    )


@app.post("/feed/rank", response_model=RankedFeed)
def feed_rank(body: FeedRankRequest) -> RankedFeed:
    start_time = time.time()

    feed = rank_feed(
        body.evaluating_user_id,
        body.items,
        body.social_connections,
        engine=engine,
        limit=body.limit or DEFAULT_SERVICE_CONFIG.default_feed_limit,
        now=body.evaluated_at,
        service_config=DEFAULT_SERVICE_CONFIG,
    )

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event(FEED_RANK_EVENT, {
        "evaluating_user_id": body.evaluating_user_id,
        "total_candidates": feed.total_candidates,
        "results_returned": len(feed.items),
        "cache_hit": feed.neighborhood_cached,
        "response_time_ms": elapsed_ms,
    })
    return feed


@app.get("/trust-category", response_model=TrustCategoryResponse)
def trust_category(score: float = Query(..., ge=0.0)) -> TrustCategoryResponse:
    return TrustCategoryResponse(
        score=score,
        category=engine.get_trust_category(score),
        meets_threshold=engine.meets_trust_threshold(score),
    )


# ── Operational endpoints ────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
