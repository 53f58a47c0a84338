from __future__ import annotations

from fastapi.testclient import TestClient

from social_trust.analytics.aggregator import compute_analytics
from social_trust.analytics.store import (
    FEED_RANK_EVENT,
    TRUST_SCORE_EVENT,
    clear_events,
    get_events,
    record_event,
)
from social_trust.app import app
from social_trust.trust.cache import clear_cache

client = TestClient(app)


def _score_payload(author: str = "bob") -> dict:
    return {
        "target_content_id": f"rec-{author}",
        "evaluating_user_id": "alice",
        "social_connections": [
            {"from_user_id": "alice", "to_user_id": "bob", "established_at": "2024-06-01T00:00:00Z"}
        ],
        "content_metadata": {
            "content_id": f"rec-{author}",
            "author_id": author,
            "created_at": "2025-01-15T12:00:00Z",
        },
        "evaluated_at": "2025-01-15T12:00:00Z",
    }


def test_analytics_returns_empty_initially():
    clear_events()
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_scores"] == 0
    assert body["total_feed_rankings"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["threshold_pass_rate"] == 0.0


def test_analytics_tracks_scores():
    clear_events()
    client.post("/trust-score", json=_score_payload("bob"))
    client.post("/trust-score", json=_score_payload("zed"))

    body = client.get("/analytics").json()
    assert body["total_scores"] == 2
    assert body["avg_final_score"] == 3.5
    assert body["threshold_pass_rate"] == 100.0
    categories = {c["name"]: c["count"] for c in body["category_distribution"]}
    assert categories == {"Moderately Trusted": 1, "Low Trust": 1}
    assert body["top_evaluators"] == [{"name": "alice", "count": 2}]


def test_analytics_tracks_feed_rankings():
    clear_events()
    clear_cache()
    payload = {
        "evaluating_user_id": "alice",
        "social_connections": [],
        "items": [
            {"content": {"content_id": "r1", "author_id": "bob", "created_at": "2025-01-15T12:00:00Z"}},
            {"content": {"content_id": "r2", "author_id": "mia", "created_at": "2025-01-15T12:00:00Z"}},
        ],
        "evaluated_at": "2025-01-15T12:00:00Z",
    }
    client.post("/feed/rank", json=payload)
    client.post("/feed/rank", json=payload)

    body = client.get("/analytics").json()
    assert body["total_feed_rankings"] == 2
    assert body["items_ranked"] == 4
    assert body["cache_stats"] == {"hits": 1, "misses": 1, "hit_rate": 50.0}


def test_compute_analytics_from_raw_events():
    events = [
        {"type": TRUST_SCORE_EVENT, "evaluating_user_id": "alice", "final_score": 8.0,
         "confidence": 0.9, "category": "Highly Trusted", "meets_threshold": True,
         "response_time_ms": 2.0},
        {"type": TRUST_SCORE_EVENT, "evaluating_user_id": "bob", "final_score": 0.0,
         "confidence": 0.1, "category": "Untrusted", "meets_threshold": False,
         "response_time_ms": 4.0},
    ]
    result = compute_analytics(events)
    assert result["avg_final_score"] == 4.0
    assert result["avg_confidence"] == 0.5
    assert result["threshold_pass_rate"] == 50.0
    assert result["avg_response_time_ms"] == 3.0


def test_store_filters_by_type():
    clear_events()
    record_event(TRUST_SCORE_EVENT, {"final_score": 1.0})
    record_event(FEED_RANK_EVENT, {"total_candidates": 3})

    assert len(get_events()) == 2
    assert [e["type"] for e in get_events(FEED_RANK_EVENT)] == [FEED_RANK_EVENT]
    assert "timestamp" in get_events(TRUST_SCORE_EVENT)[0]
