from __future__ import annotations

from collections import Counter
from typing import Any

from .store import FEED_RANK_EVENT, TRUST_SCORE_EVENT


def _mean(values: list[float], ndigits: int = 2) -> float:
    return round(sum(values) / len(values), ndigits) if values else 0.0


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    scores = [e for e in events if e["type"] == TRUST_SCORE_EVENT]
    feeds = [e for e in events if e["type"] == FEED_RANK_EVENT]
    total = len(scores)

    # Score and confidence averages
    avg_score = _mean([s["final_score"] for s in scores if "final_score" in s])
    avg_confidence = _mean([s["confidence"] for s in scores if "confidence" in s], 3)

    # Category distribution
    category_counter: Counter[str] = Counter(s.get("category", "unknown") for s in scores)
    categories = [{"name": n, "count": c} for n, c in category_counter.most_common()]

    # Threshold pass rate
    passed = sum(1 for s in scores if s.get("meets_threshold"))

    # Most active evaluators
    evaluator_counter: Counter[str] = Counter()
    for e in scores + feeds:
        evaluator_counter[e.get("evaluating_user_id", "unknown")] += 1
    top_evaluators = [{"name": n, "count": c} for n, c in evaluator_counter.most_common(10)]

    # Response time across both endpoints
    times = [e["response_time_ms"] for e in scores + feeds if "response_time_ms" in e]

    # Neighbourhood cache usage by feed ranking
    cache_hits = sum(1 for f in feeds if f.get("cache_hit"))

    return {
        "total_scores": total,
        "total_feed_rankings": len(feeds),
        "items_ranked": sum(f.get("total_candidates", 0) for f in feeds),
        "avg_final_score": avg_score,
        "avg_confidence": avg_confidence,
        "category_distribution": categories,
        "threshold_pass_rate": _rate(passed, total),
        "top_evaluators": top_evaluators,
        "avg_response_time_ms": round(sum(times) / len(times), 1) if times else 0.0,
        "cache_stats": {
            "hits": cache_hits,
            "misses": len(feeds) - cache_hits,
            "hit_rate": _rate(cache_hits, len(feeds)),
        },
    }
