from __future__ import annotations

from .models import TrustScoreResult


def explain_trust_score(result: TrustScoreResult) -> str:
    """Short human-readable reason for a score, e.g. "Direct connection, Recent activity"."""
    if result.final_score == 0:
        return "No social connection found"

    parts: list[str] = []
    breakdown = result.breakdown

    if breakdown.social_trust_weight > 0 and result.social_path:
        hops = len(result.social_path) - 1
        if hops == 0:
            parts.append("Your own recommendation")
        elif hops == 1:
            parts.append("Direct connection")
        elif hops == 2:
            parts.append("Friend of friend")
        else:
            parts.append(f"{hops} degrees of separation")

    if breakdown.quality_signals > 0:
        parts.append("Quality signals from network")

    if breakdown.recency_factor > 0.5:
        parts.append("Recent activity")

    if breakdown.diversity_bonus > 0:
        parts.append("Diverse endorsements")

    return ", ".join(parts) if parts else "Based on network activity"
