from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from social_trust.config import ServiceConfig
from social_trust.trust.cache import clear_cache, get_cache_stats
from social_trust.trust.engine import TrustScoreEngine
from social_trust.trust.models import (
    ContentMetadata,
    FeedItem,
    InteractionEvent,
    SocialConnection,
    TrustScoreInput,
)
from social_trust.trust.ranking import get_neighborhood, rank_feed

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

CONNECTIONS = [
    SocialConnection(from_user_id=a, to_user_id=b, established_at=NOW - timedelta(days=30))
    for a, b in [("alice", "bob"), ("bob", "carol")]
]


def _item(content_id: str, author: str, interactions: list[InteractionEvent] | None = None) -> FeedItem:
    return FeedItem(
        content=ContentMetadata(content_id=content_id, author_id=author, created_at=NOW),
        interactions=interactions or [],
    )


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_cache()
    yield
    clear_cache()


def test_feed_sorted_by_trust_score():
    items = [_item("rec-z", "zed"), _item("rec-c", "carol"), _item("rec-b", "bob")]
    feed = rank_feed("alice", items, CONNECTIONS, now=NOW)

    assert [i.content_id for i in feed.items] == ["rec-b", "rec-c", "rec-z"]
    assert [i.result.final_score for i in feed.items] == [5.0, 3.0, 2.0]
    assert feed.total_candidates == 3


def test_ties_broken_by_content_id():
    items = [_item("rec-2", "bob"), _item("rec-1", "bob"), _item("rec-3", "bob")]
    feed = rank_feed("alice", items, CONNECTIONS, now=NOW)
    assert [i.content_id for i in feed.items] == ["rec-1", "rec-2", "rec-3"]


def test_limit_applies_after_sorting():
    items = [_item("rec-z", "zed"), _item("rec-c", "carol"), _item("rec-b", "bob")]
    feed = rank_feed("alice", items, CONNECTIONS, limit=2, now=NOW)

    assert [i.content_id for i in feed.items] == ["rec-b", "rec-c"]
    assert feed.total_candidates == 3


def test_matches_individual_scores():
    upvote = InteractionEvent(
        user_id="carol", content_id="rec-c", interaction_type="upvote",
        timestamp=NOW - timedelta(days=1), social_distance=2,
    )
    item = _item("rec-c", "carol", [upvote])
    engine = TrustScoreEngine()

    feed = rank_feed("alice", [item], CONNECTIONS, engine=engine, now=NOW)
    single = engine.calculate_trust_score(TrustScoreInput(
        target_content_id="rec-c",
        evaluating_user_id="alice",
        social_connections=CONNECTIONS,
        user_interactions=[upvote],
        content_metadata=item.content,
        evaluated_at=NOW,
    ))
    assert feed.items[0].result == single


def test_empty_feed():
    feed = rank_feed("alice", [], CONNECTIONS, now=NOW)
    assert feed.items == []
    assert feed.total_candidates == 0


def test_neighborhood_cached_between_calls():
    items = [_item("rec-b", "bob")]
    first = rank_feed("alice", items, CONNECTIONS, now=NOW)
    second = rank_feed("alice", items, list(reversed(CONNECTIONS)), now=NOW)

    assert first.neighborhood_cached is False
    assert second.neighborhood_cached is True
    assert second.items == first.items
    assert get_cache_stats()["hits"] == 1


def test_new_edge_is_a_new_neighborhood():
    rank_feed("alice", [], CONNECTIONS, now=NOW)
    extra = CONNECTIONS + [
        SocialConnection(from_user_id="alice", to_user_id="zed", established_at=NOW)
    ]
    feed = rank_feed("alice", [_item("rec-z", "zed")], extra, now=NOW)

    assert feed.neighborhood_cached is False
    assert feed.items[0].result.final_score == 5.0


def test_cache_disabled():
    config = ServiceConfig(neighborhood_cache_enabled=False)
    engine = TrustScoreEngine()
    _, cached_first = get_neighborhood("alice", CONNECTIONS, engine, config)
    _, cached_second = get_neighborhood("alice", CONNECTIONS, engine, config)

    assert (cached_first, cached_second) == (False, False)
    assert get_cache_stats()["size"] == 0
