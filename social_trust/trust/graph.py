"""
Social graph index and bounded shortest-path search.

Edges are directed "follows" relations; distance is measured by following
edges forward from the evaluating user. Neighbours are kept sorted by user ID
so that, when several shortest paths exist, the lexicographically first one
wins on every run.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from .config import DEFAULT_TRUST_CONFIG, TrustScoreConfig
from .models import SocialConnection, SocialPathEntry
from .signals import social_distance_weight

logger = logging.getLogger(__name__)

SocialGraph = Mapping[str, Sequence[str]]

# Returned by find_social_distance when the target is beyond max_social_distance.
UNREACHABLE = None


def build_social_graph(connections: Iterable[SocialConnection]) -> dict[str, list[str]]:
    """Map each user to the sorted, de-duplicated list of users they follow."""
    following: dict[str, set[str]] = {}
    for conn in connections:
        following.setdefault(conn.from_user_id, set()).add(conn.to_user_id)
    return {user: sorted(targets) for user, targets in following.items()}


def find_social_distance(
    evaluator_id: str,
    target_id: str,
    graph: SocialGraph,
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> int | None:
    """Hop count from evaluator to target, or ``None`` beyond ``max_social_distance``."""
    if evaluator_id == target_id:
        return 0

    visited = {evaluator_id}
    queue: deque[tuple[str, int]] = deque([(evaluator_id, 0)])
    while queue:
        user_id, distance = queue.popleft()
        if distance >= config.max_social_distance:
            continue
        for neighbour in graph.get(user_id, ()):
            if neighbour == target_id:
                return distance + 1
            if neighbour not in visited:
                visited.add(neighbour)
                queue.append((neighbour, distance + 1))
    return UNREACHABLE


def _path_entries(path: Sequence[str], config: TrustScoreConfig) -> list[SocialPathEntry]:
    return [
        SocialPathEntry(
            user_id=user_id,
            distance=i,
            contribution_weight=social_distance_weight(i, config),
        )
        for i, user_id in enumerate(path)
    ]


def reconstruct_social_path(
    evaluator_id: str,
    target_id: str,
    graph: SocialGraph,
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> list[SocialPathEntry]:
    """One shortest path evaluator -> target (both inclusive), or ``[]`` if unreachable."""
    if evaluator_id == target_id:
        return _path_entries([evaluator_id], config)

    visited = {evaluator_id}
    queue: deque[list[str]] = deque([[evaluator_id]])
    while queue:
        path = queue.popleft()
        if len(path) - 1 >= config.max_social_distance:
            continue
        for neighbour in graph.get(path[-1], ()):
            if neighbour == target_id:
                return _path_entries([*path, neighbour], config)
            if neighbour not in visited:
                visited.add(neighbour)
                queue.append([*path, neighbour])
    return []


@dataclass(frozen=True)
class SocialNeighborhood:
    """Bounded BFS tree rooted at one evaluating user.

    Computed once per evaluator and reused for every item of a feed, so that
    ranking N items costs one traversal instead of N.
    """

    evaluator_id: str
    max_distance: int
    distances: dict[str, int] = field(default_factory=dict)
    parents: dict[str, str] = field(default_factory=dict)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self.distances

    def __len__(self) -> int:
        return len(self.distances)

    def distance_to(self, user_id: str) -> int | None:
        return self.distances.get(user_id, UNREACHABLE)

    def path_to(
        self, user_id: str, config: TrustScoreConfig = DEFAULT_TRUST_CONFIG
    ) -> list[SocialPathEntry]:
        if user_id not in self.distances:
            return []
        path = [user_id]
        while path[-1] != self.evaluator_id:
            path.append(self.parents[path[-1]])
        path.reverse()
        return _path_entries(path, config)


def build_neighborhood(
    evaluator_id: str,
    graph: SocialGraph,
    config: TrustScoreConfig = DEFAULT_TRUST_CONFIG,
) -> SocialNeighborhood:
    """BFS from ``evaluator_id`` to depth ``max_social_distance``, keeping first-found parents."""
    distances = {evaluator_id: 0}
    parents: dict[str, str] = {}
    queue: deque[str] = deque([evaluator_id])
    while queue:
        user_id = queue.popleft()
        distance = distances[user_id]
        if distance >= config.max_social_distance:
            continue
        for neighbour in graph.get(user_id, ()):
            if neighbour not in distances:
                distances[neighbour] = distance + 1
                parents[neighbour] = user_id
                queue.append(neighbour)

    logger.debug(
        "Built social neighbourhood for %s: %d users within %d hops",
        evaluator_id, len(distances), config.max_social_distance,
    )
    return SocialNeighborhood(
        evaluator_id=evaluator_id,
        max_distance=config.max_social_distance,
        distances=distances,
        parents=parents,
    )
