"""Union-find clustering of a small set of names.

Used to discover how many distinct identities hide inside one group (for
example the members of an aggregate household): names whose similarity
reaches the true-match threshold are joined, transitively.
"""
from __future__ import annotations

from itertools import combinations
from typing import Sequence

import structlog
from pydantic import BaseModel, Field, computed_field

from party_linkage.comparison.names import AnyName, name_similarity
from party_linkage.comparison.weighted import ComparisonContext
from party_linkage.config import MatchConfig

logger = structlog.get_logger(__name__)


class _UnionFind:
    def __init__(self, size: int) -> None:
        self._parent = list(range(size))

    def find(self, item: int) -> int:
        if self._parent[item] != item:
            self._parent[item] = self.find(self._parent[item])
        return self._parent[item]

    def union(self, left: int, right: int) -> None:
        root_left = self.find(left)
        root_right = self.find(right)
        if root_left != root_right:
            self._parent[root_left] = root_right


class PairScore(BaseModel):
    i: int
    j: int
    similarity: float = Field(ge=0.0, le=1.0)


class NameCluster(BaseModel):
    """Indices of names judged to be one identity."""

    members: list[int]
    representative: int
    cohesion: float = Field(
        ge=0.0, le=1.0,
        description="Mean similarity of the representative to the other members",
    )


class ClusteringResult(BaseModel):
    clusters: list[NameCluster] = Field(default_factory=list)
    pairwise: list[PairScore] = Field(default_factory=list)
    cross_cluster: list[PairScore] = Field(
        default_factory=list,
        description="Similarity between representatives of different clusters (cluster indices)",
    )

    @computed_field
    @property
    def distinct_identities(self) -> int:
        return len(self.clusters)


def _representative(members: list[int], scores: dict[tuple[int, int], float]) -> tuple[int, float]:
    """Member with the highest mean similarity to the rest; first wins ties."""
    if len(members) == 1:
        return members[0], 1.0
    best_index, best_mean = members[0], 0.0
    for i in members:
        others = [scores[(i, j)] for j in members if j != i]
        mean = sum(others) / len(others)
        if mean > best_mean:
            best_index, best_mean = i, mean
    return best_index, best_mean


def cluster_names(
    names: Sequence[AnyName | None],
    threshold: float | None = None,
    context: ComparisonContext | None = None,
) -> ClusteringResult:
    """Group names whose similarity is at or above ``threshold``.

    Args:
        names: Names to cluster; a missing name never joins a cluster
        threshold: True-match threshold (defaults to ``MatchConfig().cluster_threshold``)
        context: Comparison weights

    Returns:
        ClusteringResult with clusters in order of first member
    """
    if threshold is None:
        threshold = MatchConfig().cluster_threshold
    context = context or ComparisonContext()

    scores: dict[tuple[int, int], float] = {}
    pairwise: list[PairScore] = []
    for i, j in combinations(range(len(names)), 2):
        similarity = name_similarity(names[i], names[j], context) or 0.0
        scores[(i, j)] = scores[(j, i)] = similarity
        pairwise.append(PairScore(i=i, j=j, similarity=similarity))

    uf = _UnionFind(len(names))
    for pair in pairwise:
        if pair.similarity >= threshold:
            uf.union(pair.i, pair.j)

    grouped: dict[int, list[int]] = {}
    for index in range(len(names)):
        grouped.setdefault(uf.find(index), []).append(index)

    clusters = []
    for members in grouped.values():
        representative, cohesion = _representative(members, scores)
        clusters.append(
            NameCluster(members=members, representative=representative, cohesion=cohesion)
        )

    cross_cluster = [
        PairScore(
            i=a,
            j=b,
            similarity=scores[(clusters[a].representative, clusters[b].representative)],
        )
        for a, b in combinations(range(len(clusters)), 2)
    ]

    logger.debug(
        "name_clustering.completed",
        names=len(names),
        clusters=len(clusters),
        threshold=threshold,
    )
    return ClusteringResult(clusters=clusters, pairwise=pairwise, cross_cluster=cross_cluster)
