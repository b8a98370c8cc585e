"""Cross-type dispatch, best-match selection and name clustering.

Example:
    >>> from party_linkage.matching import find_best_matches
    >>> report = find_best_matches(base, population)
    >>> report.group(EntityType.INDIVIDUAL).selection_method
    'floor_cutoff (0.91)'
"""
from .dispatch import DispatchResult, direct_comparison, universal_compare
from .orchestrator import (
    classify_match,
    find_best_matches,
    find_best_matches_batch,
    minimum_score_for,
    percentile_index,
    select_best_matches,
)
from .clustering import ClusteringResult, NameCluster, PairScore, cluster_names

__all__ = [
    # Dispatch
    "DispatchResult",
    "direct_comparison",
    "universal_compare",
    # Orchestrator
    "classify_match",
    "find_best_matches",
    "find_best_matches_batch",
    "minimum_score_for",
    "percentile_index",
    "select_best_matches",
    # Clustering
    "ClusteringResult",
    "NameCluster",
    "PairScore",
    "cluster_names",
]
