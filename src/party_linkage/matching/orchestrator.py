"""Best-match selection across an entity population.

For a base entity every other entity is scored, results are grouped by the
target's type and each group is reduced to its best matches:

- Individual / Individual: keep scores at or above
  MAX(percentile score, floor cutoff) and the type minimum.
- Every other pair: keep scores at or above the percentile when that
  yields at least ``minimum_group_size`` results, else the top
  ``minimum_group_size``; either way subject to the type minimum.
- Name override: any result whose name similarity exceeds
  ``name_score_override`` is added if it clears the type minimum.

Scoring is embarrassingly parallel over candidates; selection runs once
all scores for a type are collected.

Example:
    >>> report = find_best_matches(base, population, MatchConfig())
    >>> for match in report.group(EntityType.INDIVIDUAL).best_matches:
    ...     print(match.target_name, match.score)
"""
from __future__ import annotations

import math
import time
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, Sequence

import structlog

from party_linkage.comparison.weighted import ComparisonContext
from party_linkage.config import MatchConfig, MatchCriteria
from party_linkage.matching.dispatch import DispatchResult, universal_compare
from party_linkage.models.entities import Entity, EntityType
from party_linkage.models.results import (
    MatchClassification,
    MatchRecord,
    MatchReport,
    ReportMetadata,
    TypeMatchGroup,
)
from party_linkage.reference.streets import StreetNameRegistry

logger = structlog.get_logger(__name__)

BATCH_PROGRESS_INTERVAL = 100
_CHUNKS_PER_WORKER = 4

_HOUSEHOLD_PAIR_TYPES = frozenset({EntityType.INDIVIDUAL, EntityType.AGGREGATE_HOUSEHOLD})


# =============================================================================
# Classification
# =============================================================================


def _gt(value: float | None, threshold: float) -> bool:
    return value is not None and value > threshold


def classify_match(
    overall: float,
    name: float | None = None,
    contact: float | None = None,
    criteria: MatchCriteria | None = None,
) -> MatchClassification:
    """True match, near match or no match for a scored pair.

    Unknown name or contact scores never satisfy their conditions.
    """
    c = criteria or MatchCriteria()
    if (
        (overall > c.overall_with_name and _gt(name, c.name_with_overall))
        or _gt(contact, c.contact_alone)
        or overall > c.overall_alone
        or _gt(name, c.name_alone)
    ):
        return MatchClassification.TRUE_MATCH
    if (
        (overall > c.near_overall_with_name and _gt(name, c.near_name_with_overall))
        or _gt(contact, c.near_contact_alone)
        or overall > c.near_overall_alone
        or _gt(name, c.near_name_alone)
    ):
        return MatchClassification.NEAR_MATCH
    return MatchClassification.NO_MATCH


# =============================================================================
# Scoring
# =============================================================================


def _record(
    target: Entity, result: DispatchResult, config: MatchConfig
) -> MatchRecord:
    name_score = result.name_score
    contact_score = result.contact_score
    return MatchRecord(
        target_key=target.unique_key,
        target_source=target.source.value if target.source else None,
        target_type=target.entity_type,
        target_name=target.display_name,
        score=result.score,
        name_score=name_score,
        contact_score=contact_score,
        comparison_type=result.comparison_type,
        matched_member_index=result.matched_member_index,
        classification=classify_match(result.score, name_score, contact_score, config.criteria),
        detail=result.detail if config.include_detailed_breakdown else None,
    )


def score_candidates(
    base: Entity,
    candidates: Sequence[Entity],
    context: ComparisonContext,
    config: MatchConfig,
) -> list[MatchRecord]:
    """Score one chunk of candidates. Runs inside worker processes."""
    return [_record(target, universal_compare(base, target, context), config) for target in candidates]


def _chunks(items: Sequence[Entity], size: int) -> list[Sequence[Entity]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def _score_all(
    base: Entity,
    candidates: Sequence[Entity],
    context: ComparisonContext,
    config: MatchConfig,
    workers: int,
) -> list[MatchRecord]:
    if workers <= 1 or len(candidates) < 2:
        return score_candidates(base, candidates, context, config)

    size = max(1, math.ceil(len(candidates) / (workers * _CHUNKS_PER_WORKER)))
    chunks = _chunks(candidates, size)
    records: list[MatchRecord] = []
    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(score_candidates, base, chunk, context, config) for chunk in chunks
        ]
        # Merge in submission order so results do not depend on scheduling
        for future in futures:
            records.extend(future.result())
    return records


# =============================================================================
# Selection
# =============================================================================


def minimum_score_for(
    base_type: EntityType, target_type: EntityType, config: MatchConfig
) -> float:
    if base_type is EntityType.INDIVIDUAL and target_type is EntityType.INDIVIDUAL:
        return config.individual_to_individual.minimum_score
    if {base_type, target_type} == _HOUSEHOLD_PAIR_TYPES:
        return config.individual_to_household.minimum_score
    return config.minimum_score_default


def percentile_index(count: int, percentile: float) -> int:
    """Position of the percentile score in a list sorted high to low."""
    return min(count - 1, math.floor(count * (1 - percentile / 100)))


def select_best_matches(
    base_type: EntityType,
    target_type: EntityType,
    records: Iterable[MatchRecord],
    config: MatchConfig,
) -> TypeMatchGroup:
    """Reduce all scores of one target type to its best-match set.

    ``effective_cutoff`` is MAX(percentile, floor, minimum) for
    Individual vs Individual and the plain percentile score for every
    other pair, whether the percentile or top-N method was used.
    """
    ranked = sorted(records, key=lambda r: r.score, reverse=True)
    if not ranked:
        return TypeMatchGroup(target_type=target_type, selection_method="empty")

    percentile = ranked[percentile_index(len(ranked), config.percentile_threshold)].score
    minimum = minimum_score_for(base_type, target_type, config)
    label = f"{config.percentile_threshold:g}th_percentile"

    if base_type is EntityType.INDIVIDUAL and target_type is EntityType.INDIVIDUAL:
        floor_cutoff = config.individual_to_individual.minimum_cutoff
        cutoff = max(percentile, floor_cutoff)
        kept = [r for r in ranked if r.score >= cutoff and r.score >= minimum]
        if percentile >= floor_cutoff:
            method = f"{label} ({percentile:.4f})"
        else:
            method = f"floor_cutoff ({floor_cutoff:g})"
        effective_cutoff = max(cutoff, minimum)
    else:
        above = [r for r in ranked if r.score >= percentile]
        if len(above) >= config.minimum_group_size:
            kept = [r for r in above if r.score >= minimum]
            method = label
        else:
            top = ranked[: config.minimum_group_size]
            kept = [r for r in top if r.score >= minimum]
            method = "top_N"
        effective_cutoff = percentile

    kept_keys = {r.target_key for r in kept}
    overrides = [
        r
        for r in ranked
        if r.name_score is not None
        and r.name_score > config.name_score_override
        and r.score >= minimum
        and r.target_key not in kept_keys
    ]
    if overrides:
        kept = sorted(kept + overrides, key=lambda r: r.score, reverse=True)
        method = f"{method} +{len(overrides)} name_override"

    logger.debug(
        "best_matches.group_selected",
        target_type=target_type.value,
        total=len(ranked),
        kept=len(kept),
        percentile=percentile,
        method=method,
    )
    return TypeMatchGroup(
        target_type=target_type,
        all_scores=ranked,
        best_matches=kept,
        percentile=percentile,
        effective_cutoff=effective_cutoff,
        selection_method=method,
    )


# =============================================================================
# Entry points
# =============================================================================


def _context(config: MatchConfig, streets: StreetNameRegistry | None) -> ComparisonContext:
    return ComparisonContext(
        settings=config.comparison,
        streets=streets if streets is not None else StreetNameRegistry.load_default(),
    )


def find_best_matches(
    base: Entity,
    population: Iterable[Entity],
    config: MatchConfig | None = None,
    *,
    streets: StreetNameRegistry | None = None,
    workers: int | None = None,
) -> MatchReport:
    """Score ``base`` against every other entity and select best matches per type.

    The base entity is excluded by its unique key, never by identity.

    Args:
        base: Entity to find matches for
        population: All entities; may include ``base``
        config: Thresholds and weights (defaults to ``MatchConfig()``)
        streets: Block Island street registry (defaults to the bundled one)
        workers: Process count; overrides ``config.workers``

    Returns:
        MatchReport with one group per entity type
    """
    config = config or MatchConfig()
    context = _context(config, streets)
    workers = workers if workers is not None else config.workers

    base_key = base.unique_key
    candidates = [e for e in population if e.unique_key != base_key]

    logger.info(
        "best_matches.started",
        base_key=base_key,
        base_type=base.entity_type.value,
        candidates=len(candidates),
        workers=workers,
    )
    start_time = time.time()

    records = _score_all(base, candidates, context, config, workers)
    by_type: dict[EntityType, list[MatchRecord]] = defaultdict(list)
    for record in records:
        by_type[record.target_type].append(record)

    groups = {
        entity_type: select_best_matches(base.entity_type, entity_type, by_type[entity_type], config)
        for entity_type in EntityType
    }
    elapsed_ms = (time.time() - start_time) * 1000

    logger.info(
        "best_matches.completed",
        base_key=base_key,
        comparisons=len(records),
        best_matches=sum(len(g.best_matches) for g in groups.values()),
        elapsed_ms=round(elapsed_ms, 1),
    )
    return MatchReport(
        base_key=base_key,
        base_name=base.display_name,
        base_type=base.entity_type,
        base_source=base.source.value if base.source else None,
        groups=groups,
        metadata=ReportMetadata(
            total_comparisons=len(records),
            elapsed_ms=elapsed_ms,
            config=config.model_dump(mode="json"),
        ),
    )


def find_best_matches_batch(
    bases: Iterable[Entity],
    population: Sequence[Entity],
    config: MatchConfig | None = None,
    *,
    streets: StreetNameRegistry | None = None,
    workers: int | None = None,
) -> list[MatchReport]:
    """Run :func:`find_best_matches` for several base entities."""
    config = config or MatchConfig()
    if streets is None:
        streets = StreetNameRegistry.load_default()
    bases = list(bases)
    reports: list[MatchReport] = []
    start_time = time.time()
    for i, base in enumerate(bases, start=1):
        reports.append(
            find_best_matches(base, population, config, streets=streets, workers=workers)
        )
        if i % BATCH_PROGRESS_INTERVAL == 0:
            logger.info("best_matches.batch_progress", processed=i, total=len(bases))
    logger.info(
        "best_matches.batch_completed",
        processed=len(reports),
        elapsed_ms=round((time.time() - start_time) * 1000, 1),
    )
    return reports
