"""Cross-type entity comparison.

Routes an entity pair by runtime type:

    Individual / Individual                  full entity comparison
    Individual / AggregateHousehold          best household member
    AggregateHousehold / AggregateHousehold  best member pair
    anything else                            name + contact info, 0.5 / 0.5

A household without members is compared directly. When exactly one of two
households has members the pair scores 0.
"""
from __future__ import annotations

from dataclasses import dataclass

from party_linkage.comparison.contact import compare_contact_info
from party_linkage.comparison.entities import compare_entities
from party_linkage.comparison.location import LocationRelationship, location_relationship
from party_linkage.comparison.names import name_similarity
from party_linkage.comparison.weighted import (
    ComparisonContext,
    WeightedComponent,
    score_of,
    weighted_result,
)
from party_linkage.models.entities import AggregateHousehold, Entity, Individual
from party_linkage.models.results import ComparisonDetail

DIRECT = "direct"
ENTITY = "entity"
BEST_MEMBER = "best_member"
BEST_MEMBER_PAIR = "best_member_pair"
ONE_HOUSEHOLD_EMPTY = "one_household_empty"


@dataclass
class DispatchResult:
    """Outcome of one cross-type comparison."""

    score: float
    comparison_type: str
    method: str
    detail: ComparisonDetail | None = None
    matched_member_index: int | None = None
    base_member_index: int | None = None

    @property
    def name_score(self) -> float | None:
        return self.detail.similarity_of("name") if self.detail is not None else None

    @property
    def contact_score(self) -> float | None:
        return self.detail.similarity_of("contactInfo") if self.detail is not None else None


def comparison_type(base: Entity, target: Entity) -> str:
    return f"{base.entity_type.value}-to-{target.entity_type.value}"


def direct_comparison(
    base: Entity,
    target: Entity,
    context: ComparisonContext,
    location: LocationRelationship = LocationRelationship.DISTINCT,
) -> ComparisonDetail:
    """Name and contact info only, for pairs without a richer comparison."""
    settings = context.settings
    contact = None
    if (
        base.contact_info is not None
        and target.contact_info is not None
        and not base.contact_info.is_empty
        and not target.contact_info.is_empty
    ):
        contact = score_of(
            compare_contact_info(
                base.contact_info, target.contact_info, context, location=location
            )
        )
    return weighted_result(
        "directComparison",
        [
            WeightedComponent(
                "name",
                settings.direct_name_weight,
                name_similarity(base.name, target.name, context),
                base.display_name,
                target.display_name,
            ),
            WeightedComponent("contactInfo", settings.direct_contact_weight, contact),
        ],
        detailed=True,
        notes={"method": DIRECT, "location": location.value},
    )


def _best_member(
    individual: Individual,
    household: AggregateHousehold,
    context: ComparisonContext,
    location: LocationRelationship,
) -> tuple[ComparisonDetail, int]:
    best: ComparisonDetail | None = None
    best_index = 0
    for index, member in enumerate(household.members):
        detail = compare_entities(individual, member, context, detailed=True, location=location)
        if best is None or detail.overall > best.overall:
            best, best_index = detail, index
    return best, best_index


def universal_compare(
    base: Entity, target: Entity, context: ComparisonContext
) -> DispatchResult:
    """Compare any two entities, routing by their runtime types."""
    label = comparison_type(base, target)
    location = location_relationship(base, target)

    if isinstance(base, Individual) and isinstance(target, Individual):
        detail = compare_entities(base, target, context, detailed=True, location=location)
        return DispatchResult(detail.overall, label, ENTITY, detail)

    if isinstance(base, Individual) and isinstance(target, AggregateHousehold):
        if not target.members:
            detail = direct_comparison(base, target, context, location)
            return DispatchResult(detail.overall, label, DIRECT, detail)
        detail, index = _best_member(base, target, context, location)
        return DispatchResult(detail.overall, label, BEST_MEMBER, detail, matched_member_index=index)

    if isinstance(base, AggregateHousehold) and isinstance(target, Individual):
        if not base.members:
            detail = direct_comparison(base, target, context, location)
            return DispatchResult(detail.overall, label, DIRECT, detail)
        detail, index = _best_member(target, base, context, location)
        return DispatchResult(detail.overall, label, BEST_MEMBER, detail, base_member_index=index)

    if isinstance(base, AggregateHousehold) and isinstance(target, AggregateHousehold):
        if not base.members and not target.members:
            detail = direct_comparison(base, target, context, location)
            return DispatchResult(detail.overall, label, DIRECT, detail)
        if not base.members or not target.members:
            return DispatchResult(0.0, label, ONE_HOUSEHOLD_EMPTY)
        best: ComparisonDetail | None = None
        best_pair = (0, 0)
        for i, own in enumerate(base.members):
            for j, other in enumerate(target.members):
                detail = compare_entities(own, other, context, detailed=True, location=location)
                if best is None or detail.overall > best.overall:
                    best, best_pair = detail, (i, j)
        return DispatchResult(
            best.overall,
            label,
            BEST_MEMBER_PAIR,
            best,
            matched_member_index=best_pair[1],
            base_member_index=best_pair[0],
        )

    detail = direct_comparison(base, target, context, location)
    return DispatchResult(detail.overall, label, DIRECT, detail)
