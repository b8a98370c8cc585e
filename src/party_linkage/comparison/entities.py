"""Entity comparator.

Aggregates name, contact info, household info and legacy info:

1. Components missing on either side are excluded.
2. A perfect name moves 12 points of weight into the name component (6
   points for a name above 0.95), taken proportionally from the other
   components in use.
3. The score is normalized over the weight in use.
4. Flat penalties follow, floored at 0: 0.04 without name data, 0.03
   without contact data.

Entities on the same base lot compare contact info by secondary addresses
only; their shared primary address carries no signal.
"""
from __future__ import annotations

from party_linkage.comparison.contact import compare_contact_info, secondary_only_similarity
from party_linkage.comparison.household import compare_household_information
from party_linkage.comparison.location import LocationRelationship, location_relationship
from party_linkage.comparison.names import name_similarity
from party_linkage.comparison.weighted import (
    CalculatorKind,
    ComparisonContext,
    ScoreOrDetail,
    WeightedComponent,
    score_of,
    structural_result,
    weighted_result,
)
from party_linkage.config import ComparisonSettings, EntityWeights
from party_linkage.models.entities import AggregateHousehold, Entity
from party_linkage.models.results import ComparisonDetail, ComponentScore, LotCollisionDecision
from party_linkage.utils.similarity import round_score

CALCULATOR = CalculatorKind.ENTITY.value

_OTHER_COMPONENTS = ("contactInfo", "otherInfo", "legacyInfo")


def entity_weights(entity: Entity, settings: ComparisonSettings) -> EntityWeights:
    if isinstance(entity, AggregateHousehold):
        return settings.household_weights
    return settings.individual_weights


# =============================================================================
# Component similarities (None = no data on a side)
# =============================================================================


def contact_similarity(
    a: Entity,
    b: Entity,
    context: ComparisonContext,
    location: LocationRelationship = LocationRelationship.DISTINCT,
) -> float | None:
    if location is LocationRelationship.SAME_BASE_LOT:
        return secondary_only_similarity(a.contact_info, b.contact_info, context)
    if a.contact_info is None or b.contact_info is None:
        return None
    if a.contact_info.is_empty or b.contact_info.is_empty:
        return None
    return score_of(
        compare_contact_info(a.contact_info, b.contact_info, context, location=location)
    )


def _other_similarity(a: Entity, b: Entity, context: ComparisonContext) -> float | None:
    if a.other_info is None or b.other_info is None:
        return None
    if a.other_info.is_empty or b.other_info.is_empty:
        return None
    detail = compare_household_information(a.other_info, b.other_info, context, detailed=True)
    if not detail.components:
        return None
    return detail.overall


def _legacy_similarity(a: Entity, b: Entity, context: ComparisonContext) -> float | None:
    if a.legacy_info is None or b.legacy_info is None:
        return None
    if a.legacy_info.is_empty or b.legacy_info.is_empty:
        return None
    return score_of(structural_result(a.legacy_info, b.legacy_info, context))


def _boost(name_sim: float | None, settings: ComparisonSettings) -> float:
    adj = settings.adjustments
    if name_sim is None:
        return 0.0
    if name_sim == 1.0:
        return adj.perfect_name_boost
    if name_sim > adj.near_name_threshold:
        return adj.near_name_boost
    return 0.0


# =============================================================================
# Calculator
# =============================================================================


def compare_entities(
    a: Entity,
    b: Entity,
    context: ComparisonContext,
    *,
    detailed: bool = False,
    location: LocationRelationship | None = None,
) -> ScoreOrDetail:
    """Score two entities. Weights come from the base entity ``a``."""
    settings = context.settings
    if location is None:
        location = location_relationship(a, b)

    sims = {
        "name": name_similarity(a.name, b.name, context),
        "contactInfo": contact_similarity(a, b, context, location),
        "otherInfo": _other_similarity(a, b, context),
        "legacyInfo": _legacy_similarity(a, b, context),
    }
    weights = entity_weights(a, settings).as_dict()

    boost = 0.0
    if sims["name"] is not None:
        in_use = [k for k in _OTHER_COMPONENTS if sims[k] is not None and weights[k] > 0]
        pool = sum(weights[k] for k in in_use)
        boost = min(_boost(sims["name"], settings), pool)
        if boost > 0:
            for k in in_use:
                weights[k] -= boost * weights[k] / pool
            weights["name"] += boost

    penalties: list[tuple[str, float]] = []
    if sims["name"] is None:
        penalties.append(("name_absent", settings.adjustments.missing_name_penalty))
    if sims["contactInfo"] is None:
        penalties.append(("contact_info_absent", settings.adjustments.missing_contact_penalty))

    values = {
        "name": (a.display_name, b.display_name),
        "contactInfo": (None, None),
        "otherInfo": (None, None),
        "legacyInfo": (None, None),
    }
    components = [
        WeightedComponent(k, weights[k], sims[k], *values[k])
        for k in ("name", "contactInfo", "otherInfo", "legacyInfo")
    ]
    result = weighted_result(
        CALCULATOR,
        components,
        detailed=detailed,
        penalties=penalties,
        notes={
            "location": location.value,
            "name_boost": round_score(boost),
            "base_type": a.entity_type.value,
            "target_type": b.entity_type.value,
        },
    )
    if (
        isinstance(result, ComparisonDetail)
        and location is LocationRelationship.SAME_BASE_LOT
        and sims["contactInfo"] is None
    ):
        # Shared lot without secondaries: reported, but carries no weight
        result.components.append(
            ComponentScore(name="contactInfo", similarity=0.0, weight=0.0, contribution=0.0)
        )
    return result


# =============================================================================
# Fire-number collisions
# =============================================================================


def _reasoning(
    overall: float, name: float, contact: float, same_owner: bool, settings: ComparisonSettings
) -> str:
    t = settings.lot_collision
    if not same_owner:
        return (
            f"DIFFERENT OWNER: overall={overall * 100:.1f}%, name={name * 100:.1f}%, "
            f"contactInfo={contact * 100:.1f}% (all below thresholds)"
        )
    parts = []
    if overall > t.overall:
        parts.append(f"overall {overall * 100:.1f}% > {t.overall * 100:g}%")
    if name > t.name:
        parts.append(f"name {name * 100:.1f}% > {t.name * 100:g}%")
    if contact > t.contact_info:
        parts.append(f"contactInfo {contact * 100:.1f}% > {t.contact_info * 100:g}%")
    return "SAME OWNER: " + " OR ".join(parts)


def compare_for_lot_collision(
    a: Entity, b: Entity, context: ComparisonContext | None = None
) -> LotCollisionDecision:
    """Decide whether two records claiming one fire number share an owner.

    Primary addresses are identical by construction, so contact info is
    compared by secondary addresses only.
    """
    context = context or ComparisonContext()
    t = context.settings.lot_collision
    name = name_similarity(a.name, b.name, context) or 0.0
    contact = secondary_only_similarity(a.contact_info, b.contact_info, context) or 0.0
    overall = round_score(t.name_weight * name + t.contact_weight * contact)
    same_owner = overall > t.overall or name > t.name or contact > t.contact_info
    return LotCollisionDecision(
        same_owner=same_owner,
        overall=overall,
        name_score=name,
        contact_score=contact,
        reasoning=_reasoning(overall, name, contact, same_owner, context.settings),
    )
