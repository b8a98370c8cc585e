"""Weighted aggregation framework shared by every comparator.

Each comparable type has a calculator kind. A calculator scores the
sub-components present on both sides, normalizes by the weight actually
used and returns either a bare score or a :class:`ComparisonDetail`.

Types without a calculator fall back to structural equality.

Example:
    >>> components = [
    ...     WeightedComponent("zip", 0.4, 1.0),
    ...     WeightedComponent("state", 0.1, None),  # no data, excluded
    ... ]
    >>> weighted_result("address", components, detailed=False)
    1.0
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Sequence, Union

from pydantic import BaseModel

from party_linkage.config import ComparisonSettings
from party_linkage.exceptions import TypeMismatchError
from party_linkage.models.contact import Address, ContactInfo
from party_linkage.models.entities import Entity
from party_linkage.models.household import HouseholdInformation
from party_linkage.models.names import HouseholdName, IdentifierName, IndividualName
from party_linkage.models.results import ComparisonDetail, ComponentScore, Penalty
from party_linkage.reference.streets import StreetNameRegistry
from party_linkage.utils.similarity import round_score

ScoreOrDetail = Union[float, ComparisonDetail]


# =============================================================================
# Calculator kinds
# =============================================================================


class CalculatorKind(str, Enum):
    """Weighted calculators available to :func:`compare`."""

    INDIVIDUAL_NAME = "individualNameComparison"
    HOUSEHOLD_NAME = "householdNameComparison"
    IDENTIFIER_NAME = "identifierNameComparison"
    ADDRESS = "addressWeightedComparison"
    CONTACT_INFO = "contactInfoWeightedComparison"
    HOUSEHOLD_INFORMATION = "householdInformationComparison"
    ENTITY = "entityWeightedComparison"


STRUCTURAL = "structuralEquality"

_KIND_BY_TYPE: tuple[tuple[type, CalculatorKind], ...] = (
    (IndividualName, CalculatorKind.INDIVIDUAL_NAME),
    (HouseholdName, CalculatorKind.HOUSEHOLD_NAME),
    (IdentifierName, CalculatorKind.IDENTIFIER_NAME),
    (Address, CalculatorKind.ADDRESS),
    (ContactInfo, CalculatorKind.CONTACT_INFO),
    (HouseholdInformation, CalculatorKind.HOUSEHOLD_INFORMATION),
    (Entity, CalculatorKind.ENTITY),
)


def calculator_kind(value: Any) -> CalculatorKind | None:
    """Calculator registered for a value's type, if any."""
    for cls, kind in _KIND_BY_TYPE:
        if isinstance(value, cls):
            return kind
    return None


# =============================================================================
# Context
# =============================================================================


@dataclass(frozen=True)
class ComparisonContext:
    """Weights and reference data threaded through every comparator.

    An empty street registry limits Block Island detection to zip 02807.
    The orchestrator entry points load the bundled registry instead.
    """

    settings: ComparisonSettings = field(default_factory=ComparisonSettings)
    streets: StreetNameRegistry = field(default_factory=StreetNameRegistry)


# =============================================================================
# Aggregation
# =============================================================================


@dataclass
class WeightedComponent:
    """A sub-component before normalization.

    ``similarity is None`` means at least one side has no data; the
    component is then excluded from numerator and denominator.
    """

    name: str
    weight: float
    similarity: float | None
    base_value: Any = None
    target_value: Any = None


def weighted_result(
    calculator: str,
    components: Sequence[WeightedComponent],
    *,
    detailed: bool,
    penalties: Sequence[tuple[str, float]] = (),
    notes: dict[str, Any] | None = None,
) -> ScoreOrDetail:
    """Normalize, apply flat penalties (floor 0) and round.

    Penalties are recorded as the amount actually deducted so that the
    detail checksum holds even when the floor is hit.
    """
    used = [c for c in components if c.similarity is not None and c.weight > 0]
    total_weight = sum(c.weight for c in used)

    scores: list[ComponentScore] = []
    for c in used:
        weight = round_score(c.weight / total_weight)
        similarity = round_score(min(1.0, max(0.0, c.similarity)))
        scores.append(
            ComponentScore(
                name=c.name,
                base_value=c.base_value,
                target_value=c.target_value,
                similarity=similarity,
                weight=weight,
                contribution=round_score(similarity * weight),
            )
        )

    remaining = min(1.0, sum(s.contribution for s in scores))
    applied: list[Penalty] = []
    for reason, amount in penalties:
        deducted = round_score(min(amount, max(0.0, remaining)))
        remaining -= deducted
        applied.append(Penalty(reason=reason, amount=deducted))
    overall = round_score(min(1.0, max(0.0, remaining)))

    if not detailed:
        return overall
    return ComparisonDetail(
        calculator=calculator,
        overall=overall,
        components=scores,
        penalties=applied,
        notes=notes or {},
    )


def score_of(result: ScoreOrDetail | None) -> float | None:
    """Bare score of a comparison result."""
    if result is None:
        return None
    if isinstance(result, ComparisonDetail):
        return result.overall
    return result


def single_component(
    calculator: str,
    name: str,
    similarity: float,
    *,
    detailed: bool,
    base_value: Any = None,
    target_value: Any = None,
    notes: dict[str, Any] | None = None,
) -> ScoreOrDetail:
    """Result made of one component at full weight."""
    return weighted_result(
        calculator,
        [WeightedComponent(name, 1.0, similarity, base_value, target_value)],
        detailed=detailed,
        notes=notes,
    )


# =============================================================================
# Structural fallback
# =============================================================================


def structural_equals(a: Any, b: Any, context: ComparisonContext | None = None) -> bool:
    """Field-by-field equality for types without a weighted calculator.

    Nested values with a registered calculator count as equal only when
    that calculator scores them 1.0.

    Raises:
        TypeMismatchError: if ``a`` and ``b`` are of different types
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if type(a) is not type(b):
        raise TypeMismatchError(type(a).__name__, type(b).__name__)

    if calculator_kind(a) is not None:
        return compare(a, b, context or ComparisonContext()) == 1.0
    if isinstance(a, BaseModel):
        return all(
            structural_equals(getattr(a, name), getattr(b, name), context)
            for name in type(a).model_fields
        )
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(
            structural_equals(x, y, context) for x, y in zip(a, b)
        )
    return a == b


def structural_result(
    a: Any, b: Any, context: ComparisonContext | None = None, *, detailed: bool = False
) -> ScoreOrDetail:
    """Structural equality expressed as a 1.0 / 0.0 score."""
    equal = structural_equals(a, b, context)
    return single_component(
        STRUCTURAL,
        "equality",
        1.0 if equal else 0.0,
        detailed=detailed,
        base_value=type(a).__name__ if a is not None else None,
        target_value=type(b).__name__ if b is not None else None,
    )


# =============================================================================
# Dispatch
# =============================================================================


Calculator = Callable[..., ScoreOrDetail]


@lru_cache(maxsize=1)
def _calculators() -> dict[CalculatorKind, Calculator]:
    from party_linkage.comparison import addresses, contact, entities, household, names

    return {
        CalculatorKind.INDIVIDUAL_NAME: names.compare_individual_names,
        CalculatorKind.HOUSEHOLD_NAME: names.compare_household_names,
        CalculatorKind.IDENTIFIER_NAME: names.compare_identifier_names,
        CalculatorKind.ADDRESS: addresses.compare_addresses,
        CalculatorKind.CONTACT_INFO: contact.compare_contact_info,
        CalculatorKind.HOUSEHOLD_INFORMATION: household.compare_household_information,
        CalculatorKind.ENTITY: entities.compare_entities,
    }


def compare(
    a: Any,
    b: Any,
    context: ComparisonContext | None = None,
    *,
    detailed: bool = False,
) -> ScoreOrDetail:
    """Compare two values of the same type.

    Uses the registered calculator when both values have the same one and
    the structural fallback otherwise. Name variants of different types
    are compared through their display strings.
    """
    context = context or ComparisonContext()
    kind_a = calculator_kind(a)
    kind_b = calculator_kind(b)
    if kind_a is not None and kind_a is kind_b:
        return _calculators()[kind_a](a, b, context, detailed=detailed)
    if kind_a is not None and kind_b is not None:
        from party_linkage.comparison.names import NAME_KINDS, compare_names

        if kind_a in NAME_KINDS and kind_b in NAME_KINDS:
            return compare_names(a, b, context, detailed=detailed)
    return structural_result(a, b, context, detailed=detailed)
