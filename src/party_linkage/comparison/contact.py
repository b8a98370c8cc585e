"""Contact-info comparator.

Finds the best address pairing between two contact blocks and combines it
with email similarity. The address/email split depends on whether the
winning pairing involved a primary address.
"""
from __future__ import annotations

from dataclasses import dataclass

from party_linkage.comparison.addresses import compare_addresses
from party_linkage.comparison.location import LocationRelationship
from party_linkage.comparison.weighted import (
    CalculatorKind,
    ComparisonContext,
    ScoreOrDetail,
    WeightedComponent,
    score_of,
    weighted_result,
)
from party_linkage.config import EmailWeights
from party_linkage.models.contact import Address, ContactInfo
from party_linkage.utils.similarity import round_score, term_similarity

CALCULATOR = CalculatorKind.CONTACT_INFO.value


# =============================================================================
# Email
# =============================================================================


def email_similarity(a: str, b: str, weights: EmailWeights | None = None) -> float:
    """Local part fuzzily, domain exactly; whole-string when malformed.

    Examples:
        email_similarity("jsmith@aol.com", "jsmith@aol.com") -> 1.0
        email_similarity("jsmith@aol.com", "jsmith@gmail.com") -> 0.8
    """
    weights = weights or EmailWeights()
    a = a.strip().lower()
    b = b.strip().lower()
    if "@" not in a or "@" not in b:
        return term_similarity(a, b)
    local_a, _, domain_a = a.rpartition("@")
    local_b, _, domain_b = b.rpartition("@")
    domain = 1.0 if domain_a == domain_b else 0.0
    return round_score(
        weights.local_part * term_similarity(local_a, local_b) + weights.domain * domain
    )


# =============================================================================
# Address pairing
# =============================================================================


@dataclass(frozen=True)
class AddressPairing:
    """Best-scoring address pair. Index None means the primary address."""

    score: float
    base_index: int | None
    target_index: int | None

    @property
    def primary_involved(self) -> bool:
        return self.base_index is None or self.target_index is None

    def describe(self) -> str:
        def side(index: int | None) -> str:
            return "primary" if index is None else f"secondary[{index}]"

        return f"{side(self.base_index)}-{side(self.target_index)}"


def _score(
    a: Address, b: Address, context: ComparisonContext, location: LocationRelationship
) -> float:
    return score_of(compare_addresses(a, b, context, location=location)) or 0.0


def best_primary_pairing(
    a: ContactInfo,
    b: ContactInfo,
    context: ComparisonContext,
    location: LocationRelationship = LocationRelationship.DISTINCT,
) -> AddressPairing | None:
    """Each side's primary against all of the other side's addresses."""
    best: AddressPairing | None = None

    def consider(pairing: AddressPairing) -> None:
        nonlocal best
        if best is None or pairing.score > best.score:
            best = pairing

    if a.primary_address is not None:
        if b.primary_address is not None:
            consider(
                AddressPairing(_score(a.primary_address, b.primary_address, context, location), None, None)
            )
        for j, other in enumerate(b.secondary_addresses):
            consider(AddressPairing(_score(a.primary_address, other, context, location), None, j))
    if b.primary_address is not None:
        for i, own in enumerate(a.secondary_addresses):
            consider(AddressPairing(_score(own, b.primary_address, context, location), i, None))
    return best


def best_secondary_pairing(
    a: ContactInfo,
    b: ContactInfo,
    context: ComparisonContext,
    location: LocationRelationship = LocationRelationship.DISTINCT,
    *,
    exclude_base: int | None = None,
    exclude_target: int | None = None,
) -> AddressPairing | None:
    """Best secondary-to-secondary pair, skipping excluded indices."""
    best: AddressPairing | None = None
    for i, own in enumerate(a.secondary_addresses):
        if i == exclude_base:
            continue
        for j, other in enumerate(b.secondary_addresses):
            if j == exclude_target:
                continue
            score = _score(own, other, context, location)
            if best is None or score > best.score:
                best = AddressPairing(score, i, j)
    return best


def secondary_only_similarity(
    a: ContactInfo | None, b: ContactInfo | None, context: ComparisonContext
) -> float | None:
    """Best secondary-to-secondary address score; None without secondaries on both."""
    if a is None or b is None or not a.secondary_addresses or not b.secondary_addresses:
        return None
    pairing = best_secondary_pairing(a, b, context)
    return pairing.score if pairing is not None else None


# =============================================================================
# Calculator
# =============================================================================


def compare_contact_info(
    a: ContactInfo,
    b: ContactInfo,
    context: ComparisonContext,
    *,
    detailed: bool = False,
    location: LocationRelationship = LocationRelationship.DISTINCT,
) -> ScoreOrDetail:
    weights = context.settings.contact_info

    primary = best_primary_pairing(a, b, context, location)
    exclude_base = exclude_target = None
    if primary is not None and primary.score >= weights.true_match_threshold:
        exclude_base, exclude_target = primary.base_index, primary.target_index
    secondary = best_secondary_pairing(
        a, b, context, location, exclude_base=exclude_base, exclude_target=exclude_target
    )

    best = primary
    if secondary is not None and (best is None or secondary.score > best.score):
        best = secondary

    email_sim = (
        email_similarity(a.email, b.email, context.settings.email)
        if a.has_email and b.has_email
        else None
    )

    if best is None or best.primary_involved:
        address_weight, email_weight = weights.primary_address, weights.primary_email
    else:
        address_weight, email_weight = weights.secondary_address, weights.secondary_email

    notes: dict = {"location": location.value}
    if best is not None:
        notes.update(
            pairing=best.describe(),
            primary_involved=best.primary_involved,
            primary_score=primary.score if primary is not None else None,
            secondary_score=secondary.score if secondary is not None else None,
        )

    components = [
        WeightedComponent(
            "address",
            address_weight,
            best.score if best is not None else None,
            best.describe() if best is not None else None,
        ),
        WeightedComponent("email", email_weight, email_sim, a.email, b.email),
    ]
    return weighted_result(CALCULATOR, components, detailed=detailed, notes=notes)
