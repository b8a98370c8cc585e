"""Address comparator.

An address pair is routed to exactly one branch, each with its own
weights:

    PO_BOX_MIXED         one side is a PO Box: city/state/zip only, general weights
    PO_BOX               both PO Box, zip on both
    PO_BOX_NO_ZIP        both PO Box, zip missing on a side
    BLOCK_ISLAND         both on Block Island, both zip 02807
    BLOCK_ISLAND_NO_ZIP  both on Block Island otherwise
    GENERAL              street address, zip on at least one side
    GENERAL_NO_ZIP       street address, no zip on either side

Street-number similarity is forced to 0 for entities on the same base lot.
"""
from __future__ import annotations

import re
from enum import Enum

from party_linkage.comparison.location import LocationRelationship
from party_linkage.comparison.weighted import (
    CalculatorKind,
    ComparisonContext,
    ScoreOrDetail,
    WeightedComponent,
    weighted_result,
)
from party_linkage.models.contact import Address
from party_linkage.reference.streets import BLOCK_ISLAND_ZIP, StreetNameRegistry
from party_linkage.utils.normalize import normalize_text
from party_linkage.utils.similarity import exact_similarity, term_similarity

_BOX_NUMBER = re.compile(r"BOX\s*#?\s*([A-Z0-9]+)\s*$", re.IGNORECASE)

CALCULATOR = CalculatorKind.ADDRESS.value


class AddressBranch(str, Enum):
    PO_BOX_MIXED = "po_box_mixed"
    PO_BOX = "po_box"
    PO_BOX_NO_ZIP = "po_box_no_zip"
    BLOCK_ISLAND = "block_island"
    BLOCK_ISLAND_NO_ZIP = "block_island_no_zip"
    GENERAL = "general"
    GENERAL_NO_ZIP = "general_no_zip"


# =============================================================================
# Classification
# =============================================================================


def street_label(address: Address) -> str:
    """Street name and type as one string ("CORN NECK RD")."""
    return normalize_text(
        " ".join(p for p in (address.street_name, address.street_type) if p)
    )


def is_block_island(address: Address, streets: StreetNameRegistry) -> bool:
    """Zip 02807, or a known island street in an island city."""
    if address.zip5 == BLOCK_ISLAND_ZIP:
        return True
    if not streets.is_block_island_city(address.city):
        return False
    return (
        streets.lookup(street_label(address)) is not None
        or streets.lookup(address.street_name) is not None
    )


def classify_address_pair(
    a: Address, b: Address, streets: StreetNameRegistry
) -> AddressBranch:
    po_a = a.is_po_box
    po_b = b.is_po_box
    if po_a != po_b:
        return AddressBranch.PO_BOX_MIXED
    if po_a:
        if a.has_zip and b.has_zip:
            return AddressBranch.PO_BOX
        return AddressBranch.PO_BOX_NO_ZIP
    if is_block_island(a, streets) and is_block_island(b, streets):
        if a.zip5 == BLOCK_ISLAND_ZIP and b.zip5 == BLOCK_ISLAND_ZIP:
            return AddressBranch.BLOCK_ISLAND
        return AddressBranch.BLOCK_ISLAND_NO_ZIP
    if a.has_zip or b.has_zip:
        return AddressBranch.GENERAL
    return AddressBranch.GENERAL_NO_ZIP


# =============================================================================
# Field similarities (None = data missing on a side)
# =============================================================================


def _both(a: str | None, b: str | None) -> bool:
    return bool(a and a.strip() and b and b.strip())


def box_number(address: Address) -> str | None:
    """PO Box number from the unit number or the box designation text."""
    if address.secondary_unit_number and address.secondary_unit_number.strip():
        return normalize_text(address.secondary_unit_number).lstrip("#")
    for text in (address.secondary_unit_type, address.street_name):
        if text:
            match = _BOX_NUMBER.search(text.strip())
            if match:
                return match.group(1).upper()
    return None


def _text_similarity(a: str | None, b: str | None) -> float | None:
    if not _both(a, b):
        return None
    return term_similarity(normalize_text(a), normalize_text(b))


def _exact(a: str | None, b: str | None) -> float | None:
    if not _both(a, b):
        return None
    return exact_similarity(a, b)


def state_similarity(a: str | None, b: str | None) -> float | None:
    """Two-letter codes match exactly; longer names fuzzily."""
    if not _both(a, b):
        return None
    a_norm = normalize_text(a)
    b_norm = normalize_text(b)
    if len(a_norm) <= 2 or len(b_norm) <= 2:
        return exact_similarity(a_norm, b_norm)
    return term_similarity(a_norm, b_norm)


def zip_similarity(a: Address, b: Address) -> float | None:
    if not (a.has_zip and b.has_zip):
        return None
    return term_similarity(a.zip5, b.zip5)


def street_name_similarity(
    a: Address, b: Address, streets: StreetNameRegistry
) -> float | None:
    """Registry-aware street comparison with a plain string fallback."""
    label_a = street_label(a)
    label_b = street_label(b)
    if not (label_a and label_b):
        return None
    known_a = streets.lookup(label_a) or streets.lookup(a.street_name)
    known_b = streets.lookup(label_b) or streets.lookup(b.street_name)
    if known_a is not None and known_b is not None:
        return term_similarity(known_a.primary.term, known_b.primary.term)
    return term_similarity(label_a, label_b)


# =============================================================================
# Branches
# =============================================================================


def _po_box_components(
    a: Address, b: Address, branch: AddressBranch, context: ComparisonContext
) -> tuple[list[WeightedComponent], str | None]:
    """Components for the PO Box branches, and the hard rule applied if any."""
    w = context.settings.po_box
    box_a, box_b = box_number(a), box_number(b)
    box_sim = _text_similarity(box_a, box_b)
    city_sim = _text_similarity(a.city, b.city)
    state_sim = state_similarity(a.state, b.state)

    if branch is AddressBranch.PO_BOX:
        zip_sim = zip_similarity(a, b)
        if zip_sim is not None and zip_sim < w.zip_floor:
            return [], "zip_below_floor"
        if zip_sim == 1.0 and box_sim is not None:
            return [WeightedComponent("secUnitNum", 1.0, box_sim, box_a, box_b)], "zip_exact"
        return [
            WeightedComponent("zipCode", w.zip, zip_sim, a.zip_code, b.zip_code),
            WeightedComponent("secUnitNum", w.secondary_number, box_sim, box_a, box_b),
            WeightedComponent("city", w.city, city_sim, a.city, b.city),
            WeightedComponent("state", w.state, state_sim, a.state, b.state),
        ], None

    if box_sim is not None and box_sim < w.no_zip_secondary_floor:
        return [], "box_below_floor"
    if box_sim == 1.0 and (city_sim is not None or state_sim is not None):
        return [
            WeightedComponent("city", w.no_zip_exact_city, city_sim, a.city, b.city),
            WeightedComponent("state", w.no_zip_exact_state, state_sim, a.state, b.state),
        ], "box_exact"
    return [
        WeightedComponent("secUnitNum", w.no_zip_secondary_number, box_sim, box_a, box_b),
        WeightedComponent("city", w.no_zip_city, city_sim, a.city, b.city),
        WeightedComponent("state", w.no_zip_state, state_sim, a.state, b.state),
    ], None


def _street_number(
    a: Address, b: Address, location: LocationRelationship, *, exact: bool
) -> float | None:
    if location is LocationRelationship.SAME_BASE_LOT:
        return 0.0
    if exact:
        return _exact(a.street_number, b.street_number)
    return _text_similarity(a.street_number, b.street_number)


def _block_island_components(
    a: Address,
    b: Address,
    branch: AddressBranch,
    context: ComparisonContext,
    location: LocationRelationship,
) -> list[WeightedComponent]:
    w = context.settings.block_island
    number_sim = _street_number(a, b, location, exact=True)
    if branch is AddressBranch.BLOCK_ISLAND_NO_ZIP:
        return [
            WeightedComponent(
                "streetNumber", w.no_zip_street_number, number_sim,
                a.street_number, b.street_number,
            )
        ]
    return [
        WeightedComponent(
            "streetNumber", w.street_number, number_sim, a.street_number, b.street_number
        ),
        WeightedComponent(
            "streetName", w.street_name,
            street_name_similarity(a, b, context.streets),
            street_label(a), street_label(b),
        ),
    ]


def _general_components(
    a: Address,
    b: Address,
    branch: AddressBranch,
    context: ComparisonContext,
    location: LocationRelationship,
) -> list[WeightedComponent]:
    w = context.settings.general_address
    if branch is AddressBranch.PO_BOX_MIXED:
        # Street fields stripped; city carries the weight when neither side has a zip.
        a, b = a.without_street(), b.without_street()
        number_sim = None
        no_zip = not a.has_zip and not b.has_zip
    else:
        number_sim = _street_number(a, b, location, exact=False)
        no_zip = branch is AddressBranch.GENERAL_NO_ZIP
    name_sim = street_name_similarity(a, b, context.streets)

    if no_zip:
        return [
            WeightedComponent(
                "streetNumber", w.no_zip_street_number, number_sim,
                a.street_number, b.street_number,
            ),
            WeightedComponent(
                "streetName", w.no_zip_street_name, name_sim, street_label(a), street_label(b)
            ),
            WeightedComponent(
                "city", w.no_zip_city, _text_similarity(a.city, b.city), a.city, b.city
            ),
            WeightedComponent(
                "state", w.no_zip_state, state_similarity(a.state, b.state), a.state, b.state
            ),
        ]
    return [
        WeightedComponent(
            "streetNumber", w.street_number, number_sim, a.street_number, b.street_number
        ),
        WeightedComponent(
            "streetName", w.street_name, name_sim, street_label(a), street_label(b)
        ),
        WeightedComponent("zipCode", w.zip, zip_similarity(a, b), a.zip_code, b.zip_code),
        WeightedComponent(
            "state", w.state, state_similarity(a.state, b.state), a.state, b.state
        ),
    ]


def compare_addresses(
    a: Address,
    b: Address,
    context: ComparisonContext,
    *,
    detailed: bool = False,
    location: LocationRelationship = LocationRelationship.DISTINCT,
) -> ScoreOrDetail:
    """Score two addresses in [0, 1] using the branch their pair falls into."""
    branch = classify_address_pair(a, b, context.streets)
    rule: str | None = None

    if branch in (AddressBranch.PO_BOX, AddressBranch.PO_BOX_NO_ZIP):
        components, rule = _po_box_components(a, b, branch, context)
    elif branch in (AddressBranch.BLOCK_ISLAND, AddressBranch.BLOCK_ISLAND_NO_ZIP):
        components = _block_island_components(a, b, branch, context, location)
    else:
        components = _general_components(a, b, branch, context, location)

    notes = {"branch": branch.value, "location": location.value}
    if rule:
        notes["rule"] = rule
    return weighted_result(CALCULATOR, components, detailed=detailed, notes=notes)
