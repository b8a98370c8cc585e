"""Weighted comparators for names, addresses, contact info and entities.

Example:
    >>> from party_linkage.comparison import ComparisonContext, compare
    >>> detail = compare(entity_a, entity_b, ComparisonContext(), detailed=True)
    >>> detail.verify()
"""
from .weighted import (
    CalculatorKind,
    ComparisonContext,
    ScoreOrDetail,
    WeightedComponent,
    calculator_kind,
    compare,
    score_of,
    structural_equals,
    structural_result,
    weighted_result,
)
from .location import LocationRelationship, lot_relationship, location_relationship, parse_lot
from .names import compare_names, name_similarity, permutation_score
from .addresses import AddressBranch, classify_address_pair, compare_addresses, is_block_island
from .contact import compare_contact_info, email_similarity, secondary_only_similarity
from .household import compare_household_information
from .entities import compare_entities, compare_for_lot_collision

__all__ = [
    # Framework
    "CalculatorKind",
    "ComparisonContext",
    "ScoreOrDetail",
    "WeightedComponent",
    "calculator_kind",
    "compare",
    "score_of",
    "structural_equals",
    "structural_result",
    "weighted_result",
    # Location
    "LocationRelationship",
    "lot_relationship",
    "location_relationship",
    "parse_lot",
    # Comparators
    "compare_names",
    "name_similarity",
    "permutation_score",
    "AddressBranch",
    "classify_address_pair",
    "compare_addresses",
    "is_block_island",
    "compare_contact_info",
    "email_similarity",
    "secondary_only_similarity",
    "compare_household_information",
    "compare_entities",
    "compare_for_lot_collision",
]
