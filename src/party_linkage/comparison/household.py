"""Household-information comparator.

Weights are chosen from the base side's state. An unset membership flag
counts as "in household" when an identifier or household name is present.

    not in household              isInHousehold equality 1.0
    in household, has identifier  householdIdentifier 0.7, isHeadOfHousehold 0.3
    in household, no identifier   householdName 0.7, isHeadOfHousehold 0.3
"""
from __future__ import annotations

from party_linkage.comparison.weighted import (
    CalculatorKind,
    ComparisonContext,
    ScoreOrDetail,
    WeightedComponent,
    weighted_result,
)
from party_linkage.models.household import HouseholdInformation
from party_linkage.utils.normalize import normalize_text
from party_linkage.utils.similarity import term_similarity

CALCULATOR = CalculatorKind.HOUSEHOLD_INFORMATION.value


def _flag_equality(a: bool | None, b: bool | None) -> float | None:
    if a is None or b is None:
        return None
    return 1.0 if a == b else 0.0


def _identifier_similarity(a: str | None, b: str | None) -> float | None:
    if not a or not b:
        return None
    a_norm, b_norm = normalize_text(a), normalize_text(b)
    if a_norm == b_norm:
        return 1.0
    return term_similarity(a_norm, b_norm)


def in_household(info: HouseholdInformation) -> bool:
    """Explicit membership flag, else whether household data is present."""
    if info.is_in_household is not None:
        return info.is_in_household
    return bool(info.household_identifier or info.household_name)


def compare_household_information(
    a: HouseholdInformation,
    b: HouseholdInformation,
    context: ComparisonContext,
    *,
    detailed: bool = False,
) -> ScoreOrDetail:
    settings = context.settings
    if not in_household(a):
        components = [
            WeightedComponent(
                "isInHousehold", 1.0,
                _flag_equality(a.is_in_household, b.is_in_household),
                a.is_in_household, b.is_in_household,
            )
        ]
        rule = "not_in_household"
    else:
        head = WeightedComponent(
            "isHeadOfHousehold",
            settings.household_head_weight,
            _flag_equality(a.is_head_of_household, b.is_head_of_household),
            a.is_head_of_household,
            b.is_head_of_household,
        )
        if a.household_identifier:
            components = [
                WeightedComponent(
                    "householdIdentifier",
                    settings.household_identifier_weight,
                    _identifier_similarity(a.household_identifier, b.household_identifier),
                    a.household_identifier,
                    b.household_identifier,
                ),
                head,
            ]
            rule = "identifier"
        else:
            components = [
                WeightedComponent(
                    "householdName",
                    settings.household_identifier_weight,
                    _identifier_similarity(a.household_name, b.household_name),
                    a.household_name,
                    b.household_name,
                ),
                head,
            ]
            rule = "household_name"
    return weighted_result(CALCULATOR, components, detailed=detailed, notes={"rule": rule})
