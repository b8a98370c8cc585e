"""Tests for household-information comparison."""
from __future__ import annotations

import pytest

from party_linkage.comparison import compare_household_information
from party_linkage.models import HouseholdInformation


class TestHouseholdInformation:
    """Tests for the three household-information rules."""

    def test_not_in_household(self, context):
        """Outside a household only membership equality counts."""
        a = HouseholdInformation(is_in_household=False)
        assert compare_household_information(a, a, context) == 1.0
        b = HouseholdInformation(is_in_household=True, household_identifier="H1")
        detail = compare_household_information(a, b, context, detailed=True)
        assert detail.overall == 0.0
        assert detail.notes["rule"] == "not_in_household"

    def test_identifier_and_head(self, context):
        """Identifier carries 0.7, head-of-household 0.3."""
        a = HouseholdInformation(
            is_in_household=True, household_identifier="H-100", is_head_of_household=True
        )
        b = HouseholdInformation(
            is_in_household=True, household_identifier="H-100", is_head_of_household=False
        )
        detail = compare_household_information(a, b, context, detailed=True)
        assert detail.overall == pytest.approx(0.7)
        assert detail.notes["rule"] == "identifier"
        detail.verify()

    def test_household_name_without_identifier(self, context):
        """Without an identifier the household name is compared instead."""
        a = HouseholdInformation(
            is_in_household=True, household_name="Smith Household", is_head_of_household=True
        )
        b = HouseholdInformation(
            is_in_household=True, household_name="SMITH HOUSEHOLD", is_head_of_household=True
        )
        detail = compare_household_information(a, b, context, detailed=True)
        assert detail.overall == 1.0
        assert detail.notes["rule"] == "household_name"

    def test_missing_identifier_on_target(self, context):
        """A side without an identifier leaves only the head flag."""
        a = HouseholdInformation(
            is_in_household=True, household_identifier="H-100", is_head_of_household=True
        )
        b = HouseholdInformation(is_in_household=True, is_head_of_household=True)
        detail = compare_household_information(a, b, context, detailed=True)
        assert [c.name for c in detail.components] == ["isHeadOfHousehold"]
        assert detail.overall == 1.0

    def test_identifier_without_membership_flag(self, context):
        """An unset membership flag with an identifier uses the identifier rule."""
        a = HouseholdInformation(household_identifier="ACCT-77", is_head_of_household=True)
        detail = compare_household_information(a, a, context, detailed=True)
        assert detail.notes["rule"] == "identifier"
        assert detail.overall == 1.0
        detail.verify()

    def test_name_without_membership_flag(self, context):
        """An unset membership flag with only a household name uses the name rule."""
        a = HouseholdInformation(household_name="Smith Household")
        b = HouseholdInformation(household_name="SMITH HOUSEHOLD", is_in_household=True)
        detail = compare_household_information(a, b, context, detailed=True)
        assert detail.notes["rule"] == "household_name"
        assert [c.name for c in detail.components] == ["householdName"]
        assert detail.overall == 1.0
