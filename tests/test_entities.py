"""Tests for entity comparison, lot collisions and cross-type dispatch."""
from __future__ import annotations

import itertools

import pytest

from party_linkage.comparison import (
    LocationRelationship,
    compare,
    compare_entities,
    compare_for_lot_collision,
    location_relationship,
    lot_relationship,
    parse_lot,
)
from party_linkage.matching import universal_compare
from party_linkage.matching.dispatch import (
    BEST_MEMBER,
    DIRECT,
    ONE_HOUSEHOLD_EMPTY,
    comparison_type,
)
from party_linkage.models import (
    Business,
    EntityKey,
    HouseholdInformation,
    IdentifierName,
    LegacyInfo,
    SourceSystem,
)


class TestLotParsing:
    """Tests for fire-number parsing."""

    def test_parse(self):
        """Numeric base and optional suffix."""
        assert parse_lot("72J").base == 72
        assert parse_lot("72J").suffix == "J"
        assert parse_lot("72").suffix is None
        assert parse_lot("PO BOX 7") is None
        assert parse_lot(None) is None

    def test_relationship(self):
        """Only differing suffixes on one base are a shared lot."""
        assert lot_relationship("72J", "72W") is LocationRelationship.SAME_BASE_LOT
        assert lot_relationship("72J", "72J") is LocationRelationship.DISTINCT
        assert lot_relationship("72J", "73W") is LocationRelationship.DISTINCT
        assert lot_relationship("72", "72W") is LocationRelationship.DISTINCT

    def test_only_fire_numbers_count(self, make_individual):
        """Locations that are not fire numbers never share a lot."""
        a = make_individual("JOHN", "SMITH", key="72J")
        b = make_individual("MARY", "SMITH", key="72W")
        c = make_individual("MARY", "SMITH", key="72W", location_type="PID")
        assert location_relationship(a, b) is LocationRelationship.SAME_BASE_LOT
        assert location_relationship(a, c) is LocationRelationship.DISTINCT


class TestCompareEntities:
    """Tests for the entity comparator."""

    def test_identical(self, context, make_individual, make_contact, make_address):
        """Identical entities score 1.0."""
        a = make_individual("JOHN", "SMITH", contact_info=make_contact(make_address()))
        assert compare(a, a, context) == 1.0

    def test_middle_initial(self, context, make_individual, make_contact, make_address):
        """A middle initial on one side does not hurt."""
        info = make_contact(make_address())
        a = make_individual("JOHN", "SMITH", "A", contact_info=info)
        b = make_individual("JOHN", "SMITH", contact_info=info, key="2")
        assert compare_entities(a, b, context) >= 0.9

    def test_perfect_name_boost(self, context, make_individual, make_contact):
        """A perfect name takes 12 points of weight from the other components."""
        a = make_individual("JOHN", "SMITH", contact_info=make_contact(email="jsmith@aol.com"))
        b = make_individual(
            "JOHN", "SMITH", contact_info=make_contact(email="jsmith@gmail.com"), key="2"
        )
        detail = compare_entities(a, b, context, detailed=True)
        assert detail.overall == pytest.approx(0.955)
        assert detail.notes["name_boost"] == pytest.approx(0.12)
        assert detail.component("name").weight == pytest.approx(0.775)
        detail.verify()

    def test_missing_name_penalty(self, context, make_individual, make_contact, make_address):
        """No name on one side costs 0.04."""
        info = make_contact(make_address())
        a = make_individual(contact_info=info)
        b = make_individual("JOHN", "SMITH", contact_info=info, key="2")
        detail = compare_entities(a, b, context, detailed=True)
        assert detail.overall == pytest.approx(0.96)
        assert [p.reason for p in detail.penalties] == ["name_absent"]
        detail.verify()

    def test_missing_contact_penalty(self, context, make_individual):
        """No contact info costs 0.03."""
        a = make_individual("JOHN", "SMITH")
        b = make_individual("JOHN", "SMITH", key="2")
        assert compare_entities(a, b, context) == pytest.approx(0.97)

    def test_auxiliary_blocks(self, context, make_individual):
        """Household and legacy blocks join the score when both sides have them."""
        other = HouseholdInformation(is_in_household=False)
        a = make_individual(
            "JOHN", "SMITH", other_info=other, legacy_info=LegacyInfo(owner_name="SMITH JOHN")
        )
        b = make_individual(
            "JOHN", "SMITH", key="2", other_info=other,
            legacy_info=LegacyInfo(owner_name="SMITH JON"),
        )
        detail = compare_entities(a, b, context, detailed=True)
        assert detail.similarity_of("otherInfo") == 1.0
        assert detail.similarity_of("legacyInfo") == 0.0
        detail.verify()

    def test_household_block_without_flag(self, context, make_individual, make_contact, make_address):
        """An identifier with no membership flag still counts as a match."""
        info = make_contact(make_address())
        other = HouseholdInformation(household_identifier="ACCT-77", is_head_of_household=True)
        a = make_individual("JOHN", "SMITH", contact_info=info, other_info=other)
        b = make_individual("JOHN", "SMITH", key="2", contact_info=info, other_info=other)
        detail = compare_entities(a, b, context, detailed=True)
        assert detail.similarity_of("otherInfo") == 1.0
        assert detail.overall == 1.0

    def test_unresolvable_household_block_excluded(self, context, make_individual):
        """Membership known on one side only leaves the block out of the score."""
        a = make_individual("JOHN", "SMITH", other_info=HouseholdInformation(is_in_household=False))
        b = make_individual(
            "JOHN", "SMITH", key="2", other_info=HouseholdInformation(household_name="SMITH")
        )
        detail = compare_entities(a, b, context, detailed=True)
        assert detail.component("otherInfo") is None
        assert detail.overall == pytest.approx(0.97)

    def test_household_weights(self, context, make_household, make_contact, make_address):
        """Aggregate households weight name and contact equally."""
        info = make_contact(make_address())
        a = make_household("SMITH HOUSEHOLD", contact_info=info)
        b = make_household("JONES HOUSEHOLD", contact_info=info, key="H2")
        detail = compare_entities(a, b, context, detailed=True)
        assert detail.component("name").weight == pytest.approx(0.5)
        assert detail.overall == pytest.approx((detail.similarity_of("name") + 1.0) / 2)

    def test_same_base_lot(self, context, make_individual, make_contact, make_address):
        """Neighbours on one lot do not match on their shared primary address."""
        shared = make_contact(
            make_address("72", "CORN NECK", "RD", city="BLOCK ISLAND", zip_code="02807")
        )
        a = make_individual("JOHN", "SMITH", key="72J", contact_info=shared)
        b = make_individual("MARY", "JONES", key="72W", contact_info=shared)
        c = make_individual("MARY", "JONES", key="73", contact_info=shared)

        on_lot = compare_entities(a, b, context, detailed=True)
        elsewhere = compare_entities(a, c, context, detailed=True)

        assert on_lot.notes["location"] == LocationRelationship.SAME_BASE_LOT.value
        assert on_lot.component("contactInfo").weight == 0.0
        assert [p.reason for p in on_lot.penalties] == ["contact_info_absent"]
        assert on_lot.overall < elsewhere.overall
        on_lot.verify()

    def test_checksum_holds(self, context, make_individual, make_household, make_contact, make_address):
        """Every detailed comparison adds up."""
        entities = [
            make_individual("JOHN", "SMITH", contact_info=make_contact(make_address())),
            make_individual("JON", "SMYTH", key="2", contact_info=make_contact(email="js@aol.com")),
            make_individual("MARY", "SMITH", "ANNE", key="3"),
            make_individual(key="4", contact_info=make_contact(make_address(number="125"))),
            make_household("SMITH HOUSEHOLD", contact_info=make_contact(make_address())),
            Business(
                key=EntityKey(source=SourceSystem.VISION_APPRAISAL, location_value="B1"),
                name=IdentifierName(term="SMITH HARDWARE LLC"),
            ),
        ]
        for a, b in itertools.product(entities, repeat=2):
            detail = compare_entities(a, b, context, detailed=True)
            detail.verify()
            assert 0.0 <= detail.overall <= 1.0


class TestLotCollision:
    """Tests for same-owner decisions on shared fire numbers."""

    def test_same_name(self, context, make_individual):
        """A matching name alone decides same owner."""
        a = make_individual("JOHN", "SMITH", key="72J")
        b = make_individual("JOHN", "SMITH", key="72W")
        decision = compare_for_lot_collision(a, b, context)
        assert decision.same_owner
        assert decision.reasoning == "SAME OWNER: name 100.0% > 95%"
        assert decision.overall == pytest.approx(0.7)

    def test_different_owner(self, context, make_individual):
        """Unrelated names without secondaries are different owners."""
        a = make_individual("JOHN", "SMITH", key="72J")
        b = make_individual("MARY", "JONES", key="72W")
        decision = compare_for_lot_collision(a, b, context)
        assert not decision.same_owner
        assert decision.reasoning.startswith("DIFFERENT OWNER: overall=")
        assert decision.contact_score == 0.0

    def test_shared_secondary(self, context, make_individual, make_contact, make_address):
        """A shared mailing address decides same owner."""
        mailing = make_address("9", "BROADWAY", None, city="NEW YORK", state="NY", zip_code="10001")
        lot = make_address("72", "CORN NECK", "RD", city="BLOCK ISLAND", zip_code="02807")
        a = make_individual("JOHN", "SMITH", key="72J", contact_info=make_contact(lot, (mailing,)))
        b = make_individual("J", "SMITH TRUST", key="72W", contact_info=make_contact(lot, (mailing,)))
        decision = compare_for_lot_collision(a, b, context)
        assert decision.same_owner
        assert decision.contact_score == 1.0
        assert "contactInfo 100.0% > 95%" in decision.reasoning


class TestUniversalCompare:
    """Tests for routing entity pairs by runtime type."""

    def test_individual_to_household_member(self, context, make_individual, make_household):
        """An individual is scored against the best household member."""
        base = make_individual("JOHN", "SMITH")
        target = make_household(
            "SMITH, JOHN & MARY",
            members=(
                make_individual("MARY", "SMITH", key="m1"),
                make_individual("JOHN", "SMITH", key="m2"),
            ),
        )
        result = universal_compare(base, target, context)
        assert result.method == BEST_MEMBER
        assert result.matched_member_index == 1
        assert result.score == pytest.approx(0.97)
        assert result.comparison_type == "Individual-to-AggregateHousehold"

    def test_household_to_individual(self, context, make_individual, make_household):
        """The reverse direction records the base member index."""
        base = make_household(
            "SMITH, JOHN & MARY",
            members=(
                make_individual("MARY", "SMITH", key="m1"),
                make_individual("JOHN", "SMITH", key="m2"),
            ),
        )
        result = universal_compare(base, make_individual("MARY", "SMITH"), context)
        assert result.base_member_index == 0
        assert result.score == pytest.approx(0.97)

    def test_household_without_members(self, context, make_individual, make_household):
        """A memberless household is compared directly by name and contact."""
        result = universal_compare(
            make_individual("JOHN", "SMITH"), make_household("JOHN SMITH"), context
        )
        assert result.method == DIRECT
        assert result.detail.calculator == "directComparison"
        assert result.score == 1.0
        assert result.name_score == 1.0

    def test_one_household_empty(self, context, make_individual, make_household):
        """Exactly one household with members scores 0."""
        full = make_household("SMITH", members=(make_individual("JOHN", "SMITH", key="m1"),))
        empty = make_household("SMITH", key="H2")
        result = universal_compare(full, empty, context)
        assert result.method == ONE_HOUSEHOLD_EMPTY
        assert result.score == 0.0
        assert result.detail is None

    def test_other_pairs_direct(self, context, make_individual, make_legal_construct):
        """Pairs without a richer comparison use name and contact only."""
        base = make_individual("JOHN", "SMITH")
        target = make_legal_construct("SMITH JOHN TRUST", key="P1")
        result = universal_compare(base, target, context)
        assert result.method == DIRECT
        assert comparison_type(base, target) == "Individual-to-LegalConstruct"
        result.detail.verify()
