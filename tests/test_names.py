"""Tests for name comparison."""
from __future__ import annotations

import pytest

from party_linkage.comparison import (
    ComparisonContext,
    compare,
    compare_names,
    name_similarity,
    permutation_score,
)
from party_linkage.config import PermutationSettings
from party_linkage.models import HouseholdName, IdentifierName, IndividualName


@pytest.fixture
def ctx():
    return ComparisonContext()


class TestIndividualNames:
    """Tests for the weighted/permutation individual-name comparator."""

    def test_identical(self, ctx):
        """Identical names score 1.0 through the weighted method."""
        a = IndividualName(first_name="JOHN", last_name="SMITH")
        detail = compare(a, a, ctx, detailed=True)
        assert detail.overall == 1.0
        assert detail.notes["method"] == "weighted"
        assert detail.notes["permutation_score"] == pytest.approx(0.99)

    def test_one_letter_drift(self, ctx):
        """JOHN vs JON with the same surname."""
        a = IndividualName(first_name="JOHN", last_name="SMITH")
        b = IndividualName(first_name="JON", last_name="SMITH")
        assert compare(a, b, ctx) == pytest.approx(0.8888888889, abs=1e-9)

    def test_swapped_fields_use_permutation(self, ctx):
        """Surname in the first-name field is rescued by word permutation."""
        a = IndividualName(first_name="SMITH", last_name="JOHN")
        b = IndividualName(first_name="JOHN", last_name="SMITH")
        detail = compare(a, b, ctx, detailed=True)
        assert detail.overall == pytest.approx(0.99)
        assert detail.notes["method"] == "permutation"
        assert detail.component("wordPermutation") is not None
        detail.verify()

    def test_initial_against_full_name(self, ctx):
        """A lone initial is dropped and the word-count haircut applies."""
        a = IndividualName(first_name="J", last_name="Smith")
        b = IndividualName(first_name="John", last_name="Smith")
        assert compare(a, b, ctx) == pytest.approx(0.8132233047, abs=1e-9)

    def test_symmetric(self, ctx):
        """Name comparison does not depend on argument order."""
        a = IndividualName(first_name="MARY", other_names="ANNE", last_name="O'BRIEN")
        b = IndividualName(first_name="MARIE", last_name="OBRIEN")
        assert compare(a, b, ctx) == compare(b, a, ctx)

    def test_empty_against_name(self, ctx):
        """No comparable words scores 0."""
        a = IndividualName(first_name="JOHN")
        b = IndividualName()
        assert compare(a, b, ctx) == 0.0


class TestPermutationScore:
    """Tests for free-order word matching."""

    def test_paired_initials(self):
        """One initial on each side is scored at the short-word weight."""
        a = IndividualName(first_name="J", last_name="SMITH")
        b = IndividualName(first_name="K", last_name="SMITH")
        assert permutation_score(a, b) == pytest.approx(0.89)

    def test_matching_initials(self):
        """Identical initials and surnames keep only the flat penalty."""
        a = IndividualName(first_name="J", last_name="SMITH")
        assert permutation_score(a, a) == pytest.approx(0.99)

    def test_too_many_words(self):
        """More than seven words skips the permutation path entirely."""
        a = IndividualName(
            first_name="JOHN",
            other_names="PAUL GEORGE RINGO PETER SIMON ARTHUR",
            last_name="SMITH",
        )
        assert permutation_score(a, a) == 0.0

    def test_seven_words_still_permuted(self):
        """Seven words is within the limit."""
        a = IndividualName(
            first_name="JOHN",
            other_names="PAUL GEORGE RINGO PETER SIMON",
            last_name="SMITH",
        )
        assert permutation_score(a, a) == pytest.approx(0.99)

    def test_long_name_falls_back_to_weighted(self):
        """A long identical name still scores 1.0 via the weighted method."""
        a = IndividualName(
            first_name="JOHN",
            other_names="PAUL GEORGE RINGO PETER SIMON ARTHUR",
            last_name="SMITH",
        )
        assert compare(a, a) == 1.0

    def test_custom_settings(self):
        """The flat penalty is configurable."""
        a = IndividualName(first_name="JOHN", last_name="SMITH")
        settings = PermutationSettings(flat_penalty=0.0)
        assert permutation_score(a, a, settings) == 1.0


class TestOtherNames:
    """Tests for household, identifier and cross-type names."""

    def test_household_names(self, ctx):
        """Household names compare their full string."""
        a = HouseholdName(full_name="SMITH, JOHN & MARY")
        b = HouseholdName(full_name="smith, john & mary")
        assert compare(a, b, ctx) == 1.0

    def test_identifier_names(self, ctx):
        """Identifier names compare their single term."""
        detail = compare(
            IdentifierName(term="ACME TRUST"), IdentifierName(term="ACME TRUST"), ctx, detailed=True
        )
        assert detail.overall == 1.0
        assert detail.components[0].name == "term"

    def test_cross_type(self, ctx):
        """Names of different kinds compare display strings."""
        a = IndividualName(first_name="John", last_name="Smith")
        b = HouseholdName(full_name="JOHN SMITH")
        detail = compare_names(a, b, ctx, detailed=True)
        assert detail.calculator == "crossTypeNameComparison"
        assert detail.overall == 1.0
        assert compare(a, b, ctx) == 1.0

    def test_name_similarity_missing(self, ctx):
        """Absent or empty names yield None, not 0."""
        name = IndividualName(first_name="JOHN")
        assert name_similarity(name, None, ctx) is None
        assert name_similarity(name, IndividualName(), ctx) is None
        assert name_similarity(HouseholdName(), name, ctx) is None
