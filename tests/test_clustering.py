"""Tests for union-find name clustering."""
from __future__ import annotations

import pytest

from party_linkage.matching import cluster_names
from party_linkage.models import IndividualName


def name(first: str, last: str) -> IndividualName:
    return IndividualName(first_name=first, last_name=last)


class TestClusterNames:
    """Tests for cluster_names."""

    def test_spelling_variants_join(self):
        """JOHN and JON SMITH are one identity; MARY JONES another."""
        result = cluster_names([name("JOHN", "SMITH"), name("JON", "SMITH"), name("MARY", "JONES")])
        assert result.distinct_identities == 2
        assert result.clusters[0].members == [0, 1]
        assert result.clusters[0].representative == 0
        assert result.clusters[0].cohesion == pytest.approx(0.8888888889, abs=1e-9)
        assert result.clusters[1].members == [2]
        assert result.clusters[1].cohesion == 1.0
        assert len(result.pairwise) == 3
        assert len(result.cross_cluster) == 1

    def test_threshold(self):
        """A stricter threshold keeps variants apart."""
        result = cluster_names([name("JOHN", "SMITH"), name("JON", "SMITH")], threshold=0.9)
        assert result.distinct_identities == 2

    def test_transitive(self):
        """A and C join through B even when A and C fall short."""
        names = [name("JOHN", "SMITH"), name("JON", "SMITH"), name("JON", "SMYTH")]
        result = cluster_names(names, threshold=0.885)
        direct = {(p.i, p.j): p.similarity for p in result.pairwise}
        assert direct[(0, 2)] < 0.885
        assert result.distinct_identities == 1
        assert result.clusters[0].members == [0, 1, 2]

    def test_missing_names_stay_alone(self):
        """A missing name never joins a cluster."""
        result = cluster_names([name("JOHN", "SMITH"), None, name("JOHN", "SMITH")])
        assert [c.members for c in result.clusters] == [[0, 2], [1]]

    def test_empty(self):
        """No names, no clusters."""
        result = cluster_names([])
        assert result.distinct_identities == 0
        assert result.pairwise == []
