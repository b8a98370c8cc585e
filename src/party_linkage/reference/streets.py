"""Block Island street-name reference data.

The registry is passed explicitly to the comparators that need it; there is
no module-level instance.

YAML format::

    cities: [BLOCK ISLAND, NEW SHOREHAM]   # optional
    streets:
      - primary: CORN NECK RD
        homonyms: [CORN NECK ROAD, CORN NECK]
        synonyms: []
        candidates: []
"""
from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any, Iterable

import structlog
import yaml

from party_linkage.models.terms import AliasCategory, Aliases, AliasedTerm, Term
from party_linkage.utils.similarity import term_similarity

logger = structlog.get_logger(__name__)

BLOCK_ISLAND_ZIP = "02807"
BLOCK_ISLAND_CITIES = frozenset({"BLOCK ISLAND", "NEW SHOREHAM"})
DEFAULT_LOOKUP_THRESHOLD = 0.80

_DEFAULT_DATA = "block_island_streets.yaml"
_REGISTRY_SOURCE = "street_registry"


def _normalize_key(term: str | None) -> str:
    return (term or "").strip().upper()


class StreetName(AliasedTerm):
    """A street with its known spelling variants."""

    def compare_to(self, term: str) -> dict[str, float]:
        """Best similarity of ``term`` against each alias category."""
        scores = {"primary": term_similarity(_normalize_key(term), self.primary.term)}
        for category, label in (
            (AliasCategory.HOMONYMS, "homonym"),
            (AliasCategory.SYNONYMS, "synonym"),
            (AliasCategory.CANDIDATES, "candidate"),
        ):
            scores[label] = max(
                (term_similarity(_normalize_key(term), t.term) for t in self.alternatives.get(category)),
                default=0.0,
            )
        return scores

    @classmethod
    def from_mapping(cls, data: dict[str, Any], index: int | None = None) -> "StreetName":
        def terms(values: Iterable[str] | None) -> tuple[Term, ...]:
            return tuple(
                Term(term=_normalize_key(v), source=_REGISTRY_SOURCE, index=index)
                for v in (values or ())
                if v
            )

        return cls(
            primary=Term(term=_normalize_key(data["primary"]), source=_REGISTRY_SOURCE, index=index),
            alternatives=Aliases(
                homonyms=terms(data.get("homonyms")),
                synonyms=terms(data.get("synonyms")),
                candidates=terms(data.get("candidates")),
            ),
        )


class StreetNameRegistry:
    """Lookup of known Block Island streets.

    Example:
        >>> registry = StreetNameRegistry([
        ...     StreetName.from_mapping({"primary": "CORN NECK RD", "homonyms": ["CORN NECK ROAD"]}),
        ... ])
        >>> registry.lookup("corn neck road").primary.term
        'CORN NECK RD'
    """

    def __init__(
        self,
        streets: Iterable[StreetName] = (),
        cities: Iterable[str] = BLOCK_ISLAND_CITIES,
    ) -> None:
        self._streets: list[StreetName] = []
        self._variations: dict[str, StreetName] = {}
        self.cities = frozenset(_normalize_key(c) for c in cities)
        for street in streets:
            self.add(street)

    def __len__(self) -> int:
        return len(self._streets)

    def __iter__(self):
        return iter(self._streets)

    def add(self, street: StreetName) -> None:
        self._streets.append(street)
        for variation in street.variations():
            # First mapping wins
            self._variations.setdefault(_normalize_key(variation), street)

    def lookup(self, term: str | None, threshold: float = DEFAULT_LOOKUP_THRESHOLD) -> StreetName | None:
        """Find the street a name refers to.

        Exact variation match first; otherwise the street whose primary,
        homonym or candidate similarity is highest and strictly above
        ``threshold``. Synonyms are unverified and never used for the
        similarity fallback.
        """
        key = _normalize_key(term)
        if not key:
            return None
        exact = self._variations.get(key)
        if exact is not None:
            return exact

        best: StreetName | None = None
        best_score = threshold
        for street in self._streets:
            scores = street.compare_to(key)
            score = max(scores["primary"], scores["homonym"], scores["candidate"])
            if score > best_score:
                best_score = score
                best = street
        return best

    def is_known_street(self, term: str | None) -> bool:
        """Exact variation match only."""
        return _normalize_key(term) in self._variations

    def is_block_island_city(self, city: str | None) -> bool:
        return _normalize_key(city) in self.cities

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StreetNameRegistry":
        streets_data = data.get("streets")
        if not streets_data:
            logger.warning("street_registry.no_streets", keys=sorted(data))
            streets_data = []
        streets = [
            StreetName.from_mapping(entry, index=i) for i, entry in enumerate(streets_data)
        ]
        cities = data.get("cities") or BLOCK_ISLAND_CITIES
        return cls(streets, cities=cities)

    @classmethod
    def load_from_yaml(cls, path: Path | str) -> "StreetNameRegistry":
        with open(Path(path)) as f:
            data = yaml.safe_load(f) or {}
        registry = cls.from_dict(data)
        logger.info("street_registry.loaded", path=str(path), streets=len(registry))
        return registry

    @classmethod
    def load_default(cls) -> "StreetNameRegistry":
        """Registry bundled with the package."""
        text = resources.files("party_linkage.reference").joinpath(_DEFAULT_DATA).read_text()
        return cls.from_dict(yaml.safe_load(text) or {})
