"""Attributed terms and alias sets.

A term is a string value plus where it came from. Several terms describing
the same underlying value can be grouped under one primary term with
categorized alternatives.
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AliasCategory(str, Enum):
    """How an alternative term relates to its primary term."""

    HOMONYMS = "homonyms"  # Same thing, spelled differently (MAIN ST / MAIN STREET)
    SYNONYMS = "synonyms"  # Plausibly the same, unverified
    CANDIDATES = "candidates"  # Awaiting review


class Term(BaseModel):
    """A string value with source attribution."""

    model_config = ConfigDict(frozen=True)

    term: str
    source: str | None = Field(default=None, description="Source system tag")
    index: int | None = Field(default=None, description="Insertion sequence")
    identifier: str | None = Field(
        default=None, description="Source-local identifier of the record"
    )

    def __str__(self) -> str:
        return self.term


class Aliases(BaseModel):
    """Alternative terms grouped by category."""

    model_config = ConfigDict(frozen=True)

    homonyms: tuple[Term, ...] = ()
    synonyms: tuple[Term, ...] = ()
    candidates: tuple[Term, ...] = ()

    def get(self, category: AliasCategory) -> tuple[Term, ...]:
        return getattr(self, category.value)


class AliasedTerm(BaseModel):
    """A primary term and its categorized alternatives."""

    model_config = ConfigDict(frozen=True)

    primary: Term
    alternatives: Aliases = Field(default_factory=Aliases)

    def variations(
        self,
        categories: tuple[AliasCategory, ...] = (
            AliasCategory.HOMONYMS,
            AliasCategory.SYNONYMS,
            AliasCategory.CANDIDATES,
        ),
    ) -> list[str]:
        """Primary term followed by the alternatives in the given categories."""
        values = [self.primary.term]
        for category in categories:
            values.extend(t.term for t in self.alternatives.get(category))
        return values
