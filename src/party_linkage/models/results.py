"""Comparison breakdowns and match-selection results."""
from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field

from party_linkage.exceptions import ChecksumError
from party_linkage.models.entities import EntityType


CHECKSUM_TOLERANCE = 1e-9


# =============================================================================
# Detailed comparison
# =============================================================================


class ComponentScore(BaseModel):
    """One weighted sub-component of a detailed comparison."""

    name: str
    base_value: Any = None
    target_value: Any = None
    similarity: float = Field(ge=0.0, le=1.0)
    weight: float = Field(description="Normalized weight actually applied")
    contribution: float = Field(description="similarity * weight")


class Penalty(BaseModel):
    """A flat deduction, recorded as the amount actually applied."""

    reason: str
    amount: float = Field(ge=0.0)


class ComparisonDetail(BaseModel):
    """Structured breakdown of a comparison.

    The checksum is ``overall - (sum(contributions) - sum(penalties))`` and is
    zero, within rounding, for every valid comparison.
    """

    calculator: str
    overall: float = Field(ge=0.0, le=1.0)
    components: list[ComponentScore] = Field(default_factory=list)
    penalties: list[Penalty] = Field(default_factory=list)
    notes: dict[str, Any] = Field(
        default_factory=dict,
        description="Calculator-specific context (branch taken, matched indices)",
    )

    @computed_field
    @property
    def checksum(self) -> float:
        contributions = sum(c.contribution for c in self.components)
        penalties = sum(p.amount for p in self.penalties)
        return round(self.overall - (contributions - penalties), 10)

    def component(self, name: str) -> ComponentScore | None:
        for c in self.components:
            if c.name == name:
                return c
        return None

    def similarity_of(self, name: str) -> float | None:
        c = self.component(name)
        return c.similarity if c is not None else None

    def verify(self, tolerance: float = CHECKSUM_TOLERANCE) -> None:
        """Raise ChecksumError when contributions do not add up."""
        if abs(self.checksum) > tolerance:
            raise ChecksumError(self.calculator, self.checksum)


class LotCollisionDecision(BaseModel):
    """Whether two records sharing a fire number belong to one owner."""

    same_owner: bool
    overall: float = Field(ge=0.0, le=1.0)
    name_score: float = Field(ge=0.0, le=1.0)
    contact_score: float = Field(
        ge=0.0, le=1.0, description="Secondary-address-only similarity"
    )
    reasoning: str


# =============================================================================
# Match selection
# =============================================================================


class MatchClassification(str, Enum):
    """Strength of a scored pair."""

    TRUE_MATCH = "true_match"
    NEAR_MATCH = "near_match"
    NO_MATCH = "no_match"


class MatchRecord(BaseModel):
    """One compared candidate, with everything a renderer needs."""

    target_key: str
    target_source: str | None = None
    target_type: EntityType
    target_name: str = ""
    score: float = Field(ge=0.0, le=1.0)
    name_score: float | None = Field(
        default=None, description="Isolated name-component similarity"
    )
    contact_score: float | None = None
    comparison_type: str = Field(
        description='"direct", "individual_to_household_member", ...'
    )
    matched_member_index: int | None = None
    classification: MatchClassification = MatchClassification.NO_MATCH
    detail: ComparisonDetail | None = None


class TypeMatchGroup(BaseModel):
    """All scores and the selected best matches for one target type."""

    target_type: EntityType
    all_scores: list[MatchRecord] = Field(default_factory=list)
    best_matches: list[MatchRecord] = Field(default_factory=list)
    percentile: float | None = None
    effective_cutoff: float | None = Field(
        default=None,
        description="I2I: MAX(percentile, floor, minimum); other pairs: the percentile",
    )
    selection_method: str = "none"

    @computed_field
    @property
    def total_count(self) -> int:
        return len(self.all_scores)


class ReportMetadata(BaseModel):
    total_comparisons: int = 0
    elapsed_ms: float = 0.0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    config: dict[str, Any] = Field(default_factory=dict)


class MatchReport(BaseModel):
    """Best matches of one base entity, grouped by target type."""

    base_key: str
    base_name: str = ""
    base_type: EntityType
    base_source: str | None = None
    groups: dict[EntityType, TypeMatchGroup] = Field(default_factory=dict)
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)

    def group(self, entity_type: EntityType) -> TypeMatchGroup:
        """Group for a target type; empty when no candidate had that type."""
        return self.groups.get(entity_type) or TypeMatchGroup(target_type=entity_type)

    @computed_field
    @property
    def best_match_count(self) -> int:
        return sum(len(g.best_matches) for g in self.groups.values())
