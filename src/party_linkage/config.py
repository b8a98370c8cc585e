"""Configuration for comparison weights and match-selection thresholds.

All tunable constants live here so they can be overridden without code
changes, either through the environment, a YAML file, or keyword overrides.

Environment Variables:
    LINKAGE_PERCENTILE_THRESHOLD: Percentile used for best-match cutoffs (default 98)
    LINKAGE_MINIMUM_GROUP_SIZE: Top-N fallback size per type group (default 10)
    LINKAGE_MINIMUM_SCORE_DEFAULT: Minimum score for most type pairs (default 0.31)
    LINKAGE_NAME_SCORE_OVERRIDE: Name similarity that forces inclusion (default 0.985)
    LINKAGE_I2I_MINIMUM_CUTOFF: Individual-to-Individual floor cutoff (default 0.91)
    LINKAGE_I2I_MINIMUM_SCORE: Individual-to-Individual minimum score (default 0.50)
    LINKAGE_I2H_MINIMUM_SCORE: Individual-to-AggregateHousehold minimum (default 0.50)
    LINKAGE_CLUSTER_THRESHOLD: Name clustering true-match threshold (default 0.875)
    LINKAGE_CONTACT_TRUE_MATCH: Primary address score that retires its pairing (default 0.87)
    LINKAGE_WORKERS: Process-pool size for the candidate loop (default 1)

Example:
    >>> from party_linkage.config import MatchConfig
    >>> config = MatchConfig.with_overrides(minimum_group_size=5)
    >>> config.individual_to_individual.minimum_cutoff
    0.91
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from party_linkage.exceptions import ConfigurationError


def _f(name: str, default: float) -> float:
    """Parse float from environment variable with fallback."""
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _i(name: str, default: int) -> int:
    """Parse int from environment variable with fallback."""
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _check_sum(name: str, weights: dict[str, float]) -> None:
    total = sum(weights.values())
    if abs(total - 1.0) > 1e-9:
        raise ConfigurationError(f"{name} weights must sum to 1.0, got {total}")


# =============================================================================
# Comparison weights
# =============================================================================


class IndividualNameWeights(BaseModel):
    """Field weights for the weighted individual-name score."""

    last_name: float = Field(default=0.5, ge=0.0, le=1.0)
    first_name: float = Field(default=0.4, ge=0.0, le=1.0)
    other_names: float = Field(default=0.1, ge=0.0, le=1.0)


class PermutationSettings(BaseModel):
    """Limits and adjustments for free-order name word matching."""

    short_word_max_length: int = Field(
        default=2, ge=1, description="Words this long or shorter are initials"
    )
    short_word_weight: float = Field(
        default=0.1, ge=0.0, le=1.0,
        description="Share of the score given to the paired short words",
    )
    max_words: int = Field(
        default=7, ge=1, description="Factorial guard: more words abort the permutation path"
    )
    haircut_exponent: float = Field(default=2.5, gt=0.0)
    flat_penalty: float = Field(default=0.01, ge=0.0, le=1.0)


class EmailWeights(BaseModel):
    """Split weights for email comparison."""

    local_part: float = Field(default=0.8, ge=0.0, le=1.0)
    domain: float = Field(default=0.2, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _weights_sum(self) -> "EmailWeights":
        _check_sum("email", {"local_part": self.local_part, "domain": self.domain})
        return self


class POBoxWeights(BaseModel):
    """Weights and floors for PO Box to PO Box comparison."""

    zip_floor: float = Field(default=0.74, ge=0.0, le=1.0)
    zip: float = 0.3
    secondary_number: float = 0.3
    city: float = 0.2
    state: float = 0.2

    no_zip_secondary_floor: float = Field(default=0.8, ge=0.0, le=1.0)
    no_zip_exact_city: float = 0.5
    no_zip_exact_state: float = 0.5
    no_zip_secondary_number: float = 0.6
    no_zip_city: float = 0.2
    no_zip_state: float = 0.2


class BlockIslandWeights(BaseModel):
    """Weights for Block Island to Block Island comparison."""

    street_number: float = 0.85
    street_name: float = 0.15
    no_zip_street_number: float = 1.0


class GeneralAddressWeights(BaseModel):
    """Weights for ordinary street addresses."""

    street_number: float = 0.3
    street_name: float = 0.2
    zip: float = 0.4
    state: float = 0.1

    no_zip_street_number: float = 0.3
    no_zip_street_name: float = 0.2
    no_zip_city: float = 0.25
    no_zip_state: float = 0.25

    @model_validator(mode="after")
    def _weights_sum(self) -> "GeneralAddressWeights":
        _check_sum(
            "general address",
            {
                "street_number": self.street_number,
                "street_name": self.street_name,
                "zip": self.zip,
                "state": self.state,
            },
        )
        _check_sum(
            "general address (no zip)",
            {
                "street_number": self.no_zip_street_number,
                "street_name": self.no_zip_street_name,
                "city": self.no_zip_city,
                "state": self.no_zip_state,
            },
        )
        return self


class ContactInfoWeights(BaseModel):
    """Address/email split for contact-info comparison."""

    primary_address: float = 0.75
    primary_email: float = 0.25
    secondary_address: float = 0.65
    secondary_email: float = 0.35
    true_match_threshold: float = Field(
        default=_f("LINKAGE_CONTACT_TRUE_MATCH", 0.87),
        ge=0.0, le=1.0,
        description="Primary pairing score above which its secondary is excluded",
    )


class EntityWeights(BaseModel):
    """Base weights of the entity-level comparison."""

    name: float = Field(default=0.5, ge=0.0, le=1.0)
    contact_info: float = Field(default=0.3, ge=0.0, le=1.0)
    other_info: float = Field(default=0.15, ge=0.0, le=1.0)
    legacy_info: float = Field(default=0.05, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _weights_sum(self) -> "EntityWeights":
        _check_sum("entity", self.as_dict())
        return self

    def as_dict(self) -> dict[str, float]:
        return {
            "name": self.name,
            "contactInfo": self.contact_info,
            "otherInfo": self.other_info,
            "legacyInfo": self.legacy_info,
        }


class EntityAdjustments(BaseModel):
    """Boosts and flat penalties applied by the entity comparator."""

    perfect_name_boost: float = Field(default=0.12, ge=0.0, le=1.0)
    near_name_boost: float = Field(default=0.06, ge=0.0, le=1.0)
    near_name_threshold: float = Field(default=0.95, ge=0.0, le=1.0)
    missing_name_penalty: float = Field(default=0.04, ge=0.0, le=1.0)
    missing_contact_penalty: float = Field(default=0.03, ge=0.0, le=1.0)


class LotCollisionThresholds(BaseModel):
    """Same-owner thresholds when two records share a lot number."""

    name_weight: float = 0.7
    contact_weight: float = 0.3
    overall: float = 0.92
    name: float = 0.95
    contact_info: float = 0.95


class ComparisonSettings(BaseModel):
    """Every weight consumed by the comparators."""

    individual_name: IndividualNameWeights = Field(default_factory=IndividualNameWeights)
    permutation: PermutationSettings = Field(default_factory=PermutationSettings)
    email: EmailWeights = Field(default_factory=EmailWeights)
    po_box: POBoxWeights = Field(default_factory=POBoxWeights)
    block_island: BlockIslandWeights = Field(default_factory=BlockIslandWeights)
    general_address: GeneralAddressWeights = Field(default_factory=GeneralAddressWeights)
    contact_info: ContactInfoWeights = Field(default_factory=ContactInfoWeights)

    individual_weights: EntityWeights = Field(default_factory=EntityWeights)
    household_weights: EntityWeights = Field(
        default_factory=lambda: EntityWeights(
            name=0.4, contact_info=0.4, other_info=0.15, legacy_info=0.05
        )
    )
    adjustments: EntityAdjustments = Field(default_factory=EntityAdjustments)

    direct_name_weight: float = Field(
        default=0.5, ge=0.0, le=1.0,
        description="Name share of the reduced name+contact comparison",
    )
    direct_contact_weight: float = Field(default=0.5, ge=0.0, le=1.0)

    household_identifier_weight: float = 0.7
    household_head_weight: float = 0.3

    lot_collision: LotCollisionThresholds = Field(default_factory=LotCollisionThresholds)


# =============================================================================
# Match selection
# =============================================================================


class IndividualToIndividualRules(BaseModel):
    """Selection rules for Individual base vs Individual targets."""

    minimum_cutoff: float = Field(
        default=_f("LINKAGE_I2I_MINIMUM_CUTOFF", 0.91),
        ge=0.0, le=1.0,
        description="Floor cutoff - effective cutoff is MAX(percentile, this)",
    )
    minimum_score: float = Field(
        default=_f("LINKAGE_I2I_MINIMUM_SCORE", 0.50), ge=0.0, le=1.0
    )


class IndividualToHouseholdRules(BaseModel):
    """Selection rules for Individual/AggregateHousehold pairs (either direction)."""

    minimum_score: float = Field(
        default=_f("LINKAGE_I2H_MINIMUM_SCORE", 0.50), ge=0.0, le=1.0
    )


class MatchCriteria(BaseModel):
    """Thresholds of the true-match / near-match classification."""

    overall_with_name: float = 0.80
    name_with_overall: float = 0.83
    contact_alone: float = 0.87
    overall_alone: float = 0.905
    name_alone: float = 0.875

    near_overall_with_name: float = 0.77
    near_name_with_overall: float = 0.80
    near_contact_alone: float = 0.85
    near_overall_alone: float = 0.875
    near_name_alone: float = 0.845


class MatchConfig(BaseModel):
    """Configuration consumed once per orchestrator invocation."""

    percentile_threshold: float = Field(
        default=_f("LINKAGE_PERCENTILE_THRESHOLD", 98.0), gt=0.0, le=100.0
    )
    minimum_group_size: int = Field(
        default=_i("LINKAGE_MINIMUM_GROUP_SIZE", 10), ge=1
    )
    minimum_score_default: float = Field(
        default=_f("LINKAGE_MINIMUM_SCORE_DEFAULT", 0.31), ge=0.0, le=1.0
    )
    name_score_override: float = Field(
        default=_f("LINKAGE_NAME_SCORE_OVERRIDE", 0.985), ge=0.0, le=1.0
    )
    include_detailed_breakdown: bool = True

    individual_to_individual: IndividualToIndividualRules = Field(
        default_factory=IndividualToIndividualRules
    )
    individual_to_household: IndividualToHouseholdRules = Field(
        default_factory=IndividualToHouseholdRules
    )
    criteria: MatchCriteria = Field(default_factory=MatchCriteria)

    cluster_threshold: float = Field(
        default=_f("LINKAGE_CLUSTER_THRESHOLD", 0.875), ge=0.0, le=1.0
    )
    workers: int = Field(default=_i("LINKAGE_WORKERS", 1), ge=1)

    comparison: ComparisonSettings = Field(default_factory=ComparisonSettings)

    @classmethod
    def with_overrides(cls, **overrides: Any) -> "MatchConfig":
        """Build a config from defaults plus keyword overrides."""
        return cls.model_validate(overrides)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "MatchConfig":
        """Load a configuration from a YAML file (missing keys keep defaults)."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)
