"""Party entities.

An entity is one of Individual, AggregateHousehold, Business or
LegalConstruct. Entities are built once by the loading layer and never
mutated during matching.

Example:
    >>> key = EntityKey(
    ...     source=SourceSystem.VISION_APPRAISAL,
    ...     location_type="FireNumber",
    ...     location_value="72J",
    ... )
    >>> Individual(key=key).unique_key
    'visionAppraisal:FireNumber:72J:Individual'
"""
from __future__ import annotations

from enum import Enum
from typing import ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field

from party_linkage.exceptions import LinkageError
from party_linkage.models.contact import ContactInfo
from party_linkage.models.household import HouseholdInformation, LegacyInfo
from party_linkage.models.names import Name


# =============================================================================
# Enums
# =============================================================================


class EntityType(str, Enum):
    """Runtime type of an entity."""

    INDIVIDUAL = "Individual"
    AGGREGATE_HOUSEHOLD = "AggregateHousehold"
    BUSINESS = "Business"
    LEGAL_CONSTRUCT = "LegalConstruct"


class SourceSystem(str, Enum):
    """Administrative system a record was loaded from."""

    VISION_APPRAISAL = "visionAppraisal"  # Property-appraisal roll
    BLOOMERANG = "bloomerang"  # Donor/contact database


FIRE_NUMBER = "FireNumber"


# =============================================================================
# Keys
# =============================================================================


class EntityKey(BaseModel):
    """Stable, source-disambiguating identity of an entity.

    Appraisal records are identified by their location identifier; donor
    records additionally by account number and head-of-household status.
    The rendered key always ends with the entity type so a household never
    collides with an individual on the same account or lot.
    """

    model_config = ConfigDict(frozen=True)

    source: SourceSystem
    location_type: str = Field(
        default="Unknown", description='e.g. "FireNumber", "PID", "StreetAddress"'
    )
    location_value: str = "unknown"
    account_number: str | None = None
    head_status: str | None = Field(
        default=None, description='"head", "member" or "na" for donor records'
    )

    def render(self, entity_type: EntityType) -> str:
        if self.source is SourceSystem.BLOOMERANG:
            parts = [
                self.source.value,
                self.account_number or "unknown",
                self.location_type,
                self.location_value,
                self.head_status or "na",
            ]
        else:
            parts = [self.source.value, self.location_type, self.location_value]
        parts.append(entity_type.value)
        return ":".join(parts)


# =============================================================================
# Entities
# =============================================================================


class Entity(BaseModel):
    """Fields shared by every entity variant."""

    model_config = ConfigDict(frozen=True)

    entity_type: ClassVar[EntityType]

    key: EntityKey | None = None
    name: Name | None = None
    contact_info: ContactInfo | None = None
    other_info: HouseholdInformation | None = None
    legacy_info: LegacyInfo | None = None

    @property
    def unique_key(self) -> str:
        if self.key is None:
            raise LinkageError(f"{self.entity_type.value} entity has no key")
        return self.key.render(self.entity_type)

    @property
    def source(self) -> SourceSystem | None:
        return self.key.source if self.key else None

    @property
    def display_name(self) -> str:
        return self.name.display_name if self.name is not None else ""

    @property
    def fire_number(self) -> str | None:
        """Block Island fire number, when the location identifier is one."""
        if self.key is not None and self.key.location_type == FIRE_NUMBER:
            return self.key.location_value
        return None


class Individual(Entity):
    entity_type: ClassVar[EntityType] = EntityType.INDIVIDUAL


class AggregateHousehold(Entity):
    """A household whose members are themselves Individuals."""

    entity_type: ClassVar[EntityType] = EntityType.AGGREGATE_HOUSEHOLD

    members: tuple[Individual, ...] = ()


class Business(Entity):
    entity_type: ClassVar[EntityType] = EntityType.BUSINESS


class LegalConstruct(Entity):
    """Trusts, estates and similar non-human owners."""

    entity_type: ClassVar[EntityType] = EntityType.LEGAL_CONSTRUCT


AnyEntity = Union[Individual, AggregateHousehold, Business, LegalConstruct]
