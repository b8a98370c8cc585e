"""Party Linkage data models."""

from .contact import Address, ContactInfo
from .entities import (
    AggregateHousehold,
    AnyEntity,
    Business,
    Entity,
    EntityKey,
    EntityType,
    Individual,
    LegalConstruct,
    SourceSystem,
)
from .household import HouseholdInformation, LegacyInfo
from .names import HouseholdName, IdentifierName, IndividualName, Name
from .results import (
    ComparisonDetail,
    ComponentScore,
    LotCollisionDecision,
    MatchClassification,
    MatchRecord,
    MatchReport,
    Penalty,
    ReportMetadata,
    TypeMatchGroup,
)
from .terms import AliasCategory, Aliases, AliasedTerm, Term

__all__ = [
    # Terms
    "Term",
    "Aliases",
    "AliasCategory",
    "AliasedTerm",
    # Names
    "IndividualName",
    "HouseholdName",
    "IdentifierName",
    "Name",
    # Contact
    "Address",
    "ContactInfo",
    # Auxiliary info
    "HouseholdInformation",
    "LegacyInfo",
    # Entities
    "EntityType",
    "SourceSystem",
    "EntityKey",
    "Entity",
    "Individual",
    "AggregateHousehold",
    "Business",
    "LegalConstruct",
    "AnyEntity",
    # Results
    "ComponentScore",
    "Penalty",
    "ComparisonDetail",
    "LotCollisionDecision",
    "MatchClassification",
    "MatchRecord",
    "TypeMatchGroup",
    "ReportMetadata",
    "MatchReport",
]
