"""Party Linkage - rule-based record linkage for party records.

Decides which records from a property-appraisal roll and a donor/contact
database describe the same individual, household or organization, using
deterministic hand-tuned similarity scoring and percentile-based best-match
selection.

Example:
    >>> from party_linkage import MatchConfig, find_best_matches
    >>> report = find_best_matches(base_entity, population, MatchConfig())
    >>> report.group(EntityType.INDIVIDUAL).best_matches
"""

__version__ = "0.1.0"

from party_linkage.config import ComparisonSettings, MatchConfig
from party_linkage.exceptions import (
    ChecksumError,
    ConfigurationError,
    LinkageError,
    TypeMismatchError,
)
from party_linkage.comparison import ComparisonContext, compare
from party_linkage.matching import (
    classify_match,
    cluster_names,
    find_best_matches,
    find_best_matches_batch,
)
from party_linkage.logging import configure_logging
from party_linkage.models import EntityType
from party_linkage.reference import StreetNameRegistry

__all__ = [
    # Config
    "ComparisonSettings",
    "MatchConfig",
    # Errors
    "LinkageError",
    "TypeMismatchError",
    "ChecksumError",
    "ConfigurationError",
    # Engine
    "ComparisonContext",
    "compare",
    "classify_match",
    "cluster_names",
    "find_best_matches",
    "find_best_matches_batch",
    "EntityType",
    "StreetNameRegistry",
    # Logging
    "configure_logging",
]
