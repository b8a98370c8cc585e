"""Same-location detection for Block Island fire numbers.

When a fire number is shared by distinct owners the loader suffixes it
("72J", "72W"). Two entities on the same base lot with different suffixes
live at the same physical address, so their street numbers say nothing
about whether they are the same party.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from party_linkage.models.entities import Entity

LOT_PATTERN = re.compile(r"^(\d+)([A-Z])?$")


class LocationRelationship(str, Enum):
    """Relationship between two entities' locations."""

    DISTINCT = "distinct"
    SAME_BASE_LOT = "same_base_lot"


@dataclass(frozen=True)
class ParsedLot:
    base: int
    suffix: str | None


def parse_lot(value: str | None) -> ParsedLot | None:
    """Split a fire number into numeric base and letter suffix.

    Examples:
        "72J" -> ParsedLot(base=72, suffix="J")
        "72" -> ParsedLot(base=72, suffix=None)
        "PO BOX 7" -> None
    """
    if not value:
        return None
    match = LOT_PATTERN.match(value.strip().upper())
    if match is None:
        return None
    return ParsedLot(base=int(match.group(1)), suffix=match.group(2))


def lot_relationship(a: str | None, b: str | None) -> LocationRelationship:
    """SAME_BASE_LOT when both lots are suffixed, share a base and differ."""
    lot_a = parse_lot(a)
    lot_b = parse_lot(b)
    if (
        lot_a is not None
        and lot_b is not None
        and lot_a.suffix
        and lot_b.suffix
        and lot_a.base == lot_b.base
        and lot_a.suffix != lot_b.suffix
    ):
        return LocationRelationship.SAME_BASE_LOT
    return LocationRelationship.DISTINCT


def location_relationship(a: Entity, b: Entity) -> LocationRelationship:
    return lot_relationship(a.fire_number, b.fire_number)
