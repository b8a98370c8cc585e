"""Reference data consulted by the comparators."""

from .streets import (
    BLOCK_ISLAND_CITIES,
    BLOCK_ISLAND_ZIP,
    StreetName,
    StreetNameRegistry,
)

__all__ = [
    "BLOCK_ISLAND_CITIES",
    "BLOCK_ISLAND_ZIP",
    "StreetName",
    "StreetNameRegistry",
]
