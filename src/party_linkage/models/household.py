"""Auxiliary per-entity information blocks."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HouseholdInformation(BaseModel):
    """Household membership of an entity."""

    model_config = ConfigDict(frozen=True)

    is_in_household: bool | None = None
    household_identifier: str | None = None
    household_name: str | None = None
    is_head_of_household: bool | None = None

    @property
    def is_empty(self) -> bool:
        return self.is_in_household is None and not (
            self.household_identifier or self.household_name
        )


class LegacyInfo(BaseModel):
    """Fields carried over from the appraisal roll without a weighted comparison."""

    model_config = ConfigDict(frozen=True)

    owner_name: str | None = None
    owner_name2: str | None = None
    neighborhood: str | None = None
    user_code: str | None = None
    date: str | None = None
    source_index: int | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            v is None or v == ""
            for v in (
                self.owner_name,
                self.owner_name2,
                self.neighborhood,
                self.user_code,
                self.date,
                self.source_index,
            )
        )
