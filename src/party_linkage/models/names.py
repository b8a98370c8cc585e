"""Name variants carried by entities.

Variant-specific comparison logic lives in
:mod:`party_linkage.comparison.names`; these are plain data.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from party_linkage.utils.normalize import normalize_text


class IndividualName(BaseModel):
    """A person's name split into fields."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["individual"] = "individual"
    title: str = ""
    first_name: str = ""
    other_names: str = ""
    last_name: str = ""
    suffix: str = ""

    @computed_field
    @property
    def complete_name(self) -> str:
        """Title, first, other, last and suffix joined by single spaces."""
        parts = [self.title, self.first_name, self.other_names, self.last_name, self.suffix]
        return normalize_text(" ".join(p for p in parts if p and p.strip()))

    @property
    def display_name(self) -> str:
        return self.complete_name

    @property
    def is_empty(self) -> bool:
        return not any(
            f.strip() for f in (self.first_name, self.other_names, self.last_name)
        )


class HouseholdName(BaseModel):
    """A free-text household label such as "SMITH, JOHN & MARY"."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["household"] = "household"
    full_name: str = ""

    @property
    def display_name(self) -> str:
        return normalize_text(self.full_name)

    @property
    def is_empty(self) -> bool:
        return not self.full_name.strip()


class IdentifierName(BaseModel):
    """A single-term name for businesses and legal constructs."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["identifier"] = "identifier"
    term: str = ""

    @property
    def display_name(self) -> str:
        return normalize_text(self.term)

    @property
    def is_empty(self) -> bool:
        return not self.term.strip()


Name = Annotated[
    Union[IndividualName, HouseholdName, IdentifierName],
    Field(discriminator="kind"),
]
