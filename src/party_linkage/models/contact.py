"""Addresses and contact information."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from party_linkage.utils.normalize import looks_like_po_box, normalize_text


class Address(BaseModel):
    """A parsed postal address.

    Block Island classification needs the street registry and is therefore
    computed by the address comparator, not stored here.
    """

    model_config = ConfigDict(frozen=True)

    street_number: str | None = None
    street_name: str | None = None
    street_type: str | None = None
    secondary_unit_type: str | None = Field(
        default=None, description='Unit designator such as "APT" or "PO BOX"'
    )
    secondary_unit_number: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    @property
    def is_po_box(self) -> bool:
        """Whether the unit designator or street name marks a PO Box."""
        if looks_like_po_box(self.secondary_unit_type):
            return True
        return looks_like_po_box(self.street_name)

    @property
    def has_zip(self) -> bool:
        return bool(self.zip_code and self.zip_code.strip())

    @property
    def zip5(self) -> str:
        """First five characters of the zip code."""
        return (self.zip_code or "").strip()[:5]

    @property
    def is_empty(self) -> bool:
        return not any(
            (v or "").strip()
            for v in (
                self.street_number,
                self.street_name,
                self.secondary_unit_number,
                self.city,
                self.state,
                self.zip_code,
            )
        )

    def without_street(self) -> "Address":
        """Copy keeping only city, state and zip."""
        return Address(city=self.city, state=self.state, zip_code=self.zip_code)

    def __str__(self) -> str:
        street = " ".join(
            p for p in (self.street_number, self.street_name, self.street_type) if p
        )
        unit = " ".join(
            p for p in (self.secondary_unit_type, self.secondary_unit_number) if p
        )
        locality = " ".join(p for p in (self.state, self.zip_code) if p)
        return normalize_text(", ".join(p for p in (street, unit, self.city, locality) if p))


class ContactInfo(BaseModel):
    """Addresses and email of one entity. Phone carries no comparison weight."""

    model_config = ConfigDict(frozen=True)

    primary_address: Address | None = None
    secondary_addresses: tuple[Address, ...] = ()
    email: str | None = None
    phone: str | None = None

    @property
    def has_addresses(self) -> bool:
        return self.primary_address is not None or bool(self.secondary_addresses)

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())

    @property
    def is_empty(self) -> bool:
        return not self.has_addresses and not self.has_email
