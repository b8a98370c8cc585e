"""Shared factories for building entities in tests."""
from __future__ import annotations

import pytest

from party_linkage.comparison import ComparisonContext
from party_linkage.models import (
    Address,
    AggregateHousehold,
    ContactInfo,
    EntityKey,
    HouseholdName,
    IdentifierName,
    Individual,
    IndividualName,
    LegalConstruct,
    SourceSystem,
)
from party_linkage.reference import StreetNameRegistry


def _key(source: SourceSystem, value: str, location_type: str = "FireNumber") -> EntityKey:
    if source is SourceSystem.BLOOMERANG:
        return EntityKey(
            source=source,
            location_type=location_type,
            location_value=value,
            account_number=value,
            head_status="na",
        )
    return EntityKey(source=source, location_type=location_type, location_value=value)


def address(
    number: str | None = "123",
    street: str | None = "MAIN",
    street_type: str | None = "ST",
    city: str | None = "PROVIDENCE",
    state: str | None = "RI",
    zip_code: str | None = "02903",
    **kwargs,
) -> Address:
    return Address(
        street_number=number,
        street_name=street,
        street_type=street_type,
        city=city,
        state=state,
        zip_code=zip_code,
        **kwargs,
    )


def contact(
    primary: Address | None = None,
    secondaries: tuple[Address, ...] = (),
    email: str | None = None,
) -> ContactInfo:
    return ContactInfo(primary_address=primary, secondary_addresses=secondaries, email=email)


def individual(
    first: str = "",
    last: str = "",
    other: str = "",
    *,
    key: str = "1",
    source: SourceSystem = SourceSystem.VISION_APPRAISAL,
    location_type: str = "FireNumber",
    contact_info: ContactInfo | None = None,
    **kwargs,
) -> Individual:
    return Individual(
        key=_key(source, key, location_type),
        name=IndividualName(first_name=first, last_name=last, other_names=other),
        contact_info=contact_info,
        **kwargs,
    )


def household(
    full_name: str,
    members: tuple[Individual, ...] = (),
    *,
    key: str = "H1",
    source: SourceSystem = SourceSystem.BLOOMERANG,
    contact_info: ContactInfo | None = None,
) -> AggregateHousehold:
    return AggregateHousehold(
        key=_key(source, key, "StreetAddress"),
        name=HouseholdName(full_name=full_name),
        members=members,
        contact_info=contact_info,
    )


def legal_construct(term: str, *, key: str) -> LegalConstruct:
    return LegalConstruct(
        key=_key(SourceSystem.VISION_APPRAISAL, key, "PID"),
        name=IdentifierName(term=term),
    )


@pytest.fixture
def make_address():
    return address


@pytest.fixture
def make_contact():
    return contact


@pytest.fixture
def make_individual():
    return individual


@pytest.fixture
def make_household():
    return household


@pytest.fixture
def make_legal_construct():
    return legal_construct


@pytest.fixture
def streets() -> StreetNameRegistry:
    return StreetNameRegistry.load_default()


@pytest.fixture
def context(streets) -> ComparisonContext:
    return ComparisonContext(streets=streets)
