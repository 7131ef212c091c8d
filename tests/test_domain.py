from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from fieldauth.domain import (
    Branch,
    Organization,
    OrganizationId,
    Person,
    PersonId,
    Unit,
)


def test_organization_name_is_stripped() -> None:
    org = Organization(id=OrganizationId(uuid4()), name="  1st Fighter Wing ")
    assert org.name == "1st Fighter Wing"
    assert org.name_as_lower == "1st fighter wing"
    assert org.unit_type is Unit.ORGANIZATION
    assert org.branch is Branch.OTHER


def test_organization_rejects_blank_name() -> None:
    with pytest.raises(ValidationError):
        Organization(id=OrganizationId(uuid4()), name="   ")


def test_organization_is_frozen() -> None:
    org = Organization(id=OrganizationId(uuid4()), name="Ops Group", unit_type=Unit.GROUP)
    with pytest.raises(ValidationError):
        org.name = "Maintenance Group"  # type: ignore[misc]


def test_person_email_and_dodid_validation() -> None:
    person = Person(id=PersonId(uuid4()), first_name="Ada", last_name="Byron", email=" ada@af.mil ")
    assert person.email == "ada@af.mil"
    assert person.full_name == "Ada Byron"

    with pytest.raises(ValidationError):
        Person(id=PersonId(uuid4()), email="not-an-address")
    with pytest.raises(ValidationError):
        Person(id=PersonId(uuid4()), dodid="12ab")


def test_unit_values_round_trip_from_strings() -> None:
    assert Unit("SQUADRON") is Unit.SQUADRON
    assert {unit.value for unit in Unit} == {
        "WING",
        "GROUP",
        "SQUADRON",
        "FLIGHT",
        "OTHER_USAF",
        "ORGANIZATION",
    }
