from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Annotated

import pytest
from pydantic import BaseModel

from fieldauth.domain import NON_PATCHABLE, PROTECTED, Organization, Person
from fieldauth.patching import (
    FieldMetadataRegistry,
    FieldRule,
    MetadataResolutionError,
    resolve_entity_metadata,
)


class BaseRecord(BaseModel):
    id: Annotated[int, NON_PATCHABLE]


class Squadron(BaseRecord):
    name: Annotated[str, PROTECTED]
    motto: str | None = None


@dataclass(frozen=True)
class Flight:
    id: Annotated[int, NON_PATCHABLE]
    callsign: Annotated[str, PROTECTED]
    notes: str = ""
    tail_numbers: tuple[str, ...] = field(default=(), metadata={"field_rule": FieldRule.PROTECTED})


class Opaque:
    def __init__(self, value: int) -> None:
        self.value = value


def test_pydantic_fields_include_inherited_in_declaration_order() -> None:
    metadata = resolve_entity_metadata(Squadron)

    assert metadata.entity_name == "Squadron"
    assert metadata.field_names == ("id", "name", "motto")
    assert metadata.field("id").is_non_patchable
    assert metadata.field("name").is_protected
    assert not metadata.field("motto").is_protected
    assert not metadata.field("motto").is_non_patchable


def test_organization_markers() -> None:
    metadata = resolve_entity_metadata(Organization)

    protected = {entry.name for entry in metadata.protected_fields}
    non_patchable = {entry.name for entry in metadata.non_patchable_fields}
    assert protected == {
        "name",
        "unit_type",
        "leader",
        "parent_organization",
        "subordinate_organizations",
        "members",
    }
    assert non_patchable == {"id", "created_at", "updated_at"}


def test_person_memberships_are_non_patchable() -> None:
    metadata = resolve_entity_metadata(Person)

    assert metadata.field("organization_memberships").is_non_patchable
    assert metadata.field("organization_leaderships").is_non_patchable
    assert metadata.field("email").is_protected
    assert not metadata.field("first_name").is_protected


def test_dataclass_markers_and_field_metadata_rules() -> None:
    metadata = resolve_entity_metadata(Flight)

    assert metadata.field_names == ("id", "callsign", "notes", "tail_numbers")
    assert metadata.field("id").is_non_patchable
    assert metadata.field("callsign").is_protected
    assert metadata.field("tail_numbers").is_protected
    assert not metadata.field("notes").is_protected


def test_accessors_do_not_mutate_the_instance() -> None:
    metadata = resolve_entity_metadata(Flight)
    flight = Flight(id=1, callsign="VIPER")

    renamed = metadata.field("callsign").write(flight, "COBRA")

    assert flight.callsign == "VIPER"
    assert renamed.callsign == "COBRA"
    assert metadata.field("callsign").read(renamed) == "COBRA"


def test_explicit_rules_union_with_markers() -> None:
    metadata = resolve_entity_metadata(
        Squadron,
        {"motto": FieldRule.PROTECTED | FieldRule.NON_PATCHABLE, "name": FieldRule.NON_PATCHABLE},
        name="Sq",
    )

    assert metadata.entity_name == "Sq"
    assert metadata.field("motto").is_protected
    assert metadata.field("motto").is_non_patchable
    assert metadata.field("name").is_protected
    assert metadata.field("name").is_non_patchable


def test_rules_for_undeclared_fields_fail() -> None:
    with pytest.raises(MetadataResolutionError, match="commander"):
        resolve_entity_metadata(Squadron, {"commander": FieldRule.PROTECTED})


def test_opaque_types_cannot_be_resolved() -> None:
    with pytest.raises(MetadataResolutionError):
        resolve_entity_metadata(Opaque)
    with pytest.raises(MetadataResolutionError):
        resolve_entity_metadata(Opaque(1))  # type: ignore[arg-type]


def test_registry_caches_per_type() -> None:
    registry = FieldMetadataRegistry()
    registry.register(Squadron, {"motto": FieldRule.PROTECTED})

    first = registry.resolve(Squadron)
    assert registry.resolve(Squadron) is first
    assert registry.entity_types() == (Squadron,)
    assert registry.protected_field_names(Squadron) == ("name", "motto")


def test_registry_resolves_unregistered_types_from_markers() -> None:
    registry = FieldMetadataRegistry()

    metadata = registry.resolve(Flight)

    assert metadata.field("callsign").is_protected
    assert registry.entity_types() == ()


def test_reregistering_replaces_cached_metadata() -> None:
    registry = FieldMetadataRegistry()
    registry.register(Squadron)
    before = registry.resolve(Squadron)

    registry.register(Squadron, {"motto": FieldRule.NON_PATCHABLE}, name="Squadron")

    after = registry.resolve(Squadron)
    assert after is not before
    assert after.field("motto").is_non_patchable


def test_concurrent_first_resolution_converges() -> None:
    registry = FieldMetadataRegistry()
    registry.register(Organization)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: registry.resolve(Organization), range(32)))

    assert all(result is results[0] for result in results)
