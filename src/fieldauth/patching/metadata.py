"""Field metadata resolution for patchable entity types."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Flag, auto
from operator import attrgetter
from typing import Any, get_type_hints

from pydantic import BaseModel

from fieldauth.domain.markers import NonPatchableField, ProtectedField

from .exceptions import AccessorError, MetadataResolutionError

Reader = Callable[[Any], Any]
Writer = Callable[[Any, Any], Any]


class FieldRule(Flag):
    """Declarative rule flags for a single field."""

    NONE = 0
    PROTECTED = auto()
    NON_PATCHABLE = auto()


@dataclass(frozen=True, slots=True)
class FieldMetadata:
    """Resolved rules and accessors for one declared field."""

    name: str
    is_protected: bool
    is_non_patchable: bool
    reader: Reader = field(repr=False, compare=False)
    writer: Writer = field(repr=False, compare=False)

    def read(self, instance: Any) -> Any:
        try:
            return self.reader(instance)
        except Exception as exc:
            msg = f"Unable to read field {self.name!r} from {type(instance).__name__}"
            raise AccessorError(msg) from exc

    def write(self, instance: Any, value: Any) -> Any:
        """Return a copy of ``instance`` with the field set to ``value``."""

        try:
            return self.writer(instance, value)
        except Exception as exc:
            msg = f"Unable to write field {self.name!r} on {type(instance).__name__}"
            raise AccessorError(msg) from exc


@dataclass(frozen=True, slots=True)
class EntityMetadata:
    """Ordered field metadata for an entity type."""

    entity_type: type
    entity_name: str
    fields: tuple[FieldMetadata, ...]

    def field(self, name: str) -> FieldMetadata:
        for entry in self.fields:
            if entry.name == name:
                return entry
        msg = f"{self.entity_name} has no field {name!r}"
        raise KeyError(msg)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.fields)

    @property
    def protected_fields(self) -> tuple[FieldMetadata, ...]:
        return tuple(entry for entry in self.fields if entry.is_protected)

    @property
    def non_patchable_fields(self) -> tuple[FieldMetadata, ...]:
        return tuple(entry for entry in self.fields if entry.is_non_patchable)


def _rule_from_markers(markers: Iterable[object]) -> FieldRule:
    rule = FieldRule.NONE
    for marker in markers:
        if isinstance(marker, ProtectedField):
            rule |= FieldRule.PROTECTED
        elif isinstance(marker, NonPatchableField):
            rule |= FieldRule.NON_PATCHABLE
    return rule


def _pydantic_fields(model: type[BaseModel]) -> list[tuple[str, FieldRule, Writer]]:
    declared: list[tuple[str, FieldRule, Writer]] = []
    for name, info in model.model_fields.items():

        def writer(instance: Any, value: Any, _name: str = name) -> Any:
            return instance.model_copy(update={_name: value})

        declared.append((name, _rule_from_markers(info.metadata), writer))
    return declared


def _dataclass_fields(entity_type: type) -> list[tuple[str, FieldRule, Writer]]:
    try:
        hints = get_type_hints(entity_type, include_extras=True)
    except Exception as exc:
        msg = f"Unable to resolve type hints for {entity_type.__name__}"
        raise MetadataResolutionError(msg) from exc

    declared: list[tuple[str, FieldRule, Writer]] = []
    for entry in dataclasses.fields(entity_type):
        markers = getattr(hints.get(entry.name), "__metadata__", ())
        rule = _rule_from_markers(markers)
        extra = entry.metadata.get("field_rule")
        if isinstance(extra, FieldRule):
            rule |= extra

        def writer(instance: Any, value: Any, _name: str = entry.name) -> Any:
            return dataclasses.replace(instance, **{_name: value})

        declared.append((entry.name, rule, writer))
    return declared


def resolve_entity_metadata(
    entity_type: type,
    rules: Mapping[str, FieldRule] | None = None,
    *,
    name: str | None = None,
) -> EntityMetadata:
    """Introspect ``entity_type`` and combine its markers with explicit ``rules``."""

    if not isinstance(entity_type, type):
        msg = f"Expected an entity class, got {entity_type!r}"
        raise MetadataResolutionError(msg)
    if issubclass(entity_type, BaseModel):
        declared = _pydantic_fields(entity_type)
    elif dataclasses.is_dataclass(entity_type):
        declared = _dataclass_fields(entity_type)
    else:
        msg = f"{entity_type.__name__} exposes no introspectable field list"
        raise MetadataResolutionError(msg)

    explicit = dict(rules or {})
    known = {field_name for field_name, _, _ in declared}
    unknown = sorted(set(explicit) - known)
    if unknown:
        msg = f"Rules reference undeclared fields of {entity_type.__name__}: {', '.join(unknown)}"
        raise MetadataResolutionError(msg)

    fields: list[FieldMetadata] = []
    for field_name, marker_rule, writer in declared:
        rule = marker_rule | explicit.get(field_name, FieldRule.NONE)
        fields.append(
            FieldMetadata(
                name=field_name,
                is_protected=FieldRule.PROTECTED in rule,
                is_non_patchable=FieldRule.NON_PATCHABLE in rule,
                reader=attrgetter(field_name),
                writer=writer,
            )
        )
    return EntityMetadata(
        entity_type=entity_type,
        entity_name=name or entity_type.__name__,
        fields=tuple(fields),
    )


@dataclass(slots=True)
class FieldMetadataRegistry:
    """Long-lived registry of entity types and their resolved field metadata.

    Metadata is resolved lazily on first use and cached per type. Concurrent
    first-time resolution is harmless: ``dict.setdefault`` keeps the first
    stored value and every caller sees it.
    """

    _rules: dict[type, Mapping[str, FieldRule]] = field(default_factory=dict)
    _names: dict[type, str] = field(default_factory=dict)
    _cache: dict[type, EntityMetadata] = field(default_factory=dict)

    def register(
        self,
        entity_type: type,
        rules: Mapping[str, FieldRule] | None = None,
        *,
        name: str | None = None,
    ) -> None:
        self._rules[entity_type] = dict(rules or {})
        if name is not None:
            self._names[entity_type] = name
        self._cache.pop(entity_type, None)

    def resolve(self, entity_type: type) -> EntityMetadata:
        cached = self._cache.get(entity_type)
        if cached is not None:
            return cached
        metadata = resolve_entity_metadata(
            entity_type,
            self._rules.get(entity_type),
            name=self._names.get(entity_type),
        )
        return self._cache.setdefault(entity_type, metadata)

    def entity_types(self) -> tuple[type, ...]:
        return tuple(self._rules)

    def protected_field_names(self, entity_type: type) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.resolve(entity_type).protected_fields)


__all__ = [
    "EntityMetadata",
    "FieldMetadata",
    "FieldMetadataRegistry",
    "FieldRule",
    "resolve_entity_metadata",
]
