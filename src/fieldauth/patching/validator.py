"""Field-level patch validation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from typing import Any

from .authorization import AuthContext
from .decision import (
    Approved,
    FieldViolation,
    NonPatchableFieldViolation,
    PatchDecision,
    ProtectedFieldViolation,
    Rejected,
)
from .exceptions import TypeMismatchError
from .metadata import EntityMetadata, FieldMetadataRegistry


def values_equal(left: Any, right: Any) -> bool:
    """Compare two field values by value rather than identity.

    Sequences compare element-wise, sets by membership and mappings by key.
    Strings and bytes are compared as scalars. Booleans never equal numbers,
    while ints and floats compare numerically as JSON numbers do.
    """

    if left is right:
        return True
    if isinstance(left, str | bytes) or isinstance(right, str | bytes):
        return bool(left == right)
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)
    if isinstance(left, Set) and isinstance(right, Set):
        return set(left) == set(right)
    if isinstance(left, Sequence) and isinstance(right, Sequence):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return bool(left == right)


class PatchValidator:
    """Decides whether a proposed snapshot may replace an existing one."""

    def __init__(self, registry: FieldMetadataRegistry) -> None:
        self._registry = registry

    def validate(
        self,
        existing: Any,
        proposed: Any,
        auth_context: AuthContext,
        metadata: EntityMetadata | None = None,
    ) -> PatchDecision:
        if type(existing) is not type(proposed):
            msg = (
                f"Cannot patch {type(existing).__name__} with "
                f"{type(proposed).__name__}"
            )
            raise TypeMismatchError(msg)

        resolved = metadata or self._registry.resolve(type(existing))
        entity_name = resolved.entity_name
        changed: list[str] = []
        violations: list[FieldViolation] = []

        for entry in resolved.fields:
            if values_equal(entry.read(existing), entry.read(proposed)):
                continue
            if entry.is_non_patchable:
                violations.append(NonPatchableFieldViolation(field_name=entry.name))
            elif entry.is_protected and not auth_context.can_override(entity_name, entry.name):
                violations.append(ProtectedFieldViolation(field_name=entry.name))
            else:
                changed.append(entry.name)

        if violations:
            return Rejected(entity_name=entity_name, violations=tuple(violations))
        return Approved(entity_name=entity_name, changed_fields=tuple(changed))


__all__ = ["PatchValidator", "values_equal"]
