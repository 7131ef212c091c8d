"""Construct the entity to persist from an approved decision."""

from __future__ import annotations

from typing import TypeVar

from .decision import PatchDecision, Rejected
from .exceptions import PatchRejectedError, TypeMismatchError
from .metadata import FieldMetadataRegistry

T = TypeVar("T")


class MergeApplier:
    """Applies approved changes without mutating caller-owned snapshots."""

    def __init__(self, registry: FieldMetadataRegistry) -> None:
        self._registry = registry

    def apply(self, decision: PatchDecision, existing: T, proposed: T, *, partial: bool = False) -> T:
        """Return the entity to persist.

        A full snapshot is returned as-is. For a partial patch only the fields
        listed in ``decision.changed_fields`` are copied from ``proposed`` onto
        a copy of ``existing``.
        """

        if isinstance(decision, Rejected):
            raise PatchRejectedError(decision)
        if type(existing) is not type(proposed):
            msg = (
                f"Cannot merge {type(proposed).__name__} into "
                f"{type(existing).__name__}"
            )
            raise TypeMismatchError(msg)
        if not partial:
            return proposed

        metadata = self._registry.resolve(type(existing))
        merged = existing
        for name in decision.changed_fields:
            entry = metadata.field(name)
            merged = entry.write(merged, entry.read(proposed))
        return merged


__all__ = ["MergeApplier"]
