"""Patch engine exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .decision import Rejected


class PatchError(RuntimeError):
    """Base class for patch engine failures."""


class MetadataResolutionError(PatchError):
    """Raised when field metadata cannot be resolved for an entity type."""


class TypeMismatchError(PatchError):
    """Raised when existing and proposed snapshots are of different types."""


class AccessorError(PatchError):
    """Raised when reading or writing a field through its accessor fails."""


class InvalidPatchError(PatchError):
    """Raised when a patch document cannot be applied to an entity."""


class PatchRejectedError(PatchError):
    """Raised when a rejected decision reaches a step that needs approval."""

    def __init__(self, decision: Rejected) -> None:
        self.decision = decision
        fields = ", ".join(
            f"{violation.field_name} ({violation.kind.value})"
            for violation in decision.violations
        )
        super().__init__(f"Patch rejected: {fields}")
