"""Patch decisions returned by the validator."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from fieldauth.domain import DomainModel


class ViolationKind(StrEnum):
    """Rule a changed field violated."""

    PROTECTED_FIELD = "protected_field"
    NON_PATCHABLE_FIELD = "non_patchable_field"


class FieldViolation(DomainModel):
    field_name: str
    kind: ViolationKind


class ProtectedFieldViolation(FieldViolation):
    """A protected field changed without an override privilege."""

    kind: Literal[ViolationKind.PROTECTED_FIELD] = ViolationKind.PROTECTED_FIELD


class NonPatchableFieldViolation(FieldViolation):
    """A non-patchable field changed."""

    kind: Literal[ViolationKind.NON_PATCHABLE_FIELD] = ViolationKind.NON_PATCHABLE_FIELD


class Approved(DomainModel):
    """Patch admissible; ``changed_fields`` lists fields that differ."""

    approved: Literal[True] = True
    entity_name: str
    changed_fields: tuple[str, ...] = ()


class Rejected(DomainModel):
    """Patch inadmissible; every violation is reported."""

    approved: Literal[False] = False
    entity_name: str
    violations: tuple[FieldViolation, ...]

    @property
    def denied_fields(self) -> tuple[str, ...]:
        return tuple(violation.field_name for violation in self.violations)


PatchDecision = Approved | Rejected

DENIED_FIELDS_HEADER = "x-denied-entity-fields"


def denied_fields_header(decision: PatchDecision) -> str | None:
    """Return the denied-fields header value, or ``None`` when nothing was denied."""

    if isinstance(decision, Approved) or not decision.violations:
        return None
    return ",".join(decision.denied_fields)


__all__ = [
    "DENIED_FIELDS_HEADER",
    "Approved",
    "FieldViolation",
    "NonPatchableFieldViolation",
    "PatchDecision",
    "ProtectedFieldViolation",
    "Rejected",
    "ViolationKind",
    "denied_fields_header",
]
