from __future__ import annotations

from typing import Annotated

import pytest
from pydantic import BaseModel

from fieldauth.domain import NON_PATCHABLE, PROTECTED
from fieldauth.patching import (
    Approved,
    FieldMetadataRegistry,
    MergeApplier,
    NonPatchableFieldViolation,
    PatchRejectedError,
    Rejected,
    TypeMismatchError,
)


class Wing(BaseModel):
    id: Annotated[int, NON_PATCHABLE]
    name: Annotated[str, PROTECTED]
    motto: str | None = None
    base: str | None = None


class Group(BaseModel):
    id: int


@pytest.fixture
def merger() -> MergeApplier:
    return MergeApplier(FieldMetadataRegistry())


def test_full_snapshot_is_returned_as_is(merger: MergeApplier) -> None:
    existing = Wing(id=1, name="1 FW")
    proposed = Wing(id=1, name="1 FW", motto="Aut Vincere Aut Mori")
    decision = Approved(entity_name="Wing", changed_fields=("motto",))

    assert merger.apply(decision, existing, proposed) is proposed


def test_partial_merge_only_copies_changed_fields(merger: MergeApplier) -> None:
    existing = Wing(id=1, name="1 FW", motto="old", base="Langley")
    proposed = Wing(id=1, name="1 FW", motto="new", base="somewhere else")
    decision = Approved(entity_name="Wing", changed_fields=("motto",))

    merged = merger.apply(decision, existing, proposed, partial=True)

    assert merged == Wing(id=1, name="1 FW", motto="new", base="Langley")
    assert existing.motto == "old"


def test_rejected_decision_cannot_be_merged(merger: MergeApplier) -> None:
    existing = Wing(id=1, name="1 FW")
    decision = Rejected(
        entity_name="Wing",
        violations=(NonPatchableFieldViolation(field_name="id"),),
    )

    with pytest.raises(PatchRejectedError) as excinfo:
        merger.apply(decision, existing, existing)
    assert excinfo.value.decision is decision
    assert "id (non_patchable_field)" in str(excinfo.value)


def test_merge_requires_matching_types(merger: MergeApplier) -> None:
    decision = Approved(entity_name="Wing", changed_fields=())

    with pytest.raises(TypeMismatchError):
        merger.apply(decision, Wing(id=1, name="1 FW"), Group(id=1))
