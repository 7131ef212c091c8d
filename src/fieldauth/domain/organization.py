"""Organization domain model."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field, field_validator

from fieldauth.utils.time import utc_now

from .base import DomainModel
from .enums import Branch, Unit
from .markers import NON_PATCHABLE, PROTECTED
from .types import OrganizationId, PersonId


class Organization(DomainModel):
    """A unit in the organizational hierarchy.

    Structural fields (name, type, leadership, hierarchy and membership) are
    protected; identity and audit timestamps never change through a patch.
    """

    id: Annotated[OrganizationId, NON_PATCHABLE]
    name: Annotated[str, Field(min_length=1), PROTECTED]
    unit_type: Annotated[Unit, PROTECTED] = Unit.ORGANIZATION
    branch: Branch = Branch.OTHER
    leader: Annotated[PersonId | None, PROTECTED] = None
    parent_organization: Annotated[OrganizationId | None, PROTECTED] = None
    subordinate_organizations: Annotated[frozenset[OrganizationId], PROTECTED] = frozenset()
    members: Annotated[frozenset[PersonId], PROTECTED] = frozenset()
    meta: dict[str, str] = Field(default_factory=dict)
    created_at: Annotated[datetime, NON_PATCHABLE] = Field(default_factory=utc_now)
    updated_at: Annotated[datetime, NON_PATCHABLE] = Field(default_factory=utc_now)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            msg = "Organization name must not be blank"
            raise ValueError(msg)
        return stripped

    @property
    def name_as_lower(self) -> str:
        return self.name.lower()
