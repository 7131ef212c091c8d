"""Person domain model."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field, field_validator

from fieldauth.utils.time import utc_now

from .base import DomainModel
from .enums import Branch
from .markers import NON_PATCHABLE, PROTECTED
from .types import OrganizationId, PersonId


class Person(DomainModel):
    """A member of one or more organizations.

    Membership and leadership sets are maintained through the organization
    side and are therefore non-patchable here.
    """

    id: Annotated[PersonId, NON_PATCHABLE]
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    title: str | None = None
    email: Annotated[str | None, PROTECTED] = None
    rank: Annotated[str | None, PROTECTED] = None
    dodid: Annotated[str | None, PROTECTED] = None
    branch: Branch | None = None
    phone: str | None = None
    primary_organization_id: OrganizationId | None = None
    organization_memberships: Annotated[frozenset[OrganizationId], NON_PATCHABLE] = frozenset()
    organization_leaderships: Annotated[frozenset[OrganizationId], NON_PATCHABLE] = frozenset()
    created_at: Annotated[datetime, NON_PATCHABLE] = Field(default_factory=utc_now)
    updated_at: Annotated[datetime, NON_PATCHABLE] = Field(default_factory=utc_now)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if normalized and "@" not in normalized:
            msg = "Email address must contain '@'"
            raise ValueError(msg)
        return normalized or None

    @field_validator("dodid")
    @classmethod
    def validate_dodid(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not value.isdigit() or not 5 <= len(value) <= 10:
            msg = "DoD ID must be 5 to 10 digits"
            raise ValueError(msg)
        return value

    @property
    def full_name(self) -> str:
        parts = (self.first_name, self.middle_name, self.last_name)
        return " ".join(part for part in parts if part)
