"""Shared type aliases for the domain layer."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NewType
from uuid import UUID

OrganizationId = NewType("OrganizationId", UUID)
PersonId = NewType("PersonId", UUID)
PrivilegeId = NewType("PrivilegeId", UUID)
JsonMapping = Mapping[str, Any]

__all__ = [
    "JsonMapping",
    "OrganizationId",
    "PersonId",
    "PrivilegeId",
]
