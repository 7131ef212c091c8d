"""Domain models for the fieldauth package."""

from .base import DomainModel
from .enums import Branch, Unit
from .markers import NON_PATCHABLE, PROTECTED, NonPatchableField, ProtectedField
from .organization import Organization
from .person import Person
from .privilege import Privilege
from .types import JsonMapping, OrganizationId, PersonId, PrivilegeId

__all__ = [
    "NON_PATCHABLE",
    "PROTECTED",
    "Branch",
    "DomainModel",
    "JsonMapping",
    "NonPatchableField",
    "Organization",
    "OrganizationId",
    "Person",
    "PersonId",
    "Privilege",
    "PrivilegeId",
    "ProtectedField",
    "Unit",
]
