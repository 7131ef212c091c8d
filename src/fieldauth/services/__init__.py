"""Application services."""

from .entities import EntityService, OrganizationService, PatchOutcome, PersonService
from .exceptions import PermissionDeniedError, ServiceError
from .field_auth import EntityFieldAuthService, PrivilegeSyncResult

__all__ = [
    "EntityFieldAuthService",
    "EntityService",
    "OrganizationService",
    "PatchOutcome",
    "PermissionDeniedError",
    "PersonService",
    "PrivilegeSyncResult",
    "ServiceError",
]
