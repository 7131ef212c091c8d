"""Service-level exceptions."""

from __future__ import annotations


class ServiceError(RuntimeError):
    """Base class for application service failures."""


class PermissionDeniedError(ServiceError):
    """Raised when the caller lacks the privilege to edit an entity type."""
