"""Persistence layer exports."""

from .errors import DuplicateError, NotFoundError, RepositoryError
from .interfaces import (
    OrganizationRepository,
    PersonRepository,
    PrivilegeRepository,
    UnitOfWork,
)
from .memory import InMemoryUnitOfWork

__all__ = [
    "DuplicateError",
    "InMemoryUnitOfWork",
    "NotFoundError",
    "OrganizationRepository",
    "PersonRepository",
    "PrivilegeRepository",
    "RepositoryError",
    "UnitOfWork",
]
