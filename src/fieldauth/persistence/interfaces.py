"""Persistence layer abstractions for repositories and unit of work."""

from __future__ import annotations

from collections.abc import Sequence
from types import TracebackType
from typing import Protocol

from fieldauth.domain import Organization, Person, Privilege
from fieldauth.domain.types import OrganizationId, PersonId, PrivilegeId


class OrganizationRepository(Protocol):
    """CRUD operations for organizations."""

    async def get(self, organization_id: OrganizationId) -> Organization | None: ...

    async def list_all(self) -> Sequence[Organization]: ...

    async def upsert(self, organization: Organization) -> None: ...

    async def delete(self, organization_id: OrganizationId) -> None: ...


class PersonRepository(Protocol):
    """CRUD operations for people."""

    async def get(self, person_id: PersonId) -> Person | None: ...

    async def list_all(self) -> Sequence[Person]: ...

    async def upsert(self, person: Person) -> None: ...

    async def delete(self, person_id: PersonId) -> None: ...


class PrivilegeRepository(Protocol):
    """Storage for named privileges."""

    async def get(self, privilege_id: PrivilegeId) -> Privilege | None: ...

    async def find_by_name(self, name: str) -> Privilege | None: ...

    async def list_all(self) -> Sequence[Privilege]: ...

    async def add(self, privilege: Privilege) -> None: ...

    async def delete(self, privilege_id: PrivilegeId) -> None: ...


class UnitOfWork(Protocol):
    """Transactional boundary for repository operations."""

    organization_repository: OrganizationRepository
    person_repository: PersonRepository
    privilege_repository: PrivilegeRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
