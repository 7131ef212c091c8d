"""In-memory repository implementations for unit testing."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from copy import deepcopy
from dataclasses import dataclass, field
from types import TracebackType
from typing import TypeVar

from fieldauth.domain import Organization, Person, Privilege
from fieldauth.domain.types import OrganizationId, PersonId, PrivilegeId
from fieldauth.persistence.errors import DuplicateError
from fieldauth.persistence.interfaces import (
    OrganizationRepository,
    PersonRepository,
    PrivilegeRepository,
    UnitOfWork,
)

T = TypeVar("T")


def _copy(value: T) -> T:
    return deepcopy(value)


@dataclass
class InMemoryOrganizationRepository(OrganizationRepository):
    _organizations: dict[OrganizationId, Organization] = field(default_factory=dict)

    async def get(self, organization_id: OrganizationId) -> Organization | None:
        return _copy(self._organizations.get(organization_id))

    async def list_all(self) -> Sequence[Organization]:
        return sorted(
            (_copy(org) for org in self._organizations.values()),
            key=lambda org: org.name_as_lower,
        )

    async def upsert(self, organization: Organization) -> None:
        self._organizations[organization.id] = organization

    async def delete(self, organization_id: OrganizationId) -> None:
        self._organizations.pop(organization_id, None)


@dataclass
class InMemoryPersonRepository(PersonRepository):
    _people: dict[PersonId, Person] = field(default_factory=dict)

    async def get(self, person_id: PersonId) -> Person | None:
        return _copy(self._people.get(person_id))

    async def list_all(self) -> Sequence[Person]:
        return [_copy(person) for person in self._people.values()]

    async def upsert(self, person: Person) -> None:
        self._people[person.id] = person

    async def delete(self, person_id: PersonId) -> None:
        self._people.pop(person_id, None)


@dataclass
class InMemoryPrivilegeRepository(PrivilegeRepository):
    _privileges: dict[PrivilegeId, Privilege] = field(default_factory=dict)

    async def get(self, privilege_id: PrivilegeId) -> Privilege | None:
        return _copy(self._privileges.get(privilege_id))

    async def find_by_name(self, name: str) -> Privilege | None:
        for privilege in self._privileges.values():
            if privilege.name == name:
                return _copy(privilege)
        return None

    async def list_all(self) -> Sequence[Privilege]:
        return sorted(
            (_copy(privilege) for privilege in self._privileges.values()),
            key=lambda privilege: privilege.name,
        )

    async def add(self, privilege: Privilege) -> None:
        if await self.find_by_name(privilege.name) is not None:
            msg = f"Privilege {privilege.name!r} already exists"
            raise DuplicateError(msg)
        self._privileges[privilege.id] = privilege

    async def delete(self, privilege_id: PrivilegeId) -> None:
        self._privileges.pop(privilege_id, None)


@dataclass
class InMemoryUnitOfWork(UnitOfWork):
    organization_repository: InMemoryOrganizationRepository = field(
        default_factory=InMemoryOrganizationRepository
    )
    person_repository: InMemoryPersonRepository = field(
        default_factory=InMemoryPersonRepository
    )
    privilege_repository: InMemoryPrivilegeRepository = field(
        default_factory=InMemoryPrivilegeRepository
    )
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def __aenter__(self) -> InMemoryUnitOfWork:
        await self._lock.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._lock.release()

    async def commit(self) -> None:
        return None

    async def rollback(self) -> None:
        return None
