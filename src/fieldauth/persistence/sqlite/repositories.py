"""SQLite repository implementations."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldauth.domain import Organization, Person, Privilege
from fieldauth.domain.types import OrganizationId, PersonId, PrivilegeId
from fieldauth.persistence.errors import DuplicateError
from fieldauth.persistence.interfaces import (
    OrganizationRepository,
    PersonRepository,
    PrivilegeRepository,
)

from .models import OrganizationRecord, PersonRecord, PrivilegeRecord


class SQLiteOrganizationRepository(OrganizationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, organization_id: OrganizationId) -> Organization | None:
        record = await self._session.get(OrganizationRecord, str(organization_id))
        if record is None:
            return None
        return Organization.model_validate(record.payload)

    async def list_all(self) -> Sequence[Organization]:
        stmt: Select[tuple[OrganizationRecord]] = select(OrganizationRecord).order_by(
            OrganizationRecord.name_as_lower
        )
        result = await self._session.execute(stmt)
        return [Organization.model_validate(r.payload) for r in result.scalars().all()]

    async def upsert(self, organization: Organization) -> None:
        record = await self._session.get(OrganizationRecord, str(organization.id))
        payload = organization.model_dump(mode="json")
        if record is None:
            record = OrganizationRecord(
                id=str(organization.id),
                name_as_lower=organization.name_as_lower,
                unit_type=organization.unit_type.value,
                updated_at=organization.updated_at,
                payload=payload,
            )
            self._session.add(record)
        else:
            record.name_as_lower = organization.name_as_lower
            record.unit_type = organization.unit_type.value
            record.updated_at = organization.updated_at
            record.payload = payload

    async def delete(self, organization_id: OrganizationId) -> None:
        record = await self._session.get(OrganizationRecord, str(organization_id))
        if record is not None:
            await self._session.delete(record)


class SQLitePersonRepository(PersonRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, person_id: PersonId) -> Person | None:
        record = await self._session.get(PersonRecord, str(person_id))
        if record is None:
            return None
        return Person.model_validate(record.payload)

    async def list_all(self) -> Sequence[Person]:
        result = await self._session.execute(select(PersonRecord))
        return [Person.model_validate(r.payload) for r in result.scalars().all()]

    async def upsert(self, person: Person) -> None:
        record = await self._session.get(PersonRecord, str(person.id))
        payload = person.model_dump(mode="json")
        if record is None:
            record = PersonRecord(
                id=str(person.id),
                email=person.email,
                updated_at=person.updated_at,
                payload=payload,
            )
            self._session.add(record)
        else:
            record.email = person.email
            record.updated_at = person.updated_at
            record.payload = payload

    async def delete(self, person_id: PersonId) -> None:
        record = await self._session.get(PersonRecord, str(person_id))
        if record is not None:
            await self._session.delete(record)


def _to_privilege(record: PrivilegeRecord) -> Privilege:
    return Privilege(id=PrivilegeId(UUID(record.id)), name=record.name)


class SQLitePrivilegeRepository(PrivilegeRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, privilege_id: PrivilegeId) -> Privilege | None:
        record = await self._session.get(PrivilegeRecord, str(privilege_id))
        if record is None:
            return None
        return _to_privilege(record)

    async def find_by_name(self, name: str) -> Privilege | None:
        stmt: Select[tuple[PrivilegeRecord]] = select(PrivilegeRecord).where(
            PrivilegeRecord.name == name
        )
        result = await self._session.execute(stmt)
        record = result.scalars().first()
        if record is None:
            return None
        return _to_privilege(record)

    async def list_all(self) -> Sequence[Privilege]:
        stmt: Select[tuple[PrivilegeRecord]] = select(PrivilegeRecord).order_by(
            PrivilegeRecord.name
        )
        result = await self._session.execute(stmt)
        return [_to_privilege(r) for r in result.scalars().all()]

    async def add(self, privilege: Privilege) -> None:
        if await self.find_by_name(privilege.name) is not None:
            msg = f"Privilege {privilege.name!r} already exists"
            raise DuplicateError(msg)
        self._session.add(PrivilegeRecord(id=str(privilege.id), name=privilege.name))

    async def delete(self, privilege_id: PrivilegeId) -> None:
        record = await self._session.get(PrivilegeRecord, str(privilege_id))
        if record is not None:
            await self._session.delete(record)
