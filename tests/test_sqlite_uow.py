from __future__ import annotations

import asyncio
from pathlib import Path
from uuid import uuid4

import pytest

from fieldauth.domain import (
    Organization,
    OrganizationId,
    Person,
    PersonId,
    Privilege,
    PrivilegeId,
    Unit,
)
from fieldauth.persistence import DuplicateError
from fieldauth.persistence.sqlite import create_sqlite_unit_of_work_factory


def _db_url(tmp_path: Path) -> str:
    db_file = tmp_path / "fieldauth.db"
    return f"sqlite+aiosqlite:///{db_file}"


def test_sqlite_organization_round_trip(tmp_path: Path) -> None:
    factory = create_sqlite_unit_of_work_factory(_db_url(tmp_path))
    leader = PersonId(uuid4())
    org = Organization(
        id=OrganizationId(uuid4()),
        name="1st Fighter Wing",
        unit_type=Unit.WING,
        leader=leader,
        members=frozenset({leader}),
        meta={"base": "Langley"},
    )

    async def _store() -> None:
        async with factory() as uow:
            await uow.organization_repository.upsert(org)
            await uow.commit()

    asyncio.run(_store())

    async def _load() -> Organization | None:
        async with factory() as uow:
            return await uow.organization_repository.get(org.id)

    loaded = asyncio.run(_load())
    assert loaded == org

    renamed = org.model_copy(update={"name": "1 FW"})

    async def _rename_and_list() -> list[Organization]:
        async with factory() as uow:
            await uow.organization_repository.upsert(renamed)
            await uow.commit()
        async with factory() as uow:
            return list(await uow.organization_repository.list_all())

    assert [o.name for o in asyncio.run(_rename_and_list())] == ["1 FW"]


def test_sqlite_person_and_delete(tmp_path: Path) -> None:
    factory = create_sqlite_unit_of_work_factory(_db_url(tmp_path))
    person = Person(id=PersonId(uuid4()), first_name="Jo", email="jo@af.mil")

    async def _run() -> tuple[Person | None, Person | None]:
        async with factory() as uow:
            await uow.person_repository.upsert(person)
            await uow.commit()
        async with factory() as uow:
            loaded = await uow.person_repository.get(person.id)
            await uow.person_repository.delete(person.id)
            await uow.commit()
        async with factory() as uow:
            return loaded, await uow.person_repository.get(person.id)

    loaded, deleted = asyncio.run(_run())
    assert loaded == person
    assert deleted is None


def test_sqlite_privileges(tmp_path: Path) -> None:
    factory = create_sqlite_unit_of_work_factory(_db_url(tmp_path))
    privilege = Privilege(id=PrivilegeId(uuid4()), name="Organization-name")

    async def _add() -> None:
        async with factory() as uow:
            await uow.privilege_repository.add(privilege)
            await uow.commit()

    asyncio.run(_add())

    async def _find() -> Privilege | None:
        async with factory() as uow:
            return await uow.privilege_repository.find_by_name("Organization-name")

    assert asyncio.run(_find()) == privilege
    with pytest.raises(DuplicateError):
        asyncio.run(_add())
