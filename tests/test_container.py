from __future__ import annotations

import asyncio
from pathlib import Path

from fieldauth.config import AppSettings
from fieldauth.container import build_container
from fieldauth.domain import Organization, Person
from fieldauth.persistence import InMemoryUnitOfWork


def test_build_container_registers_entities(tmp_path: Path) -> None:
    db_url = f"sqlite+aiosqlite:///{tmp_path/'nested'/'container.db'}"
    settings = AppSettings(environment="test", database_url=db_url)

    container = build_container(settings)

    assert (tmp_path / "nested").exists()
    assert container.registry.entity_types() == (Organization, Person)
    assert container.organization_service.entity_name == "Organization"

    async def _round_trip() -> int:
        async with container.unit_of_work_factory() as uow:
            organizations = await uow.organization_repository.list_all()
            await uow.commit()
        return len(organizations)

    assert asyncio.run(_round_trip()) == 0


def test_build_container_accepts_injected_unit_of_work() -> None:
    uow = InMemoryUnitOfWork()
    container = build_container(
        AppSettings(environment="test", efa_enabled=False),
        unit_of_work_factory=lambda: uow,
    )

    context = container.field_auth_service.auth_context_for([])
    assert context.can_override("Person", "email")
    assert container.unit_of_work_factory() is uow


def test_settings_from_env(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("FIELDAUTH_ENV", "staging")
    monkeypatch.setenv("FIELDAUTH_EFA_ENABLED", "false")
    monkeypatch.setenv("FIELDAUTH_ADMIN_PRIVILEGE", "ROOT")
    monkeypatch.setenv("FIELDAUTH_LOG_LEVEL", "debug")

    settings = AppSettings.from_env()

    assert settings.environment == "staging"
    assert settings.efa_enabled is False
    assert settings.admin_privilege == "ROOT"
    assert settings.log_level == "DEBUG"
