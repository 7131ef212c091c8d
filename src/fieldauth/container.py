"""Service container wiring application components."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from fieldauth.config import AppSettings
from fieldauth.domain import Organization, Person
from fieldauth.patching import FieldMetadataRegistry, MergeApplier, PatchValidator
from fieldauth.persistence import UnitOfWork
from fieldauth.persistence.sqlite import create_sqlite_unit_of_work_factory
from fieldauth.services import EntityFieldAuthService, OrganizationService, PersonService
from fieldauth.utils import Clock, SystemClock

UnitOfWorkFactory = Callable[[], UnitOfWork]


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Aggregates constructed services with shared configuration."""

    settings: AppSettings
    registry: FieldMetadataRegistry
    unit_of_work_factory: UnitOfWorkFactory
    clock: Clock
    validator: PatchValidator
    merger: MergeApplier
    field_auth_service: EntityFieldAuthService
    organization_service: OrganizationService
    person_service: PersonService


def build_registry() -> FieldMetadataRegistry:
    """Register every patchable entity type."""

    registry = FieldMetadataRegistry()
    registry.register(Organization)
    registry.register(Person)
    return registry


def _ensure_sqlite_directory(database_url: str) -> None:
    if not database_url.startswith("sqlite"):
        return
    try:
        _, path = database_url.split(":///", maxsplit=1)
    except ValueError:
        return
    db_path = Path(path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)


def build_container(
    settings: AppSettings | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock | None = None,
) -> ServiceContainer:
    """Construct the primary service container."""

    resolved_settings = settings or AppSettings.from_env()
    if unit_of_work_factory is None:
        _ensure_sqlite_directory(resolved_settings.database_url)
        unit_of_work_factory = create_sqlite_unit_of_work_factory(resolved_settings.database_url)
    resolved_clock = clock or SystemClock()

    registry = build_registry()
    validator = PatchValidator(registry)
    merger = MergeApplier(registry)
    if not resolved_settings.efa_enabled:
        logger.warning("Entity field authorization disabled; protected fields are unenforced")

    field_auth_service = EntityFieldAuthService(unit_of_work_factory, registry, resolved_settings)
    organization_service = OrganizationService(
        unit_of_work_factory,
        registry,
        validator=validator,
        merger=merger,
        clock=resolved_clock,
    )
    person_service = PersonService(
        unit_of_work_factory,
        registry,
        validator=validator,
        merger=merger,
        clock=resolved_clock,
    )

    return ServiceContainer(
        settings=resolved_settings,
        registry=registry,
        unit_of_work_factory=unit_of_work_factory,
        clock=resolved_clock,
        validator=validator,
        merger=merger,
        field_auth_service=field_auth_service,
        organization_service=organization_service,
        person_service=person_service,
    )


__all__ = ["ServiceContainer", "build_container", "build_registry"]
