"""Entity field authorization: privilege catalog and caller contexts."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from uuid import uuid4

from fieldauth.config import AppSettings
from fieldauth.domain import Privilege, PrivilegeId
from fieldauth.patching import AuthContext, FieldMetadataRegistry, field_privilege_name
from fieldauth.patching.authorization import WILDCARD_FIELD
from fieldauth.persistence import UnitOfWork

UnitOfWorkFactory = Callable[[], UnitOfWork]


@dataclass(frozen=True, slots=True)
class PrivilegeSyncResult:
    created: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()


class EntityFieldAuthService:
    """Keeps field privileges aligned with protected fields and builds auth contexts."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        registry: FieldMetadataRegistry,
        settings: AppSettings,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._registry = registry
        self._settings = settings
        self._logger = logger or logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self._settings.efa_enabled

    def auth_context_for(self, privileges: Iterable[str]) -> AuthContext:
        """Build the caller context; everything is overridable when field auth is off."""

        if not self.enabled:
            return AuthContext.unrestricted()
        return AuthContext.from_privileges(
            privileges,
            admin_privilege=self._settings.admin_privilege,
        )

    def field_privilege_names(self) -> dict[str, tuple[str, ...]]:
        """Map each registered entity name to the override privileges it needs."""

        names: dict[str, tuple[str, ...]] = {}
        for entity_type in self._registry.entity_types():
            metadata = self._registry.resolve(entity_type)
            protected = [entry.name for entry in metadata.protected_fields]
            if not protected:
                names[metadata.entity_name] = ()
                continue
            names[metadata.entity_name] = tuple(
                field_privilege_name(metadata.entity_name, field_name)
                for field_name in [*protected, WILDCARD_FIELD]
            )
        return names

    async def sync_privileges(self) -> PrivilegeSyncResult:
        """Create missing field privileges and prune ones whose field is no longer protected."""

        catalog = self.field_privilege_names()
        expected = {name for names in catalog.values() for name in names}
        prefixes = tuple(f"{entity_name}-" for entity_name in catalog)
        created: list[str] = []
        removed: list[str] = []

        async with self._uow_factory() as uow:
            repository = uow.privilege_repository
            for name in sorted(expected):
                if await repository.find_by_name(name) is None:
                    await repository.add(Privilege(id=PrivilegeId(uuid4()), name=name))
                    created.append(name)
            for privilege in await repository.list_all():
                if privilege.name.startswith(prefixes) and privilege.name not in expected:
                    await repository.delete(privilege.id)
                    removed.append(privilege.name)
            await uow.commit()

        if created or removed:
            self._logger.info(
                "Synchronized field privileges (created=%d, removed=%d)",
                len(created),
                len(removed),
            )
        return PrivilegeSyncResult(created=tuple(created), removed=tuple(removed))


__all__ = ["EntityFieldAuthService", "PrivilegeSyncResult"]
