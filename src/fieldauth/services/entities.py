"""Entity services running the load, patch, validate, merge and persist flow."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import ValidationError

from fieldauth.domain import JsonMapping, Organization, Person
from fieldauth.patching import (
    Approved,
    AuthContext,
    FieldMetadataRegistry,
    InvalidPatchError,
    MergeApplier,
    PatchOperation,
    PatchRejectedError,
    PatchValidator,
    Rejected,
    apply_json_patch,
    apply_merge_patch,
    denied_fields_header,
)
from fieldauth.persistence import (
    DuplicateError,
    NotFoundError,
    OrganizationRepository,
    PersonRepository,
    UnitOfWork,
)
from fieldauth.utils import Clock, SystemClock

from .exceptions import PermissionDeniedError

UnitOfWorkFactory = Callable[[], UnitOfWork]
EntityT = TypeVar("EntityT", Organization, Person)


@dataclass(frozen=True)
class PatchOutcome(Generic[EntityT]):
    """The persisted entity together with the decision that allowed it."""

    entity: EntityT
    decision: Approved


class EntityService(Generic[EntityT]):
    """Shared update flow for entities guarded by field-level rules."""

    entity_type: type[EntityT]

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        registry: FieldMetadataRegistry,
        *,
        validator: PatchValidator | None = None,
        merger: MergeApplier | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._registry = registry
        self._validator = validator or PatchValidator(registry)
        self._merger = merger or MergeApplier(registry)
        self._clock = clock or SystemClock()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def entity_name(self) -> str:
        return self._registry.resolve(self.entity_type).entity_name

    def _repository(self, uow: UnitOfWork) -> Any:
        raise NotImplementedError

    async def _ensure_unique(self, uow: UnitOfWork, entity: EntityT) -> None:
        return None

    async def get(self, entity_id: UUID) -> EntityT:
        async with self._uow_factory() as uow:
            entity = await self._repository(uow).get(entity_id)
        if entity is None:
            msg = f"{self.entity_name} {entity_id} not found"
            raise NotFoundError(msg)
        return entity

    async def list_all(self) -> Sequence[EntityT]:
        async with self._uow_factory() as uow:
            return await self._repository(uow).list_all()

    async def create(self, entity: EntityT) -> EntityT:
        now = self._clock.now()
        stamped = entity.model_copy(update={"created_at": now, "updated_at": now})
        async with self._uow_factory() as uow:
            repository = self._repository(uow)
            if await repository.get(stamped.id) is not None:
                msg = f"{self.entity_name} {stamped.id} already exists"
                raise DuplicateError(msg)
            await self._ensure_unique(uow, stamped)
            await repository.upsert(stamped)
            await uow.commit()
        self._logger.info("Created %s %s", self.entity_name, stamped.id)
        return stamped

    async def delete(self, entity_id: UUID) -> None:
        async with self._uow_factory() as uow:
            repository = self._repository(uow)
            if await repository.get(entity_id) is None:
                msg = f"{self.entity_name} {entity_id} not found"
                raise NotFoundError(msg)
            await repository.delete(entity_id)
            await uow.commit()

    async def replace(
        self,
        entity_id: UUID,
        proposed: EntityT,
        auth: AuthContext,
    ) -> PatchOutcome[EntityT]:
        """Full replacement with a complete snapshot."""

        return await self._update(entity_id, lambda _existing: proposed, auth, partial=False)

    async def patch(
        self,
        entity_id: UUID,
        operations: Sequence[PatchOperation],
        auth: AuthContext,
    ) -> PatchOutcome[EntityT]:
        """Apply a JSON Patch to the stored entity."""

        def build(existing: EntityT) -> EntityT:
            document = apply_json_patch(existing.model_dump(mode="json"), operations)
            return self._from_document(document)

        return await self._update(entity_id, build, auth, partial=False)

    async def merge_patch(
        self,
        entity_id: UUID,
        document: JsonMapping,
        auth: AuthContext,
    ) -> PatchOutcome[EntityT]:
        """Apply a JSON Merge Patch; only changed fields are merged onto the stored entity."""

        def build(existing: EntityT) -> EntityT:
            merged = apply_merge_patch(existing.model_dump(mode="json"), document)
            return self._from_document(merged)

        return await self._update(entity_id, build, auth, partial=True)

    def _from_document(self, document: Any) -> EntityT:
        try:
            return self.entity_type.model_validate(document)
        except ValidationError as exc:
            msg = f"Patched document is not a valid {self.entity_name}: {exc.error_count()} error(s)"
            raise InvalidPatchError(msg) from exc

    async def _update(
        self,
        entity_id: UUID,
        build: Callable[[EntityT], EntityT],
        auth: AuthContext,
        *,
        partial: bool,
    ) -> PatchOutcome[EntityT]:
        metadata = self._registry.resolve(self.entity_type)
        if not auth.can_edit(metadata.entity_name):
            msg = f"Caller may not edit {metadata.entity_name} records"
            raise PermissionDeniedError(msg)

        async with self._uow_factory() as uow:
            repository = self._repository(uow)
            existing = await repository.get(entity_id)
            if existing is None:
                msg = f"{metadata.entity_name} {entity_id} not found"
                raise NotFoundError(msg)

            proposed = build(existing)
            decision = self._validator.validate(existing, proposed, auth, metadata)
            if isinstance(decision, Rejected):
                self._logger.warning(
                    "Rejected %s update for %s; denied fields: %s",
                    metadata.entity_name,
                    entity_id,
                    denied_fields_header(decision),
                )
                raise PatchRejectedError(decision)

            merged = self._merger.apply(decision, existing, proposed, partial=partial)
            if decision.changed_fields:
                merged = merged.model_copy(update={"updated_at": self._clock.now()})
                await self._ensure_unique(uow, merged)
                await repository.upsert(merged)
                await uow.commit()

        self._logger.info(
            "Updated %s %s (changed: %s)",
            metadata.entity_name,
            entity_id,
            ", ".join(decision.changed_fields) or "nothing",
        )
        return PatchOutcome(entity=merged, decision=decision)


class OrganizationService(EntityService[Organization]):
    entity_type = Organization

    def _repository(self, uow: UnitOfWork) -> OrganizationRepository:
        return uow.organization_repository

    async def _ensure_unique(self, uow: UnitOfWork, entity: Organization) -> None:
        for other in await uow.organization_repository.list_all():
            if other.id != entity.id and other.name_as_lower == entity.name_as_lower:
                msg = f"Organization name {entity.name!r} is already in use"
                raise DuplicateError(msg)


class PersonService(EntityService[Person]):
    entity_type = Person

    def _repository(self, uow: UnitOfWork) -> PersonRepository:
        return uow.person_repository

    async def _ensure_unique(self, uow: UnitOfWork, entity: Person) -> None:
        if entity.email is None:
            return
        email = entity.email.lower()
        for other in await uow.person_repository.list_all():
            if other.id != entity.id and other.email is not None and other.email.lower() == email:
                msg = f"Email {entity.email!r} is already in use"
                raise DuplicateError(msg)


__all__ = ["EntityService", "OrganizationService", "PatchOutcome", "PersonService"]
