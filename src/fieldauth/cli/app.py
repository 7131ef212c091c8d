"""Typer CLI wiring fieldauth services."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

import typer

from fieldauth.domain import (
    Branch,
    Organization,
    OrganizationId,
    Person,
    PersonId,
    Unit,
)
from fieldauth.patching import (
    InvalidPatchError,
    PatchRejectedError,
    denied_fields_header,
    parse_patch,
)
from fieldauth.persistence import DuplicateError, NotFoundError
from fieldauth.services import EntityService, PatchOutcome, PermissionDeniedError

from .deps import get_container

EXIT_INVALID = 1
EXIT_REJECTED = 2
EXIT_FORBIDDEN = 3

app = typer.Typer(help="fieldauth command-line interface")


@app.callback()
def configure() -> None:
    """Configure logging from the resolved settings."""

    settings = get_container().settings
    level = logging.getLevelNamesMapping().get(settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _parse_uuid(value: str, label: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise typer.BadParameter(f"{label} must be a valid UUID") from exc


def _load_document(raw: str) -> Any:
    text = raw
    if raw.startswith("@"):
        try:
            text = Path(raw[1:]).read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot read patch file {raw[1:]!r}: {exc.strerror}"
            raise InvalidPatchError(msg) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Patch is not valid JSON: {exc.msg}"
        raise InvalidPatchError(msg) from exc


def _run_patch(
    service: EntityService[Any],
    entity_id: UUID,
    raw_patch: str,
    privileges: list[str],
    *,
    merge: bool,
) -> None:
    container = get_container()
    auth = container.field_auth_service.auth_context_for(privileges)

    async def _run(document: Any) -> PatchOutcome[Any]:
        if merge:
            if not isinstance(document, dict):
                msg = "Merge patch must be a JSON object"
                raise InvalidPatchError(msg)
            return await service.merge_patch(entity_id, document, auth)
        return await service.patch(entity_id, parse_patch(document), auth)

    try:
        outcome = asyncio.run(_run(_load_document(raw_patch)))
    except PatchRejectedError as exc:
        typer.echo(f"Rejected; denied fields: {denied_fields_header(exc.decision)}")
        for violation in exc.decision.violations:
            typer.echo(f"{violation.field_name}\t{violation.kind.value}")
        raise typer.Exit(code=EXIT_REJECTED) from exc
    except PermissionDeniedError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=EXIT_FORBIDDEN) from exc
    except (NotFoundError, InvalidPatchError, DuplicateError) as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=EXIT_INVALID) from exc

    changed = ", ".join(outcome.decision.changed_fields) or "nothing"
    typer.echo(f"Updated {outcome.entity.id}; changed: {changed}")


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved application settings."""

    settings = get_container().settings
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Database URL:\t" + settings.database_url)
    typer.echo("Field auth:\t" + ("enabled" if settings.efa_enabled else "disabled"))
    typer.echo("Admin privilege:\t" + settings.admin_privilege)


@app.command("sync-privileges")
def sync_privileges() -> None:
    """Create and prune field override privileges to match protected fields."""

    container = get_container()
    result = asyncio.run(container.field_auth_service.sync_privileges())
    for name in result.created:
        typer.echo(f"+ {name}")
    for name in result.removed:
        typer.echo(f"- {name}")
    typer.echo(f"Created {len(result.created)}, removed {len(result.removed)}")


@app.command("describe-fields")
def describe_fields() -> None:
    """List every registered entity field with its patch rules."""

    registry = get_container().registry
    for entity_type in registry.entity_types():
        metadata = registry.resolve(entity_type)
        typer.echo(metadata.entity_name)
        for entry in metadata.fields:
            rules = [
                label
                for label, flag in (
                    ("protected", entry.is_protected),
                    ("non-patchable", entry.is_non_patchable),
                )
                if flag
            ]
            typer.echo(f"  {entry.name}\t{', '.join(rules) or '-'}")


@app.command("create-org")
def create_org(
    name: str,
    unit_type: Unit = typer.Option(Unit.ORGANIZATION, case_sensitive=False),
    branch: Branch = typer.Option(Branch.OTHER, case_sensitive=False),
) -> None:
    """Create an organization."""

    container = get_container()
    organization = Organization(
        id=OrganizationId(uuid4()),
        name=name,
        unit_type=unit_type,
        branch=branch,
    )
    try:
        created = asyncio.run(container.organization_service.create(organization))
    except DuplicateError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=EXIT_INVALID) from exc
    typer.echo(f"Created organization {created.id}")


@app.command("list-orgs")
def list_orgs() -> None:
    """List organizations."""

    container = get_container()
    organizations = asyncio.run(container.organization_service.list_all())
    if not organizations:
        typer.echo("No organizations found")
        return
    for org in organizations:
        typer.echo(f"{org.id}\t{org.name}\t{org.unit_type.value}")


@app.command("create-person")
def create_person(
    first_name: str,
    last_name: str,
    email: str | None = typer.Option(None),
    rank: str | None = typer.Option(None),
) -> None:
    """Create a person."""

    container = get_container()
    person = Person(
        id=PersonId(uuid4()),
        first_name=first_name,
        last_name=last_name,
        email=email,
        rank=rank,
    )
    try:
        created = asyncio.run(container.person_service.create(person))
    except DuplicateError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=EXIT_INVALID) from exc
    typer.echo(f"Created person {created.id}")


@app.command("patch-org")
def patch_org(
    organization_id: str,
    patch: str = typer.Option(..., help="JSON document, or @path to a file containing one"),
    privilege: list[str] = typer.Option([], "--privilege", "-p", help="Caller privilege"),
    merge: bool = typer.Option(False, help="Treat the document as a JSON Merge Patch"),
) -> None:
    """Patch an organization as a caller holding the given privileges."""

    container = get_container()
    target = _parse_uuid(organization_id, "organization-id")
    _run_patch(container.organization_service, target, patch, privilege, merge=merge)


@app.command("patch-person")
def patch_person(
    person_id: str,
    patch: str = typer.Option(..., help="JSON document, or @path to a file containing one"),
    privilege: list[str] = typer.Option([], "--privilege", "-p", help="Caller privilege"),
    merge: bool = typer.Option(False, help="Treat the document as a JSON Merge Patch"),
) -> None:
    """Patch a person as a caller holding the given privileges."""

    container = get_container()
    target = _parse_uuid(person_id, "person-id")
    _run_patch(container.person_service, target, patch, privilege, merge=merge)


__all__ = ["app"]
