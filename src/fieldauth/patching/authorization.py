"""Caller authorization context evaluated during patch validation.

Override privileges are granted per entity type and per field. The privilege
``"<Entity>-<field>"`` unlocks one protected field, ``"<Entity>-*"`` unlocks
every protected field of the type, and the admin privilege unlocks all of
them. Non-patchable fields are outside the reach of any privilege.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

DEFAULT_ADMIN_PRIVILEGE = "DASHBOARD_ADMIN"
WILDCARD_FIELD = "*"


def field_privilege_name(entity_name: str, field_name: str) -> str:
    return f"{entity_name}-{field_name}"


def edit_privilege_name(entity_name: str) -> str:
    return f"{entity_name.upper()}_EDIT"


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Privileges held by the caller of a patch request."""

    privileges: frozenset[str] = frozenset()
    admin_privilege: str = DEFAULT_ADMIN_PRIVILEGE
    unrestricted_access: bool = False

    @classmethod
    def from_privileges(
        cls,
        privileges: Iterable[str],
        *,
        admin_privilege: str = DEFAULT_ADMIN_PRIVILEGE,
    ) -> AuthContext:
        cleaned = frozenset(name.strip() for name in privileges if name.strip())
        return cls(privileges=cleaned, admin_privilege=admin_privilege)

    @classmethod
    def unrestricted(cls) -> AuthContext:
        """Context that overrides every protected field."""

        return cls(unrestricted_access=True)

    @property
    def is_admin(self) -> bool:
        return self.unrestricted_access or self.admin_privilege in self.privileges

    def can_edit(self, entity_name: str) -> bool:
        return self.is_admin or edit_privilege_name(entity_name) in self.privileges

    def can_override(self, entity_name: str, field_name: str) -> bool:
        if self.is_admin:
            return True
        return (
            field_privilege_name(entity_name, field_name) in self.privileges
            or field_privilege_name(entity_name, WILDCARD_FIELD) in self.privileges
        )


__all__ = [
    "DEFAULT_ADMIN_PRIVILEGE",
    "WILDCARD_FIELD",
    "AuthContext",
    "edit_privilege_name",
    "field_privilege_name",
]
