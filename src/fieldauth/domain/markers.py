"""Field markers consumed by the patch authorization engine.

Markers are attached through ``typing.Annotated`` metadata::

    name: Annotated[str, Field(min_length=1), PROTECTED]

Pydantic keeps unknown metadata objects on ``FieldInfo.metadata`` and
dataclasses expose them through ``get_type_hints(include_extras=True)``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProtectedField:
    """Field writable only by callers holding an override privilege."""


@dataclass(frozen=True, slots=True)
class NonPatchableField:
    """Field that can never change once the entity exists."""


PROTECTED = ProtectedField()
NON_PATCHABLE = NonPatchableField()

__all__ = ["NON_PATCHABLE", "PROTECTED", "NonPatchableField", "ProtectedField"]
