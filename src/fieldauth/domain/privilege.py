"""Privilege domain model."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from .base import DomainModel
from .types import PrivilegeId


class Privilege(DomainModel):
    """A named capability that can be granted to a caller."""

    id: PrivilegeId
    name: Annotated[str, Field(min_length=1)]
