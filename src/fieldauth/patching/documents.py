"""JSON Patch (RFC 6902) and JSON Merge Patch (RFC 7396) application.

Both appliers operate on JSON-compatible documents (the ``mode="json"`` dump
of an entity) and return a new document; the input is never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from copy import deepcopy
from typing import Any, Literal

from pydantic import ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from fieldauth.domain import DomainModel

from .exceptions import InvalidPatchError
from .validator import values_equal

OperationName = Literal["add", "remove", "replace", "move", "copy", "test"]


class PatchOperation(DomainModel):
    """A single JSON Patch operation."""

    model_config = ConfigDict(populate_by_name=True)

    op: OperationName
    path: str
    from_: str | None = Field(default=None, alias="from")
    value: Any = None

    @model_validator(mode="after")
    def check_arguments(self) -> PatchOperation:
        if self.op in {"add", "replace", "test"} and "value" not in self.model_fields_set:
            msg = f"'{self.op}' operation requires a value"
            raise ValueError(msg)
        if self.op in {"move", "copy"} and self.from_ is None:
            msg = f"'{self.op}' operation requires a 'from' pointer"
            raise ValueError(msg)
        return self


_OPERATIONS = TypeAdapter(list[PatchOperation])


def parse_patch(raw: Any) -> list[PatchOperation]:
    """Validate raw JSON Patch operations from JSON text or decoded JSON."""

    try:
        if isinstance(raw, str | bytes):
            return _OPERATIONS.validate_json(raw)
        return _OPERATIONS.validate_python(raw)
    except ValidationError as exc:
        msg = f"Malformed JSON Patch document: {exc.error_count()} error(s)"
        raise InvalidPatchError(msg) from exc


def _parse_pointer(pointer: str) -> list[str]:
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        msg = f"JSON Pointer must start with '/': {pointer!r}"
        raise InvalidPatchError(msg)
    return [token.replace("~1", "/").replace("~0", "~") for token in pointer[1:].split("/")]


def _index(token: str, length: int, *, allow_end: bool = False) -> int:
    if allow_end and token == "-":
        return length
    if not (token.isascii() and token.isdigit()) or (len(token) > 1 and token.startswith("0")):
        msg = f"Invalid array index {token!r}"
        raise InvalidPatchError(msg)
    index = int(token)
    upper = length if allow_end else length - 1
    if index > upper:
        msg = f"Array index {index} out of range"
        raise InvalidPatchError(msg)
    return index


def _child(container: Any, token: str) -> Any:
    if isinstance(container, dict):
        if token not in container:
            msg = f"Path member {token!r} does not exist"
            raise InvalidPatchError(msg)
        return container[token]
    if isinstance(container, list):
        return container[_index(token, len(container))]
    msg = f"Cannot traverse into scalar with {token!r}"
    raise InvalidPatchError(msg)


def _get(document: Any, tokens: list[str]) -> Any:
    current = document
    for token in tokens:
        current = _child(current, token)
    return current


def _add(document: Any, tokens: list[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _get(document, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        parent[key] = value
    elif isinstance(parent, list):
        parent.insert(_index(key, len(parent), allow_end=True), value)
    else:
        msg = f"Cannot add member {key!r} to a scalar"
        raise InvalidPatchError(msg)
    return document


def _remove(document: Any, tokens: list[str]) -> Any:
    if not tokens:
        msg = "Cannot remove the document root"
        raise InvalidPatchError(msg)
    parent = _get(document, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        if key not in parent:
            msg = f"Path member {key!r} does not exist"
            raise InvalidPatchError(msg)
        del parent[key]
    elif isinstance(parent, list):
        del parent[_index(key, len(parent))]
    else:
        msg = f"Cannot remove member {key!r} from a scalar"
        raise InvalidPatchError(msg)
    return document


def _replace(document: Any, tokens: list[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _get(document, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        if key not in parent:
            msg = f"Path member {key!r} does not exist"
            raise InvalidPatchError(msg)
        parent[key] = value
    elif isinstance(parent, list):
        parent[_index(key, len(parent))] = value
    else:
        msg = f"Cannot replace member {key!r} of a scalar"
        raise InvalidPatchError(msg)
    return document


def _apply_operation(document: Any, operation: PatchOperation) -> Any:
    tokens = _parse_pointer(operation.path)
    if operation.op == "add":
        return _add(document, tokens, deepcopy(operation.value))
    if operation.op == "remove":
        return _remove(document, tokens)
    if operation.op == "replace":
        return _replace(document, tokens, deepcopy(operation.value))
    if operation.op == "test":
        if not values_equal(_get(document, tokens), operation.value):
            msg = f"Test failed at {operation.path!r}"
            raise InvalidPatchError(msg)
        return document

    assert operation.from_ is not None
    source = _parse_pointer(operation.from_)
    if operation.op == "move":
        if tokens[: len(source)] == source and len(tokens) > len(source):
            msg = f"Cannot move {operation.from_!r} into its own child {operation.path!r}"
            raise InvalidPatchError(msg)
        value = _get(document, source)
        document = _remove(document, source)
        return _add(document, tokens, value)
    return _add(document, tokens, deepcopy(_get(document, source)))


def apply_json_patch(document: Any, operations: Sequence[PatchOperation]) -> Any:
    """Apply JSON Patch operations in order; any failure aborts the whole patch."""

    patched = deepcopy(document)
    for operation in operations:
        patched = _apply_operation(patched, operation)
    return patched


def apply_merge_patch(document: Any, patch: Any) -> Any:
    """Apply a JSON Merge Patch: ``null`` removes, objects merge, anything else replaces."""

    if not isinstance(patch, Mapping):
        return deepcopy(patch)
    target = dict(document) if isinstance(document, Mapping) else {}
    for key, value in patch.items():
        if value is None:
            target.pop(key, None)
        else:
            target[key] = apply_merge_patch(target.get(key), value)
    return target


__all__ = [
    "PatchOperation",
    "apply_json_patch",
    "apply_merge_patch",
    "parse_patch",
]
