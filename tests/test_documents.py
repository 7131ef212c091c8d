from __future__ import annotations

import pytest

from fieldauth.patching import (
    InvalidPatchError,
    PatchOperation,
    apply_json_patch,
    apply_merge_patch,
    parse_patch,
)


def _doc() -> dict:
    return {"name": "Unit A", "members": ["a", "b"], "meta": {"a/b": "1", "m~n": "2"}}


def test_parse_patch_accepts_from_alias_and_json_text() -> None:
    operations = parse_patch('[{"op": "move", "from": "/name", "path": "/title"}]')
    assert operations == [PatchOperation(op="move", from_="/name", path="/title")]


@pytest.mark.parametrize(
    "raw",
    [
        [{"op": "replace", "path": "/name"}],
        [{"op": "copy", "path": "/name"}],
        [{"op": "delete", "path": "/name"}],
        [{"op": "remove", "path": None}],
        {"op": "remove", "path": "/name"},
        5,
        None,
        "null",
    ],
)
def test_parse_patch_rejects_malformed_operations(raw: object) -> None:
    with pytest.raises(InvalidPatchError):
        parse_patch(raw)


def test_add_replace_remove() -> None:
    document = _doc()
    operations = parse_patch(
        [
            {"op": "replace", "path": "/name", "value": "Unit B"},
            {"op": "add", "path": "/members/-", "value": "c"},
            {"op": "add", "path": "/members/0", "value": "z"},
            {"op": "remove", "path": "/meta/a~1b"},
            {"op": "add", "path": "/leader", "value": None},
        ]
    )

    patched = apply_json_patch(document, operations)

    assert patched == {
        "name": "Unit B",
        "members": ["z", "a", "b", "c"],
        "meta": {"m~n": "2"},
        "leader": None,
    }
    assert document == _doc()


def test_move_copy_and_test() -> None:
    operations = parse_patch(
        [
            {"op": "test", "path": "/meta/m~0n", "value": "2"},
            {"op": "copy", "from": "/members/1", "path": "/primary"},
            {"op": "move", "from": "/name", "path": "/title"},
        ]
    )

    patched = apply_json_patch(_doc(), operations)

    assert patched["primary"] == "b"
    assert patched["title"] == "Unit A"
    assert "name" not in patched


@pytest.mark.parametrize(
    "operation",
    [
        {"op": "test", "path": "/name", "value": "Unit Z"},
        {"op": "replace", "path": "/missing", "value": 1},
        {"op": "remove", "path": "/members/5"},
        {"op": "remove", "path": ""},
        {"op": "add", "path": "name", "value": 1},
        {"op": "add", "path": "/members/01", "value": "x"},
        {"op": "add", "path": "/name/first", "value": "x"},
        {"op": "move", "from": "/meta", "path": "/meta/child"},
        {"op": "remove", "path": "/members/\u00b2"},
        {"op": "add", "path": "/members/\u0661", "value": "x"},
    ],
)
def test_invalid_operations_abort(operation: dict) -> None:
    with pytest.raises(InvalidPatchError):
        apply_json_patch(_doc(), parse_patch([operation]))


def test_root_replace_returns_new_document() -> None:
    patched = apply_json_patch(_doc(), parse_patch([{"op": "replace", "path": "", "value": {}}]))
    assert patched == {}


def test_merge_patch_semantics() -> None:
    document = {"name": "Unit A", "leader": "x", "meta": {"a": "1", "b": "2"}, "tags": ["t"]}

    patched = apply_merge_patch(
        document,
        {"leader": None, "meta": {"b": None, "c": "3"}, "tags": ["u"], "motto": "Aim High"},
    )

    assert patched == {
        "name": "Unit A",
        "meta": {"a": "1", "c": "3"},
        "tags": ["u"],
        "motto": "Aim High",
    }
    assert document["leader"] == "x"
    assert document["meta"] == {"a": "1", "b": "2"}


def test_test_operation_distinguishes_booleans_from_numbers() -> None:
    document = {"flag": True, "count": 1}

    with pytest.raises(InvalidPatchError):
        apply_json_patch(document, parse_patch([{"op": "test", "path": "/flag", "value": 1}]))
    with pytest.raises(InvalidPatchError):
        apply_json_patch(document, parse_patch([{"op": "test", "path": "/count", "value": True}]))
    assert apply_json_patch(
        document, parse_patch([{"op": "test", "path": "/count", "value": 1.0}])
    ) == document
