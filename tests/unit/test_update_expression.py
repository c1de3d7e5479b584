from __future__ import annotations

import pytest

from dynamo_adapter import CallerError, apply_update_expression, compile_update_expression


def test_compile_mixes_set_and_remove_with_shared_counter() -> None:
    out = compile_update_expression({"id": "1"}, {"name": "Bob", "note": ""})

    assert out.expression == " SET #param1 = :val1 REMOVE #param2"
    assert out.set_clause == "SET #param1 = :val1"
    assert out.remove_clause == "REMOVE #param2"
    assert out.names == {"#param1": "name", "#param2": "note"}
    assert out.values == {":val1": "Bob"}


def test_compile_does_not_restart_counter_for_remove() -> None:
    out = compile_update_expression({"id": "1"}, {"a": "", "b": 1, "c": "", "d": "x"})

    assert out.expression == " SET #param2 = :val2, #param4 = :val4 REMOVE #param1, #param3"
    assert out.values == {":val2": 1, ":val4": "x"}
    assert out.names == {"#param1": "a", "#param2": "b", "#param3": "c", "#param4": "d"}


def test_compile_only_set_keeps_trailing_separator() -> None:
    out = compile_update_expression({"id": "1"}, {"a": 1, "b": 2})

    assert out.expression == " SET #param1 = :val1, #param2 = :val2 "
    assert out.remove_clause == ""


def test_compile_only_remove_omits_values() -> None:
    out = compile_update_expression({"id": "1"}, {"a": "", "b": ""})

    assert out.expression == "  REMOVE #param1, #param2"
    assert out.set_clause == ""
    assert out.values is None


def test_compile_drops_key_fields() -> None:
    out = compile_update_expression(
        {"accountId": "acc", "id": "1"},
        {"accountId": "other", "id": "2", "name": "Bob"},
    )

    assert out.names == {"#param1": "name"}
    assert out.values == {":val1": "Bob"}
    assert "accountId" not in out.names.values()
    assert "id" not in out.names.values()


def test_compile_rejects_updates_that_only_touch_the_key() -> None:
    with pytest.raises(CallerError, match="no updates provided"):
        compile_update_expression({"id": "1"}, {"id": "1"})

    with pytest.raises(CallerError, match="no updates provided"):
        compile_update_expression({"id": "1"}, {})


@pytest.mark.parametrize("value", [None, 0, False, [], {}, "0", " "])
def test_compile_only_empty_string_means_remove(value: object) -> None:
    out = compile_update_expression({"id": "1"}, {"field": value})

    assert out.set_clause == "SET #param1 = :val1"
    assert out.remove_clause == ""
    assert out.values == {":val1": value}


def test_compile_removes_managed_fields_when_asked() -> None:
    out = compile_update_expression({"id": "1"}, {"updated": ""})

    assert out.expression == "  REMOVE #param1"
    assert out.names == {"#param1": "updated"}


@pytest.mark.parametrize(
    "attributes",
    [
        {"a": "", "b": "x", "id": "k"},
        {"z": 1, "y": "", "x": "", "w": [1, 2]},
        {"only": ""},
        {"nested": {"a": ""}, "flag": True},
    ],
)
def test_compile_places_every_field_in_exactly_one_clause(attributes: dict) -> None:
    key = {"id": "k"}
    out = compile_update_expression(key, attributes)

    placeholder_of = {field: ref for ref, field in out.names.items()}
    assert set(placeholder_of) == set(attributes) - set(key)

    for field, ref in placeholder_of.items():
        in_set = f"{ref} = " in out.set_clause
        in_remove = ref in out.remove_clause.removeprefix("REMOVE ").split(", ")
        assert in_set != in_remove
        assert in_remove == (attributes[field] == "")

    for ref in (out.values or {}):
        assert ref in out.set_clause


def test_apply_serializes_values_and_keeps_caller_placeholders() -> None:
    out = compile_update_expression({"id": "1"}, {"name": "Bob", "note": ""})
    req = {
        "ConditionExpression": "#v = :v",
        "ExpressionAttributeNames": {"#v": "version"},
        "ExpressionAttributeValues": {":v": 3},
    }

    apply_update_expression(req, out)

    assert req["UpdateExpression"] == " SET #param1 = :val1 REMOVE #param2"
    assert req["ExpressionAttributeNames"] == {"#v": "version", "#param1": "name", "#param2": "note"}
    assert req["ExpressionAttributeValues"] == {":v": {"N": "3"}, ":val1": {"S": "Bob"}}
    assert req["ConditionExpression"] == "#v = :v"


def test_apply_omits_value_map_when_nothing_is_set() -> None:
    out = compile_update_expression({"id": "1"}, {"note": ""})
    req: dict = {"ExpressionAttributeValues": {}}

    apply_update_expression(req, out)

    assert "ExpressionAttributeValues" not in req
    assert req["ExpressionAttributeNames"] == {"#param1": "note"}


def test_apply_rejects_placeholder_collisions() -> None:
    out = compile_update_expression({"id": "1"}, {"name": "Bob"})

    with pytest.raises(CallerError, match="name collision: #param1"):
        apply_update_expression({"ExpressionAttributeNames": {"#param1": "other"}}, out)

    with pytest.raises(CallerError, match="value collision: :val1"):
        apply_update_expression({"ExpressionAttributeValues": {":val1": "x"}}, out)
