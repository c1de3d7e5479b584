from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, TypeAlias

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from .errors import CallerError

AttributeValue: TypeAlias = Any
AttributeMap: TypeAlias = dict[str, AttributeValue]
Key: TypeAlias = dict[str, str | int | Decimal | bytes]

DELETE_SENTINEL = ""

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def is_delete_sentinel(value: AttributeValue) -> bool:
    """Report whether ``value`` asks for the attribute to be removed.

    Only the empty string qualifies; ``None``, ``0``, ``False`` and empty
    containers are ordinary values and are written with ``SET``.
    """
    return isinstance(value, str) and value == DELETE_SENTINEL


def validate_key(key: Any) -> Key:
    if not isinstance(key, Mapping) or not key:
        raise CallerError("malformed key: expected a non-empty mapping")

    out: Key = {}
    for name, value in key.items():
        if not isinstance(name, str) or not name:
            raise CallerError(f"malformed key: invalid field name {name!r}")
        if isinstance(value, bool) or not isinstance(value, (str, int, Decimal, bytes, bytearray, Binary)):
            raise CallerError(f"malformed key: {name} must be a string, number or binary value")
        if is_delete_sentinel(value):
            raise CallerError(f"malformed key: {name} must not be empty")
        out[name] = value
    if len(out) > 2:
        raise CallerError("malformed key: expected a partition key and an optional sort key")
    return out


def _floats_to_decimal(value: AttributeValue) -> AttributeValue:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, list):
        return [_floats_to_decimal(v) for v in value]
    if isinstance(value, dict):
        return {k: _floats_to_decimal(v) for k, v in value.items()}
    if isinstance(value, set):
        return {_floats_to_decimal(v) for v in value}
    return value


def serialize_value(value: AttributeValue) -> dict[str, Any]:
    try:
        return _serializer.serialize(_floats_to_decimal(value))
    except TypeError as err:
        raise CallerError(str(err)) from err


def serialize_values(values: Mapping[str, AttributeValue]) -> dict[str, Any]:
    return {k: serialize_value(v) for k, v in values.items()}


def serialize_item(item: Mapping[str, AttributeValue]) -> dict[str, Any]:
    if not isinstance(item, Mapping):
        raise CallerError("item must be a mapping")
    return serialize_values(item)


def deserialize_value(av: Mapping[str, Any]) -> AttributeValue:
    value = _deserializer.deserialize(av)
    if isinstance(value, Binary):
        return value.value
    return value


def deserialize_item(item: Mapping[str, Any]) -> AttributeMap:
    return {k: deserialize_value(v) for k, v in item.items()}
