from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .attributes import AttributeMap, deserialize_item, serialize_item, serialize_values
from .projection import apply_projection


@dataclass(frozen=True)
class Page:
    items: list[AttributeMap]
    last_evaluated_key: AttributeMap | None = None
    count: int = 0
    scanned_count: int = 0
    consumed_capacity: Any = field(default=None, compare=False)

    @classmethod
    def from_response(cls, resp: Mapping[str, Any]) -> Page:
        last = resp.get("LastEvaluatedKey")
        items = [deserialize_item(item) for item in resp.get("Items", [])]
        return cls(
            items=items,
            last_evaluated_key=deserialize_item(last) if last else None,
            count=int(resp.get("Count", len(items))),
            scanned_count=int(resp.get("ScannedCount", len(items))),
            consumed_capacity=resp.get("ConsumedCapacity"),
        )


def build_read_request(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Prepare document-style query/scan/get parameters for the low-level client.

    ``ProjectionExpression`` is taken as a comma-separated field list, and the
    native ``ExpressionAttributeValues`` / ``ExclusiveStartKey`` are serialised.
    """
    req = dict(params or {})
    if "ProjectionExpression" in req:
        apply_projection(req)
    if req.get("ExpressionAttributeValues"):
        req["ExpressionAttributeValues"] = serialize_values(req["ExpressionAttributeValues"])
    if req.get("ExclusiveStartKey"):
        req["ExclusiveStartKey"] = serialize_item(req["ExclusiveStartKey"])
    return req
