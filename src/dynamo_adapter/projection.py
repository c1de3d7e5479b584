from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import CallerError


@dataclass(frozen=True)
class ProjectionExpression:
    expression: str
    names: dict[str, str]


def build_projection(fields: str) -> ProjectionExpression | None:
    """Turn ``"a,b,c"`` into ``#a, #b, #c`` plus its name placeholders.

    Field order is preserved. Names are not validated; an illegal name is
    left for the store to reject.
    """
    if not fields:
        return None

    refs: list[str] = []
    names: dict[str, str] = {}
    for field_name in fields.split(","):
        ref = f"#{field_name}"
        names[ref] = field_name
        refs.append(ref)
    return ProjectionExpression(expression=", ".join(refs), names=names)


def apply_projection(req: dict[str, Any]) -> dict[str, Any]:
    projection = build_projection(req.get("ProjectionExpression") or "")
    if projection is None:
        req.pop("ProjectionExpression", None)
        return req

    names = dict(req.get("ExpressionAttributeNames") or {})
    for ref, field_name in projection.names.items():
        if names.get(ref, field_name) != field_name:
            raise CallerError(f"expression attribute name collision: {ref}")
        names[ref] = field_name

    req["ProjectionExpression"] = projection.expression
    req["ExpressionAttributeNames"] = names
    return req
