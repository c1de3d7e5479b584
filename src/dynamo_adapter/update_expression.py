from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .attributes import AttributeMap, AttributeValue, is_delete_sentinel, serialize_values
from .errors import CallerError


@dataclass(frozen=True)
class UpdateExpressionComponents:
    set_clause: str
    remove_clause: str
    names: dict[str, str]
    values: dict[str, AttributeValue] | None

    @property
    def expression(self) -> str:
        # Each clause keeps its leading space even when empty, so the wire text
        # is " SET ... REMOVE ...", " SET ... " or "  REMOVE ...".
        return f" {self.set_clause} {self.remove_clause}"


def compile_update_expression(
    key: Mapping[str, Any],
    attributes: Mapping[str, AttributeValue],
) -> UpdateExpressionComponents:
    """Diff ``attributes`` against ``key`` into SET/REMOVE clauses.

    Key fields are dropped first. Every remaining field gets a ``#param{i}``
    name placeholder, ``i`` counting from 1 across both clauses in iteration
    order. Empty-string values become ``REMOVE`` entries, everything else a
    ``#param{i} = :val{i}`` ``SET`` entry. When nothing is SET, ``values`` is
    ``None`` so the request carries no value map at all.
    """
    remaining: AttributeMap = {name: value for name, value in attributes.items() if name not in key}
    if not remaining:
        raise CallerError("no updates provided")

    names: dict[str, str] = {}
    values: dict[str, AttributeValue] = {}
    set_parts: list[str] = []
    remove_parts: list[str] = []

    i = 0
    for field_name, value in remaining.items():
        i += 1
        name_ref = f"#param{i}"
        names[name_ref] = field_name

        if is_delete_sentinel(value):
            remove_parts.append(name_ref)
            continue

        value_ref = f":val{i}"
        values[value_ref] = value
        set_parts.append(f"{name_ref} = {value_ref}")

    return UpdateExpressionComponents(
        set_clause="SET " + ", ".join(set_parts) if set_parts else "",
        remove_clause="REMOVE " + ", ".join(remove_parts) if remove_parts else "",
        names=names,
        values=values or None,
    )


def apply_update_expression(req: dict[str, Any], components: UpdateExpressionComponents) -> dict[str, Any]:
    names = dict(req.get("ExpressionAttributeNames") or {})
    for ref, field_name in components.names.items():
        if ref in names:
            raise CallerError(f"expression attribute name collision: {ref}")
        names[ref] = field_name

    values = serialize_values(req.get("ExpressionAttributeValues") or {})
    for ref, value in serialize_values(components.values or {}).items():
        if ref in values:
            raise CallerError(f"expression attribute value collision: {ref}")
        values[ref] = value

    req["UpdateExpression"] = components.expression
    req["ExpressionAttributeNames"] = names
    if values:
        req["ExpressionAttributeValues"] = values
    else:
        req.pop("ExpressionAttributeValues", None)
    return req
