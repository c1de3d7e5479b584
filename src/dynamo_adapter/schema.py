from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, TypeAlias

from .attributes import AttributeMap, is_delete_sentinel

ID_FIELD = "id"
CREATED_FIELD = "created"
UPDATED_FIELD = "updated"

Clock: TypeAlias = Callable[[], datetime]
IdGenerator: TypeAlias = Callable[[], str]


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_item_id() -> str:
    return str(uuid.uuid1())


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as UTC ISO-8601 with milliseconds, e.g. ``2024-01-15T10:42:31.123Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class SchemaDescriptor:
    manages_id: bool = False
    manages_created: bool = False
    manages_updated: bool = False

    @classmethod
    def from_mapping(cls, flags: Mapping[str, Any] | None) -> SchemaDescriptor:
        if not flags:
            return cls()
        return cls(
            manages_id=bool(flags.get(ID_FIELD)),
            manages_created=bool(flags.get(CREATED_FIELD)),
            manages_updated=bool(flags.get(UPDATED_FIELD)),
        )

    @classmethod
    def coerce(cls, schema: SchemaDescriptor | Mapping[str, Any] | None) -> SchemaDescriptor:
        if isinstance(schema, SchemaDescriptor):
            return schema
        return cls.from_mapping(schema)


@dataclass(frozen=True)
class FieldLifecycle:
    """Stamps the managed ``id``/``created``/``updated`` fields onto items.

    Each method returns the item to write and the result surfaced to the
    caller; the caller's mapping is never mutated.
    """

    schema: SchemaDescriptor
    clock: Clock = utc_now
    id_generator: IdGenerator = new_item_id

    def _now(self) -> str:
        return format_timestamp(self.clock())

    @staticmethod
    def _storable(item: Mapping[str, Any]) -> AttributeMap:
        # Full writes leave sentinel-valued fields out of the stored record.
        return {name: value for name, value in item.items() if not is_delete_sentinel(value)}

    def on_create(self, item: Mapping[str, Any], item_id: str | None = None) -> tuple[AttributeMap, AttributeMap]:
        out = self._storable(item)
        result: AttributeMap = {}

        if self.schema.manages_id:
            out[ID_FIELD] = item_id or self.id_generator()
            result[ID_FIELD] = out[ID_FIELD]
        if self.schema.manages_created:
            out[CREATED_FIELD] = self._now()
            result[CREATED_FIELD] = out[CREATED_FIELD]
        if self.schema.manages_updated:
            out[UPDATED_FIELD] = out[CREATED_FIELD] if self.schema.manages_created else self._now()
            result[UPDATED_FIELD] = out[UPDATED_FIELD]

        return out, result

    def on_replace(self, key: Mapping[str, Any], item: Mapping[str, Any]) -> tuple[AttributeMap, AttributeMap]:
        out = self._storable(item)
        result: AttributeMap = {}

        if self.schema.manages_updated:
            out[UPDATED_FIELD] = self._now()
            result[UPDATED_FIELD] = out[UPDATED_FIELD]

        out.update(key)
        return out, result

    def on_partial_update(
        self, key: Mapping[str, Any], attributes: Mapping[str, Any]
    ) -> tuple[AttributeMap, AttributeMap]:
        out = dict(attributes)
        result: AttributeMap = {}

        if self.schema.manages_updated:
            out[UPDATED_FIELD] = self._now()
            result[UPDATED_FIELD] = out[UPDATED_FIELD]

        # Echoed unconditionally: batched partial updates correlate on it.
        result[ID_FIELD] = key.get(ID_FIELD)
        return out, result
