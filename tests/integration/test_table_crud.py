from __future__ import annotations

import asyncio

import pytest

from dynamo_adapter import ConflictError, NotFoundError, SchemaDescriptor

from dynamodb_local import temporary_table

pytestmark = pytest.mark.integration

ALL = SchemaDescriptor(manages_id=True, manages_created=True, manages_updated=True)


def test_table_crud_round_trip_and_conditions() -> None:
    async def run() -> None:
        async with temporary_table("dynamo_adapter_crud", ALL) as table:
            created = await table.create_item(
                {"accountId": "A", "name": "Alice", "note": "hello"},
                None,
                {"ConditionExpression": "attribute_not_exists(#id)", "ExpressionAttributeNames": {"#id": "id"}},
            )
            assert created["created"] == created["updated"]
            key = {"accountId": "A", "id": created["id"]}

            fetched = await table.get_item(key)
            assert fetched["name"] == "Alice"
            assert fetched["note"] == "hello"

            result = await table.update_attributes(key, {"name": "Bob", "note": ""})
            assert result["id"] == created["id"]

            fetched = await table.get_item(key, {"ProjectionExpression": "name,note"})
            assert fetched == {"name": "Bob"}

            with pytest.raises(ConflictError):
                await table.create_item(
                    {"accountId": "A"},
                    created["id"],
                    {"ConditionExpression": "attribute_not_exists(#id)", "ExpressionAttributeNames": {"#id": "id"}},
                )

            replaced = await table.replace_item(
                key,
                {"name": "Carol"},
                {"ConditionExpression": "attribute_exists(#id)", "ExpressionAttributeNames": {"#id": "id"}},
            )
            assert "updated" in replaced

            with pytest.raises(ConflictError):
                await table.replace_item(
                    {"accountId": "A", "id": "missing"},
                    {"name": "x"},
                    {"ConditionExpression": "attribute_exists(#id)", "ExpressionAttributeNames": {"#id": "id"}},
                )

            await table.delete_item(key)
            await table.delete_item(key)

            with pytest.raises(NotFoundError):
                await table.get_item(key)

    asyncio.run(run())
