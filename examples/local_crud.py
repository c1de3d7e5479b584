from __future__ import annotations

import asyncio
import os
import uuid

from dynamo_adapter import SchemaDescriptor, Table
from dynamo_adapter.runtime import AdapterConfig, create_logger, open_dynamodb_client


def _config() -> AdapterConfig:
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "dummy")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "dummy")
    return AdapterConfig(
        region=os.environ.get("AWS_REGION", "us-east-1"),
        endpoint_url=os.environ.get("DYNAMODB_ENDPOINT", "http://localhost:8000"),
    )


async def main() -> None:
    config = _config()
    schema = SchemaDescriptor(manages_id=True, manages_created=True, manages_updated=True)

    async with open_dynamodb_client(config) as client:
        table = Table.model(
            f"dynamo_adapter_example_{uuid.uuid4().hex[:12]}",
            schema,
            client=client,
            logger=create_logger(config),
        )
        await table.create_table(
            {
                "KeySchema": [
                    {"AttributeName": "accountId", "KeyType": "HASH"},
                    {"AttributeName": "id", "KeyType": "RANGE"},
                ],
                "AttributeDefinitions": [
                    {"AttributeName": "accountId", "AttributeType": "S"},
                    {"AttributeName": "id", "AttributeType": "S"},
                ],
                "BillingMode": "PAY_PER_REQUEST",
            }
        )
        await client.get_waiter("table_exists").wait(TableName=table.table_name)

        try:
            created = await table.create_item({"accountId": "A", "name": "Alice", "note": "draft"})
            key = {"accountId": "A", "id": created["id"]}
            print("create:", created)

            print("updateAttributes:", await table.update_attributes(key, {"name": "Bob", "note": ""}))
            print("get:", await table.get_item(key))

            page = await table.query(
                {
                    "KeyConditionExpression": "accountId = :accountId",
                    "ExpressionAttributeValues": {":accountId": "A"},
                    "ProjectionExpression": "id,name",
                }
            )
            print("query:", page.items)
        finally:
            await table.delete_table()


if __name__ == "__main__":
    asyncio.run(main())
