from __future__ import annotations

import asyncio
import json
import os
from typing import Any

from aws_lambda_powertools.utilities.typing import LambdaContext

from dynamo_adapter import CallerError, ConflictError, DynamoAdapterError, NotFoundError, SchemaDescriptor, Table
from dynamo_adapter.runtime import AdapterConfig, create_logger, open_dynamodb_client

SCHEMA = SchemaDescriptor(manages_id=True, manages_created=True, manages_updated=True)

_config = AdapterConfig.from_env()
logger = create_logger(_config)

_STATUS = {NotFoundError: 404, ConflictError: 409, CallerError: 400}


def _table_name() -> str:
    table_name = (os.environ.get("TABLE_NAME") or "").strip()
    if not table_name:
        raise RuntimeError("TABLE_NAME is required")
    return table_name


def _json_response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"content-type": "application/json"},
        "body": json.dumps(body, separators=(",", ":"), sort_keys=True, default=str),
    }


async def _dispatch(method: str, account_id: str, item_id: str, body: dict[str, Any]) -> dict[str, Any]:
    async with open_dynamodb_client(_config) as client:
        table = Table.model(_table_name(), SCHEMA, client=client, logger=logger)
        key = {"accountId": account_id, "id": item_id}

        if method == "GET":
            return _json_response(200, {"ok": True, "item": await table.get_item(key)})
        if method == "POST":
            created = await table.create_item({**body, "accountId": account_id}, item_id or None)
            return _json_response(201, {"ok": True, **created})
        if method == "PATCH":
            return _json_response(200, {"ok": True, **await table.update_attributes(key, body)})
        if method == "PUT":
            return _json_response(200, {"ok": True, **await table.replace_item(key, body)})
        if method == "DELETE":
            await table.delete_item(key)
            return _json_response(200, {"ok": True})
        return _json_response(405, {"error": f"unsupported method {method}"})


@logger.inject_lambda_context
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    _ = context
    method = ((event.get("requestContext") or {}).get("http") or {}).get("method") or "GET"
    qs = event.get("queryStringParameters") or {}

    body_raw = event.get("body") or ""
    try:
        body = json.loads(body_raw) if body_raw else {}
    except json.JSONDecodeError:
        return _json_response(400, {"error": "body must be JSON"})

    if not isinstance(body, dict):
        return _json_response(400, {"error": "body must be a JSON object"})

    account_id = str(qs.get("accountId") or body.pop("accountId", "") or "")
    item_id = str(qs.get("id") or body.pop("id", "") or "")
    if not account_id or (method != "POST" and not item_id):
        return _json_response(400, {"error": "accountId and id are required"})

    try:
        return asyncio.run(_dispatch(method, account_id, item_id, body))
    except DynamoAdapterError as err:
        return _json_response(_STATUS.get(type(err), 500), {"error": str(err), "kind": err.kind})
