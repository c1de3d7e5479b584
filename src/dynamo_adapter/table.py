from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from botocore.exceptions import ClientError

from .attributes import (
    AttributeMap,
    deserialize_item,
    serialize_item,
    serialize_values,
    validate_key,
)
from .aws_errors import map_client_error as _map_client_error
from .errors import CallerError, NotFoundError
from .query import Page, build_read_request
from .runtime import create_logger
from .schema import Clock, FieldLifecycle, IdGenerator, SchemaDescriptor, new_item_id, utc_now
from .update_expression import apply_update_expression, compile_update_expression

RETURN_CONSUMED_CAPACITY = "INDEXES"


def _serialize_write_request(op: Mapping[str, Any]) -> dict[str, Any]:
    if "PutRequest" in op:
        return {"PutRequest": {"Item": serialize_item(op["PutRequest"]["Item"])}}
    if "DeleteRequest" in op:
        return {"DeleteRequest": {"Key": serialize_item(validate_key(op["DeleteRequest"]["Key"]))}}
    raise CallerError("write request must be a PutRequest or a DeleteRequest")


def _deserialize_write_request(op: Mapping[str, Any]) -> dict[str, Any]:
    if "PutRequest" in op:
        return {"PutRequest": {"Item": deserialize_item(op["PutRequest"]["Item"])}}
    return {"DeleteRequest": {"Key": deserialize_item(op["DeleteRequest"]["Key"])}}


def _reject_reserved(params: Mapping[str, Any] | None, reserved: Sequence[str]) -> dict[str, Any]:
    req = dict(params or {})
    for name in reserved:
        if name in req:
            raise CallerError(f"{name} must not be passed in params")
    return req


class Table:
    """Schema-aware handle on one DynamoDB table.

    ``client`` is an async low-level DynamoDB client (see
    ``runtime.open_dynamodb_client``). The handle holds no per-request state, so
    one instance can serve concurrent tasks.
    """

    def __init__(
        self,
        table_name: str,
        schema: SchemaDescriptor | Mapping[str, Any] | None = None,
        *,
        client: Any,
        logger: Any | None = None,
        clock: Clock = utc_now,
        id_generator: IdGenerator = new_item_id,
        account_field: str = "accountId",
    ) -> None:
        if not table_name:
            raise ValueError("table_name is required")
        if client is None:
            raise ValueError("client is required")

        self._table_name = table_name
        self._schema = SchemaDescriptor.coerce(schema)
        self._client = client
        self._logger = logger if logger is not None else create_logger()
        self._lifecycle = FieldLifecycle(self._schema, clock=clock, id_generator=id_generator)
        self._account_field = account_field

    @classmethod
    def model(
        cls,
        table_name: str,
        schema: SchemaDescriptor | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Table:
        return cls(table_name, schema, **kwargs)

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def schema(self) -> SchemaDescriptor:
        return self._schema

    async def get_item(self, key: Mapping[str, Any], params: Mapping[str, Any] | None = None) -> AttributeMap:
        key = validate_key(key)
        context = self._context(key=key)
        self._logger.debug("DB_ACTION::get", extra=context)

        req = self._extend_params(build_read_request(params))
        req["Key"] = serialize_item(key)

        try:
            resp = await self._client.get_item(**req)
        except ClientError as err:
            self._log_failure("DB_ACTION::get", context, err)
            raise _map_client_error(err) from err

        item = resp.get("Item")
        if not item:
            not_found = NotFoundError()
            self._log_failure("DB_ACTION::get", context, not_found)
            raise not_found
        return deserialize_item(item)

    async def query(self, params: Mapping[str, Any]) -> Page:
        values = params.get("ExpressionAttributeValues") or {}
        context = self._context(account=values.get(f":{self._account_field}"))
        self._logger.debug("DB_ACTION::query", extra=context)

        req = self._extend_params(build_read_request(params))

        try:
            resp = await self._client.query(**req)
        except ClientError as err:
            self._log_failure("DB_ACTION::query", context, err)
            raise

        page = Page.from_response(resp)
        self._log_read_stats("DB_ACTION::query", context, page)
        return page

    async def scan(self, params: Mapping[str, Any] | None = None) -> Page:
        context = self._context()
        self._logger.debug("DB_ACTION::scan", extra=context)

        req = self._extend_params(build_read_request(params))

        try:
            resp = await self._client.scan(**req)
        except ClientError as err:
            self._log_failure("DB_ACTION::scan", context, err)
            raise

        page = Page.from_response(resp)
        self._log_read_stats("DB_ACTION::scan", context, page)
        return page

    async def create_item(
        self,
        item: Mapping[str, Any],
        item_id: str | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> AttributeMap:
        if not isinstance(item, Mapping):
            raise CallerError("item must be a mapping")

        record, result = self._lifecycle.on_create(item, item_id)
        context = self._context(key=record, item_id=record.get("id", item_id))
        self._logger.debug("DB_ACTION::create", extra=context)

        req = self._extend_params(self._condition_params(params))
        req["Item"] = serialize_item(record)

        try:
            await self._client.put_item(**req)
        except ClientError as err:
            self._log_failure("DB_ACTION::create", context, err)
            raise _map_client_error(err) from err

        return result

    async def replace_item(
        self,
        key: Mapping[str, Any],
        item: Mapping[str, Any],
        params: Mapping[str, Any] | None = None,
    ) -> AttributeMap:
        key = validate_key(key)
        if not isinstance(item, Mapping):
            raise CallerError("item must be a mapping")

        context = self._context(key=key)
        self._logger.debug("DB_ACTION::update", extra=context)

        record, result = self._lifecycle.on_replace(key, item)
        req = self._extend_params(self._condition_params(params))
        req["Item"] = serialize_item(record)

        try:
            await self._client.put_item(**req)
        except ClientError as err:
            self._log_failure("DB_ACTION::update", context, err)
            raise _map_client_error(err) from err

        return result

    async def update_attributes(
        self,
        key: Mapping[str, Any],
        attributes: Mapping[str, Any],
        params: Mapping[str, Any] | None = None,
    ) -> AttributeMap:
        key = validate_key(key)
        if not isinstance(attributes, Mapping):
            raise CallerError("attributes must be a mapping")

        context = self._context(key=key)
        self._logger.debug("DB_ACTION::updateAttributes", extra=context)

        stamped, result = self._lifecycle.on_partial_update(key, attributes)
        components = compile_update_expression(key, stamped)

        req = _reject_reserved(params, ("Key", "UpdateExpression"))
        apply_update_expression(req, components)
        req = self._extend_params(req)
        req["Key"] = serialize_item(key)

        try:
            await self._client.update_item(**req)
        except ClientError as err:
            self._log_failure("DB_ACTION::updateAttributes", context, err)
            raise _map_client_error(err) from err

        return result

    async def delete_item(
        self,
        key: Mapping[str, Any],
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        key = validate_key(key)
        context = self._context(key=key)
        self._logger.debug("DB_ACTION::delete", extra=context)

        req = self._extend_params(self._condition_params(params))
        req["Key"] = serialize_item(key)

        try:
            resp = dict(await self._client.delete_item(**req))
        except ClientError as err:
            self._log_failure("DB_ACTION::delete", context, err)
            raise _map_client_error(err) from err

        if resp.get("Attributes"):
            resp["Attributes"] = deserialize_item(resp["Attributes"])
        return resp

    async def batch_write(
        self,
        write_requests: Sequence[Mapping[str, Any]],
        account_id: str | None = None,
    ) -> dict[str, Any]:
        context = self._context(account=account_id)
        self._logger.debug("DB_ACTION::batchWrite", extra=context)

        req: dict[str, Any] = {
            "RequestItems": {self._table_name: [_serialize_write_request(op) for op in write_requests]},
            "ReturnConsumedCapacity": RETURN_CONSUMED_CAPACITY,
        }

        try:
            resp = dict(await self._client.batch_write_item(**req))
        except ClientError as err:
            self._log_failure("DB_ACTION::batchWrite", context, err)
            raise _map_client_error(err) from err

        unprocessed = resp.get("UnprocessedItems") or {}
        resp["UnprocessedItems"] = {
            table: [_deserialize_write_request(op) for op in ops] for table, ops in unprocessed.items()
        }
        return resp

    async def list_tables(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return dict(await self._client.list_tables(**dict(params or {})))

    async def create_table(self, params: Mapping[str, Any]) -> dict[str, Any]:
        req = dict(params)
        req.setdefault("TableName", self._table_name)
        return dict(await self._client.create_table(**req))

    async def delete_table(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        req = dict(params or {})
        req.setdefault("TableName", self._table_name)
        return dict(await self._client.delete_table(**req))

    def _extend_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return {
            **params,
            "TableName": self._table_name,
            "ReturnConsumedCapacity": RETURN_CONSUMED_CAPACITY,
        }

    def _condition_params(self, params: Mapping[str, Any] | None) -> dict[str, Any]:
        req = _reject_reserved(params, ("Item", "Key"))
        if req.get("ExpressionAttributeValues"):
            req["ExpressionAttributeValues"] = serialize_values(req["ExpressionAttributeValues"])
        return req

    def _context(
        self,
        *,
        key: Mapping[str, Any] | None = None,
        item_id: Any = None,
        account: Any = None,
    ) -> dict[str, Any]:
        key = key or {}
        return {
            "table": self._table_name,
            "account": account if account is not None else key.get(self._account_field),
            "id": item_id if item_id is not None else key.get("id"),
        }

    def _log_failure(self, action: str, context: Mapping[str, Any], err: Exception) -> None:
        self._logger.error(action, extra={**context, "error": str(err)})

    def _log_read_stats(self, action: str, context: Mapping[str, Any], page: Page) -> None:
        self._logger.debug(
            action,
            extra={
                **context,
                "count": page.count,
                "scanned_count": page.scanned_count,
                "consumed_capacity": page.consumed_capacity,
            },
        )
