from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError


class _AnySentinel:
    def __repr__(self) -> str:  # pragma: no cover
        return "ANY"


ANY: Any = _AnySentinel()


def client_error(code: str, message: str = "", *, operation: str = "PutItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message or code}}, operation)


def _assert_match(expected: Any, actual: Any, *, path: str) -> None:
    if expected is ANY:
        return

    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            raise AssertionError(f"{path}: expected dict, got {type(actual).__name__}")
        for k, v in expected.items():
            if k not in actual:
                raise AssertionError(f"{path}: missing key {k!r}")
            _assert_match(v, actual[k], path=f"{path}.{k}")
        return

    if isinstance(expected, list):
        if not isinstance(actual, list):
            raise AssertionError(f"{path}: expected list, got {type(actual).__name__}")
        if len(expected) != len(actual):
            raise AssertionError(f"{path}: expected {len(expected)} items, got {len(actual)}")
        for i, (e, a) in enumerate(zip(expected, actual, strict=True)):
            _assert_match(e, a, path=f"{path}[{i}]")
        return

    if expected != actual:
        raise AssertionError(f"{path}: expected {expected!r}, got {actual!r}")


@dataclass(frozen=True)
class ExpectedCall:
    method: str
    expected: Mapping[str, Any] | Callable[[Mapping[str, Any]], None] | None = None
    response: Mapping[str, Any] | None = None
    error: Exception | None = None


class FakeDynamoDBClient:
    """Async stand-in for an aiobotocore DynamoDB client.

    Calls are matched, in order, against the queue built with ``expect``.
    Dict and list expectations match recursively (extra request keys are
    allowed, ``ANY`` matches everything); a callable receives the request.
    """

    def __init__(self) -> None:
        self._expected: list[ExpectedCall] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def expect(
        self,
        method: str,
        expected: Mapping[str, Any] | Callable[[Mapping[str, Any]], None] | None = None,
        *,
        response: Mapping[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._expected.append(ExpectedCall(method=method, expected=expected, response=response, error=error))

    def expect_error(self, method: str, code: str, message: str = "") -> ClientError:
        """Queue a ``ClientError`` with ``code`` for the next ``method`` call and return it."""
        operation = "".join(part.capitalize() for part in method.split("_"))
        err = client_error(code, message, operation=operation)
        self.expect(method, error=err)
        return err

    def requests(self, method: str) -> list[dict[str, Any]]:
        return [req for name, req in self.calls if name == method]

    def assert_no_pending(self) -> None:
        if self._expected:
            raise AssertionError(f"pending expected calls: {self._expected!r}")

    def _handle(self, method: str, req: dict[str, Any]) -> Mapping[str, Any]:
        self.calls.append((method, dict(req)))
        if not self._expected:
            raise AssertionError(f"unexpected call: {method}")

        call = self._expected.pop(0)
        if call.method != method:
            raise AssertionError(f"expected {call.method}, got {method}")

        if callable(call.expected):
            call.expected(req)
        elif call.expected is not None:
            _assert_match(dict(call.expected), req, path=method)

        if call.error is not None:
            raise call.error

        return dict(call.response or {})

    async def put_item(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("put_item", kwargs)

    async def get_item(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("get_item", kwargs)

    async def update_item(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("update_item", kwargs)

    async def delete_item(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("delete_item", kwargs)

    async def query(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("query", kwargs)

    async def scan(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("scan", kwargs)

    async def batch_write_item(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("batch_write_item", kwargs)

    async def list_tables(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("list_tables", kwargs)

    async def create_table(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("create_table", kwargs)

    async def delete_table(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._handle("delete_table", kwargs)
