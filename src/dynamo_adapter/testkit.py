from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from itertools import count
from typing import Any

from .mocks import ANY, FakeDynamoDBClient, client_error


def fixed_clock(moment: datetime, *, step: timedelta = timedelta(0)) -> Callable[[], datetime]:
    ticks: Iterator[int] = count()

    def now() -> datetime:
        return moment + step * next(ticks)

    return now


def sequential_ids(prefix: str = "id-") -> Callable[[], str]:
    ticks: Iterator[int] = count(1)

    def next_id() -> str:
        return f"{prefix}{next(ticks)}"

    return next_id


class RecordingLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def debug(self, msg: str, *, extra: dict[str, Any] | None = None) -> None:
        self.records.append(("DEBUG", msg, dict(extra or {})))

    def error(self, msg: str, *, extra: dict[str, Any] | None = None) -> None:
        self.records.append(("ERROR", msg, dict(extra or {})))

    def levels(self) -> list[str]:
        return [level for level, _, _ in self.records]


__all__ = [
    "ANY",
    "FakeDynamoDBClient",
    "RecordingLogger",
    "client_error",
    "fixed_clock",
    "sequential_ids",
]
