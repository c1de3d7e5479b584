from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import aioboto3
from aws_lambda_powertools import Logger
from botocore.config import Config

DEFAULT_SERVICE = "dynamo-adapter"


@dataclass(frozen=True)
class AdapterConfig:
    region: str | None = None
    endpoint_url: str | None = None
    log_level: str = "INFO"
    service: str = DEFAULT_SERVICE
    connect_timeout: float = 1.0
    read_timeout: float = 3.0
    max_attempts: int = 3

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> AdapterConfig:
        level = (environ.get("LOGGER_LEVEL") or "").strip().upper()
        return cls(
            region=(environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or "").strip() or None,
            endpoint_url=(environ.get("DYNAMODB_ENDPOINT") or "").strip() or None,
            log_level="DEBUG" if level == "DEBUG" else "INFO",
            service=(environ.get("POWERTOOLS_SERVICE_NAME") or "").strip() or DEFAULT_SERVICE,
        )


def create_boto3_config(config: AdapterConfig) -> Config:
    return Config(
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
        retries={"max_attempts": config.max_attempts, "mode": "adaptive"},
    )


def open_dynamodb_client(config: AdapterConfig | None = None, *, session: Any | None = None) -> Any:
    """Return the async context manager yielding a low-level DynamoDB client.

    Usage::

        async with open_dynamodb_client(AdapterConfig.from_env()) as client:
            table = Table.model("notes", client=client)
    """
    config = config or AdapterConfig.from_env()
    sess = session or aioboto3.Session(region_name=config.region)

    kwargs: dict[str, Any] = {"config": create_boto3_config(config)}
    if config.region is not None:
        kwargs["region_name"] = config.region
    if config.endpoint_url is not None:
        kwargs["endpoint_url"] = config.endpoint_url
    return sess.client("dynamodb", **kwargs)


def create_logger(config: AdapterConfig | None = None) -> Logger:
    config = config or AdapterConfig.from_env()
    return Logger(service=config.service, level=config.log_level, utc=True)
