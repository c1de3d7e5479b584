from __future__ import annotations

import logging

from dynamo_adapter.runtime import AdapterConfig, create_boto3_config, create_logger, open_dynamodb_client


def test_adapter_config_from_env() -> None:
    cfg = AdapterConfig.from_env(
        {
            "AWS_REGION": "eu-west-1",
            "DYNAMODB_ENDPOINT": "http://localhost:8000",
            "LOGGER_LEVEL": "debug",
            "POWERTOOLS_SERVICE_NAME": "shifts",
        }
    )

    assert cfg == AdapterConfig(
        region="eu-west-1",
        endpoint_url="http://localhost:8000",
        log_level="DEBUG",
        service="shifts",
    )


def test_adapter_config_defaults() -> None:
    cfg = AdapterConfig.from_env({"AWS_DEFAULT_REGION": "us-east-1", "LOGGER_LEVEL": "WARNING"})

    assert cfg.region == "us-east-1"
    assert cfg.endpoint_url is None
    assert cfg.log_level == "INFO"
    assert cfg.service == "dynamo-adapter"
    assert AdapterConfig.from_env({}).region is None


def test_create_boto3_config() -> None:
    cfg = create_boto3_config(AdapterConfig(connect_timeout=2.0, read_timeout=4.0, max_attempts=5))

    assert cfg.connect_timeout == 2.0
    assert cfg.read_timeout == 4.0
    assert cfg.retries["max_attempts"] == 5
    assert cfg.retries["mode"] == "adaptive"


def test_open_dynamodb_client_passes_region_and_endpoint() -> None:
    class FakeSession:
        def __init__(self) -> None:
            self.calls: list[tuple[str, dict[str, object]]] = []

        def client(self, service_name: str, **kwargs: object) -> object:
            self.calls.append((service_name, kwargs))
            return "client-context"

    sess = FakeSession()
    out = open_dynamodb_client(
        AdapterConfig(region="us-east-1", endpoint_url="http://localhost:8000"),
        session=sess,
    )

    assert out == "client-context"
    service, kwargs = sess.calls[0]
    assert service == "dynamodb"
    assert kwargs["region_name"] == "us-east-1"
    assert kwargs["endpoint_url"] == "http://localhost:8000"
    assert kwargs["config"].retries["mode"] == "adaptive"

    open_dynamodb_client(AdapterConfig(), session=sess)
    assert set(sess.calls[1][1]) == {"config"}


def test_create_logger_uses_service_and_level() -> None:
    logger = create_logger(AdapterConfig(service="shifts-test", log_level="DEBUG"))

    assert logger.service == "shifts-test"
    assert logger.log_level == logging.DEBUG
