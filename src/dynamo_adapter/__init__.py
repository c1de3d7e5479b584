from __future__ import annotations

import json
import re
from importlib.resources import files
from typing import TYPE_CHECKING, Any

from .attributes import (
    DELETE_SENTINEL,
    AttributeMap,
    AttributeValue,
    Key,
    is_delete_sentinel,
)
from .errors import (
    CallerError,
    ConflictError,
    DynamoAdapterError,
    InternalError,
    NotFoundError,
)
from .projection import ProjectionExpression, build_projection
from .query import Page
from .schema import FieldLifecycle, SchemaDescriptor
from .update_expression import (
    UpdateExpressionComponents,
    apply_update_expression,
    compile_update_expression,
)

if TYPE_CHECKING:
    from .aws_errors import map_client_error
    from .runtime import AdapterConfig, create_boto3_config, create_logger, open_dynamodb_client
    from .table import Table


def _read_repo_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except Exception:
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


def _normalize_repo_version(repo_version: str) -> str:
    match = re.match(r"^(\d+\.\d+\.\d+)-rc\.?([0-9]+)$", repo_version)
    if match:
        return f"{match.group(1)}rc{match.group(2)}"
    return repo_version


__repo_version__ = _read_repo_version()
__version__ = _normalize_repo_version(__repo_version__)


def __getattr__(name: str) -> Any:
    if name == "Table":
        from .table import Table

        return Table
    if name == "map_client_error":
        from .aws_errors import map_client_error

        return map_client_error
    if name in {"AdapterConfig", "create_boto3_config", "create_logger", "open_dynamodb_client"}:
        from . import runtime

        return getattr(runtime, name)
    raise AttributeError(name)


__all__ = [
    "AdapterConfig",
    "AttributeMap",
    "AttributeValue",
    "CallerError",
    "ConflictError",
    "DELETE_SENTINEL",
    "DynamoAdapterError",
    "FieldLifecycle",
    "InternalError",
    "Key",
    "NotFoundError",
    "Page",
    "ProjectionExpression",
    "SchemaDescriptor",
    "Table",
    "UpdateExpressionComponents",
    "__repo_version__",
    "__version__",
    "apply_update_expression",
    "build_projection",
    "compile_update_expression",
    "create_boto3_config",
    "create_logger",
    "is_delete_sentinel",
    "map_client_error",
    "open_dynamodb_client",
]
