from __future__ import annotations

from botocore.exceptions import ClientError

from .errors import (
    CONFLICT_MESSAGE,
    INTERNAL_MESSAGE,
    ConflictError,
    InternalError,
)


def error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


def map_client_error(err: ClientError) -> Exception:
    code = error_code(err)

    if code == "ConditionalCheckFailedException":
        return ConflictError(CONFLICT_MESSAGE)

    return InternalError(code=code or "UnknownError", message=INTERNAL_MESSAGE)