from __future__ import annotations

NOT_FOUND_MESSAGE = "Requested resource not found."
CONFLICT_MESSAGE = "Requested resource already exists."
INTERNAL_MESSAGE = "Something went wrong with DB server."


class DynamoAdapterError(Exception):
    kind = "Internal"


class NotFoundError(DynamoAdapterError):
    kind = "NotFound"

    def __init__(self, message: str = NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(DynamoAdapterError):
    kind = "Conflict"

    def __init__(self, message: str = CONFLICT_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class InternalError(DynamoAdapterError):
    kind = "Internal"

    def __init__(self, *, code: str = "UnknownError", message: str = INTERNAL_MESSAGE) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class CallerError(DynamoAdapterError, ValueError):
    kind = "CallerError"
