# models/result.py
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel


class ResultStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    CONFLICT = "conflict"
    STORE_ERROR = "store_error"


class StoreResult(BaseModel):
    """Outcome of a store operation.

    Lets callers tell an empty read apart from a missing record, a bad
    argument or a database failure without inspecting sentinel values.
    """
    status: ResultStatus
    data: Any = None
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == ResultStatus.OK


def ok(data: Any = None, message: Optional[str] = None) -> StoreResult:
    return StoreResult(status=ResultStatus.OK, data=data, message=message)


def not_found(message: str) -> StoreResult:
    return StoreResult(status=ResultStatus.NOT_FOUND, message=message)


def invalid(message: str) -> StoreResult:
    return StoreResult(status=ResultStatus.INVALID, message=message)


def conflict(message: str) -> StoreResult:
    return StoreResult(status=ResultStatus.CONFLICT, message=message)


def store_error(message: str) -> StoreResult:
    return StoreResult(status=ResultStatus.STORE_ERROR, message=message)
