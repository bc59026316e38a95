"""Typed errors raised by form transition handlers.

Every error carries an HTTP-like status code, a machine-checkable kind and a
stable human-readable message. The HTTP layer renders them as-is; the core
never retries.
"""

from enum import Enum
from typing import Optional

from fastapi import status


class ErrorKind(str, Enum):
    """Machine-checkable error categories."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    UNPROCESSABLE = "unprocessable"
    CONFIGURATION_MISSING = "configuration_missing"
    CONFLICT = "conflict"


class ApiError(Exception):
    """Base error with a status code and a fixed message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: Optional[ErrorKind] = None

    def __init__(self, status_code: Optional[int] = None, message: str = "", *, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if kind is not None:
            self.kind = kind
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return (self.status_code, self.message) == (other.status_code, other.message)

    def __hash__(self) -> int:
        return hash((self.status_code, self.message))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.status_code} {self.message!r}>"

    def to_dict(self) -> dict:
        return {
            "code": self.status_code,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
        }


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str):
        super().__init__(message=message)


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "Forbidden - You are not selected approver"):
        super().__init__(message=message)


class InvalidStateError(ApiError):
    """Guard precondition violated (wrong state, already finalized)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    kind = ErrorKind.UNPROCESSABLE

    def __init__(self, message: str):
        super().__init__(message=message)


class ConfigurationMissingError(ApiError):
    """No journal mapping configured for a feature."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    kind = ErrorKind.CONFIGURATION_MISSING

    def __init__(self, feature: str, name: str):
        super().__init__(message=f"Journal {feature} account - {name} not found")
        self.feature = feature
        self.name = name


class ConcurrencyConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str = "Form was modified by another request, please retry"):
        super().__init__(message=message)
