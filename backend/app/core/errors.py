"""Error taxonomy shared by the services and the HTTP layer.

Every failure the service reports is an :class:`AppError` tagged with an
:class:`ErrorKind`. Handlers dispatch on ``error.kind``; there are no
per-kind subclasses.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFoundError"
    UNAUTHORIZED = "UnauthorizedError"
    FORBIDDEN = "ForbiddenError"
    STORAGE = "StorageError"
    INTERNAL = "InternalError"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def is_client_safe(self) -> bool:
        """Whether messages of this kind may be shown verbatim outside debug mode."""
        return self not in (ErrorKind.STORAGE, ErrorKind.INTERNAL)


_STATUS_CODES = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_GENERIC_MESSAGES = {
    ErrorKind.STORAGE: "Storage service error",
    ErrorKind.INTERNAL: "Internal server error",
}


class AppError(Exception):
    """Raised for every failure that maps onto an API error response."""

    def __init__(self, kind: ErrorKind, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    def __repr__(self) -> str:  # pragma: no cover
        return f"AppError(kind={self.kind.value!r}, message={self.message!r})"

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @classmethod
    def validation(cls, message: str, details: Any = None) -> "AppError":
        return cls(ErrorKind.VALIDATION, message, details)

    @classmethod
    def not_found(cls, message: str) -> "AppError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "AppError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> "AppError":
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def storage(cls, message: str) -> "AppError":
        return cls(ErrorKind.STORAGE, message)

    @classmethod
    def internal(cls, message: str = "Internal server error") -> "AppError":
        return cls(ErrorKind.INTERNAL, message)

    def to_payload(self, debug: bool = False) -> dict[str, Any]:
        message = self.message
        if not debug and not self.kind.is_client_safe:
            message = _GENERIC_MESSAGES[self.kind]
        payload: dict[str, Any] = {
            "error": self.kind.value,
            "message": message,
            "statusCode": self.status_code,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload
