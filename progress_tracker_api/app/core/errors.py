"""
Error types shared across the application.

The resource layer is the only place that turns failures into HTTP
responses.  It raises ``ApiError`` with an explicit ``ErrorKind`` so the
difference between a missing record and any other failure is carried
by the error itself rather than inferred from exception classes coming
out of the storage driver.  ``ConfigurationError`` is raised while the
application is being built and never reaches a client.
"""

from enum import Enum
from typing import Iterable, List

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    """Client-visible failure categories."""

    NOT_FOUND = "not_found"
    INTERNAL = "internal_error"

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self]


_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(Exception):
    """Failure raised by route handlers and rendered as ``{"detail": message}``."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @classmethod
    def not_found(cls, message: str = "Task not found") -> "ApiError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def internal(cls, message: str) -> "ApiError":
        return cls(ErrorKind.INTERNAL, message)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid.

    ``errors`` holds one human readable entry per invalid variable; the
    exception message lists all of them.
    """

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("Configuration validation failed:\n" + "\n".join(self.errors))


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ``ApiError`` using FastAPI's ``detail`` body convention."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
