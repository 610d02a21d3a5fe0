"""Application error taxonomy.

Every failure a service reports is one of the ``ServiceError`` subclasses
below. Each carries a human-readable message and a string status code; the
API layer maps them to HTTP responses in one place.
"""

from typing import Any, ClassVar


class ServiceError(Exception):
    """Base class for errors surfaced to the API boundary."""

    code: ClassVar[str] = "500"
    default_message: ClassVar[str] = "Internal Server Error"

    def __init__(self, message: str | None = None, *, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return int(self.code)


class NoContentError(ServiceError):
    """A query matched no records."""

    code = "204"
    default_message = "No Content"


class NotFoundError(ServiceError):
    """The requested entity does not exist."""

    code = "404"
    default_message = "Not Found"


class ConflictError(ServiceError):
    """A uniqueness rule would be violated."""

    code = "409"
    default_message = "Conflict"


class UnauthorizedError(ServiceError):
    """Credentials were rejected."""

    code = "401"
    default_message = "Unauthorized"


class InvalidTokenError(ServiceError):
    """A token failed signature, expiry, or issuer verification."""

    code = "498"
    default_message = "Invalid Token"
