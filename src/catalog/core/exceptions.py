"""Domain exceptions for the product catalog.

Services raise these; the HTTP layer turns them into responses using
``status_code``. They carry no framework types so services stay usable from
the CLI and from tests without an application running.
"""

from typing import Any, Literal


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CatalogError):
    """A required field is missing or a value violates a product constraint."""

    status_code = 400

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message, details={"errors": errors or []})
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, error: Any) -> "ValidationError":
        """Build from a pydantic ``ValidationError``, naming fields as clients sent them."""
        errors = [
            {"field": ".".join(str(part) for part in e["loc"]), "message": e["msg"]}
            for e in error.errors()
        ]
        if not errors:
            return cls("Invalid input")
        first = errors[0]
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        return cls(message, errors)


class InvalidArgument(CatalogError):
    """An identifier is not syntactically valid."""

    status_code = 400

    def __init__(self, argument: str, value: Any, message: str | None = None):
        super().__init__(
            message or f"Invalid {argument} format",
            details={"argument": argument, "value": value},
        )


class NotFound(CatalogError):
    """The requested resource does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} not found",
            details={"resource": resource, "id": identifier},
        )


class Forbidden(CatalogError):
    """The caller is neither the owner of the resource nor an admin."""

    status_code = 403


AuthFailureReason = Literal[
    "missing_token",
    "malformed_header",
    "invalid_token",
    "token_expired",
    "user_not_found",
    "invalid_credentials",
]


class AuthenticationFailure(CatalogError):
    """Bearer token or credentials could not be verified."""

    status_code = 401

    def __init__(self, reason: AuthFailureReason, message: str):
        super().__init__(message, details={"reason": reason})
        self.reason = reason


class Conflict(CatalogError):
    """A uniqueness constraint would be violated."""

    status_code = 409


class StorageError(CatalogError):
    """The object storage provider rejected or failed an upload."""

    status_code = 502


class StoreUnavailable(CatalogError):
    """The product store stayed unreachable after every connection attempt."""

    status_code = 503
