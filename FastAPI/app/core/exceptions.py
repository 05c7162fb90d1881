"""
Domain errors raised by the services.

Each error knows the HTTP status it maps to, so routers never build error
responses themselves; the handlers registered in ``app.main`` turn any
``ServiceError`` into the JSON envelope.
"""

from typing import Any


class ServiceError(Exception):
    """Base class for errors that are safe to show to the client."""

    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed or missing input. ``errors`` carries field-level detail."""

    status_code = 400
    default_message = "Validation failed"


class Unauthenticated(ServiceError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(ServiceError):
    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Resource not found"


class Duplicate(ServiceError):
    """A uniqueness rule would be broken (second application, reused email)."""

    status_code = 400
    default_message = "Resource already exists"


class InvalidState(ServiceError):
    """The entity's current state does not allow the action, e.g. applying to a closed job."""

    status_code = 400
    default_message = "Action not allowed in the current state"
