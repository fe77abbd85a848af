"""
Domain errors raised by services and mapped to HTTP responses in app.main.

Every error carries the status code and the message shown to the client.
"""

from typing import Any, Optional


class VialsError(Exception):
    """Base class for errors with a client-facing response."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.public_message
        self.details = details
        super().__init__(self.message)


class InvalidInputError(VialsError):
    status_code = 400
    public_message = "Validation error"


class NotFoundError(VialsError):
    status_code = 404
    public_message = "Not found"


class ConflictError(VialsError):
    status_code = 409
    public_message = "Conflict"


class UpstreamServiceError(VialsError):
    """A third-party API failed and no fallback is allowed.

    The client only ever sees the generic message; the cause is logged.
    """

    status_code = 500
    public_message = "Internal server error"
