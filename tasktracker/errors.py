"""Error taxonomy shared by the services and the API layer.

Services raise the narrow errors (token and duplicate-user failures); the API
layer maps them onto ``AppError`` subclasses, which carry the HTTP status and
the message returned to the client.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors rendered as ``{"success": false, "message": ...}``."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed, missing or oversized input."""

    status_code = 400
    default_message = "Invalid request data"


class ConflictError(AppError):
    """Uniqueness violation. Reported as 400 rather than 409."""

    status_code = 400
    default_message = "User already exists"


class UnauthenticatedError(AppError):
    """Missing, expired or invalid token."""

    status_code = 401
    default_message = "No authentication token provided. Access denied."


class NotFoundError(AppError):
    """Resource absent or owned by someone else."""

    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    """Unexpected store, hashing or token failure."""

    status_code = 500


class TokenError(Exception):
    """Raised when a token cannot be verified."""


class ExpiredTokenError(TokenError):
    """Raised when a token is past its expiration."""


class MalformedTokenError(TokenError):
    """Raised when a token's signature or structure is invalid."""


class DuplicateUserError(Exception):
    """Raised when a username or email is already taken."""


@contextmanager
def server_errors(message: str) -> Iterator[None]:
    """Convert unexpected exceptions into a generic ``InternalError``.

    ``AppError`` passes through untouched; anything else is logged with its
    traceback and replaced by ``message``.
    """
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        logger.exception(message)
        raise InternalError(message) from exc
