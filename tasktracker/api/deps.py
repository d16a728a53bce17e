"""API dependencies for dependency injection."""

import logging
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyCookie, APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from tasktracker.db.session import get_session
from tasktracker.errors import (
    ExpiredTokenError,
    InternalError,
    MalformedTokenError,
    UnauthenticatedError,
    ValidationError,
)
from tasktracker.models.ids import is_valid_id
from tasktracker.services.security import verify_token

logger = logging.getLogger(__name__)

token_header = APIKeyHeader(name="x-auth-token", auto_error=False)
bearer = HTTPBearer(auto_error=False)
token_cookie = APIKeyCookie(name="token", auto_error=False)


def get_db_session() -> Generator[Session, None, None]:
    """Get database session dependency."""
    yield from get_session()


DBSession = Annotated[Session, Depends(get_db_session)]


def extract_token(
    header_token: str | None,
    bearer_credentials: HTTPAuthorizationCredentials | None,
    cookie_token: str | None,
) -> str | None:
    """Pick the candidate token: custom header, then bearer, then cookie."""
    bearer_token = bearer_credentials.credentials if bearer_credentials else None
    token = header_token or bearer_token or cookie_token
    if token and token.startswith("Bearer "):
        token = token[len("Bearer "):]
    return token or None


def get_current_user_id(
    header_token: Annotated[str | None, Depends(token_header)],
    bearer_credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
    cookie_token: Annotated[str | None, Depends(token_cookie)],
) -> str:
    """Resolve the authenticated user id from the request's token."""
    token = extract_token(header_token, bearer_credentials, cookie_token)
    if token is None:
        raise UnauthenticatedError("No authentication token provided. Access denied.")

    try:
        return verify_token(token)
    except ExpiredTokenError:
        logger.debug("Rejected expired token")
        raise UnauthenticatedError("Token has expired. Please login again.")
    except MalformedTokenError:
        logger.debug("Rejected invalid token")
        raise UnauthenticatedError("Invalid token. Access denied.")
    except Exception as exc:
        logger.exception("Auth middleware error")
        raise InternalError("Authentication error") from exc


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def require_task_id(task_id: str) -> str:
    """Reject path ids that are not 24 hex characters before touching the store."""
    if not is_valid_id(task_id):
        raise ValidationError("Invalid task ID format")
    return task_id


TaskId = Annotated[str, Depends(require_task_id)]
