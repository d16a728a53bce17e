"""Credential hashing and JWT issuance for user authentication."""

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from tasktracker.config import get_settings
from tasktracker.errors import ExpiredTokenError, MalformedTokenError


def hash_password(password: str) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. A malformed hash never verifies."""
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        return False


def issue_token(user_id: str, now: datetime | None = None) -> str:
    """Issue a signed token for ``user_id`` expiring after the configured window."""
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.JWT_EXPIRATION_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> str:
    """Verify a token and return the user id it carries.

    Raises:
        ExpiredTokenError: The token is past its expiration.
        MalformedTokenError: The signature, structure or claims are invalid.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise ExpiredTokenError("Token has expired") from exc
    except JWTError as exc:
        raise MalformedTokenError("Invalid token") from exc

    user_id = payload.get("id")
    if not isinstance(user_id, str) or not user_id:
        raise MalformedTokenError("Token has no user id")
    return user_id
