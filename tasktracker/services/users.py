"""User store accessor."""

import logging

from email_validator import EmailNotValidError, validate_email as check_email
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, or_, select

from tasktracker.errors import DuplicateUserError
from tasktracker.models.user import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    User,
)

logger = logging.getLogger(__name__)


def find_by_username_or_email(session: Session, identifier: str) -> User | None:
    """Get the user whose username or email equals ``identifier``."""
    return session.exec(
        select(User).where(or_(User.username == identifier, User.email == identifier))
    ).first()


def exists_by_username_or_email(session: Session, username: str, email: str) -> bool:
    """Check whether the username or the email is already taken."""
    existing = session.exec(
        select(User.id).where(or_(User.username == username, User.email == email))
    ).first()
    return existing is not None


def create_user(session: Session, username: str, email: str, hashed_password: str) -> User:
    """Create a new user.

    Raises:
        DuplicateUserError: The store rejected the username or email as taken.
    """
    user = User(username=username, email=email, hashed_password=hashed_password)
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateUserError("User already exists") from exc
    session.refresh(user)

    logger.info("User created", extra={"user_id": user.id, "username": user.username})
    return user


def validate_email(email: str) -> bool:
    """Validate email syntax without any DNS lookups."""
    try:
        check_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_signup(username: str, email: str, password: str) -> tuple[bool, str]:
    """
    Validate signup fields against the user record constraints.
    Returns (is_valid, error_message).
    """
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return False, (
            f"Username must be between {USERNAME_MIN_LENGTH} and "
            f"{USERNAME_MAX_LENGTH} characters"
        )
    if not validate_email(email):
        return False, "Please enter a valid email"
    if len(password) < PASSWORD_MIN_LENGTH:
        return False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return False, f"Password cannot be longer than {PASSWORD_MAX_BYTES} bytes"
    return True, ""
