"""User signup and login endpoints."""

import logging

from fastapi import APIRouter, status

from tasktracker.api.deps import DBSession
from tasktracker.errors import ConflictError, DuplicateUserError, ValidationError, server_errors
from tasktracker.models.user import (
    LoginResponse,
    SignupResponse,
    SignupUser,
    UserCreate,
    UserLogin,
    UserSummary,
)
from tasktracker.services.security import hash_password, issue_token, verify_password
from tasktracker.services.users import (
    create_user,
    exists_by_username_or_email,
    find_by_username_or_email,
    validate_signup,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(session: DBSession, user_data: UserCreate) -> SignupResponse:
    """Register a new user account."""
    if not user_data.username or not user_data.email or not user_data.password:
        raise ValidationError("Please provide username, email, and password")

    is_valid, error_msg = validate_signup(user_data.username, user_data.email, user_data.password)
    if not is_valid:
        raise ValidationError(error_msg)

    with server_errors("Server error during signup"):
        if exists_by_username_or_email(session, user_data.username, user_data.email):
            raise ConflictError("User already exists")

        try:
            user = create_user(
                session,
                username=user_data.username,
                email=user_data.email,
                hashed_password=hash_password(user_data.password),
            )
        except DuplicateUserError:
            # Lost a race against a concurrent signup with the same username or email
            raise ConflictError("User already exists")

    return SignupResponse(
        message="User created successfully",
        user=SignupUser.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
def login(session: DBSession, credentials: UserLogin) -> LoginResponse:
    """Sign in with a username or email and a password."""
    if not credentials.username or not credentials.password:
        raise ValidationError("Please provide username and password")

    with server_errors("Server error during login"):
        user = find_by_username_or_email(session, credentials.username)
        if user is None or not verify_password(credentials.password, user.hashed_password):
            # Same message for unknown user and wrong password to prevent enumeration
            logger.info("Login failed", extra={"identifier": credentials.username})
            raise ValidationError("Invalid credentials")

        token = issue_token(user.id)

    logger.info("Login succeeded", extra={"user_id": user.id})
    return LoginResponse(
        message="Login successful",
        token=token,
        user=UserSummary.model_validate(user),
    )


@router.get("/test")
def users_route_check() -> dict[str, bool | str]:
    """Liveness check for the users routes."""
    return {"success": True, "message": "Users route is working!"}
