"""User entity model."""

from datetime import datetime

from sqlmodel import Column, Field, SQLModel

from tasktracker.db.types import UTCDateTime, utc_now
from tasktracker.models.ids import new_id

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
# bcrypt only hashes the first 72 bytes
PASSWORD_MAX_BYTES = 72


class User(SQLModel, table=True):
    """User database model."""

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=24)
    username: str = Field(max_length=USERNAME_MAX_LENGTH, unique=True, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False)
    )


class UserCreate(SQLModel):
    """Schema for signup. Presence and shape are checked by the endpoint."""

    username: str | None = None
    email: str | None = None
    password: str | None = None


class UserLogin(SQLModel):
    """Schema for login; ``username`` may also hold an email address."""

    username: str | None = None
    password: str | None = None


class SignupUser(SQLModel):
    """User as echoed back by signup (no id, no password)."""

    username: str
    email: str

    model_config = {"from_attributes": True}


class UserSummary(SQLModel):
    """User summary returned alongside a login token."""

    id: str
    username: str
    email: str

    model_config = {"from_attributes": True}


class SignupResponse(SQLModel):
    success: bool = True
    message: str
    user: SignupUser


class LoginResponse(SQLModel):
    success: bool = True
    message: str
    token: str
    user: UserSummary
