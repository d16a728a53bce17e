"""Tests for signup, login and the user store accessor."""

import time

import pytest
from sqlmodel import Session, select

from tasktracker.errors import DuplicateUserError
from tasktracker.models.user import User
from tasktracker.services.security import hash_password, verify_password, verify_token
from tasktracker.services.users import (
    create_user,
    exists_by_username_or_email,
    find_by_username_or_email,
    validate_email,
)

SIGNUP = "/api/users/signup"
LOGIN = "/api/users/login"


def signup(client, username="alice", email="alice@x.com", password="secret1"):
    return client.post(SIGNUP, json={"username": username, "email": email, "password": password})


class TestSignup:
    """Tests for POST /api/users/signup."""

    def test_signup_creates_user_without_password(self, client):
        response = signup(client)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User created successfully"
        assert body["user"] == {"username": "alice", "email": "alice@x.com"}

    def test_stored_password_is_hashed(self, client, db_session: Session):
        signup(client)

        user = db_session.exec(select(User).where(User.username == "alice")).one()
        assert user.hashed_password != "secret1"
        assert verify_password("secret1", user.hashed_password)

    def test_duplicate_username_rejected(self, client):
        signup(client)
        response = signup(client, email="other@x.com")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "User already exists"}

    def test_duplicate_email_rejected(self, client):
        signup(client)
        response = signup(client, username="alice2")

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"

    @pytest.mark.parametrize("missing", ["username", "email", "password"])
    def test_missing_field_rejected(self, client, missing):
        payload = {"username": "alice", "email": "alice@x.com", "password": "secret1"}
        del payload[missing]

        response = client.post(SIGNUP, json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Please provide username, email, and password"

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"username": "al"}, "Username must be between 3 and 30 characters"),
            ({"username": "a" * 31}, "Username must be between 3 and 30 characters"),
            ({"email": "not-an-email"}, "Please enter a valid email"),
            ({"password": "12345"}, "Password must be at least 6 characters long"),
            ({"password": "p" * 80}, "Password cannot be longer than 72 bytes"),
            ({"password": "\u00e9" * 40}, "Password cannot be longer than 72 bytes"),
            ({"email": "a" * 40 + "!"}, "Please enter a valid email"),
        ],
    )
    def test_field_constraints(self, client, overrides, message):
        payload = {"username": "alice", "email": "alice@x.com", "password": "secret1"}
        payload.update(overrides)

        response = client.post(SIGNUP, json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": message}

    def test_malformed_body_rejected(self, client):
        response = client.post(
            SIGNUP, content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid request data"}

    def test_store_failure_is_generic_500(self, client, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("connection refused to db-host:5432")

        monkeypatch.setattr("tasktracker.api.users.exists_by_username_or_email", boom)

        response = signup(client)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error during signup"}


class TestLogin:
    """Tests for POST /api/users/login."""

    def test_login_with_username(self, client, alice):
        response = client.post(LOGIN, json={"username": "alice", "password": "secret1"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert isinstance(body["token"], str)
        assert body["user"] == {"id": alice.id, "username": "alice", "email": "alice@x.com"}
        assert verify_token(body["token"]) == alice.id

    def test_login_with_email(self, client, alice):
        response = client.post(LOGIN, json={"username": "alice@x.com", "password": "secret1"})

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    def test_wrong_password(self, client, alice):
        response = client.post(LOGIN, json={"username": "alice", "password": "wrong"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    def test_unknown_user_indistinguishable_from_wrong_password(self, client, alice):
        unknown = client.post(LOGIN, json={"username": "nobody", "password": "secret1"})
        wrong = client.post(LOGIN, json={"username": "alice", "password": "wrong"})

        assert unknown.status_code == wrong.status_code == 400
        assert unknown.json() == wrong.json()

    def test_overlong_password_is_invalid_credentials(self, client, alice):
        response = client.post(LOGIN, json={"username": "alice", "password": "p" * 80})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    def test_missing_fields(self, client):
        response = client.post(LOGIN, json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["message"] == "Please provide username and password"

    def test_password_of_exactly_72_bytes_accepted(self, client):
        password = "p" * 72
        assert signup(client, password=password).status_code == 201

        response = client.post(LOGIN, json={"username": "alice", "password": password})
        assert response.status_code == 200

    def test_signup_then_login(self, client):
        signup(client)
        response = client.post(LOGIN, json={"username": "alice", "password": "secret1"})

        assert response.status_code == 200


class TestUserStore:
    """Tests for the user store accessor."""

    def test_find_by_username_or_email(self, db_session, alice):
        assert find_by_username_or_email(db_session, "alice").id == alice.id
        assert find_by_username_or_email(db_session, "alice@x.com").id == alice.id
        assert find_by_username_or_email(db_session, "carol") is None

    def test_exists_matches_either_field(self, db_session, alice):
        assert exists_by_username_or_email(db_session, "alice", "new@x.com") is True
        assert exists_by_username_or_email(db_session, "new", "alice@x.com") is True
        assert exists_by_username_or_email(db_session, "new", "new@x.com") is False

    def test_create_user_enforces_uniqueness_in_store(self, db_session, alice):
        # Skips the pre-check, as a concurrent signup would
        with pytest.raises(DuplicateUserError):
            create_user(db_session, "alice", "fresh@x.com", hash_password("secret1"))

        # The session is still usable after the rollback
        user = create_user(db_session, "carol", "carol@x.com", hash_password("secret1"))
        assert len(user.id) == 24

    @pytest.mark.parametrize(
        "email, valid",
        [
            ("alice@x.com", True),
            ("first.last@mail.tasks.org", True),
            ("alice@x", False),
            ("alice.x.com", False),
            ("", False),
        ],
    )
    def test_validate_email(self, email, valid):
        assert validate_email(email) is valid

    @pytest.mark.parametrize("email", ["a" * 40 + "!", "a." * 40 + "@x", "a" * 300 + "@x.com"])
    def test_validate_email_is_fast_on_hostile_input(self, email):
        started = time.monotonic()

        assert validate_email(email) is False
        assert time.monotonic() - started < 1.0


def test_users_route_check(client):
    response = client.get("/api/users/test")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Users route is working!"}
