from datetime import datetime, timezone
from typing import Dict, Optional
import uuid

import pytest

from image_insight.application.ports.user_repo import UserDto, UserRepository
from image_insight.application.services.auth_service import AuthService
from image_insight.exceptions import AuthError, ConflictError, ValidationError
from image_insight.services.auth import create_jwt_token, decode_jwt_token


class FakeUserRepo(UserRepository):
    def __init__(self):
        self.users: Dict[str, UserDto] = {}

    def get_by_email(self, email: str) -> Optional[UserDto]:
        return self.users.get(email)

    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        return next((u for u in self.users.values() if u.id == user_id), None)

    def create(self, email: str, password_hash: str) -> UserDto:
        if email in self.users:
            raise ConflictError("User with this email already exists")
        user = UserDto(id=str(uuid.uuid4()), email=email, password_hash=password_hash, created_at=datetime.now(timezone.utc))
        self.users[email] = user
        return user


@pytest.fixture
def svc():
    return AuthService(user_repo=FakeUserRepo())


def test_signup_then_login_yields_token_for_same_user(svc):
    user, signup_token = svc.signup("alice@example.com", "password123")
    logged_in, login_token = svc.login("alice@example.com", "password123")

    assert logged_in.id == user.id
    assert decode_jwt_token(signup_token)["sub"] == user.id
    assert decode_jwt_token(login_token)["sub"] == user.id
    assert decode_jwt_token(login_token)["email"] == "alice@example.com"


def test_password_is_stored_hashed(svc):
    user, _ = svc.signup("alice@example.com", "password123")
    assert user.password_hash != "password123"
    assert user.password_hash.startswith("$2")


@pytest.mark.parametrize("password", ["password123", "something-else"])
def test_duplicate_email_conflicts_regardless_of_password(svc, password):
    svc.signup("alice@example.com", "password123")
    with pytest.raises(ConflictError):
        svc.signup("alice@example.com", password)


def test_email_is_case_insensitive(svc):
    user, _ = svc.signup("Alice@Example.com ", "password123")
    assert user.email == "alice@example.com"
    with pytest.raises(ConflictError):
        svc.signup("ALICE@example.com", "password123")
    assert svc.login("ALICE@EXAMPLE.COM", "password123")[0].id == user.id


@pytest.mark.parametrize(
    "email,password,message",
    [
        (None, "password123", "Email is required"),
        ("", "password123", "Email is required"),
        ("not-an-email", "password123", "Please provide a valid email address"),
        ("a@example.com", None, "Password is required"),
        ("a@example.com", "12345", "Password must be at least 6 characters long"),
    ],
)
def test_signup_validation(svc, email, password, message):
    with pytest.raises(ValidationError) as exc:
        svc.signup(email, password)
    assert exc.value.detail == message


def test_login_with_wrong_password_or_unknown_email(svc):
    svc.signup("alice@example.com", "password123")
    with pytest.raises(AuthError) as wrong_password:
        svc.login("alice@example.com", "wrongpassword")
    with pytest.raises(AuthError) as unknown_email:
        svc.login("bob@example.com", "password123")
    assert wrong_password.value.detail == unknown_email.value.detail == "Invalid credentials"


def test_get_user_for_unknown_id_is_auth_error(svc):
    with pytest.raises(AuthError):
        svc.get_user("missing")


def test_expired_and_tampered_tokens_are_rejected():
    expired = create_jwt_token({"sub": "u1"}, expires_minutes=-1)
    with pytest.raises(AuthError) as exc:
        decode_jwt_token(expired)
    assert exc.value.detail == "Token expired"

    with pytest.raises(AuthError) as exc:
        decode_jwt_token(create_jwt_token({"sub": "u1"}) + "x")
    assert exc.value.detail == "Invalid token"
