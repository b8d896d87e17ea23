from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import re

from ..ports.user_repo import UserRepository, UserDto
from ...core.config import settings
from ...exceptions import AuthError, ConflictError, ValidationError
from ...services.auth import create_jwt_token, hash_password, verify_password

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


@dataclass
class AuthService:
    user_repo: UserRepository

    def _validate_credentials(self, email: str, password: Optional[str]) -> None:
        if not email:
            raise ValidationError("Email is required")
        if not EMAIL_RE.match(email):
            raise ValidationError("Please provide a valid email address")
        if not password:
            raise ValidationError("Password is required")
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long")

    def issue_token(self, user: UserDto) -> str:
        return create_jwt_token({"sub": user.id, "email": user.email})

    def signup(self, email: Optional[str], password: Optional[str]) -> Tuple[UserDto, str]:
        email = normalize_email(email)
        self._validate_credentials(email, password)

        if self.user_repo.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user = self.user_repo.create(email=email, password_hash=hash_password(password))
        logger.info(f"Registered user {user.id}")
        return user, self.issue_token(user)

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[UserDto, str]:
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Please provide email and password")

        user = self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthError("Invalid credentials")
        return user, self.issue_token(user)

    def get_user(self, user_id: str) -> UserDto:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            # Token outlived its account
            raise AuthError("User not found")
        return user
