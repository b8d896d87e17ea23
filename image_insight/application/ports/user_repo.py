from typing import Protocol, Optional
from datetime import datetime

class UserDto:
    def __init__(self, id: str, email: str, password_hash: str, created_at: datetime):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at

class UserRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[UserDto]:
        ...

    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        ...

    def create(self, email: str, password_hash: str) -> UserDto:
        """Raises ConflictError when the email is already taken."""
        ...
