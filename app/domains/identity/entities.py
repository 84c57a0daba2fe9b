import uuid
from datetime import datetime
from typing import Optional

from app.core.security import get_password_hash, verify_password
from app.db.base import utc_now


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: uuid.UUID,
        email: str,
        username: str,
        password_hash: str,
        profile_pic: str = "",
        follower_count: int = 0,
        following_count: int = 0,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.username = username
        self.password_hash = password_hash
        self.profile_pic = profile_pic
        self.follower_count = follower_count
        self.following_count = following_count
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or utc_now()

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    @classmethod
    def create_user(cls, email: str, username: str, password: str) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            id=uuid.uuid4(),
            email=email,
            username=username,
            password_hash=get_password_hash(password)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, username={self.username})"
