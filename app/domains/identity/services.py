import logging
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.exceptions import InvalidInput, NotFound
from app.core.security import create_access_token, verify_token
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserCreate, UserLogin

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    async def register_user(self, user_data: UserCreate) -> User:
        """Регистрация нового пользователя"""
        if user_data.password != user_data.confirm_password:
            raise InvalidInput("Passwords don't match")

        # Проверка существования email и username
        if await self.user_repository.username_exists(user_data.username):
            raise InvalidInput("Username already exists")

        if await self.user_repository.email_exists(user_data.email):
            raise InvalidInput("Email already exists")

        user = User.create_user(
            email=user_data.email,
            username=user_data.username,
            password=user_data.password
        )

        created = await self.user_repository.create(user)
        logger.info(f"Registered user {created.username} ({created.id})")
        return created

    async def authenticate_user(self, login_data: UserLogin) -> Optional[User]:
        """Аутентификация по имени пользователя или email"""
        user = await self.user_repository.get_by_login(login_data.username_or_email.strip())

        if not user or not user.authenticate(login_data.password):
            return None

        return user

    async def login_user(self, login_data: UserLogin) -> Optional[Tuple[str, User]]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data)

        if not user:
            return None

        token = create_access_token(data={"sub": str(user.id), "username": user.username})
        return token, user

    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if not payload or not payload.get("sub"):
            return None

        try:
            user_id = uuid.UUID(payload["sub"])
        except ValueError:
            return None

        return await self.user_repository.get_by_id(user_id)

    async def get_profile(self, user_id: uuid.UUID) -> User:
        """Публичный профиль пользователя"""
        user = await self.user_repository.get_profile(user_id)

        if not user:
            raise NotFound("User not found")

        return user
