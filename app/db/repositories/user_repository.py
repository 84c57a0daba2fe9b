from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert, func, or_
from sqlalchemy.exc import IntegrityError
import uuid

from app.core.exceptions import InvalidInput
from app.db.models.user import User as UserModel, follows
from app.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = UserModel(
            id=user.id,
            email=user.email,
            username=user.username,
            password_hash=user.password_hash,
            profile_pic=user.profile_pic
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise InvalidInput("User with this email or username already exists")
        await self.session.refresh(db_user)
        return self._to_domain(db_user)

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Получение пользователя по id"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_login(self, username_or_email: str) -> Optional[User]:
        """Получение пользователя по имени или email"""
        result = await self.session.execute(
            select(UserModel).where(
                or_(UserModel.username == username_or_email, UserModel.email == username_or_email)
            )
        )
        db_user = result.scalars().first()
        return self._to_domain(db_user) if db_user else None

    async def exists(self, user_id: uuid.UUID) -> bool:
        """Проверка существования пользователя"""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none() is not None

    async def email_exists(self, email: str) -> bool:
        """Проверка существования email"""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.email == email)
        )
        return result.scalar_one_or_none() is not None

    async def username_exists(self, username: str) -> bool:
        """Проверка существования username"""
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.username == username)
        )
        return result.scalar_one_or_none() is not None

    async def get_profile(self, user_id: uuid.UUID) -> Optional[User]:
        """Пользователь вместе с количеством подписчиков и подписок"""
        user = await self.get_by_id(user_id)
        if user is None:
            return None

        followers = await self.session.execute(
            select(func.count()).select_from(follows).where(follows.c.following_id == user_id)
        )
        following = await self.session.execute(
            select(func.count()).select_from(follows).where(follows.c.follower_id == user_id)
        )
        user.follower_count = followers.scalar()
        user.following_count = following.scalar()
        return user

    async def add_following(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> None:
        """Подписка follower_id на following_id"""
        await self.session.execute(
            insert(follows).values(follower_id=follower_id, following_id=following_id)
        )
        await self.session.commit()

    async def get_following_ids(self, follower_id: uuid.UUID) -> List[uuid.UUID]:
        """Идентификаторы пользователей, на которых подписан follower_id"""
        result = await self.session.execute(
            select(follows.c.following_id).where(follows.c.follower_id == follower_id)
        )
        return list(result.scalars().all())

    def _to_domain(self, db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            id=db_user.id,
            email=db_user.email,
            username=db_user.username,
            password_hash=db_user.password_hash,
            profile_pic=db_user.profile_pic or "",
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
