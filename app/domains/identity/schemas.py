import re
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def looks_like_email(value: str) -> bool:
    """Проверка, похожа ли строка на email"""
    return bool(EMAIL_PATTERN.match(value))


class CamelModel(BaseModel):
    """Схема с camelCase-именами полей в JSON"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserCreate(CamelModel):
    """Схема для регистрации пользователя"""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        if looks_like_email(v):
            raise ValueError('Username cannot be in email format')
        if not v.replace('_', '').replace('-', '').replace('.', '').isalnum():
            raise ValueError('Username must contain only letters, digits, dots, underscores and hyphens')
        return v


class UserLogin(CamelModel):
    """Схема для входа: имя пользователя или email"""
    username_or_email: str = Field(..., min_length=1)
    password: str


class UserPublic(CamelModel):
    """Публичные данные пользователя"""
    id: uuid.UUID
    username: str
    profile_pic: str = ""


class UserResponse(UserPublic):
    """Данные текущего пользователя"""
    email: str
    created_at: datetime


class UserProfileResponse(UserPublic):
    """Профиль пользователя со счетчиками подписок"""
    follower_count: int
    following_count: int
    created_at: datetime


class Token(CamelModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
