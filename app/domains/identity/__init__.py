from app.domains.identity.entities import User
from app.domains.identity.schemas import (
    UserCreate, UserLogin, UserPublic, UserResponse, UserProfileResponse, Token
)

__all__ = [
    "User",
    "UserCreate", "UserLogin", "UserPublic", "UserResponse", "UserProfileResponse", "Token"
]
