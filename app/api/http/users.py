from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.auth import get_optional_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserProfileResponse
from app.domains.identity.services import IdentityService
from app.domains.poems.audience import UserPoems
from app.domains.poems.schemas import PoemListResponse
from app.domains.poems.services import PoemListingService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Получение информации о пользователе"""
    user = await IdentityService(db).get_profile(user_id)
    return UserProfileResponse.model_validate(user)


@router.get("/{user_id}/poems", response_model=PoemListResponse)
async def get_user_poems(
    user_id: uuid.UUID,
    cursor: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Стихи пользователя"""
    page = await PoemListingService(db).list_poems(
        UserPoems(user_id),
        user.id if user else None,
        cursor=cursor,
        limit=limit,
        search=search
    )
    return PoemListResponse.from_page(page)
