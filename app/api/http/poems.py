from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.auth import get_current_user, get_optional_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.poems.audience import AllPoems, FeedPoems, OwnPoems
from app.domains.poems.schemas import (
    PoemCreate, PoemTitleUpdate, StanzaReorder, PoemResponse, PoemListResponse
)
from app.domains.poems.services import PoemListingService, PoemService

router = APIRouter(prefix="/poems", tags=["poems"])


def _requester_id(user: Optional[User]) -> Optional[uuid.UUID]:
    return user.id if user else None


# Списки стихов: маршруты /mine и /feed объявлены раньше /{poem_id}
@router.get("", response_model=PoemListResponse)
async def get_all_poems(
    cursor: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Все опубликованные стихи"""
    page = await PoemListingService(db).list_poems(
        AllPoems(), _requester_id(user), cursor=cursor, limit=limit, search=search
    )
    return PoemListResponse.from_page(page)


@router.get("/mine", response_model=PoemListResponse)
async def get_my_poems(
    cursor: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Стихи текущего пользователя, включая черновики"""
    requester_id = _requester_id(user)
    page = await PoemListingService(db).list_poems(
        OwnPoems(requester_id), requester_id, cursor=cursor, limit=limit, search=search
    )
    return PoemListResponse.from_page(page)


@router.get("/feed", response_model=PoemListResponse)
async def get_feed_poems(
    cursor: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Лента подписок"""
    requester_id = _requester_id(user)
    page = await PoemListingService(db).list_poems(
        FeedPoems(requester_id), requester_id, cursor=cursor, limit=limit, search=search
    )
    return PoemListResponse.from_page(page)


@router.post("", response_model=PoemResponse, status_code=status.HTTP_201_CREATED)
async def create_poem(
    poem_data: Optional[PoemCreate] = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового стихотворения"""
    title = poem_data.title if poem_data else None
    poem = await PoemService(db).create_poem(user.id, title)
    return PoemResponse.from_poem(poem, is_owner=True)


@router.get("/{poem_id}", response_model=PoemResponse)
async def get_poem(
    poem_id: uuid.UUID,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение стихотворения по id"""
    requester_id = _requester_id(user)
    poem = await PoemService(db).get_poem(poem_id, requester_id)
    return PoemResponse.from_poem(poem, is_owner=poem.is_owned_by(requester_id))


@router.put("/{poem_id}/title", response_model=PoemResponse)
async def update_poem_title(
    poem_id: uuid.UUID,
    update_data: PoemTitleUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление заголовка"""
    poem = await PoemService(db).update_title(poem_id, update_data.title, user.id)
    return PoemResponse.from_poem(poem, is_owner=True)


@router.put("/{poem_id}/reorder", response_model=PoemResponse)
async def reorder_stanzas(
    poem_id: uuid.UUID,
    reorder_data: StanzaReorder,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Перестановка строф"""
    poem = await PoemService(db).reorder_stanzas(poem_id, reorder_data.stanza_ids, user.id)
    return PoemResponse.from_poem(poem, is_owner=True)


@router.put("/{poem_id}/publish", response_model=PoemResponse)
async def publish_poem(
    poem_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Публикация"""
    poem = await PoemService(db).publish(poem_id, user.id)
    return PoemResponse.from_poem(poem, is_owner=True)


@router.put("/{poem_id}/draft", response_model=PoemResponse)
async def convert_to_draft(
    poem_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Возврат в черновики"""
    poem = await PoemService(db).convert_to_draft(poem_id, user.id)
    return PoemResponse.from_poem(poem, is_owner=True)


@router.delete("/{poem_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_poem(
    poem_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление стихотворения"""
    await PoemService(db).delete_poem(poem_id, user.id)
