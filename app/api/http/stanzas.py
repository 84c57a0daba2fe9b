from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.auth import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.poems.schemas import StanzaCreate, StanzaUpdate, StanzaResponse
from app.domains.poems.services import StanzaService

router = APIRouter(prefix="/stanzas", tags=["stanzas"])


@router.post("", response_model=StanzaResponse, status_code=status.HTTP_201_CREATED)
async def create_stanza(
    stanza_data: StanzaCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Добавление строфы в конец стихотворения"""
    stanza = await StanzaService(db).create_stanza(stanza_data.poem_id, stanza_data.body, user.id)
    return StanzaResponse.model_validate(stanza)


@router.put("/{stanza_id}", response_model=StanzaResponse)
async def update_stanza(
    stanza_id: uuid.UUID,
    update_data: StanzaUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление текста строфы"""
    stanza = await StanzaService(db).update_stanza(stanza_id, update_data.body, user.id)
    return StanzaResponse.model_validate(stanza)


@router.delete("/{stanza_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stanza(
    stanza_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление строфы; оставшиеся перенумеровываются"""
    await StanzaService(db).delete_stanza(stanza_id, user.id)
