from datetime import datetime
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, and_, or_
from sqlalchemy.orm import selectinload, joinedload
import uuid

from app.core.exceptions import InvalidInput
from app.db.base import utc_now
from app.db.models.poem import Poem as PoemModel, Stanza as StanzaModel
from app.db.models.user import User as UserModel
from app.domains.poems.audience import PoemFilter
from app.domains.poems.entities import Poem, PoemAuthor, Stanza

SortKey = Tuple[datetime, uuid.UUID]


def poem_lock_query(poem_id: uuid.UUID):
    """SELECT ... FOR UPDATE строки стихотворения; SQLite опускает FOR UPDATE"""
    return select(PoemModel.id).where(PoemModel.id == poem_id).with_for_update()


def _stanza_to_domain(db_stanza: StanzaModel) -> Stanza:
    return Stanza(
        id=db_stanza.id,
        poem_id=db_stanza.poem_id,
        body=db_stanza.body,
        position=db_stanza.position,
        created_at=db_stanza.created_at,
        updated_at=db_stanza.updated_at
    )


class PoemRepository:
    """Репозиторий для работы со стихами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select_poems(self):
        """Выборка стихов вместе со строфами и автором"""
        return (
            select(PoemModel)
            .options(selectinload(PoemModel.stanzas), joinedload(PoemModel.owner))
            .execution_options(populate_existing=True)
        )

    def _conditions(self, poem_filter: PoemFilter) -> list:
        """Условия WHERE для фильтра"""
        conditions = []

        if poem_filter.owner_ids is not None:
            conditions.append(PoemModel.owner_id.in_(poem_filter.owner_ids))

        if not poem_filter.include_drafts:
            visible = PoemModel.is_draft.is_(False)
            if poem_filter.visible_to is not None:
                visible = or_(visible, PoemModel.owner_id == poem_filter.visible_to)
            conditions.append(visible)

        if poem_filter.is_search:
            term = poem_filter.search_term
            matches = [
                PoemModel.title.icontains(term, autoescape=True),
                PoemModel.stanzas.any(StanzaModel.body.icontains(term, autoescape=True)),
            ]
            if poem_filter.search_usernames:
                matches.append(PoemModel.owner.has(UserModel.username.icontains(term, autoescape=True)))
            # поиск сужает аудиторию, но не расширяет её
            conditions.append(or_(*matches))

        return conditions

    async def create(self, poem: Poem) -> Poem:
        """Создание нового стихотворения"""
        db_poem = PoemModel(
            id=poem.id,
            owner_id=poem.owner_id,
            title=poem.title,
            is_draft=poem.is_draft
        )

        self.session.add(db_poem)
        await self.session.commit()
        return await self.get_by_id(poem.id)

    async def get_by_id(self, poem_id: uuid.UUID) -> Optional[Poem]:
        """Получение стихотворения по id"""
        result = await self.session.execute(
            self._select_poems().where(PoemModel.id == poem_id)
        )
        db_poem = result.unique().scalar_one_or_none()
        return self._to_domain(db_poem) if db_poem else None

    async def update_title(self, poem_id: uuid.UUID, title: str) -> Optional[Poem]:
        """Обновление заголовка"""
        await self.session.execute(
            update(PoemModel)
            .where(PoemModel.id == poem_id)
            .values(title=title, updated_at=utc_now())
        )
        await self.session.commit()
        return await self.get_by_id(poem_id)

    async def set_draft(self, poem_id: uuid.UUID, is_draft: bool) -> Optional[Poem]:
        """Публикация или возврат в черновики"""
        await self.session.execute(
            update(PoemModel)
            .where(PoemModel.id == poem_id)
            .values(is_draft=is_draft, updated_at=utc_now())
        )
        await self.session.commit()
        return await self.get_by_id(poem_id)

    async def delete(self, poem_id: uuid.UUID) -> bool:
        """Удаление стихотворения вместе со строфами"""
        await self.session.execute(delete(StanzaModel).where(StanzaModel.poem_id == poem_id))
        result = await self.session.execute(delete(PoemModel).where(PoemModel.id == poem_id))
        await self.session.commit()
        return result.rowcount > 0

    async def count(self, poem_filter: PoemFilter) -> int:
        """Количество стихов, подходящих под фильтр"""
        result = await self.session.execute(
            select(func.count(PoemModel.id)).where(*self._conditions(poem_filter))
        )
        return result.scalar()

    async def get_sort_key(self, poem_filter: PoemFilter, poem_id: uuid.UUID) -> Optional[SortKey]:
        """Ключ сортировки стихотворения-курсора, если оно подходит под фильтр"""
        result = await self.session.execute(
            select(PoemModel.updated_at, PoemModel.id)
            .where(PoemModel.id == poem_id, *self._conditions(poem_filter))
        )
        row = result.one_or_none()
        return (row.updated_at, row.id) if row else None

    async def list_page(
        self,
        poem_filter: PoemFilter,
        after: Optional[SortKey] = None,
        limit: int = 11
    ) -> List[Poem]:
        """Страница стихов: сначала недавно измененные, при равенстве времени по id"""
        query = self._select_poems().where(*self._conditions(poem_filter))

        if after is not None:
            updated_at, poem_id = after
            query = query.where(
                or_(
                    PoemModel.updated_at < updated_at,
                    and_(PoemModel.updated_at == updated_at, PoemModel.id < poem_id)
                )
            )

        result = await self.session.execute(
            query
            .order_by(PoemModel.updated_at.desc(), PoemModel.id.desc())
            .limit(limit)
        )
        return [self._to_domain(poem) for poem in result.unique().scalars().all()]

    def _to_domain(self, db_poem: PoemModel) -> Poem:
        """Преобразование модели БД в доменную сущность"""
        owner = None
        if db_poem.owner is not None:
            owner = PoemAuthor(
                id=db_poem.owner.id,
                username=db_poem.owner.username,
                profile_pic=db_poem.owner.profile_pic or ""
            )

        return Poem(
            id=db_poem.id,
            owner_id=db_poem.owner_id,
            title=db_poem.title,
            is_draft=db_poem.is_draft,
            stanzas=[_stanza_to_domain(s) for s in db_poem.stanzas],
            owner=owner,
            created_at=db_poem.created_at,
            updated_at=db_poem.updated_at
        )


class StanzaRepository:
    """Репозиторий для работы со строфами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _lock_poem(self, poem_id: uuid.UUID) -> None:
        """Позиции строф меняются только под блокировкой стихотворения"""
        await self.session.execute(poem_lock_query(poem_id))

    async def _touch_poem(self, poem_id: uuid.UUID) -> None:
        """Изменение строф считается изменением стихотворения"""
        await self.session.execute(
            update(PoemModel).where(PoemModel.id == poem_id).values(updated_at=utc_now())
        )

    async def get_by_id(self, stanza_id: uuid.UUID) -> Optional[Stanza]:
        """Получение строфы по id"""
        result = await self.session.execute(
            select(StanzaModel).where(StanzaModel.id == stanza_id)
        )
        db_stanza = result.scalar_one_or_none()
        return _stanza_to_domain(db_stanza) if db_stanza else None

    async def get_by_poem(self, poem_id: uuid.UUID) -> List[Stanza]:
        """Строфы стихотворения по порядку"""
        result = await self.session.execute(
            select(StanzaModel)
            .where(StanzaModel.poem_id == poem_id)
            .order_by(StanzaModel.position)
        )
        return [_stanza_to_domain(s) for s in result.scalars().all()]

    async def append(self, poem_id: uuid.UUID, body: str) -> Stanza:
        """Добавление строфы в конец стихотворения"""
        await self._lock_poem(poem_id)
        result = await self.session.execute(
            select(func.max(StanzaModel.position)).where(StanzaModel.poem_id == poem_id)
        )
        last_position = result.scalar()
        position = 0 if last_position is None else last_position + 1

        db_stanza = StanzaModel(poem_id=poem_id, body=body, position=position)
        self.session.add(db_stanza)
        await self._touch_poem(poem_id)
        await self.session.commit()
        await self.session.refresh(db_stanza)
        return _stanza_to_domain(db_stanza)

    async def update_body(self, stanza_id: uuid.UUID, poem_id: uuid.UUID, body: str) -> Optional[Stanza]:
        """Обновление текста строфы"""
        await self.session.execute(
            update(StanzaModel)
            .where(StanzaModel.id == stanza_id)
            .values(body=body, updated_at=utc_now())
        )
        await self._touch_poem(poem_id)
        await self.session.commit()
        return await self.get_by_id(stanza_id)

    async def delete(self, stanza_id: uuid.UUID, poem_id: uuid.UUID) -> bool:
        """Удаление строфы с перенумерацией оставшихся"""
        await self._lock_poem(poem_id)
        result = await self.session.execute(delete(StanzaModel).where(StanzaModel.id == stanza_id))
        if result.rowcount == 0:
            await self.session.rollback()
            return False

        remaining = await self.session.execute(
            select(StanzaModel.id)
            .where(StanzaModel.poem_id == poem_id)
            .order_by(StanzaModel.position)
        )
        for position, remaining_id in enumerate(remaining.scalars().all()):
            await self.session.execute(
                update(StanzaModel)
                .where(StanzaModel.id == remaining_id)
                .values(position=position)
            )

        await self._touch_poem(poem_id)
        await self.session.commit()
        return True

    async def reorder(self, poem_id: uuid.UUID, stanza_ids: List[uuid.UUID]) -> List[Stanza]:
        """Новый порядок строф; принимается только полная перестановка"""
        await self._lock_poem(poem_id)
        result = await self.session.execute(
            select(StanzaModel.id).where(StanzaModel.poem_id == poem_id)
        )
        existing = set(result.scalars().all())

        if len(stanza_ids) != len(existing) or set(stanza_ids) != existing:
            raise InvalidInput("Stanza order must list every stanza of the poem exactly once")

        for position, stanza_id in enumerate(stanza_ids):
            await self.session.execute(
                update(StanzaModel)
                .where(StanzaModel.id == stanza_id)
                .values(position=position, updated_at=utc_now())
            )

        await self._touch_poem(poem_id)
        await self.session.commit()
        return await self.get_by_poem(poem_id)
