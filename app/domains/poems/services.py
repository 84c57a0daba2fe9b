import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.exceptions import Forbidden, NotFound, Unauthorized
from app.db.repositories.poem_repository import PoemRepository, StanzaRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.poems.audience import Audience, FeedPoems, UserPoems, build_filter, requires_requester
from app.domains.poems.entities import Poem, Stanza
from app.domains.poems.pagination import Page, PageRequest, slice_page
from app.domains.poems.search import SearchMatches, annotate_poem, normalize_search_term

logger = logging.getLogger(__name__)


class AnnotatedPoem:
    """Стихотворение в выдаче: признак владельца и совпадения поиска"""

    def __init__(self, poem: Poem, is_owner: bool, search_matches: Optional[SearchMatches] = None):
        self.poem = poem
        self.is_owner = is_owner
        self.search_matches = search_matches


class PoemListingService:
    """Единый движок выдачи стихов для всех аудиторий"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.poem_repository = PoemRepository(session)
        self.user_repository = UserRepository(session)

    async def list_poems(
        self,
        audience: Audience,
        requester_id: Optional[uuid.UUID] = None,
        cursor: Optional[str] = None,
        limit=None,
        search: Optional[str] = None
    ) -> Page[AnnotatedPoem]:
        """Страница стихов аудитории с разметкой совпадений поиска"""
        if requires_requester(audience) and requester_id is None:
            raise Unauthorized("Authentication required")

        if isinstance(audience, UserPoems) and not await self.user_repository.exists(audience.target_user_id):
            raise NotFound("User not found")

        page_request = PageRequest.from_params(cursor=cursor, limit=limit)
        term = normalize_search_term(search)

        following_ids = []
        if isinstance(audience, FeedPoems):
            following_ids = await self.user_repository.get_following_ids(audience.requester_id)

        poem_filter = build_filter(audience, requester_id, term, following_ids)
        logger.debug(
            f"Listing {type(audience).__name__} for {requester_id}: "
            f"limit={page_request.limit} cursor={page_request.cursor} search={term!r}"
        )

        after = None
        if page_request.cursor is not None:
            after = await self.poem_repository.get_sort_key(poem_filter, page_request.cursor)
            if after is None:
                raise NotFound("Cursor not found")

        total_count = await self.poem_repository.count(poem_filter)
        rows = await self.poem_repository.list_page(poem_filter, after, page_request.fetch_size)
        page = slice_page(rows, page_request.limit, total_count)

        page.items = [
            AnnotatedPoem(
                poem=poem,
                is_owner=poem.is_owned_by(requester_id),
                search_matches=(
                    annotate_poem(poem, term, include_username=poem_filter.search_usernames)
                    if term else None
                )
            )
            for poem in page.items
        ]
        return page


class PoemService:
    """Сервис для создания и редактирования стихов"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.poem_repository = PoemRepository(session)
        self.stanza_repository = StanzaRepository(session)

    async def _get_owned_poem(self, poem_id: uuid.UUID, user_id: uuid.UUID) -> Poem:
        """Стихотворение, которое пользователь имеет право менять"""
        poem = await self.poem_repository.get_by_id(poem_id)

        if not poem:
            raise NotFound("Poem not found")

        if not poem.is_owned_by(user_id):
            raise Forbidden("You don't have permission to modify this poem")

        return poem

    async def create_poem(self, owner_id: uuid.UUID, title: Optional[str] = None) -> Poem:
        """Создание нового стихотворения"""
        poem = await self.poem_repository.create(Poem.create_poem(owner_id, title))
        logger.info(f"User {owner_id} created poem {poem.id}")
        return poem

    async def get_poem(self, poem_id: uuid.UUID, requester_id: Optional[uuid.UUID] = None) -> Poem:
        """Получение стихотворения; чужие черновики не видны"""
        poem = await self.poem_repository.get_by_id(poem_id)

        if not poem or not poem.is_visible_to(requester_id):
            raise NotFound("Poem not found")

        return poem

    async def update_title(self, poem_id: uuid.UUID, title: Optional[str], user_id: uuid.UUID) -> Poem:
        """Обновление заголовка"""
        await self._get_owned_poem(poem_id, user_id)
        return await self.poem_repository.update_title(poem_id, Poem.normalize_title(title))

    async def publish(self, poem_id: uuid.UUID, user_id: uuid.UUID) -> Poem:
        """Публикация стихотворения"""
        await self._get_owned_poem(poem_id, user_id)
        logger.info(f"User {user_id} published poem {poem_id}")
        return await self.poem_repository.set_draft(poem_id, False)

    async def convert_to_draft(self, poem_id: uuid.UUID, user_id: uuid.UUID) -> Poem:
        """Возврат стихотворения в черновики"""
        await self._get_owned_poem(poem_id, user_id)
        return await self.poem_repository.set_draft(poem_id, True)

    async def delete_poem(self, poem_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Удаление стихотворения (только владельцем)"""
        await self._get_owned_poem(poem_id, user_id)
        await self.poem_repository.delete(poem_id)
        logger.info(f"User {user_id} deleted poem {poem_id}")

    async def reorder_stanzas(
        self,
        poem_id: uuid.UUID,
        stanza_ids: List[uuid.UUID],
        user_id: uuid.UUID
    ) -> Poem:
        """Перестановка строф"""
        await self._get_owned_poem(poem_id, user_id)
        await self.stanza_repository.reorder(poem_id, stanza_ids)
        return await self.poem_repository.get_by_id(poem_id)


class StanzaService:
    """Сервис для работы со строфами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.poem_repository = PoemRepository(session)
        self.stanza_repository = StanzaRepository(session)

    async def _get_owned_stanza(self, stanza_id: uuid.UUID, user_id: uuid.UUID) -> Stanza:
        stanza = await self.stanza_repository.get_by_id(stanza_id)

        if not stanza:
            raise NotFound("Stanza not found")

        poem = await self.poem_repository.get_by_id(stanza.poem_id)
        if not poem or not poem.is_owned_by(user_id):
            raise Forbidden("You don't have permission to modify this stanza")

        return stanza

    async def create_stanza(self, poem_id: uuid.UUID, body: str, user_id: uuid.UUID) -> Stanza:
        """Добавление строфы в конец стихотворения"""
        poem = await self.poem_repository.get_by_id(poem_id)

        if not poem:
            raise NotFound("Poem not found")

        if not poem.is_owned_by(user_id):
            raise Forbidden("You don't have permission to modify this poem")

        return await self.stanza_repository.append(poem_id, body)

    async def update_stanza(self, stanza_id: uuid.UUID, body: str, user_id: uuid.UUID) -> Stanza:
        """Обновление текста строфы"""
        stanza = await self._get_owned_stanza(stanza_id, user_id)
        return await self.stanza_repository.update_body(stanza_id, stanza.poem_id, body)

    async def delete_stanza(self, stanza_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Удаление строфы"""
        stanza = await self._get_owned_stanza(stanza_id, user_id)
        await self.stanza_repository.delete(stanza_id, stanza.poem_id)
