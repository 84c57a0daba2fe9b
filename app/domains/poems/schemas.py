from typing import Optional, List
import uuid
from datetime import datetime

from pydantic import Field

from app.domains.identity.schemas import CamelModel, UserPublic
from app.domains.poems.pagination import Page
from app.domains.poems.search import SearchMatches
from app.domains.poems.entities import Poem


class PoemCreate(CamelModel):
    """Схема для создания стихотворения"""
    title: Optional[str] = Field(None, max_length=255)


class PoemTitleUpdate(CamelModel):
    """Схема для обновления заголовка"""
    title: Optional[str] = Field(None, max_length=255)


class StanzaReorder(CamelModel):
    """Полный список id строф в новом порядке"""
    stanza_ids: List[uuid.UUID]


class StanzaCreate(CamelModel):
    """Схема для добавления строфы"""
    poem_id: uuid.UUID
    body: str = Field(..., max_length=10000)


class StanzaUpdate(CamelModel):
    """Схема для обновления строфы"""
    body: str = Field(..., max_length=10000)


class StanzaResponse(CamelModel):
    """Схема для ответа с данными строфы"""
    id: uuid.UUID
    poem_id: uuid.UUID
    body: str
    position: int
    created_at: datetime
    updated_at: datetime


class StanzaMatchResponse(CamelModel):
    id: uuid.UUID
    position: int
    snippet: str
    match_index: int


class SearchMatchesResponse(CamelModel):
    title_match: bool
    username_match: Optional[bool] = None
    matching_stanzas: List[StanzaMatchResponse]

    @classmethod
    def from_matches(cls, matches: SearchMatches) -> "SearchMatchesResponse":
        return cls(
            title_match=matches.title_match,
            username_match=matches.username_match,
            matching_stanzas=[
                StanzaMatchResponse(
                    id=m.id, position=m.position, snippet=m.snippet, match_index=m.match_index
                )
                for m in matches.matching_stanzas
            ]
        )


class PoemResponse(CamelModel):
    """Схема для ответа с данными стихотворения"""
    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    is_draft: bool
    created_at: datetime
    updated_at: datetime
    stanzas: List[StanzaResponse]
    user: Optional[UserPublic] = None
    is_owner: bool = False
    search_matches: Optional[SearchMatchesResponse] = None

    @classmethod
    def from_poem(
        cls,
        poem: Poem,
        is_owner: bool,
        search_matches: Optional[SearchMatches] = None
    ) -> "PoemResponse":
        return cls(
            id=poem.id,
            owner_id=poem.owner_id,
            title=poem.title,
            is_draft=poem.is_draft,
            created_at=poem.created_at,
            updated_at=poem.updated_at,
            stanzas=[StanzaResponse.model_validate(s) for s in poem.stanzas],
            user=UserPublic.model_validate(poem.owner) if poem.owner else None,
            is_owner=is_owner,
            search_matches=(
                SearchMatchesResponse.from_matches(search_matches) if search_matches else None
            )
        )


class PoemListResponse(CamelModel):
    """Страница стихов"""
    poems: List[PoemResponse]
    next_cursor: Optional[str] = None
    total_count: int

    @classmethod
    def from_page(cls, page: Page) -> "PoemListResponse":
        return cls(
            poems=[
                PoemResponse.from_poem(item.poem, item.is_owner, item.search_matches)
                for item in page.items
            ],
            next_cursor=page.next_cursor,
            total_count=page.total_count
        )
