"""Аудитории списка стихов и фильтры, которые они порождают.

Аудитория определяет, чьи стихи попадают в выдачу. Каждый вариант до
выполнения запроса превращается в неизменяемый PoemFilter; репозиторий
работает только с фильтром.
"""

import uuid
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Union


@dataclass(frozen=True)
class OwnPoems:
    """Стихи текущего пользователя, включая черновики"""
    user_id: uuid.UUID


@dataclass(frozen=True)
class AllPoems:
    """Все опубликованные стихи"""


@dataclass(frozen=True)
class FeedPoems:
    """Лента: стихи авторов, на которых подписан пользователь, и его собственные"""
    requester_id: uuid.UUID


@dataclass(frozen=True)
class UserPoems:
    """Стихи конкретного пользователя"""
    target_user_id: uuid.UUID


Audience = Union[OwnPoems, AllPoems, FeedPoems, UserPoems]


def requires_requester(audience: Audience) -> bool:
    return isinstance(audience, (OwnPoems, FeedPoems))


@dataclass(frozen=True)
class PoemFilter:
    """Готовый к выполнению фильтр выборки стихов.

    owner_ids = None означает любого владельца. visible_to скрывает чужие
    черновики; include_drafts отключает эту проверку.
    """
    owner_ids: Optional[FrozenSet[uuid.UUID]] = None
    include_drafts: bool = False
    visible_to: Optional[uuid.UUID] = None
    search_term: Optional[str] = None
    search_usernames: bool = False

    @property
    def is_search(self) -> bool:
        return self.search_term is not None


def build_filter(
    audience: Audience,
    requester_id: Optional[uuid.UUID] = None,
    search_term: Optional[str] = None,
    following_ids: Iterable[uuid.UUID] = (),
) -> PoemFilter:
    """Построение фильтра для аудитории (following_ids нужны только ленте)"""
    if isinstance(audience, OwnPoems):
        return PoemFilter(
            owner_ids=frozenset([audience.user_id]),
            include_drafts=True,
            search_term=search_term,
        )

    if isinstance(audience, UserPoems):
        return PoemFilter(
            owner_ids=frozenset([audience.target_user_id]),
            visible_to=requester_id,
            search_term=search_term,
        )

    if isinstance(audience, FeedPoems):
        return PoemFilter(
            owner_ids=frozenset(following_ids) | {audience.requester_id},
            visible_to=audience.requester_id,
            search_term=search_term,
            search_usernames=True,
        )

    if isinstance(audience, AllPoems):
        return PoemFilter(
            visible_to=requester_id,
            search_term=search_term,
            search_usernames=True,
        )

    raise TypeError(f"Unknown audience: {audience!r}")
