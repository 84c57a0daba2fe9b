"""Разметка совпадений поиска для страницы стихов.

Поиск в БД только отбирает стихи; здесь для каждой строфы найденного
стихотворения вычисляется фрагмент текста вокруг первого совпадения и
позиция совпадения внутри фрагмента.
"""

import re
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from app.domains.poems.entities import Poem

SNIPPET_CONTEXT = 50
ELLIPSIS = "..."


@dataclass(frozen=True)
class StanzaMatch:
    id: uuid.UUID
    position: int
    snippet: str
    match_index: int


@dataclass(frozen=True)
class SearchMatches:
    title_match: bool
    username_match: Optional[bool] = None
    matching_stanzas: List[StanzaMatch] = field(default_factory=list)


def normalize_search_term(raw: Optional[str]) -> Optional[str]:
    """Обрезка пробелов; пустая строка означает отсутствие поиска"""
    if raw is None:
        return None
    term = raw.strip()
    return term or None


def contains_ignore_case(text: Optional[str], term: str) -> bool:
    if not text or not term:
        return False
    return re.search(re.escape(term), text, re.IGNORECASE) is not None


def extract_snippet(body: str, term: str, context: int = SNIPPET_CONTEXT) -> Optional[Tuple[str, int]]:
    """Фрагмент вокруг первого совпадения и индекс совпадения внутри фрагмента.

    Окно захватывает до ``context`` символов до и после совпадения; обрезанные
    края помечаются многоточием. Возвращает None, если совпадения нет.
    """
    if not body or not term:
        return None

    # индексы считаются по исходному тексту, не по body.lower()
    match = re.search(re.escape(term), body, re.IGNORECASE)
    if match is None:
        return None

    start = max(0, match.start() - context)
    end = min(len(body), match.end() + context)

    snippet = body[start:end]
    match_index = match.start() - start

    if start > 0:
        snippet = ELLIPSIS + snippet
        match_index += len(ELLIPSIS)
    if end < len(body):
        snippet = snippet + ELLIPSIS

    return snippet, match_index


def annotate_poem(poem: Poem, term: str, include_username: bool = False) -> SearchMatches:
    """Совпадения поиска в заголовке, имени автора и строфах"""
    matching_stanzas = []
    for stanza in poem.stanzas:
        found = extract_snippet(stanza.body, term)
        if found is None:
            continue
        snippet, match_index = found
        matching_stanzas.append(
            StanzaMatch(id=stanza.id, position=stanza.position, snippet=snippet, match_index=match_index)
        )

    username_match = None
    if include_username:
        username = poem.owner.username if poem.owner else None
        username_match = contains_ignore_case(username, term)

    return SearchMatches(
        title_match=contains_ignore_case(poem.title, term),
        username_match=username_match,
        matching_stanzas=matching_stanzas,
    )
