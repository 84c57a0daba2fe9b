import re
import uuid
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

from app.core.exceptions import NotFound

DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

T = TypeVar("T")


def parse_limit(raw: Union[str, int, None]) -> int:
    """Размер страницы из строки запроса: ведущее целое, по умолчанию 10, в пределах [1, 50]"""
    if raw is None:
        return DEFAULT_LIMIT

    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(raw)
        if match is None:
            return DEFAULT_LIMIT
        value = int(match.group(1))

    return min(max(value, MIN_LIMIT), MAX_LIMIT)


def parse_cursor(raw: Optional[str]) -> Optional[uuid.UUID]:
    """Курсор: пустое значение означает первую страницу"""
    if raw is None or not raw.strip():
        return None
    try:
        return uuid.UUID(raw.strip())
    except ValueError:
        raise NotFound("Cursor not found")


@dataclass(frozen=True)
class PageRequest:
    limit: int = DEFAULT_LIMIT
    cursor: Optional[uuid.UUID] = None

    @classmethod
    def from_params(cls, cursor: Optional[str] = None, limit: Union[str, int, None] = None) -> "PageRequest":
        return cls(limit=parse_limit(limit), cursor=parse_cursor(cursor))

    @property
    def fetch_size(self) -> int:
        # на одну запись больше, чтобы узнать, есть ли следующая страница
        return self.limit + 1


@dataclass
class Page(Generic[T]):
    items: List[T]
    next_cursor: Optional[str]
    total_count: int


def slice_page(rows: List[T], limit: int, total_count: int, key=lambda row: row.id) -> Page[T]:
    """Отрезает лишнюю запись и вычисляет курсор следующей страницы"""
    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = str(key(items[-1])) if has_more else None
    return Page(items=items, next_cursor=next_cursor, total_count=total_count)
