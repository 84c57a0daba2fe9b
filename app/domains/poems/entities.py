import uuid
from datetime import datetime
from typing import Optional, List

from app.db.base import utc_now

DEFAULT_POEM_TITLE = "Untitled Poem"


class Stanza:
    """Строфа стихотворения"""

    def __init__(
        self,
        id: uuid.UUID,
        poem_id: uuid.UUID,
        body: str,
        position: int,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.poem_id = poem_id
        self.body = body
        self.position = position
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or utc_now()

    def __repr__(self) -> str:
        return f"Stanza(id={self.id}, poem_id={self.poem_id}, position={self.position})"


class PoemAuthor:
    """Автор стихотворения в том виде, в каком его видят читатели"""

    def __init__(self, id: uuid.UUID, username: str, profile_pic: str = ""):
        self.id = id
        self.username = username
        self.profile_pic = profile_pic


class Poem:
    """Сущность стихотворения домена Poems"""

    def __init__(
        self,
        id: uuid.UUID,
        owner_id: uuid.UUID,
        title: str = DEFAULT_POEM_TITLE,
        is_draft: bool = True,
        stanzas: Optional[List[Stanza]] = None,
        owner: Optional[PoemAuthor] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.owner_id = owner_id
        self.title = title
        self.is_draft = is_draft
        self.stanzas = sorted(stanzas or [], key=lambda s: s.position)
        self.owner = owner
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or utc_now()

    def is_owned_by(self, user_id: Optional[uuid.UUID]) -> bool:
        """Является ли пользователь владельцем"""
        return user_id is not None and self.owner_id == user_id

    def is_visible_to(self, user_id: Optional[uuid.UUID]) -> bool:
        """Черновики видит только владелец"""
        return not self.is_draft or self.is_owned_by(user_id)

    @staticmethod
    def normalize_title(title: Optional[str]) -> str:
        """Пустой заголовок заменяется заглушкой"""
        if title is None or not title.strip():
            return DEFAULT_POEM_TITLE
        return title.strip()

    @classmethod
    def create_poem(cls, owner_id: uuid.UUID, title: Optional[str] = None) -> "Poem":
        """Создание нового пустого стихотворения (черновик)"""
        return cls(
            id=uuid.uuid4(),
            owner_id=owner_id,
            title=cls.normalize_title(title),
            is_draft=True
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Poem):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Poem(id={self.id}, title={self.title}, stanzas={len(self.stanzas)})"
