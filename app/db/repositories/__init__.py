from app.db.repositories.user_repository import UserRepository
from app.db.repositories.poem_repository import PoemRepository, StanzaRepository

__all__ = [
    "UserRepository",
    "PoemRepository",
    "StanzaRepository"
]
