from app.db.models.user import User, follows
from app.db.models.poem import Poem, Stanza

__all__ = [
    "User",
    "follows",
    "Poem",
    "Stanza"
]
