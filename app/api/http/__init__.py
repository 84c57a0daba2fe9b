from app.api.http.auth import router as auth_router
from app.api.http.users import router as users_router
from app.api.http.poems import router as poems_router
from app.api.http.stanzas import router as stanzas_router

__all__ = [
    "auth_router",
    "users_router",
    "poems_router",
    "stanzas_router"
]
