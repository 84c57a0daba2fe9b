import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.http import auth_router, users_router, poems_router, stanzas_router
from app.core.config import settings
from app.core.db import Base, engine
from app.core.exceptions import Internal, PoitError
from app.core.logging_config import configure_logging
from app.db import models  # noqa: F401  регистрация моделей в Base.metadata

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    if settings.create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema is ready")
    yield
    await engine.dispose()


app = FastAPI(
    title="Po-it",
    description="Социальная сеть для публикации стихов",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@app.exception_handler(PoitError)
async def poit_error_handler(request: Request, exc: PoitError):
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid input") if errors else "Invalid input"
    return _error(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error(Internal.status_code, Internal.default_message)


# Подключаем роутеры
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(poems_router)
app.include_router(stanzas_router)


@app.get("/health")
async def health():
    """Проверка работоспособности"""
    return {"status": "ok"}
