from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, Uuid

from app.core.db import Base


def utc_now() -> datetime:
    """Текущее время в UTC (наивное, как хранится в БД)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(Base):
    """Общие колонки: идентификатор и метки времени"""
    __abstract__ = True

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
