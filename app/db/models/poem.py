from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.db.base import BaseModel
from app.domains.poems.entities import DEFAULT_POEM_TITLE


class Poem(BaseModel):
    __tablename__ = "poems"

    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(255), default=DEFAULT_POEM_TITLE, nullable=False)
    is_draft = Column(Boolean, default=True, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="poems")
    stanzas = relationship(
        "Stanza",
        back_populates="poem",
        order_by="Stanza.position",
        cascade="all, delete-orphan",
    )


class Stanza(BaseModel):
    __tablename__ = "stanzas"

    poem_id = Column(Uuid, ForeignKey("poems.id", ondelete="CASCADE"), index=True, nullable=False)
    body = Column(Text, default="", nullable=False)
    position = Column(Integer, nullable=False)

    # Relationships
    poem = relationship("Poem", back_populates="stanzas")
