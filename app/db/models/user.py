from sqlalchemy import Column, String, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship

from app.core.db import Base
from app.db.base import BaseModel


# Связь "кто на кого подписан"
follows = Table(
    "follows",
    Base.metadata,
    Column("follower_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("following_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_pic = Column(String(512), default="", nullable=False)

    # Relationships
    poems = relationship("Poem", back_populates="owner", cascade="all, delete-orphan")
    following = relationship(
        "User",
        secondary=follows,
        primaryjoin=lambda: User.id == follows.c.follower_id,
        secondaryjoin=lambda: User.id == follows.c.following_id,
        back_populates="followers",
    )
    followers = relationship(
        "User",
        secondary=follows,
        primaryjoin=lambda: User.id == follows.c.following_id,
        secondaryjoin=lambda: User.id == follows.c.follower_id,
        back_populates="following",
    )
