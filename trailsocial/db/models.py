"""SQLAlchemy models for users and their social-graph edges."""
from __future__ import annotations

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base

USERNAME_MAX = 15
NAME_MAX = 50
AVATAR_URL_MAX = 200
LIKE_KINDS = ("comments", "routes", "pois")


def _new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    username = Column(String(USERNAME_MAX), unique=True, nullable=False)
    name = Column(String(NAME_MAX), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(AVATAR_URL_MAX), nullable=True)
    salt = Column(String(64), nullable=False)
    hash = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    following = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all,delete-orphan",
        passive_deletes=True,
    )
    followers = relationship(
        "Follow",
        foreign_keys="Follow.followed_id",
        back_populates="followed",
        cascade="all,delete-orphan",
        passive_deletes=True,
    )
    likes = relationship("Like", back_populates="user", cascade="all,delete-orphan", passive_deletes=True)


class Follow(Base):
    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "followed_id", name="uq_follows_pair"),
        Index("ix_follows_followed_id", "followed_id"),
    )

    id = Column(String(32), primary_key=True, default=_new_id)
    follower_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    followed_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="following")
    followed = relationship("User", foreign_keys=[followed_id], back_populates="followers")


class Like(Base):
    """One row per (user, target kind, target id); kinds share a single table."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "target_kind", "target_id", name="uq_likes_user_target"),
        CheckConstraint(
            "target_kind IN ('comments', 'routes', 'pois')",
            name="ck_likes_target_kind",
        ),
        Index("ix_likes_target", "target_kind", "target_id"),
    )

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_kind = Column(String(16), nullable=False)
    # Routes, comments and POIs live outside this schema; the id is an opaque reference.
    target_id = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="likes")
