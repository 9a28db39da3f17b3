"""Follow and like edges backed by SQLAlchemy."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError

from trailsocial.core.errors import (
    AlreadyFollowing,
    AlreadyLiked,
    ConstraintViolation,
    FollowConstraintViolation,
    LikeConstraintViolation,
    MissingField,
    NotFollowing,
    NotFound,
    NotLiked,
)
from trailsocial.db.models import Follow, Like, User
from trailsocial.db.session import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    Store,
    integrity_violation_kind,
)
from trailsocial.domain.relationships import (
    FollowEdge,
    LikeCollections,
    LikeEdge,
    LikeKind,
    LikeTarget,
)
from trailsocial.domain.users import UserSummary

logger = logging.getLogger(__name__)


class RelationshipRepository:
    """
    Owns follow and like edges.

    Edges only reference users (and opaque route/comment/poi ids); at most one
    edge exists per (source, target, kind), enforced by unique constraints.
    """

    def __init__(self, store: Store) -> None:
        self.store = store

    # -------------------------- follows --------------------------
    def follow(self, follower_id: str, followed_id: Optional[str]) -> FollowEdge:
        if not followed_id:
            raise MissingField("follow")
        with self.store.session() as session:
            if self._get_follow(session, follower_id, followed_id):
                raise AlreadyFollowing()
            entity = Follow(
                follower_id=follower_id,
                followed_id=followed_id,
                created_at=datetime.now(timezone.utc),
            )
            session.add(entity)
            self._commit_edge(session, FollowConstraintViolation, f"Follow {follower_id} -> {followed_id}")
            session.refresh(entity)
            return FollowEdge(
                id=entity.id,
                follower_id=entity.follower_id,
                followed_id=entity.followed_id,
                created_at=entity.created_at,
            )

    def unfollow(self, follower_id: str, followed_id: Optional[str]) -> None:
        if not followed_id:
            raise MissingField("follow")
        with self.store.session() as session:
            entity = self._get_follow(session, follower_id, followed_id)
            if not entity:
                raise NotFollowing()
            session.delete(entity)
            session.commit()

    def is_following(self, follower_id: str, followed_id: str) -> bool:
        with self.store.session() as session:
            return self._get_follow(session, follower_id, followed_id) is not None

    def list_following(self, user_id: str) -> list[FollowEdge]:
        """Edges where ``user_id`` is the follower, each carrying the followed user."""
        stmt = (
            select(Follow, User)
            .join(User, User.id == Follow.followed_id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        )
        return self._list_edges(stmt)

    def list_followers(self, user_id: str) -> list[FollowEdge]:
        """Edges where ``user_id`` is followed, each carrying the follower."""
        stmt = (
            select(Follow, User)
            .join(User, User.id == Follow.follower_id)
            .where(Follow.followed_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
        )
        return self._list_edges(stmt)

    # -------------------------- likes --------------------------
    def like(self, user_id: str, target: LikeTarget) -> LikeEdge:
        if not target.target_id:
            raise MissingField("target_id")
        kind = LikeKind(target.kind)
        with self.store.session() as session:
            if self._get_like(session, user_id, kind, target.target_id):
                raise AlreadyLiked()
            entity = Like(
                user_id=user_id,
                target_kind=kind.value,
                target_id=target.target_id,
                created_at=datetime.now(timezone.utc),
            )
            session.add(entity)
            self._commit_edge(session, LikeConstraintViolation, f"Like {user_id} -> {kind.value}/{target.target_id}")
            session.refresh(entity)
            return LikeEdge.from_entity(entity)

    def unlike(self, user_id: str, target: LikeTarget) -> None:
        if not target.target_id:
            raise MissingField("target_id")
        with self.store.session() as session:
            entity = self._get_like(session, user_id, LikeKind(target.kind), target.target_id)
            if not entity:
                raise NotLiked()
            session.delete(entity)
            session.commit()

    def list_likes(self, user_id: str, kind: LikeKind | str | None = None) -> LikeCollections:
        """
        Return the user's likes grouped by target kind, newest first.

        With a kind only that collection is populated. Without one, all three
        kinds are read in a single query and partitioned.
        """
        selected = LikeKind.parse(kind)
        stmt = select(Like).where(Like.user_id == user_id)
        if selected is not None:
            stmt = stmt.where(Like.target_kind == selected.value)
        stmt = stmt.order_by(Like.created_at.desc(), Like.id.desc())
        with self.store.session() as session:
            rows = session.execute(stmt).scalars().all()
            edges = [LikeEdge.from_entity(row) for row in rows]

        grouped: dict[str, list[LikeEdge]] = {}
        for member in ([selected] if selected is not None else list(LikeKind)):
            grouped[member.value] = []
        for edge in edges:
            grouped[edge.target.kind.value].append(edge)
        return LikeCollections(**grouped)

    # -------------------------- cleanup --------------------------
    def remove_edges_for_user(self, user_id: str) -> int:
        """Delete every follow touching the user and every like the user made."""
        with self.store.session() as session:
            follows = session.execute(
                delete(Follow).where(or_(Follow.follower_id == user_id, Follow.followed_id == user_id))
            )
            likes = session.execute(delete(Like).where(Like.user_id == user_id))
            session.commit()
            return (follows.rowcount or 0) + (likes.rowcount or 0)

    # -------------------------- helpers --------------------------
    def _commit_edge(self, session, violation: type[ConstraintViolation], label: str) -> None:
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            kind = integrity_violation_kind(exc)
            if kind == FOREIGN_KEY_VIOLATION:
                logger.warning("%s references a missing user", label)
                raise NotFound("User not found") from exc
            if kind == UNIQUE_VIOLATION:
                logger.warning("%s lost a uniqueness race", label)
                raise violation() from exc
            raise

    def _get_follow(self, session, follower_id: str, followed_id: str) -> Optional[Follow]:
        stmt = select(Follow).where(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
        return session.execute(stmt).scalar_one_or_none()

    def _get_like(self, session, user_id: str, kind: LikeKind, target_id: str) -> Optional[Like]:
        stmt = select(Like).where(
            Like.user_id == user_id,
            Like.target_kind == kind.value,
            Like.target_id == target_id,
        )
        return session.execute(stmt).scalar_one_or_none()

    def _list_edges(self, stmt) -> list[FollowEdge]:
        with self.store.session() as session:
            return [
                FollowEdge(
                    id=follow.id,
                    follower_id=follow.follower_id,
                    followed_id=follow.followed_id,
                    created_at=follow.created_at,
                    user=UserSummary.from_entity(user),
                )
                for follow, user in session.execute(stmt).all()
            ]
