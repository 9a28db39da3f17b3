"""User directory backed by SQLAlchemy."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from trailsocial.core.config import DEFAULT_AVATAR_URL
from trailsocial.core.errors import MissingField, NotFound, UsernameConstraintViolation, UsernameTaken
from trailsocial.core.security import generate_salt, hash_password
from trailsocial.db.models import User
from trailsocial.db.session import UNIQUE_VIOLATION, Store, integrity_violation_kind
from trailsocial.domain.pagination import PageQuery
from trailsocial.domain.users import Credentials, NewUser, ProfileUpdate, UserPage, UserProfile

logger = logging.getLogger(__name__)


class UserRepository:
    """Owns user records; username uniqueness is backed by a unique index."""

    def __init__(self, store: Store, *, default_avatar_url: str = DEFAULT_AVATAR_URL) -> None:
        self.store = store
        self.default_avatar_url = default_avatar_url

    # -------------------------- reads --------------------------
    def list(self, query: PageQuery | None = None) -> UserPage:
        query = query or PageQuery()
        with self.store.session() as session:
            total = session.execute(select(func.count()).select_from(User)).scalar_one()
            total_pages = query.total_pages(total)
            if query.paginated and query.page > total_pages:
                raise NotFound()
            stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
            if query.paginated:
                stmt = stmt.offset(query.offset).limit(query.limit)
            rows = session.execute(stmt).scalars().all()
            users = [UserProfile.from_entity(row) for row in rows]
        return UserPage(
            users=users,
            total_pages=total_pages,
            page=query.page if query.paginated else 1,
            total_results=total,
        )

    def count(self) -> int:
        with self.store.session() as session:
            return session.execute(select(func.count()).select_from(User)).scalar_one()

    def find_by_username(self, username: str) -> Optional[UserProfile]:
        with self.store.session() as session:
            entity = self._get_by_username(session, username)
            return UserProfile.from_entity(entity) if entity else None

    def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        with self.store.session() as session:
            entity = session.get(User, user_id) if user_id else None
            return UserProfile.from_entity(entity) if entity else None

    def exists(self, user_id: str) -> bool:
        if not user_id:
            return False
        with self.store.session() as session:
            stmt = select(User.id).where(User.id == user_id).limit(1)
            return session.execute(stmt).first() is not None

    def get_credentials(self, username: str) -> Optional[Credentials]:
        with self.store.session() as session:
            entity = self._get_by_username(session, username)
            if not entity:
                return None
            return Credentials(user_id=entity.id, username=entity.username, hash=entity.hash, salt=entity.salt)

    # -------------------------- writes --------------------------
    def create(self, fields: NewUser) -> UserProfile:
        missing = [name for name in ("username", "password") if not getattr(fields, name)]
        if missing:
            raise MissingField(*missing)
        fields.validate()
        now = datetime.now(timezone.utc)
        salt = generate_salt()
        entity = User(
            username=fields.username,
            name=fields.name,
            bio=fields.bio,
            avatar_url=fields.avatar_url or self.default_avatar_url,
            salt=salt,
            hash=hash_password(fields.password, salt),
            created_at=now,
            updated_at=now,
        )
        with self.store.session() as session:
            if self._get_by_username(session, fields.username):
                raise UsernameTaken()
            session.add(entity)
            self._commit_username(session, fields.username)
            session.refresh(entity)
            return UserProfile.from_entity(entity)

    def update(self, user_id: str, fields: ProfileUpdate) -> UserProfile:
        fields.validate()
        with self.store.session() as session:
            entity = session.get(User, user_id) if user_id else None
            if not entity:
                raise NotFound()
            if fields.username and fields.username != entity.username:
                if self._get_by_username(session, fields.username):
                    raise UsernameTaken()
                entity.username = fields.username
            if fields.password:
                entity.salt = generate_salt()
                entity.hash = hash_password(fields.password, entity.salt)
            if fields.name is not None:
                entity.name = fields.name or None
            if fields.bio is not None:
                entity.bio = fields.bio
            if fields.avatar_url is not None:
                entity.avatar_url = fields.avatar_url or self.default_avatar_url
            entity.updated_at = datetime.now(timezone.utc)
            self._commit_username(session, entity.username)
            session.refresh(entity)
            return UserProfile.from_entity(entity)

    def delete(self, user_id: str) -> None:
        with self.store.session() as session:
            result = session.execute(delete(User).where(User.id == user_id))
            if not result.rowcount:
                session.rollback()
                raise NotFound()
            session.commit()

    # -------------------------- helpers --------------------------
    def _get_by_username(self, session, username: str) -> Optional[User]:
        if not username:
            return None
        stmt = select(User).where(User.username == username)
        return session.execute(stmt).scalar_one_or_none()

    def _commit_username(self, session, username: str) -> None:
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if integrity_violation_kind(exc) != UNIQUE_VIOLATION:
                raise
            logger.warning("Username %r lost a uniqueness race", username)
            raise UsernameConstraintViolation() from exc
