"""
Account and social-graph use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from trailsocial.core.config import Settings, get_settings
from trailsocial.core.errors import IncorrectPassword, MissingField, NotFound, UsernameNotFound
from trailsocial.core.security import valid_password
from trailsocial.db.session import Store
from trailsocial.domain.pagination import PageQuery
from trailsocial.domain.relationships import FollowEdge, LikeCollections, LikeEdge, LikeKind, LikeTarget
from trailsocial.domain.users import NewUser, ProfileUpdate, UserPage, UserProfile
from trailsocial.repositories.relationship_repository import RelationshipRepository
from trailsocial.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class LoginSuccess:
    user_id: str
    username: str


@dataclass
class AccountService:
    """Handles registration, login, profile changes and the follow/like graph."""

    store: Store
    settings: Optional[Settings] = None

    def __post_init__(self):
        self.settings = self.settings or get_settings()
        self.users = UserRepository(self.store, default_avatar_url=self.settings.default_avatar_url)
        self.relationships = RelationshipRepository(self.store)

    # -------------------------------------- helpers --------------------------------------
    def _require_user(self, user_id: str) -> None:
        if not self.users.exists(user_id):
            raise NotFound()

    # -------------------------------------- registration --------------------------------------
    def register(self, fields: NewUser | dict[str, Any]) -> UserProfile:
        if isinstance(fields, dict):
            fields = NewUser(**fields)
        user = self.users.create(fields)
        logger.info("Registered user %s (%s)", user.username, user.id)
        return user

    # -------------------------------------- login --------------------------------------
    def authenticate(self, username: Optional[str], password: Optional[str]) -> LoginSuccess:
        raw_username = (username or "").strip()
        missing = [name for name, value in (("username", raw_username), ("password", password)) if not value]
        if missing:
            raise MissingField(*missing)
        credentials = self.users.get_credentials(raw_username)
        if not credentials:
            logger.warning("Login attempt for unknown username %r", raw_username)
            raise UsernameNotFound()
        if not valid_password(password, credentials.hash, credentials.salt):
            logger.warning("Incorrect password for %r", raw_username)
            raise IncorrectPassword()
        return LoginSuccess(user_id=credentials.user_id, username=credentials.username)

    # -------------------------------------- users --------------------------------------
    def list_users(self, page: Any = None, limit: Any = None) -> UserPage:
        query = PageQuery.from_params(page, limit, default_limit=self.settings.users_page_limit)
        return self.users.list(query)

    def get_user(self, username: str) -> UserProfile:
        user = self.users.find_by_username((username or "").strip())
        if not user:
            raise NotFound()
        return user

    def get_user_by_id(self, user_id: str) -> UserProfile:
        user = self.users.find_by_id(user_id)
        if not user:
            raise NotFound()
        return user

    def update_profile(self, user_id: str, fields: ProfileUpdate | dict[str, Any]) -> UserProfile:
        if isinstance(fields, dict):
            fields = ProfileUpdate(**fields)
        user = self.users.update(user_id, fields)
        if fields.password:
            logger.info("Password changed for user %s", user_id)
        return user

    def remove_account(self, user_id: str) -> None:
        """Hard delete; the user's follow and like edges go with it."""
        self._require_user(user_id)
        removed = self.relationships.remove_edges_for_user(user_id)
        self.users.delete(user_id)
        logger.info("Removed user %s and %d edge(s)", user_id, removed)

    # -------------------------------------- follows --------------------------------------
    def follow(self, user_id: str, followed_id: Optional[str]) -> FollowEdge:
        if not followed_id:
            raise MissingField("follow")
        self._require_user(user_id)
        self._require_user(followed_id)
        edge = self.relationships.follow(user_id, followed_id)
        logger.info("User %s followed %s", user_id, followed_id)
        return edge

    def unfollow(self, user_id: str, followed_id: Optional[str]) -> None:
        self.relationships.unfollow(user_id, followed_id)
        logger.info("User %s unfollowed %s", user_id, followed_id)

    def list_following(self, user_id: str) -> list[FollowEdge]:
        return self.relationships.list_following(user_id)

    def list_followers(self, user_id: str) -> list[FollowEdge]:
        return self.relationships.list_followers(user_id)

    # -------------------------------------- likes --------------------------------------
    def list_likes(self, user_id: str, kind: LikeKind | str | None = None) -> LikeCollections:
        return self.relationships.list_likes(user_id, kind)

    def like(self, user_id: str, target: LikeTarget) -> LikeEdge:
        self._require_user(user_id)
        return self.relationships.like(user_id, target)

    def unlike(self, user_id: str, target: LikeTarget) -> None:
        self.relationships.unlike(user_id, target)
