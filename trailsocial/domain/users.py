"""User projections and request-shaped inputs."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from trailsocial.core.errors import InvalidField
from trailsocial.db.models import AVATAR_URL_MAX, NAME_MAX, USERNAME_MAX


@dataclass(frozen=True)
class UserProfile:
    """Public projection: never carries salt or hash."""

    id: str
    username: str
    name: Optional[str]
    bio: Optional[str]
    avatar_url: Optional[str]
    created_at: datetime

    @classmethod
    def from_entity(cls, entity) -> "UserProfile":
        return cls(
            id=entity.id,
            username=entity.username,
            name=entity.name,
            bio=entity.bio,
            avatar_url=entity.avatar_url,
            created_at=entity.created_at,
        )


@dataclass(frozen=True)
class UserSummary:
    """Fields attached to the other side of a follow edge."""

    id: str
    username: str
    avatar_url: Optional[str]
    bio: Optional[str]
    name: Optional[str]

    @classmethod
    def from_entity(cls, entity) -> "UserSummary":
        return cls(
            id=entity.id,
            username=entity.username,
            avatar_url=entity.avatar_url,
            bio=entity.bio,
            name=entity.name,
        )


@dataclass(frozen=True)
class Credentials:
    user_id: str
    username: str
    hash: str = field(repr=False)
    salt: str = field(repr=False)


@dataclass(frozen=True)
class UserPage:
    users: list[UserProfile]
    total_pages: int
    page: int
    total_results: int


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()


def _check_length(field_name: str, value: Optional[str], max_len: int) -> None:
    if value is not None and len(value) > max_len:
        raise InvalidField(field_name, f"{field_name} must be at most {max_len} characters")


@dataclass
class NewUser:
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None

    def __post_init__(self):
        self.username = _clean(self.username)
        self.name = _clean(self.name) or None
        self.avatar_url = _clean(self.avatar_url) or None

    def validate(self) -> None:
        _check_length("username", self.username, USERNAME_MAX)
        _check_length("name", self.name, NAME_MAX)
        _check_length("avatar_url", self.avatar_url, AVATAR_URL_MAX)


@dataclass
class ProfileUpdate:
    """Fields left as None are not touched."""

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None

    def __post_init__(self):
        self.username = _clean(self.username) or None
        self.name = _clean(self.name)
        self.avatar_url = _clean(self.avatar_url)
        self.password = self.password or None

    def validate(self) -> None:
        _check_length("username", self.username, USERNAME_MAX)
        _check_length("name", self.name, NAME_MAX)
        _check_length("avatar_url", self.avatar_url, AVATAR_URL_MAX)

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.username, self.password, self.name, self.bio, self.avatar_url)
        )
