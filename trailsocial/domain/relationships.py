"""Follow/like edge types and the polymorphic like target."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from trailsocial.core.errors import InvalidQuery
from trailsocial.domain.users import UserSummary


class LikeKind(str, Enum):
    COMMENT = "comments"
    ROUTE = "routes"
    POI = "pois"

    @classmethod
    def parse(cls, value: "LikeKind | str | None") -> Optional["LikeKind"]:
        """None/blank means "every kind"; anything unknown is an InvalidQuery."""
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            raise InvalidQuery("Bad request - invalid like type") from None


@dataclass(frozen=True)
class LikeTarget:
    """Comment(id) | Route(id) | Poi(id)."""

    kind: LikeKind
    target_id: str

    @classmethod
    def comment(cls, target_id: str) -> "LikeTarget":
        return cls(LikeKind.COMMENT, target_id)

    @classmethod
    def route(cls, target_id: str) -> "LikeTarget":
        return cls(LikeKind.ROUTE, target_id)

    @classmethod
    def poi(cls, target_id: str) -> "LikeTarget":
        return cls(LikeKind.POI, target_id)


@dataclass(frozen=True)
class FollowEdge:
    id: str
    follower_id: str
    followed_id: str
    created_at: datetime
    # The side that is not the queried user; None on a freshly created edge.
    user: Optional[UserSummary] = None


@dataclass(frozen=True)
class LikeEdge:
    id: str
    user_id: str
    target: LikeTarget
    created_at: datetime

    @classmethod
    def from_entity(cls, entity) -> "LikeEdge":
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            target=LikeTarget(LikeKind(entity.target_kind), entity.target_id),
            created_at=entity.created_at,
        )


@dataclass(frozen=True)
class LikeCollections:
    """Collections that were not requested stay None."""

    comments: Optional[list[LikeEdge]] = None
    routes: Optional[list[LikeEdge]] = None
    pois: Optional[list[LikeEdge]] = None
