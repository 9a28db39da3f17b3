"""Page/limit parsing for user listings."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from trailsocial.core.errors import InvalidQuery

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidQuery(f"Bad request - invalid {field}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        raise InvalidQuery(f"Bad request - invalid {field}") from None


@dataclass(frozen=True)
class PageQuery:
    """
    Recognized listing parameters.

    ``limit == 0`` disables pagination and returns every record on page 1.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        if self.page < 1:
            raise InvalidQuery("Bad request - invalid page")
        if self.limit < 0:
            raise InvalidQuery("Bad request - invalid limit")

    @classmethod
    def from_params(cls, page: Any = None, limit: Any = None, *, default_limit: int = DEFAULT_LIMIT) -> "PageQuery":
        """Build a query from raw request values (strings, ints or None)."""
        page_value = DEFAULT_PAGE if page in (None, "") else _as_int(page, "page")
        limit_value = default_limit if limit in (None, "") else _as_int(limit, "limit")
        return cls(page=page_value, limit=limit_value)

    @property
    def paginated(self) -> bool:
        return self.limit != 0

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total_results: int) -> int:
        if not self.paginated:
            return 1
        return max(1, math.ceil(total_results / self.limit))
