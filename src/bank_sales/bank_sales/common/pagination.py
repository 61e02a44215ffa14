from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from .validators import parse_positive_int


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_request(
    page: Any = None,
    limit: Any = None,
    *,
    default_limit: int = DEFAULT_PAGE_LIMIT,
    max_limit: int = MAX_PAGE_LIMIT,
) -> PageRequest:
    """Build a PageRequest. page/limit below 1 are rejected; limit above max is clamped."""
    p = DEFAULT_PAGE if page in (None, "") else parse_positive_int(page, "page")
    n = default_limit if limit in (None, "") else parse_positive_int(limit, "limit")
    return PageRequest(page=p, limit=min(n, max_limit))
