from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Tuple

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def normalize_page(page: int | None, limit: int | None) -> Tuple[int, int]:
    """page <= 0 -> 1; limit <= 0 -> DEFAULT_LIMIT; limit > MAX_LIMIT -> MAX_LIMIT"""
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else DEFAULT_LIMIT
    return page, min(limit, MAX_LIMIT)


def total_pages(total: int, limit: int) -> int:
    return int(math.ceil(total / limit)) if limit > 0 else 0


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    def meta(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }


def paginate(query, order_by, page: int | None, limit: int | None) -> Page:
    """Count, order, slice. `query` is an unordered SQLAlchemy query."""
    page, limit = normalize_page(page, limit)
    total = query.count()
    rows = query.order_by(*order_by).offset((page - 1) * limit).limit(limit).all()
    return Page(items=rows, total=total, page=page, limit=limit)
