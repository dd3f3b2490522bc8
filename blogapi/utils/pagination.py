# blogapi/utils/pagination.py
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class Pagination:
    """Page window plus the totals reported to the client."""
    page: int
    limit: int
    total: int = 0

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        if self.total <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    def with_total(self, total: int) -> 'Pagination':
        return Pagination(page=self.page, limit=self.limit, total=total)

    def to_dict(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_pagination_args(args: Mapping[str, Any], default_limit: int = DEFAULT_LIMIT,
                          max_limit: int = MAX_LIMIT) -> Pagination:
    """Reads ``page``/``limit`` query parameters. Invalid or non-positive values fall back to defaults."""
    page = _positive_int(args.get('page'), DEFAULT_PAGE)
    limit = min(_positive_int(args.get('limit'), default_limit), max_limit)
    return Pagination(page=page, limit=limit)


def paginate(items: Sequence[Any], pagination: Pagination) -> Tuple[List[Any], Pagination]:
    """Slices an already filtered, already ordered sequence."""
    start = pagination.offset
    return list(items[start:start + pagination.limit]), pagination.with_total(len(items))
