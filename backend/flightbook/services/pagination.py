import math
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from flightbook.models.flight import Flight
from flightbook.reference import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, MAX_PAGE


@dataclass
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(value: Optional[str], default: int, maximum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number <= 0:
        return default
    return min(number, maximum)


def parse_pagination(page: Optional[str] = None, limit: Optional[str] = None) -> PageParams:
    """
    Zero, negative or non-numeric inputs fall back to the defaults (1, 3).
    Oversized values are clamped to MAX_PAGE / MAX_LIMIT.
    """
    return PageParams(
        page=_positive_int(page, DEFAULT_PAGE, MAX_PAGE),
        limit=_positive_int(limit, DEFAULT_LIMIT, MAX_LIMIT),
    )


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)


def pagination_payload(total: int, params: PageParams) -> dict:
    return {
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "totalPages": total_pages(total, params.limit),
    }


def paginate_flights(db: Session, conditions: list, order_by, params: PageParams) -> Tuple[int, List[Any]]:
    """Count every match first, then fetch one ordered page with the same conditions."""
    total = db.query(func.count(Flight.flight_id)).filter(*conditions).scalar() or 0

    rows = (
        db.query(Flight)
        .filter(*conditions)
        .order_by(order_by)
        .limit(params.limit)
        .offset(params.offset)
        .all()
    )
    return total, rows
