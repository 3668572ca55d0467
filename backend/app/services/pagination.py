"""
Page/per-page helpers shared by list endpoints.
"""
import math
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Query


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def pagination_meta(page: int, per_page: int, total: int) -> Dict[str, int]:
    """Metadata block returned next to every paginated list."""
    return {
        "current_page": page,
        "per_page": per_page,
        "total_items": total,
        "total_pages": max(1, math.ceil(total / per_page)),
    }


def paginate_query(query: Query, page: int, per_page: int) -> Tuple[List[Any], Dict[str, int]]:
    """Count, then fetch one page of an ORM query."""
    page = max(1, page)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return items, pagination_meta(page, per_page, total)


def paginate_list(items: List[Any], page: int, per_page: int) -> Tuple[List[Any], Dict[str, int]]:
    """Slice an already materialized list."""
    page = max(1, page)
    start = (page - 1) * per_page
    return items[start:start + per_page], pagination_meta(page, per_page, len(items))
