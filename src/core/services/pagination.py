"""Builders de `PaginatedResult`.

Dos variantes, según lo que exponga la fuente:
- `build_page`: el total se infiere del último link del pager HTML (offset `pid`).
  `next`/`previous` se expresan como *offsets* (índice de página × per_page), no
  como números de página: es lo que espera el esquema de URLs del sitio.
- `paginate`: el total de elementos viene dado (APIs JSON). `next`/`previous`
  son números de página.
"""

from __future__ import annotations

import math
from typing import Sequence, TypeVar
from urllib.parse import parse_qs, urlparse

from core.domain.models import PaginatedResult

T = TypeVar("T")

DEFAULT_PER_PAGE = 10
OFFSET_PARAM = "pid"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def extract_offset(href: str | None, param: str = OFFSET_PARAM) -> int | None:
    """Offset del query string del link (`...&pid=40` -> 40); `None` si no hay."""

    if not href:
        return None
    values = parse_qs(urlparse(href.replace("&amp;", "&")).query).get(param)
    if not values:
        # Links relativos raros ("?pid=40" sin path) o fragmentos sueltos.
        _, sep, tail = href.partition(f"{param}=")
        if not sep:
            return None
        values = [tail.split("&", 1)[0]]
    try:
        return int(values[0])
    except ValueError:
        return None


def build_page(
    raw_items: Sequence[T],
    pager_last_href: str | None,
    requested_page: int,
    per_page: int,
) -> PaginatedResult[T]:
    per_page = per_page if per_page >= 1 else DEFAULT_PER_PAGE

    if pager_last_href:
        # Offset no numérico -> se trata como 1 (una sola página).
        offset = extract_offset(pager_last_href)
        total_pages = (offset if offset is not None else 1) // per_page + 1
        total = total_pages * per_page
    else:
        total_pages = 1
        total = len(raw_items)

    page = _clamp(requested_page, 1, total_pages)
    next_index = page + 1 if page < total_pages else None
    previous_index = page - 1 if page > 1 else None

    return PaginatedResult(
        results=list(raw_items),
        total=total,
        page=page,
        pages=total_pages,
        next=next_index * per_page if next_index is not None else 0,
        previous=previous_index * per_page if previous_index is not None else 0,
        has_next_page=next_index is not None,
    )


def paginate(
    results: Sequence[T],
    total: int | None,
    requested_page: int,
    per_page: int,
) -> PaginatedResult[T]:
    per_page = per_page if per_page >= 1 else DEFAULT_PER_PAGE
    total = max(0, total or 0)

    pages = max(1, math.ceil(total / per_page))
    page = _clamp(requested_page, 1, pages)

    return PaginatedResult(
        results=list(results),
        total=total,
        page=page,
        pages=pages,
        next=page + 1 if page < pages else None,
        previous=page - 1 if page > 1 else None,
        has_next_page=page < pages,
    )
