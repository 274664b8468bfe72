"""Parsing de fechas scrapeadas.

Dos variantes:
- `parse_date`: formatos absolutos conocidos (`strptime`).
- `parse_relative_date`: textos tipo "3 days ago", "yesterday".

Ninguna lanza: si el texto no se entiende devuelven `None`.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Iterable

DEFAULT_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
)

_RELATIVE_RE = re.compile(
    r"(\d+|an?|one)\s*(second|sec|minute|min|hour|day|week|month|year)s?\s+ago",
    re.IGNORECASE,
)

_UNIT_SECONDS = {
    "second": 1,
    "sec": 1,
    "minute": 60,
    "min": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "year": 365 * 86400,
}


def parse_date(text: str | None, formats: Iterable[str] = DEFAULT_FORMATS) -> datetime | None:
    """Prueba cada formato en orden y devuelve el primero que encaja."""

    if not text:
        return None
    s = " ".join(str(text).split())
    for fmt in formats:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def parse_relative_date(text: str | None, *, now: datetime | None = None) -> datetime | None:
    """Entiende "N <unidad> ago", "today" y "yesterday"; si no, cae a `parse_date`."""

    if not text:
        return None
    now = now or datetime.now()
    s = text.strip().lower()

    if s in ("today", "just now"):
        return now
    if s == "yesterday":
        return now - timedelta(days=1)

    match = _RELATIVE_RE.search(s)
    if match:
        amount_raw, unit = match.group(1), match.group(2)
        amount = int(amount_raw) if amount_raw.isdigit() else 1
        return now - timedelta(seconds=amount * _UNIT_SECONDS[unit])

    return parse_date(text)
