"""Fuente: Rule34 (galería de imágenes).

- Búsqueda paginada por tags; el total de páginas se infiere del pager HTML.
- Autocompletado vía la API JSON `ac.rule34.xxx`.
- Ficha de imagen: se pide la página dos veces (con y sin la cookie de
  "resize") para obtener la imagen original y la redimensionada.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime

import httpx
from bs4 import BeautifulSoup

from adapters.http_client import (
    build_async_client,
    fetch_html,
    response_json,
    select_attr,
    select_text,
    send,
)
from core.config import AppSettings
from core.dates import parse_date
from core.domain.dimension import Dimension
from core.domain.models import PaginatedResult
from core.domain.rule34 import (
    Rule34Autocomplete,
    Rule34Comment,
    Rule34ImageInfo,
    Rule34ImageSizes,
    Rule34SearchResult,
)
from core.errors import ParseFailedError, require_text
from core.services.pagination import build_page
from core.text import split_words

logger = logging.getLogger(__name__)

RESIZE_COOKIES = {"resize-notification": "1", "resize-original": "1"}

_POSTED_RE = re.compile(r"Posted:\s*(?P<date>.+?)\s*by\s+(?P<user>\S.*)", re.DOTALL)


class Rule34Source:
    """Cliente de rule34.xxx."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        base_url: str | None = None,
        api_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.base_url = (base_url or self._settings.rule34_base_url).rstrip("/")
        self.api_url = (api_url or self._settings.rule34_api_url).rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return build_async_client(self._settings, transport=self._transport)

    async def search_autocomplete(self, query: str) -> list[Rule34Autocomplete]:
        query = require_text(query, name="query", step="rule34.search_autocomplete")
        step = "rule34.search_autocomplete"

        async with self._client() as client:
            response = await send(client, "GET", f"{self.api_url}/autocomplete.php", step=step, params={"q": query})
        data = response_json(response, step=step)
        if not isinstance(data, list):
            raise ParseFailedError("autocomplete response is not a list", step=step)

        out: list[Rule34Autocomplete] = []
        for item in data:
            if not isinstance(item, dict) or not item.get("value"):
                logger.debug("Dropping malformed autocomplete entry: %r", item)
                continue
            out.append(
                Rule34Autocomplete(
                    completed_query=str(item["value"]),
                    label=str(item.get("label") or item["value"]),
                    type=str(item.get("type") or ""),
                )
            )
        return out

    async def search(self, query: str, page: int = 1, per_page: int = 10) -> PaginatedResult[Rule34SearchResult]:
        query = require_text(query, name="query", step="rule34.search")
        page = max(1, page)
        per_page = per_page if per_page >= 1 else 10

        params = {
            "page": "post",
            "s": "list",
            "tags": query,
            "pid": str((page - 1) * per_page),
        }
        async with self._client() as client:
            soup = await fetch_html(client, f"{self.base_url}/index.php", step="rule34.search", params=params)

        results: list[Rule34SearchResult] = []
        for span in soup.select(".image-list span"):
            span_id = str(span.get("id") or "")
            results.append(
                Rule34SearchResult(
                    id=span_id.removeprefix("s"),
                    image=select_attr(span, "img", "src") or "",
                    tags=split_words(select_attr(span, "img", "alt")),
                )
            )

        pager_links = soup.select("#paginator .pagination a")
        last_href = pager_links[-1].get("href") if pager_links else None
        return build_page(results, str(last_href) if last_href else None, page, per_page)

    async def get_info(self, id: str) -> Rule34ImageInfo:
        id = require_text(id, name="id", step="rule34.get_info")
        step = "rule34.get_info"
        url = f"{self.base_url}/index.php"
        params = {"page": "post", "s": "view", "id": id}
        cookie = "; ".join(f"{k}={v}" for k, v in RESIZE_COOKIES.items())

        async with self._client() as client:
            resized, original = await asyncio.gather(
                fetch_html(client, url, step=f"{step}:resized", params=params),
                fetch_html(client, url, step=f"{step}:original", params=params, headers={"Cookie": cookie}),
            )

        stats = original.select_one("#stats ul")
        if stats is None:
            raise ParseFailedError(f"post {id}: stats block not found", step=step)

        created_at, published_by = _parse_posted(select_text(stats, "li:nth-child(2)"))
        size_text = select_text(stats, "li:nth-child(3)").split("Size:", 1)[-1].strip()
        rating_text = select_text(stats, 'li:-soup-contains("Rating:")')
        rating = rating_text.split("Rating:", 1)[1].strip() if "Rating:" in rating_text else None

        return Rule34ImageInfo(
            id=id,
            full_image=select_attr(original, "#image", "src"),
            resized_image_url=select_attr(resized, "#image", "src"),
            tags=split_words(select_attr(original, "#image", "alt")),
            created_at=created_at,
            published_by=published_by,
            rating=rating or None,
            sizes=_sizes(Dimension.from_string(size_text)),
            comments=_parse_comments(original),
        )


def _parse_posted(text: str) -> tuple[datetime | None, str | None]:
    match = _POSTED_RE.search(text)
    if not match:
        return None, None
    user = match.group("user").strip().splitlines()[0].strip()
    return parse_date(match.group("date")), user or None


def _sizes(dimension: Dimension | None) -> Rule34ImageSizes:
    if dimension is None:
        return Rule34ImageSizes()
    return Rule34ImageSizes(
        aspect=dimension.get_aspect_ratio(),
        width=dimension.get_width_in_px(),
        height=dimension.get_height_in_px(),
        width_rem=dimension.get_width_in_rem(),
        height_rem=dimension.get_height_in_rem(),
        full_size=dimension.full_size,
        formatted=dimension.formatted(),
    )


def _parse_comments(soup: BeautifulSoup) -> list[Rule34Comment]:
    comments: list[Rule34Comment] = []
    for div in soup.select("#comment-list div"):
        text = select_text(div, ".col2")
        if not text:
            continue
        div_id = div.get("id")
        user_lines = select_text(div, ".col1").split("\n")
        comments.append(
            Rule34Comment(
                id=str(div_id).removeprefix("c") if div_id else None,
                user=user_lines[0].strip(),
                comment=text,
            )
        )
    return comments
