"""Fuente: Hentai Stream (tube.hentaistream.com).

El sitio no tiene páginas de serie: `get_info` reconstruye la serie buscando
por nombre, pidiendo en paralelo la ficha de cada episodio encontrado y
ordenándolos por el número extraído del título.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import math
from datetime import datetime
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from adapters.http_client import build_async_client, fetch_html, path_segment, select_attr, select_text
from core.config import AppSettings
from core.dates import parse_relative_date
from core.domain.hentai_stream import (
    HStreamEpisodeInfo,
    HStreamEpisodeListItem,
    HStreamEpisodeStream,
    HStreamInfo,
    HStreamResult,
)
from core.errors import InvalidArgumentError, NotFoundError, ParseFailedError, require_text
from core.services.episodes import sort_by_episode_number
from core.text import get_number_from_string, normalize, parse_int

logger = logging.getLogger(__name__)


def _after(text: str, marker: str) -> str:
    """Texto tras `marker` ("" si no aparece)."""

    _, sep, tail = text.partition(marker)
    return tail.strip() if sep else ""


def _parse_views(text: str) -> int | None:
    return parse_int(_after(text, "Views:").split(" ")[0]) if text else None


def _parse_added(text: str) -> datetime | None:
    return parse_relative_date(_after(text, "Added:").split(" @")[0].strip())


def _parse_video_page(soup: BeautifulSoup) -> tuple[str, datetime | None, int | None]:
    title = select_text(soup, ".videotitle").replace("¤", "").strip()
    released = _parse_added(select_text(soup, ".threebox p:nth-child(1)"))
    views = _parse_views(select_text(soup, ".threebox p:nth-child(2)"))
    return title, released, views


class HentaiStreamSource:
    """Cliente de tube.hentaistream.com."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.base_url = (base_url or self._settings.hentai_stream_base_url).rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return build_async_client(self._settings, transport=self._transport)

    async def search(self, query: str) -> list[HStreamResult]:
        step = "hentai_stream.search"
        query = require_text(query, name="query", step=step)

        async with self._client() as client:
            soup = await fetch_html(client, f"{self.base_url}/", step=step, params={"s": query})

        results: list[HStreamResult] = []
        for post in soup.select(".content .post"):
            views_text = select_text(post, ".view").split(" ")[0]
            results.append(
                HStreamResult(
                    id=path_segment(select_attr(post, "div.postimg a", "href"), -1),
                    title=select_text(post, "p.posttitle ins"),
                    image=select_attr(post, "div.postimg img", "src"),
                    views=parse_int(views_text, 0) or 0,
                    release_date=_parse_added(select_text(post, ".dtcreated")),
                )
            )
        return results

    async def get_info_episode(self, id: str) -> HStreamEpisodeInfo:
        step = "hentai_stream.get_info_episode"
        id = require_text(id, name="id", step=step)

        async with self._client() as client:
            soup = await fetch_html(client, f"{self.base_url}/{id}", step=step)
        return self._episode_info(soup)

    @staticmethod
    def _episode_info(soup: BeautifulSoup) -> HStreamEpisodeInfo:
        title, released, views = _parse_video_page(soup)
        genres: list[str] = []
        for box in soup.select("div.videotags"):
            if "Genre(s)" in box.get_text():
                genres.extend(a.get_text().strip() for a in box.select("a"))
        return HStreamEpisodeInfo(title=title, released_date=released, views=views, genres=genres)

    async def get_info(self, id: str) -> HStreamInfo:
        step = "hentai_stream.get_info"
        id = require_text(id, name="id", step=step)
        normalized_id = normalize(id)

        found = await self.search(normalized_id)
        matches = [r for r in found if normalized_id in normalize(r.title or "")]
        if not matches:
            raise NotFoundError(f"no episodes found for {id!r}", step=step)

        logger.debug("%s: %d matching episodes", id, len(matches))
        sem = asyncio.Semaphore(max(1, self._settings.max_concurrency))

        async with self._client() as client:

            async def fetch_one(result: HStreamResult) -> HStreamEpisodeInfo:
                async with sem:
                    soup = await fetch_html(client, f"{self.base_url}/{result.id}", step=f"{step}:episode")
                return self._episode_info(soup)

            tasks = [asyncio.create_task(fetch_one(r)) for r in matches]
            try:
                infos = await asyncio.gather(*tasks)
            except BaseException:
                # Ninguna petición debe sobrevivir al cierre del cliente.
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        merged = [
            (get_number_from_string(result.title or ""), result, info)
            for result, info in zip(matches, infos)
        ]
        merged = sort_by_episode_number(merged, lambda row: row[0])

        views = [info.views or 0 for _, _, info in merged]
        genres: list[str] = []
        for _, _, info in merged:
            for genre in info.genres:
                if genre not in genres:
                    genres.append(genre)

        episodes = [
            HStreamEpisodeListItem(
                id=base64.b64encode(result.id.encode("utf-8")).decode("ascii"),
                number=number,
                views=info.views,
                released_date=result.release_date,
                title=info.title or result.title,
                image=result.image,
            )
            for number, result, info in merged
        ]

        return HStreamInfo(
            title=(normalized_id[:1].upper() + normalized_id[1:]).strip(),
            image=matches[0].image,
            genres=genres,
            views=math.ceil(sum(views) / len(views)),
            episodes=episodes,
            released_date=episodes[0].released_date,
        )

    async def get_episode(self, id: str) -> HStreamEpisodeStream:
        step = "hentai_stream.get_episode"
        id = require_text(id, name="id", step=step)
        try:
            slug = base64.b64decode(id, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise InvalidArgumentError("The episode id is not valid base64", step=step) from exc

        async with self._client() as client:
            page_url = f"{self.base_url}/{slug}"
            soup = await fetch_html(client, page_url, step=f"{step}:page")
            title, released, views = _parse_video_page(soup)

            frame_url = select_attr(soup, "iframe", "src")
            if not frame_url:
                raise ParseFailedError(f"{slug}: player iframe not found", step=f"{step}:page")

            frame = await fetch_html(client, urljoin(page_url, frame_url), step=f"{step}:iframe")

        return HStreamEpisodeStream(
            title=title,
            released_date=released,
            views=views,
            source=select_attr(frame, "video source", "src"),
        )
