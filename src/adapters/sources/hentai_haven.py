"""Fuente: Hentai Haven (WordPress + plugin "wp-manga").

Flujo de `get_episode`:
    watch page -> iframe del player -> meta `x-secure-token`
    -> unscramble -> POST multipart a `<uri>api.php` -> sources

El sitio no expone ids de episodio: se usa el path `<serie>/<episodio>`
codificado en base64 como id opaco.
"""

from __future__ import annotations

import base64
import binascii
import logging
from urllib.parse import urljoin

import httpx
from bs4 import Tag

from adapters.http_client import (
    build_async_client,
    fetch_html,
    make_soup,
    path_segment,
    response_json,
    select_attr,
    select_text,
    send,
)
from core.config import AppSettings
from core.dates import parse_date
from core.domain.hentai_haven import (
    EpisodeSort,
    HHDate,
    HHEpisode,
    HHGenre,
    HHInfo,
    HHSearchResult,
    HHSource,
    HHSources,
)
from core.errors import InvalidArgumentError, ParseFailedError, UpstreamRequestFailedError, require_text
from core.services.episodes import sort_by_episode_number
from core.services.unscramble import unscramble
from core.text import get_number_from_string

logger = logging.getLogger(__name__)

PLAYER_ACTION = "zarat_get_data_player_ajax"
BLOCKED_MARKER = "webpage has been blocked"

SEARCH_DATE_FORMATS = ("%b %d, %Y",)
EPISODE_DATE_FORMATS = ("%B %d, %Y",)


def encode_episode_id(path: str) -> str:
    return base64.b64encode(path.encode("utf-8")).decode("ascii")


def decode_episode_id(encoded_id: str, *, step: str) -> str:
    """Inverso de `encode_episode_id`; rechaza ids planos o no-base64."""

    if "episode-" in encoded_id:
        raise InvalidArgumentError("The episode id must be base64-encoded", step=step)
    try:
        return base64.b64decode(encoded_id, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise InvalidArgumentError("The episode id is not valid base64", step=step) from exc


def _to_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def _to_float(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def _parse_genres(links: list[Tag]) -> list[HHGenre]:
    genres: list[HHGenre] = []
    for link in links:
        href = str(link.get("href") or "")
        genres.append(
            HHGenre(
                id=path_segment(href, 4),
                url=href,
                name=link.get_text().strip().replace(",", ""),
            )
        )
    return genres


class HentaiHavenSource:
    """Cliente de hentaihaven.xxx."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.base_url = (base_url or self._settings.hentai_haven_base_url).rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return build_async_client(self._settings, transport=self._transport)

    async def search(self, query: str) -> list[HHSearchResult]:
        step = "hentai_haven.search"
        query = require_text(query, name="query", step=step)

        async with self._client() as client:
            soup = await fetch_html(
                client,
                f"{self.base_url}/",
                step=step,
                params={"s": query, "post_type": "wp-manga"},
            )

        results: list[HHSearchResult] = []
        for item in soup.select(".c-tabs-item__content"):
            date_text = select_text(item, ".tab-meta .post-on")
            results.append(
                HHSearchResult(
                    id=path_segment(select_attr(item, ".c-image-hover a", "href"), 4),
                    title=select_text(item, ".post-title h3"),
                    cover=(select_attr(item, ".c-image-hover img", "src") or "").replace(" ", "%20"),
                    rating=_to_float(select_text(item, ".tab-meta .rating .total_votes")),
                    released=_to_int(select_text(item, ".tab-summary .mg_release .summary-content")),
                    genres=_parse_genres(item.select(".tab-summary .mg_genres .summary-content a")),
                    total_episodes=get_number_from_string(select_text(item, ".tab-meta .latest-chap .chapter")) or 0,
                    date=HHDate(unparsed=date_text, parsed=parse_date(date_text, SEARCH_DATE_FORMATS)),
                    alternative=select_text(item, ".tab-summary .mg_alternative .summary-content"),
                    author=select_text(item, ".tab-summary .mg_author .summary-content"),
                )
            )
        return results

    async def get_info(self, id: str, episode_sort: EpisodeSort = "ASC") -> HHInfo:
        step = "hentai_haven.get_info"
        id = require_text(id, name="id", step=step)
        url = f"{self.base_url}/watch/{id}"

        async with self._client() as client:
            response = await send(client, "GET", url, step=step)

        if not response.text:
            raise UpstreamRequestFailedError("empty response body", step=step, url=url)
        soup = make_soup(response.text)
        body = soup.body or soup
        if BLOCKED_MARKER in body.get_text():
            logger.warning("GET %s was blocked by the upstream site", url)
            raise UpstreamRequestFailedError(
                f"The webpage is blocked. Consider using a proxy. GET {url}",
                step=step,
                url=url,
            )

        chapters = soup.select("li.wp-manga-chapter")
        count = len(chapters)
        episodes: list[HHEpisode] = []
        for index, chapter in enumerate(chapters):
            href = select_attr(chapter, "a", "href")
            released = select_text(chapter, ".chapter-release-date")
            episodes.append(
                HHEpisode(
                    id=encode_episode_id(f"{path_segment(href, 4)}/{path_segment(href, 5)}"),
                    title=select_text(chapter, "a"),
                    thumbnail=select_attr(chapter, "img", "src"),
                    number=count - index,
                    released_utc=parse_date(released, EPISODE_DATE_FORMATS),
                    released_relative=released,
                )
            )
        self.sort_episodes(episodes, episode_sort)

        cover = select_attr(soup, ".summary_image img", "src") or ""
        return HHInfo(
            id=id,
            title=select_text(soup, ".post-title h1"),
            cover=cover.replace(" ", "%20"),
            summary=select_text(soup, ".description-summary p"),
            views=get_number_from_string(select_text(soup, ".post-content_item:nth-child(4) .summary-content")),
            rating_count=_to_int(select_text(soup, 'span[property="ratingCount"]')),
            released=_to_int(select_text(soup, ".post-status .summary-content a")),
            genres=_parse_genres(soup.select(".genres-content a")),
            total_episodes=count,
            episodes=episodes,
        )

    async def get_episode(self, id: str) -> HHSources:
        step = "hentai_haven.get_episode"
        id = require_text(id, name="id", step=step)
        path = decode_episode_id(id, step=step)

        async with self._client() as client:
            page_url = f"{self.base_url}/watch/{path}"
            page = await fetch_html(client, page_url, step=f"{step}:page")
            iframe_src = select_attr(page, ".player_logic_item > iframe", "src")
            if not iframe_src:
                raise ParseFailedError(f"{path}: player iframe not found", step=f"{step}:page")

            iframe = await fetch_html(client, urljoin(page_url, iframe_src), step=f"{step}:iframe")
            token = select_attr(iframe, 'meta[name="x-secure-token"]', "content")
            if not token:
                raise ParseFailedError(f"{path}: secure token not found", step=f"{step}:iframe")

            payload = unscramble(token)
            response = await send(
                client,
                "POST",
                f"{payload.api_uri}api.php",
                step=f"{step}:api",
                files={
                    "action": (None, PLAYER_ACTION),
                    "a": (None, payload.encrypted_key),
                    "b": (None, payload.iv),
                },
            )

        data = response_json(response, step=f"{step}:api")
        player = data.get("data") if isinstance(data, dict) else None
        if not isinstance(player, dict):
            raise ParseFailedError("player API response without data", step=f"{step}:api")

        sources: list[HHSource] = []
        for raw in player.get("sources") or []:
            if not isinstance(raw, dict) or not raw.get("src"):
                logger.debug("Dropping source without src: %r", raw)
                continue
            sources.append(HHSource(label=raw.get("label"), src=raw["src"], type=raw.get("type")))
        return HHSources(sources=sources, thumbnail=player.get("image"))

    @staticmethod
    def sort_episodes(episodes: list[HHEpisode], order: EpisodeSort) -> None:
        """Ordena en sitio por número de episodio (ASC o DESC)."""

        episodes[:] = sort_by_episode_number(episodes, lambda ep: ep.number, order)
