"""Fuente: HAnime.

- Búsqueda vía la API JSON (POST) de `search.htv-services.com`.
- Ficha del vídeo desde el estado Nuxt embebido (`window.__NUXT__=`).
- Streams desde `rapi/v7/videos_manifests`, que exige cabeceras de firma.
"""

from __future__ import annotations

import json
import logging
import secrets
import time
from typing import Any, Callable

import httpx

from adapters.http_client import build_async_client, fetch_html, response_json, send
from core.config import AppSettings
from core.domain.hanime import (
    HAnimeBrand,
    HAnimeEpisode,
    HAnimeEpisodes,
    HAnimeSearchResult,
    HAnimeStream,
    HAnimeTag,
    HAnimeVideoInfo,
)
from core.domain.models import PaginatedResult
from core.errors import ParseFailedError, require_text
from core.services.pagination import DEFAULT_PER_PAGE, paginate

logger = logging.getLogger(__name__)

NUXT_MARKER = "window.__NUXT__="


def default_signature() -> str:
    """32 caracteres hex aleatorios (el servidor no valida la firma en sí)."""

    return secrets.token_hex(16)


class HAnimeSource:
    """Cliente de hanime.tv."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        base_url: str | None = None,
        search_url: str | None = None,
        signature_generator: Callable[[], str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.base_url = (base_url or self._settings.hanime_base_url).rstrip("/")
        self.search_url = search_url or self._settings.hanime_search_url
        self.generate_signature = signature_generator or default_signature
        self._transport = transport

    def _client(self, extra_headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        return build_async_client(self._settings, extra_headers=extra_headers, transport=self._transport)

    async def search(self, query: str, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> PaginatedResult[HAnimeSearchResult]:
        step = "hanime.search"
        query = require_text(query, name="query", step=step)
        page = max(1, page)
        per_page = per_page if per_page >= 1 else DEFAULT_PER_PAGE

        body = {
            "blacklist": [],
            "brands": [],
            "order_by": "created_at_unix",
            "page": page - 1,
            "tags": [],
            "search_text": query.strip(),
            "tags_mode": "AND",
        }
        async with self._client({"Accept": "application/json"}) as client:
            response = await send(client, "POST", self.search_url, step=step, json=body)
        data = response_json(response, step=step)
        if not isinstance(data, dict):
            raise ParseFailedError("search response is not an object", step=step)

        hits = _maybe_json_list(data.get("hits"), step=step)
        if not hits:
            return paginate([], 0, page, per_page)

        # `hitsPerPage` es el tamaño real de página de la API.
        api_page_size = data.get("hitsPerPage")
        if isinstance(api_page_size, int) and api_page_size >= 1:
            per_page = api_page_size
        else:
            hits = hits[:per_page]

        try:
            results = [map_search_result(hit) for hit in hits]
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseFailedError(f"malformed search hit: {exc}", step=step) from exc

        return paginate(results, data.get("nbHits") or 0, page, per_page)

    async def get_info(self, slug: str) -> HAnimeVideoInfo:
        step = "hanime.get_info"
        slug = require_text(slug, name="slug", step=step)

        async with self._client() as client:
            soup = await fetch_html(client, f"{self.base_url}/videos/hentai/{slug}", step=step)

        script = next(
            (str(s.string) for s in soup.find_all("script") if s.string and NUXT_MARKER in s.string),
            None,
        )
        if script is None:
            raise ParseFailedError(f"{slug}: Nuxt state script not found", step=step)

        state = _parse_nuxt_state(script, step=step)
        try:
            video = state["state"]["data"]["video"]
            return map_video_info(video)
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseFailedError(f"{slug}: unexpected Nuxt state shape ({exc})", step=step) from exc

    async def get_episode(self, slug: str) -> list[HAnimeStream]:
        step = "hanime.get_episode:manifest"
        slug = require_text(slug, name="slug", step=step)

        headers = {
            "x-signature": self.generate_signature(),
            "x-time": str(int(time.time())),
            "x-signature-version": "web2",
        }
        async with self._client(headers) as client:
            response = await send(client, "GET", f"{self.base_url}/rapi/v7/videos_manifests/{slug}", step=step)
        data = response_json(response, step=step)

        try:
            servers = data["videos_manifest"]["servers"]
        except (KeyError, TypeError) as exc:
            raise ParseFailedError(f"{slug}: manifest without servers", step=step) from exc

        streams: list[HAnimeStream] = []
        try:
            for server in servers or []:
                for raw in server.get("streams") or []:
                    if not raw.get("url") or raw.get("kind") == "premium_alert":
                        continue
                    streams.append(map_stream(raw))
        except (AttributeError, KeyError, ValueError) as exc:
            raise ParseFailedError(f"{slug}: malformed stream entry ({exc})", step=step) from exc
        return streams


def _maybe_json_list(value: Any, *, step: str) -> list[Any]:
    """La API devuelve algunas listas como string JSON (`hits`, `tags`)."""

    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ParseFailedError("list field is not valid JSON", step=step) from exc
    if not isinstance(value, list):
        raise ParseFailedError("list field has unexpected type", step=step)
    return value


def _parse_nuxt_state(script: str, *, step: str) -> dict[str, Any]:
    raw = script.split(NUXT_MARKER, 1)[1].strip().rstrip(";")
    try:
        data, _ = json.JSONDecoder().raw_decode(raw)
    except json.JSONDecodeError as exc:
        raise ParseFailedError("Nuxt state is not valid JSON", step=step) from exc
    if not isinstance(data, dict):
        raise ParseFailedError("Nuxt state is not an object", step=step)
    return data


def _brand(raw: dict[str, Any]) -> HAnimeBrand:
    return HAnimeBrand(name=raw.get("brand"), id=raw.get("brand_id"))


def map_search_result(raw: dict[str, Any]) -> HAnimeSearchResult:
    return HAnimeSearchResult(
        id=raw["id"],
        name=raw["name"],
        titles=raw.get("titles") or [],
        slug=raw["slug"],
        description=raw.get("description"),
        views=raw.get("views"),
        interests=raw.get("interests"),
        banner_image=raw.get("poster_url"),
        cover_image=raw.get("cover_url"),
        brand=_brand(raw),
        duration_ms=raw.get("duration_in_ms"),
        is_censored=raw.get("is_censored"),
        likes=raw.get("likes"),
        rating=raw.get("rating"),
        dislikes=raw.get("dislikes"),
        downloads=raw.get("downloads"),
        rank_monthly=raw.get("monthly_rank"),
        tags=_maybe_json_list(raw.get("tags"), step="hanime.search"),
        created_at=raw.get("created_at"),
        released_at=raw.get("released_at"),
    )


def map_episode(raw: dict[str, Any] | None) -> HAnimeEpisode | None:
    if not raw:
        return None
    return HAnimeEpisode(
        id=raw["id"],
        name=raw["name"],
        slug=raw["slug"],
        views=raw.get("views"),
        interests=raw.get("interests"),
        thumbnail_url=raw.get("poster_url"),
        cover_url=raw.get("cover_url"),
        is_hard_subtitled=raw.get("is_hard_subtitled"),
        brand=_brand(raw),
        duration_ms=raw.get("duration_in_ms"),
        is_censored=raw.get("is_censored"),
        likes=raw.get("likes"),
        rating=raw.get("rating"),
        dislikes=raw.get("dislikes"),
        downloads=raw.get("downloads"),
        rank_monthly=raw.get("monthly_rank"),
        is_banned_in=raw.get("is_banned_in"),
        preview_url=raw.get("preview_url"),
        color=raw.get("primary_color"),
        created_at=raw.get("created_at_unix"),
        released_at=raw.get("released_at_unix"),
    )


def map_video_info(video: dict[str, Any]) -> HAnimeVideoInfo:
    franchise = video["hentai_franchise"]
    hv = video["hentai_video"]
    return HAnimeVideoInfo(
        title=franchise["name"],
        slug=franchise["slug"],
        id=hv["id"],
        description=hv.get("description"),
        views=hv.get("views"),
        interests=hv.get("interests"),
        poster_url=hv.get("poster_url"),
        cover_url=hv.get("cover_url"),
        brand=_brand(hv),
        duration_ms=hv.get("duration_in_ms"),
        is_censored=hv.get("is_censored"),
        likes=hv.get("likes"),
        rating=hv.get("rating"),
        dislikes=hv.get("dislikes"),
        downloads=hv.get("downloads"),
        rank_monthly=hv.get("monthly_rank"),
        tags=[HAnimeTag.model_validate(tag) for tag in video.get("hentai_tags") or []],
        created_at=hv.get("created_at"),
        released_at=hv.get("released_at"),
        episodes=HAnimeEpisodes(
            next=map_episode(video.get("next_hentai_video")),
            all=[ep for ep in map(map_episode, video.get("hentai_franchise_hentai_videos") or []) if ep],
            random=map_episode(video.get("next_random_hentai_video")),
        ),
    )


def map_stream(raw: dict[str, Any]) -> HAnimeStream:
    return HAnimeStream(
        id=raw["id"],
        server_id=raw.get("server_id"),
        kind=raw.get("kind"),
        extension=raw.get("extension"),
        mime_type=raw.get("mime_type"),
        width=raw.get("width"),
        height=raw.get("height"),
        duration_in_ms=raw.get("duration_in_ms"),
        filesize_mbs=raw.get("filesize_mbs"),
        filename=raw.get("filename"),
        url=raw["url"],
    )
