"""Wrapper de httpx + helpers de parsing HTML.

Por qué un wrapper:
- Estandariza timeouts, headers y logging para todas las fuentes.
- Traduce fallos de red / status no exitosos a `UpstreamRequestFailedError`.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup, Tag

from core.config import AppSettings
from core.errors import ParseFailedError, UpstreamRequestFailedError

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las fuentes se comporten igual.
    - Los tests pasan `transport` para no tocar la red.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    step: str,
    **kwargs: Any,
) -> httpx.Response:
    """Hace la request y valida el status (2xx/3xx).

    Raises:
        UpstreamRequestFailedError: excepción de red/timeout o status >= 400.
    """

    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        logger.warning("%s %s failed: %s", method, url, exc)
        raise UpstreamRequestFailedError(
            f"{method} {url} failed: {exc.__class__.__name__}",
            step=step,
            url=url,
        ) from exc

    logger.debug("%s %s -> %s", method, url, response.status_code)
    if response.status_code >= 400:
        logger.warning("%s %s returned HTTP %s", method, url, response.status_code)
        raise UpstreamRequestFailedError(
            f"{method} {url} returned HTTP {response.status_code}",
            step=step,
            url=url,
            status_code=response.status_code,
        )
    return response


async def fetch_html(client: httpx.AsyncClient, url: str, *, step: str, **kwargs: Any) -> BeautifulSoup:
    response = await send(client, "GET", url, step=step, **kwargs)
    return make_soup(response.text)


def response_json(response: httpx.Response, *, step: str) -> Any:
    """`response.json()` mapeando JSON inválido a `ParseFailedError`."""

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseFailedError(f"invalid JSON from {response.url}", step=step) from exc


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def select_text(node: BeautifulSoup | Tag | None, selector: str) -> str:
    """Texto (strip) del primer match, o "" si no existe. Nunca lanza."""

    if node is None:
        return ""
    found = node.select_one(selector)
    return found.get_text().strip() if found is not None else ""


def select_attr(node: BeautifulSoup | Tag | None, selector: str, attr: str) -> str | None:
    """Atributo del primer match, o `None` si no existe el nodo o el atributo."""

    if node is None:
        return None
    found = node.select_one(selector)
    if found is None:
        return None
    value = found.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    return str(value) if value is not None else None


def path_segment(url: str | None, index: int) -> str:
    """Segmento `index` de `url.split("/")` (las fuentes identifican por path)."""

    if not url:
        return ""
    parts = url.split("/")
    return parts[index] if -len(parts) <= index < len(parts) else ""
