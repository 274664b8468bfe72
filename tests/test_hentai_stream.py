from __future__ import annotations

import asyncio
import base64
from datetime import datetime

import httpx
import pytest

from adapters.sources.hentai_stream import HentaiStreamSource
from core.config import AppSettings
from core.errors import InvalidArgumentError, NotFoundError, ParseFailedError, UpstreamRequestFailedError

BASE = "https://tube.hentaistream.com"


def _post(slug: str, title: str, views: str, added: str) -> str:
    return f"""
    <div class="post">
      <div class="postimg"><a href="{BASE}/{slug}"><img src="https://img.example/{slug}.jpg"></a></div>
      <p class="posttitle"><ins>{title}</ins></p>
      <span class="view">{views} views</span>
      <span class="dtcreated">Added: {added}</span>
    </div>"""


# Descubiertos fuera de orden: 3, 1, 1 (empate resuelto por orden de aparición).
SEARCH_HTML = (
    '<div class="content">'
    + _post("overflow-3", "Overflow Episode 3", "3,000", "March 3, 2020")
    + _post("overflow-1", "Overflow Episode 1", "1,000", "January 1, 2020")
    + _post("overflow-1-uncut", "Overflow Episode 1 Uncut", "900", "January 2, 2020")
    + _post("other-1", "Something Else 1", "10", "May 1, 2020")
    + "</div>"
)

EPISODES = {
    "overflow-3": ("Overflow Episode 3", "Views: 301", ["Romance"]),
    "overflow-1": ("Overflow Episode 1", "Views: 100", ["Romance", "Comedy"]),
    "overflow-1-uncut": ("Overflow Episode 1 Uncut", "Views: 200", ["Comedy", "Uncensored"]),
}

# Respuestas más lentas para los primeros episodios: el gather completa fuera de orden.
DELAYS = {"overflow-3": 0.03, "overflow-1": 0.02, "overflow-1-uncut": 0.0}


def _episode_page(title: str, views: str, genres: list[str], iframe: str = "") -> str:
    links = "".join(f"<a href='#'>{g}</a>" for g in genres)
    return f"""
    <html><body>
    <h1 class="videotitle">¤ {title} ¤</h1>
    <div class="threebox"><p>Added: July 3, 2020 @ 10:00 am</p><p>{views}</p></div>
    <div class="videotags">Tags: <a href="#">hd</a></div>
    <div class="videotags">Genre(s): {links}</div>
    {iframe}
    </body></html>"""


async def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/":
        assert request.url.params["s"] == "overflow"
        return httpx.Response(200, text=SEARCH_HTML)
    slug = request.url.path.strip("/")
    if slug in EPISODES:
        await asyncio.sleep(DELAYS[slug])
        return httpx.Response(200, text=_episode_page(*EPISODES[slug]))
    return httpx.Response(404)


def _run(coro):
    return asyncio.run(coro)


def _source(settings: AppSettings, handler=_handler) -> HentaiStreamSource:
    return HentaiStreamSource(settings, transport=httpx.MockTransport(handler))


def test_search_parses_posts(settings: AppSettings) -> None:
    results = _run(_source(settings).search("overflow"))

    assert [r.id for r in results] == ["overflow-3", "overflow-1", "overflow-1-uncut", "other-1"]
    assert results[0].title == "Overflow Episode 3"
    assert results[0].views == 3000
    assert results[0].image == "https://img.example/overflow-3.jpg"
    assert results[0].release_date == datetime(2020, 3, 3)


def test_get_info_episode(settings: AppSettings) -> None:
    info = _run(_source(settings).get_info_episode("overflow-1"))

    assert info.title == "Overflow Episode 1"
    assert info.views == 100
    assert info.released_date == datetime(2020, 7, 3)
    assert info.genres == ["Romance", "Comedy"]


def test_get_info_gathers_and_sorts_episodes(settings: AppSettings) -> None:
    info = _run(_source(settings).get_info("Overflow"))

    assert info.title == "Overflow"
    assert info.image == "https://img.example/overflow-3.jpg"
    assert [base64.b64decode(ep.id).decode() for ep in info.episodes] == [
        "overflow-1",
        "overflow-1-uncut",
        "overflow-3",
    ]
    assert [ep.number for ep in info.episodes] == [1, 1, 3]
    assert info.genres == ["Romance", "Comedy", "Uncensored"]
    assert info.views == 201
    assert info.released_date == datetime(2020, 1, 1)


def test_get_info_with_limited_concurrency(settings: AppSettings) -> None:
    limited = settings.model_copy(update={"max_concurrency": 1})

    info = _run(_source(limited).get_info("overflow"))

    assert [ep.number for ep in info.episodes] == [1, 1, 3]


def test_get_info_without_matches(settings: AppSettings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text='<div class="content"></div>')

    with pytest.raises(NotFoundError):
        _run(_source(settings, handler).get_info("nothing here"))


def test_get_info_fails_when_one_episode_fails(settings: AppSettings) -> None:
    completed: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/":
            return httpx.Response(200, text=SEARCH_HTML)
        slug = request.url.path.strip("/")
        if slug == "overflow-3":
            return httpx.Response(500)
        await asyncio.sleep(0.05)
        completed.append(slug)
        return httpx.Response(200, text=_episode_page(*EPISODES[slug]))

    async def scenario() -> tuple[UpstreamRequestFailedError, int]:
        with pytest.raises(UpstreamRequestFailedError) as excinfo:
            await _source(settings, handler).get_info("overflow")
        leftover = len(asyncio.all_tasks()) - 1
        await asyncio.sleep(0.1)
        return excinfo.value, leftover

    error, leftover = _run(scenario())

    assert error.status_code == 500
    assert error.step == "hentai_stream.get_info:episode"
    assert leftover == 0
    assert completed == []


def test_get_episode_follows_iframe(settings: AppSettings) -> None:
    frame = "https://player.example/frame/1"

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == frame:
            return httpx.Response(200, text='<video><source src="https://cdn.example/1.mp4" type="video/mp4"></video>')
        assert request.url.path == "/overflow-1"
        page = _episode_page("Overflow Episode 1", "Views: 1,234", [], iframe=f'<iframe src="{frame}"></iframe>')
        return httpx.Response(200, text=page)

    stream = _run(_source(settings, handler).get_episode(base64.b64encode(b"overflow-1").decode()))

    assert stream.title == "Overflow Episode 1"
    assert stream.views == 1234
    assert stream.source == "https://cdn.example/1.mp4"


def test_get_episode_resolves_relative_iframe(settings: AppSettings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/player/1":
            assert request.url.host == "tube.hentaistream.com"
            return httpx.Response(200, text='<video><source src="https://cdn.example/1.mp4"></video>')
        page = _episode_page("Overflow Episode 1", "Views: 1", [], iframe='<iframe src="/player/1"></iframe>')
        return httpx.Response(200, text=page)

    stream = _run(_source(settings, handler).get_episode(base64.b64encode(b"overflow-1").decode()))

    assert stream.source == "https://cdn.example/1.mp4"


def test_get_episode_without_iframe(settings: AppSettings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=_episode_page("Overflow Episode 1", "Views: 1", []))

    with pytest.raises(ParseFailedError):
        _run(_source(settings, handler).get_episode(base64.b64encode(b"overflow-1").decode()))


def test_get_episode_rejects_plain_id(settings: AppSettings) -> None:
    with pytest.raises(InvalidArgumentError):
        _run(HentaiStreamSource(settings).get_episode("overflow-1"))
