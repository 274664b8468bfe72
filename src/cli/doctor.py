"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.sources import SOURCES
from core.config import ENV_PREFIX, AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def source_urls(settings: AppSettings) -> dict[str, str]:
    """Base URL de cada fuente según la configuración actual."""

    return {
        "rule34": settings.rule34_base_url,
        "hanime": settings.hanime_base_url,
        "hentai_haven": settings.hentai_haven_base_url,
        "hentai_stream": settings.hentai_stream_base_url,
    }


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return response.status_code < 400, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or exc.__class__.__name__


async def _check_all(urls: dict[str, str], settings: AppSettings) -> list[tuple[bool, str]]:
    return await asyncio.gather(*(_check_http(url, settings) for url in urls.values()))


@app.command()
def run() -> None:
    """Show the active configuration and check connectivity to every source."""

    settings = AppSettings()

    table = Table(title="adult-sources Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Max concurrency", "OK", str(settings.max_concurrency))
    table.add_row("Log level", "OK", settings.log_level)

    # Connectivity (best-effort)
    urls = source_urls(settings)
    checks = asyncio.run(_check_all(urls, settings))
    for (name, url), (ok, detail) in zip(urls.items(), checks):
        table.add_row(name, "OK" if ok else "FAIL", f"{url} -> {detail}")

    _console.print(table)


@app.command(name="set-url")
def set_url(
    source: str = typer.Argument(..., help=f"One of: {', '.join(SOURCES)}"),
    url: str = typer.Argument(..., help="New base URL (e.g. a mirror)."),
) -> None:
    """Store a base-URL override in the user config .env."""

    if source not in SOURCES:
        raise typer.BadParameter(f"unknown source {source!r}")
    if not url.startswith(("http://", "https://")):
        raise typer.BadParameter("url must start with http:// or https://")

    env_path = write_user_env_vars({f"{ENV_PREFIX}{source.upper()}_BASE_URL": url.rstrip("/")})
    _console.print(f"[green]Saved {source} base URL to:[/green] {env_path}")
