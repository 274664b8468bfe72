"""CLI de desarrollo (Typer + Rich).

Por qué existe:
- Superficie fina para probar las fuentes a mano (`search`, `info`, `episode`).
- No forma parte del contrato de la librería: solo llama a las fuentes y
  pinta/exporta el resultado.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console

from adapters.json_exporter import dumps, export_json
from adapters.sources import SOURCES, Rule34Source
from cli import doctor
from cli.ui_components import build_error_panel, print_result
from core.config import AppSettings
from core.errors import SourceError
from core.log import setup_logging

app = typer.Typer(no_args_is_help=True, help="Scraping clients for several video/gallery sites.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

JsonOption = typer.Option(False, "--json", help="Print raw JSON instead of tables.")
OutputOption = typer.Option(None, "--output", "-o", help="Also export the result as JSON to this path.")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging.")


def _make_source(name: str, settings: AppSettings) -> Any:
    cls = SOURCES.get(name)
    if cls is None:
        raise typer.BadParameter(f"unknown source {name!r} (choose from: {', '.join(SOURCES)})")
    return cls(settings)


def _execute(
    factory: Callable[[AppSettings], Awaitable[Any]],
    *,
    title: str,
    as_json: bool,
    output: Optional[Path],
    verbose: bool,
) -> None:
    settings = AppSettings()
    setup_logging("DEBUG" if verbose else settings.log_level)

    try:
        result = asyncio.run(factory(settings))
    except SourceError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(dumps(result))
    else:
        print_result(_console, result, title=title)

    if output is not None:
        path = export_json(result=result, output_path=output)
        _console.print(f"[green]Saved JSON to:[/green] {path}")


@app.command()
def search(
    source: str = typer.Argument(..., help=f"One of: {', '.join(SOURCES)}"),
    query: str = typer.Argument(...),
    page: int = typer.Option(1, "--page", min=1),
    per_page: int = typer.Option(10, "--per-page", min=1),
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
    verbose: bool = VerboseOption,
) -> None:
    """Search a source. Paginated sources honour --page/--per-page."""

    async def call(settings: AppSettings) -> Any:
        client = _make_source(source, settings)
        if source in ("rule34", "hanime"):
            return await client.search(query, page, per_page)
        return await client.search(query)

    _execute(call, title=f"{source} search: {query}", as_json=as_json, output=output, verbose=verbose)


@app.command()
def info(
    source: str = typer.Argument(..., help=f"One of: {', '.join(SOURCES)}"),
    id: str = typer.Argument(..., help="Post id, slug or series id depending on the source."),
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show the detail record of an item."""

    async def call(settings: AppSettings) -> Any:
        return await _make_source(source, settings).get_info(id)

    _execute(call, title=f"{source} info: {id}", as_json=as_json, output=output, verbose=verbose)


@app.command()
def episode(
    source: str = typer.Argument(..., help="hanime, hentai_haven or hentai_stream"),
    id: str = typer.Argument(..., help="Episode slug or encoded episode id."),
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
    verbose: bool = VerboseOption,
) -> None:
    """List the streams of an episode."""

    async def call(settings: AppSettings) -> Any:
        client = _make_source(source, settings)
        if not hasattr(client, "get_episode"):
            raise typer.BadParameter(f"{source} has no episodes")
        return await client.get_episode(id)

    _execute(call, title=f"{source} episode: {id}", as_json=as_json, output=output, verbose=verbose)


@app.command()
def autocomplete(
    query: str = typer.Argument(...),
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
    verbose: bool = VerboseOption,
) -> None:
    """Rule34 tag autocompletion."""

    async def call(settings: AppSettings) -> Any:
        return await Rule34Source(settings).search_autocomplete(query)

    _execute(call, title=f"rule34 autocomplete: {query}", as_json=as_json, output=output, verbose=verbose)


def run() -> None:
    app()
