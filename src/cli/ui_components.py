"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

from core.domain.models import PaginatedResult
from core.errors import SourceError

# Columnas preferidas por tipo de resultado; el resto se omite en la tabla.
_PREFERRED_COLUMNS = ("id", "slug", "title", "name", "number", "views", "released_date", "url", "src", "image")


def _columns_for(item: BaseModel) -> list[str]:
    fields = type(item).model_fields
    columns = [name for name in _PREFERRED_COLUMNS if name in fields]
    return columns or list(fields)[:5]


def build_results_table(items: list[Any], *, title: str) -> Table:
    """Tabla Rich para una lista de modelos (resultados de búsqueda, streams...)."""

    table = Table(title=title)
    models = [item for item in items if isinstance(item, BaseModel)]
    if not models:
        table.add_column("Result", style="white")
        for item in items:
            table.add_row(str(item))
        return table

    columns = _columns_for(models[0])
    for i, column in enumerate(columns):
        table.add_column(column, style="cyan" if i == 0 else "white", no_wrap=i == 0)
    for model in models:
        row = model.model_dump(mode="json")
        table.add_row(*("" if row.get(c) is None else str(row.get(c)) for c in columns))
    return table


def print_result(console: Console, result: Any, *, title: str) -> None:
    """Pinta páginas y listas como tabla; registros sueltos como panel."""

    if isinstance(result, PaginatedResult):
        console.print(build_results_table(result.results, title=title))
        console.print(
            f"[dim]page {result.page}/{result.pages} • total {result.total} • "
            f"next {result.next} • previous {result.previous}[/dim]"
        )
    elif isinstance(result, list):
        console.print(build_results_table(result, title=title))
    elif isinstance(result, BaseModel):
        console.print(Panel(Pretty(result.model_dump(mode="json")), title=title, border_style="cyan"))
    else:
        console.print(Pretty(result))


def build_error_panel(exc: SourceError) -> Panel:
    body = Text()
    body.append(f"{exc.kind.value}\n", style="bold")
    if exc.step:
        body.append(f"step: {exc.step}\n", style="dim")
    body.append(exc.message)
    return Panel(body, title=Text("Error", style="bold red"), border_style="red")
