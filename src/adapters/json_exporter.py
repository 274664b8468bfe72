"""Exportación JSON de resultados.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Los modelos Pydantic dan `model_dump(mode="json")` listo para serializar.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def to_jsonable(result: Any) -> Any:
    """Convierte modelos (o listas de modelos) a estructuras JSON-safe."""

    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


def dumps(result: Any) -> str:
    return json.dumps(to_jsonable(result), ensure_ascii=False, indent=2, sort_keys=True)


def export_json(*, result: Any, output_path: Path) -> Path:
    """Exporta el resultado a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps(result) + "\n", encoding="utf-8")
    return output_path
