"""Contratos de las fuentes (sitios).

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida.
- Cada sitio es una clase sin estado mutable: solo configuración
  (`AppSettings` + overrides de URL), así que son intercambiables y testeables
  inyectando un transport de httpx.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class GallerySource(Protocol):
    """Fuente de imágenes paginada (p.ej. Rule34)."""

    async def search(self, query: str, page: int = 1, per_page: int = 10) -> Any:
        ...

    async def get_info(self, id: str) -> Any:
        ...


@runtime_checkable
class VideoSource(Protocol):
    """Fuente de vídeo: búsqueda, ficha de la serie y streams de un episodio.

    Reglas de diseño:
    - Todo es asíncrono porque hay I/O (HTTP).
    - Cada operación es request -> parse -> map, sin reintentos.
    """

    async def search(self, query: str, *args: Any, **kwargs: Any) -> Any:
        ...

    async def get_info(self, id: str, *args: Any, **kwargs: Any) -> Any:
        ...

    async def get_episode(self, id: str) -> Any:
        ...
