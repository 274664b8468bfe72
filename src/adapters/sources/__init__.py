"""Fuentes (clientes por sitio).

Por qué un paquete:
- Un módulo por sitio; cada clase implementa `core.interfaces.source`
  (`GallerySource` o `VideoSource`).
- `SOURCES` permite elegir la fuente por nombre (CLI, llamadores genéricos).
"""

from adapters.sources.hanime import HAnimeSource
from adapters.sources.hentai_haven import HentaiHavenSource
from adapters.sources.hentai_stream import HentaiStreamSource
from adapters.sources.rule34 import Rule34Source

SOURCES = {
    "rule34": Rule34Source,
    "hanime": HAnimeSource,
    "hentai_haven": HentaiHavenSource,
    "hentai_stream": HentaiStreamSource,
}

__all__ = [
    "HAnimeSource",
    "HentaiHavenSource",
    "HentaiStreamSource",
    "Rule34Source",
    "SOURCES",
]
