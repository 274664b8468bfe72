"""Modelos compartidos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y documentación autocontenida (Field) sin acoplar el
  Core a librerías de I/O.
- `model_dump(mode="json")` da dicts listos para exportar.

Nota:
- Los modelos propios de cada sitio viven en `core.domain.<sitio>`.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

T = TypeVar("T")


class PaginatedResult(BaseModel, Generic[T]):
    """Página de resultados con metadatos de paginación.

    Invariantes (las garantizan los builders de `core.services.pagination`):
    - `1 <= page <= pages`.
    - `has_next_page == (page < pages)`.
    """

    model_config = ConfigDict(populate_by_name=True)

    results: list[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Total de elementos (estimado si viene del pager).")
    page: int = Field(default=1, ge=1)
    pages: int = Field(default=1, ge=1)
    next: int | None = Field(
        default=None,
        description="Siguiente página u offset, según la fuente (ver builder usado).",
    )
    previous: int | None = Field(default=None)
    has_next_page: bool = Field(default=False, alias="hasNextPage")


class DecodedPayload(BaseModel):
    """Carga útil recuperada del token `x-secure-token` tras el unscrambling."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    encrypted_key: str = Field(
        ...,
        alias="en",
        min_length=1,
        description="Material de clave cifrado (campo `a` del POST al player).",
    )
    iv: str = Field(
        ...,
        min_length=1,
        description="Vector de inicialización (campo `b` del POST al player).",
    )
    api_uri: str = Field(
        ...,
        alias="uri",
        min_length=1,
        description="Base URI de la API del player; se le añade `api.php`.",
    )
