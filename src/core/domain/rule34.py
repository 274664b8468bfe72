"""Modelos de Rule34 (galería de imágenes)."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class Rule34Autocomplete(BaseModel):
    completed_query: str = Field(..., description="Valor completo sugerido (tag).")
    label: str = Field(..., description="Etiqueta mostrada, p.ej. 'tag (123)'.")
    type: str = Field(default="", description="Tipo de tag (general, artist...).")


class Rule34SearchResult(BaseModel):
    id: str
    image: str = ""
    tags: list[str] = Field(default_factory=list)
    type: Literal["preview"] = "preview"


class Rule34Comment(BaseModel):
    id: str | None = None
    user: str
    comment: str


class Rule34ImageSizes(BaseModel):
    aspect: str | None = Field(default=None, description="Relación de aspecto, p.ej. '16:9'.")
    width: int | None = None
    height: int | None = None
    width_rem: float | None = None
    height_rem: float | None = None
    full_size: int | None = Field(default=None, description="Total de píxeles (ancho × alto).")
    formatted: str | None = Field(default=None, description="'1920x1080'.")


class Rule34ImageInfo(BaseModel):
    id: str
    full_image: str | None = None
    resized_image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, description="Fecha de publicación.")
    published_by: str | None = None
    rating: str | None = Field(default=None, description="'Safe', 'Questionable' o 'Explicit'.")
    sizes: Rule34ImageSizes = Field(default_factory=Rule34ImageSizes)
    comments: list[Rule34Comment] = Field(default_factory=list)
