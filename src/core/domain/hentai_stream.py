"""Modelos de Hentai Stream."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class HStreamResult(BaseModel):
    id: str
    title: str = ""
    views: int = 0
    image: str | None = None
    release_date: datetime | None = None


class HStreamEpisodeInfo(BaseModel):
    title: str = ""
    released_date: datetime | None = None
    views: int | None = None
    genres: list[str] = Field(default_factory=list)


class HStreamEpisodeListItem(BaseModel):
    id: str = Field(..., description="Slug del episodio codificado en base64.")
    number: int | None = None
    views: int | None = None
    released_date: datetime | None = None
    title: str = ""
    image: str | None = None


class HStreamInfo(BaseModel):
    title: str
    image: str | None = None
    genres: list[str] = Field(default_factory=list)
    views: int = Field(default=0, description="Media de vistas de los episodios (ceil).")
    episodes: list[HStreamEpisodeListItem] = Field(default_factory=list)
    released_date: datetime | None = None


class HStreamEpisodeStream(BaseModel):
    title: str = ""
    released_date: datetime | None = None
    views: int | None = None
    source: str | None = None
