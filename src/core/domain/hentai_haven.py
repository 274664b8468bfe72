"""Modelos de Hentai Haven."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

EpisodeSort = Literal["ASC", "DESC"]


class HHGenre(BaseModel):
    id: str
    url: str
    name: str


class HHDate(BaseModel):
    unparsed: str = ""
    parsed: datetime | None = None


class HHSearchResult(BaseModel):
    id: str
    title: str
    cover: str = ""
    rating: float | None = None
    released: int | None = Field(default=None, description="Año de estreno.")
    genres: list[HHGenre] = Field(default_factory=list)
    total_episodes: int = 0
    date: HHDate = Field(default_factory=HHDate)
    alternative: str = ""
    author: str = ""


class HHEpisode(BaseModel):
    id: str = Field(
        ...,
        description="Path `<serie>/<episodio>` codificado en base64 (el sitio no expone ids).",
    )
    title: str
    thumbnail: str | None = None
    number: int
    released_utc: datetime | None = None
    released_relative: str = ""


class HHInfo(BaseModel):
    id: str
    title: str
    cover: str = ""
    summary: str = ""
    views: int | None = None
    rating_count: int | None = None
    released: int | None = None
    genres: list[HHGenre] = Field(default_factory=list)
    total_episodes: int = 0
    episodes: list[HHEpisode] = Field(default_factory=list)


class HHSource(BaseModel):
    label: str | None = None
    src: str
    type: str | None = None


class HHSources(BaseModel):
    sources: list[HHSource] = Field(default_factory=list)
    thumbnail: str | None = None
