"""Modelos de HAnime.

La API devuelve snake_case; aquí se normaliza a nombres propios
(`poster_url` -> `banner_image`/`thumbnail_url`, etc.).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HAnimeBrand(BaseModel):
    name: str | None = None
    id: int | str | None = None


class HAnimeTag(BaseModel):
    id: int | None = None
    text: str
    count: int | None = None
    description: str | None = None
    wide_image_url: str | None = None
    tall_image_url: str | None = None


class HAnimeSearchResult(BaseModel):
    id: int
    name: str
    titles: list[Any] = Field(default_factory=list)
    slug: str
    description: str | None = None
    views: int | None = None
    interests: int | None = None
    banner_image: str | None = None
    cover_image: str | None = None
    brand: HAnimeBrand = Field(default_factory=HAnimeBrand)
    duration_ms: int | None = None
    is_censored: bool | None = None
    likes: int | None = None
    rating: float | None = None
    dislikes: int | None = None
    downloads: int | None = None
    rank_monthly: int | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: int | None = Field(default=None, description="Unix timestamp (segundos).")
    released_at: int | None = Field(default=None, description="Unix timestamp (segundos).")


class HAnimeEpisode(BaseModel):
    id: int
    name: str
    slug: str
    views: int | None = None
    interests: int | None = None
    thumbnail_url: str | None = None
    cover_url: str | None = None
    is_hard_subtitled: bool | None = None
    brand: HAnimeBrand = Field(default_factory=HAnimeBrand)
    duration_ms: int | None = None
    is_censored: bool | None = None
    likes: int | None = None
    rating: float | None = None
    dislikes: int | None = None
    downloads: int | None = None
    rank_monthly: int | None = None
    is_banned_in: str | None = None
    preview_url: str | None = None
    color: str | None = None
    created_at: int | None = None
    released_at: int | None = None


class HAnimeEpisodes(BaseModel):
    next: HAnimeEpisode | None = None
    all: list[HAnimeEpisode] = Field(default_factory=list)
    random: HAnimeEpisode | None = None


class HAnimeVideoInfo(BaseModel):
    title: str
    slug: str
    id: int
    description: str | None = None
    views: int | None = None
    interests: int | None = None
    poster_url: str | None = None
    cover_url: str | None = None
    brand: HAnimeBrand = Field(default_factory=HAnimeBrand)
    duration_ms: int | None = None
    is_censored: bool | None = None
    likes: int | None = None
    rating: float | None = None
    dislikes: int | None = None
    downloads: int | None = None
    rank_monthly: int | None = None
    tags: list[HAnimeTag] = Field(default_factory=list)
    created_at: str | None = None
    released_at: str | None = None
    episodes: HAnimeEpisodes = Field(default_factory=HAnimeEpisodes)


class HAnimeStream(BaseModel):
    id: int
    server_id: int | None = None
    kind: str | None = None
    extension: str | None = None
    mime_type: str | None = None
    width: int | None = None
    height: int | str | None = None
    duration_in_ms: int | None = None
    filesize_mbs: float | None = None
    filename: str | None = None
    url: str
