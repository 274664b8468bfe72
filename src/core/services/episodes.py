"""Orden determinista de episodios (estable: a igual número, orden de descubrimiento)."""

from __future__ import annotations

from typing import Callable, Iterable, Literal, TypeVar

T = TypeVar("T")

SortOrder = Literal["ASC", "DESC"]


def sort_by_episode_number(
    items: Iterable[T],
    number_of: Callable[[T], int | None],
    order: SortOrder = "ASC",
) -> list[T]:
    """Ordena por número de episodio; un número ausente cuenta como 0."""

    def key(item: T) -> int:
        number = number_of(item) or 0
        return number if order == "ASC" else -number

    return sorted(items, key=key)
