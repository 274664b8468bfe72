from __future__ import annotations

import pytest

from core.services.episodes import sort_by_episode_number
from core.services.pagination import build_page, extract_offset, paginate

PAGER_HREF = "?page=post&s=list&tags=landscape&pid=40"


def test_build_page_empty_without_pager() -> None:
    page = build_page([], None, 1, 20)

    assert page.pages == 1
    assert page.page == 1
    assert page.total == 0
    assert page.has_next_page is False
    assert page.next == 0
    assert page.previous == 0


def test_build_page_from_pager_offset() -> None:
    page = build_page(["a", "b"], PAGER_HREF, 2, 20)

    assert page.pages == 3
    assert page.page == 2
    assert page.total == 60
    assert page.has_next_page is True
    # Offsets (índice de página × per_page), no números de página.
    assert page.next == 60
    assert page.previous == 20


@pytest.mark.parametrize("requested, expected", [(-3, 1), (0, 1), (1, 1), (3, 3), (99, 3)])
def test_build_page_clamps_requested_page(requested: int, expected: int) -> None:
    page = build_page(["a"], PAGER_HREF, requested, 20)

    assert page.page == expected
    assert page.has_next_page is (expected < 3)


def test_build_page_non_numeric_offset_is_one_page() -> None:
    page = build_page(["a"], "index.php?page=post&pid=abc", 1, 20)

    assert page.pages == 1
    assert page.has_next_page is False


def test_extract_offset() -> None:
    assert extract_offset("index.php?page=post&amp;s=list&amp;pid=42") == 42
    assert extract_offset("https://rule34.xxx/index.php?pid=0") == 0
    assert extract_offset("index.php?page=post") is None
    assert extract_offset(None) is None


def test_paginate_page_numbers() -> None:
    page = paginate(list(range(10)), 25, 2, 10)

    assert page.pages == 3
    assert page.page == 2
    assert page.next == 3
    assert page.previous == 1
    assert page.has_next_page is True


def test_paginate_corrects_invalid_input() -> None:
    page = paginate([], None, 0, 0)

    assert page.pages == 1
    assert page.page == 1
    assert page.next is None
    assert page.previous is None
    assert page.has_next_page is False


def test_sort_by_episode_number_is_stable() -> None:
    items = [("c", 3), ("a1", 1), ("none", None), ("a2", 1)]

    ordered = sort_by_episode_number(items, lambda item: item[1])
    assert [name for name, _ in ordered] == ["none", "a1", "a2", "c"]

    descending = sort_by_episode_number(items, lambda item: item[1], "DESC")
    assert [name for name, _ in descending] == ["c", "a1", "a2", "none"]
