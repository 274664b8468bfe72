from __future__ import annotations

import string

import pytest

from core.errors import InvalidArgumentError
from core.text import get_number_from_string, normalize, parse_int, remove_number_from_string, rot13, split_words


def test_rot13_known_value() -> None:
    assert rot13("Why did the chicken cross the road?") == "Jul qvq gur puvpxra pebff gur ebnq?"


@pytest.mark.parametrize(
    "text",
    [
        string.printable,
        "Hello, World! 123",
        "sha512-AbCdEf==",
        "ñandú ünïcode",
    ],
)
def test_rot13_is_self_inverse(text: str) -> None:
    assert rot13(rot13(text)) == text


@pytest.mark.parametrize("text", ["", "1234567890", "!@#$%^&*() \n\t", "== // ++"])
def test_rot13_leaves_non_letters_unchanged(text: str) -> None:
    assert rot13(text) == text


@pytest.mark.parametrize("func", [rot13, get_number_from_string, remove_number_from_string, normalize])
def test_non_string_input_is_rejected(func) -> None:
    with pytest.raises(InvalidArgumentError):
        func(123)


def test_get_number_from_string() -> None:
    assert get_number_from_string("abc123def456") == 123
    assert get_number_from_string("Episode 07") == 7
    assert get_number_from_string("no digits") is None
    assert get_number_from_string("   ") is None


def test_remove_number_from_string() -> None:
    assert remove_number_from_string("abc123def456") == "abcdef"
    assert remove_number_from_string("  ") == "  "


def test_normalize() -> None:
    assert normalize("Hello World! 123") == "hello world "
    assert normalize("Overflow Episode 2") == "overflow "
    assert normalize("   ") == "   "


def test_split_words_and_parse_int() -> None:
    assert split_words("  tag_a  tag_b ") == ["tag_a", "tag_b"]
    assert split_words(None) == []
    assert parse_int("1,234") == 1234
    assert parse_int("n/a", 0) == 0
    assert parse_int(None) is None
