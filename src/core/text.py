"""Utilidades de texto usadas por los parsers de las fuentes.

Todas validan que la entrada sea `str` y lanzan `InvalidArgumentError` si no.
"""

from __future__ import annotations

import re

from core.errors import InvalidArgumentError

_DIGITS_RE = re.compile(r"\d+")
_NON_LETTERS_RE = re.compile(r"[^a-zA-Z\s]")
_MULTI_SPACE_RE = re.compile(r"\s{2,}")


def _ensure_str(value: object) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError("Input must be a string")
    return value


def _rot13_char(match: re.Match[str]) -> str:
    c = match.group(0)
    base = ord("A") if c.isupper() else ord("a")
    return chr((ord(c) - base + 13) % 26 + base)


def rot13(text: str) -> str:
    """Aplica ROT13 (solo letras ASCII; el resto queda igual). Es su propia inversa.

    >>> rot13("Hello, World! 123")
    'Uryyb, Jbeyq! 123'
    """

    text = _ensure_str(text)
    if not text:
        return ""
    return re.sub(r"[a-zA-Z]", _rot13_char, text)


def get_number_from_string(text: str) -> int | None:
    """Primer número entero del texto, o `None` si no hay dígitos.

    >>> get_number_from_string("abc123def456")
    123
    """

    text = _ensure_str(text)
    if not text.strip():
        return None
    match = _DIGITS_RE.search(text)
    return int(match.group(0)) if match else None


def remove_number_from_string(text: str) -> str:
    text = _ensure_str(text)
    if not text.strip():
        return text
    return _DIGITS_RE.sub("", text)


def normalize(text: str) -> str:
    """Minúsculas, sin símbolos ni números, espacios colapsados y sin "episode".

    >>> normalize("Hello World! 123")
    'hello world '
    """

    text = _ensure_str(text)
    if not text.strip():
        return text

    normalized = _NON_LETTERS_RE.sub(" ", text).lower()
    return _MULTI_SPACE_RE.sub(" ", normalized).replace("episode", "")


def split_words(text: str | None) -> list[str]:
    """Separa por espacios descartando vacíos (listas de tags en atributos `alt`)."""

    if not text:
        return []
    return [word for word in text.strip().split(" ") if word]


def parse_int(text: str | None, default: int | None = None) -> int | None:
    """`int()` tolerante a comas de miles; devuelve `default` si no es numérico."""

    if text is None:
        return default
    cleaned = text.strip().replace(",", "")
    try:
        return int(cleaned)
    except ValueError:
        return default
