"""Errores del Core.

Cada fallo de una fuente se normaliza a una subclase de `SourceError` con un
`ErrorKind` y, opcionalmente, el `step` (etapa) donde ocurrió, p.ej.
`"hanime.get_episode:manifest"`.

No hay reintentos en ninguna capa: el llamador decide si reintenta.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tipos de error normalizados."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    UNSCRAMBLING_FAILED = "unscrambling_failed"
    UPSTREAM_REQUEST_FAILED = "upstream_request_failed"
    PARSE_FAILED = "parse_failed"


class SourceError(Exception):
    """Error base de todas las fuentes."""

    kind: ErrorKind = ErrorKind.UPSTREAM_REQUEST_FAILED

    def __init__(self, message: str = "", *, step: str | None = None) -> None:
        self.step = step
        self.message = message or self.kind.value
        super().__init__(f"[{step}] {self.message}" if step else self.message)


class InvalidArgumentError(SourceError, ValueError):
    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(SourceError):
    kind = ErrorKind.NOT_FOUND


class UnscramblingFailedError(SourceError):
    kind = ErrorKind.UNSCRAMBLING_FAILED


class UpstreamRequestFailedError(SourceError):
    """Status HTTP no exitoso, excepción de red/timeout o respuesta vacía/bloqueada."""

    kind = ErrorKind.UPSTREAM_REQUEST_FAILED

    def __init__(
        self,
        message: str = "",
        *,
        step: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message, step=step)


class ParseFailedError(SourceError):
    """Falta un nodo DOM requerido o el JSON embebido no es válido."""

    kind = ErrorKind.PARSE_FAILED


def require_text(value: object, *, name: str = "value", step: str | None = None) -> str:
    """Valida que `value` sea un `str` no vacío (tras strip)."""

    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{name} must be a non-empty string", step=step)
    return value
