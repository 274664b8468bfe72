"""Unscrambling del `x-secure-token` del player de Hentai Haven.

El sitio ofusca `{"en", "iv", "uri"}` aplicando tres veces base64 + ROT13 y
prefijando `sha512-`. Aquí se invierte en el mismo orden:

    token -> quitar prefijo -> (ROT13 -> base64 decode) x3 -> JSON

No hay checksum: si el sitio cambia el esquema el resultado es basura, por eso
cada etapa valida estrictamente y cualquier fallo es `UnscramblingFailedError`.
"""

from __future__ import annotations

import base64
import binascii
import json

from pydantic import ValidationError

from core.domain.models import DecodedPayload
from core.errors import UnscramblingFailedError
from core.text import rot13

TOKEN_PREFIX = "sha512-"
ROUNDS = 3


def _decode_round(text: str, round_no: int) -> str:
    text = rot13(text)
    # Como `atob`: el relleno `=` es opcional.
    text += "=" * (-len(text) % 4)
    try:
        raw = base64.b64decode(text, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise UnscramblingFailedError(
            f"round {round_no}: invalid base64 payload ({exc})",
            step="unscramble",
        ) from exc


def unscramble(secure_token: str) -> DecodedPayload:
    """Recupera el `DecodedPayload` de un token ofuscado.

    Raises:
        UnscramblingFailedError: token vacío, base64/UTF-8 inválido, JSON
            inválido o campos requeridos ausentes.
    """

    if not isinstance(secure_token, str) or not secure_token.strip():
        raise UnscramblingFailedError("secure token is empty", step="unscramble")

    text = secure_token.strip().removeprefix(TOKEN_PREFIX)
    for round_no in range(1, ROUNDS + 1):
        text = _decode_round(text, round_no)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise UnscramblingFailedError(f"decoded payload is not JSON ({exc})", step="unscramble") from exc
    if not isinstance(data, dict):
        raise UnscramblingFailedError("decoded payload is not an object", step="unscramble")

    try:
        return DecodedPayload.model_validate(data)
    except ValidationError as exc:
        missing = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise UnscramblingFailedError(
            f"decoded payload missing required fields: {missing}",
            step="unscramble",
        ) from exc
