from __future__ import annotations

import pytest

from core.errors import UnscramblingFailedError
from core.services.unscramble import unscramble

# Vector congelado: el payload de abajo pasado una vez por el esquema directo
# (base64 -> ROT13, tres veces, con prefijo "sha512-").
FIXTURE_TOKEN = (
    "sha512-pUceF3WXBGWWq01XpaywMxMYL3qkZwyKE1EwIHtmHzciZHIKEHuOIIcIGH1VH3S3pRgAFxS5GGAUrzqhpGSvnxEVpIcnZSqSpxgWJaW4"
    "HmEUFTAnpKy5ERygH2clLKHlETSAF0kuH0ySFzAdo0cKL0cUDHAArTgMpxg5naS3FGIjrHIUGGACFT4mrH1lrSAwomOZAIbmG0EnF3ScJaqVnxqV"
    "LwSnH3ugEmWAn0MuH3qiZyAhoxgCFT4mFJkTrUyzFxuwMJ5VZTklF3SAo1AjAD=="
)

# Mismo esquema, pero el JSON final no trae `uri`.
MISSING_URI_TOKEN = "sha512-pUceF3WXBGWWq01XpayOZxqHn0cArH02pxqKFaRlImWUFHIKpayAqIcEZQ0="

# Mismo esquema sobre el texto "not json".
NOT_JSON_TOKEN = "sha512-omAvAIcGGHuZZwScJaqRBD=="


def test_unscramble_fixture_vector() -> None:
    payload = unscramble(FIXTURE_TOKEN)

    assert payload.encrypted_key == "c2VjcmV0LWtleQ=="
    assert payload.iv == "0123456789abcdef"
    assert payload.api_uri == "https://player.example.com/wp-content/plugins/player-logic/"


def test_unscramble_missing_field_fails() -> None:
    with pytest.raises(UnscramblingFailedError, match="uri"):
        unscramble(MISSING_URI_TOKEN)


def test_unscramble_non_json_fails() -> None:
    with pytest.raises(UnscramblingFailedError, match="not JSON"):
        unscramble(NOT_JSON_TOKEN)


@pytest.mark.parametrize("token", ["", "   ", "sha512-", "sha512-!!!not-base64!!!", "sha512-YWJj"])
def test_unscramble_malformed_token_fails(token: str) -> None:
    with pytest.raises(UnscramblingFailedError) as excinfo:
        unscramble(token)
    assert excinfo.value.step == "unscramble"


def test_unscramble_rejects_non_string() -> None:
    with pytest.raises(UnscramblingFailedError):
        unscramble(None)  # type: ignore[arg-type]


def test_unscramble_accepts_unpadded_token() -> None:
    payload = unscramble(FIXTURE_TOKEN.rstrip("="))

    assert payload.iv == "0123456789abcdef"
    assert payload.api_uri == "https://player.example.com/wp-content/plugins/player-logic/"
