from __future__ import annotations

import pytest

from core.config import AppSettings


@pytest.fixture
def settings() -> AppSettings:
    # Sin .env: los tests no deben depender de la config local del usuario.
    return AppSettings(_env_file=None)
