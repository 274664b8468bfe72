from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli import doctor
from cli.main import app

runner = CliRunner()


def test_source_error_exits_with_code_1() -> None:
    result = runner.invoke(app, ["search", "hanime", "   "])

    assert result.exit_code == 1
    assert "invalid_argument" in result.output


def test_unknown_source_is_usage_error() -> None:
    result = runner.invoke(app, ["info", "nope", "123"])

    assert result.exit_code == 2


def test_doctor_set_url_writes_user_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    saved: dict[str, str] = {}

    def fake_write(values: dict[str, str]) -> Path:
        saved.update(values)
        return tmp_path / ".env"

    monkeypatch.setattr(doctor, "write_user_env_vars", fake_write)

    result = runner.invoke(app, ["doctor", "set-url", "hentai_haven", "https://mirror.example/"])

    assert result.exit_code == 0
    assert saved == {"ADULT_SOURCES_HENTAI_HAVEN_BASE_URL": "https://mirror.example"}


def test_doctor_set_url_rejects_unknown_source() -> None:
    result = runner.invoke(app, ["doctor", "set-url", "nope", "https://mirror.example"])

    assert result.exit_code != 0
