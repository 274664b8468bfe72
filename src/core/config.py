"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Las fuentes leen base URLs/timeouts de un único contrato; los overrides por
  constructor tienen prioridad sobre estos valores.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "ADULT_SOURCES_"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "adult-sources"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "adult-sources"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "adult-sources"
    return Path.home() / ".config" / "adult-sources"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# adult-sources user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la librería y de la CLI."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
        ),
        min_length=1,
        description="User-Agent para todas las peticiones.",
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=100,
        description="Concurrencia máxima en operaciones con fan-out (p.ej. episodios).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging usado por la CLI (DEBUG, INFO, WARNING...).",
    )

    rule34_base_url: str = Field(default="https://rule34.xxx", min_length=8)
    rule34_api_url: str = Field(
        default="https://ac.rule34.xxx",
        min_length=8,
        description="Endpoint de autocompletado de Rule34.",
    )
    hanime_base_url: str = Field(default="https://hanime.tv", min_length=8)
    hanime_search_url: str = Field(
        default="https://search.htv-services.com",
        min_length=8,
        description="API de búsqueda (POST JSON) de HAnime.",
    )
    hentai_haven_base_url: str = Field(default="http://hentaihaven.xxx", min_length=8)
    hentai_stream_base_url: str = Field(default="https://tube.hentaistream.com", min_length=8)
