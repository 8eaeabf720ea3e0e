"""Configuración del cliente.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el cliente, los adaptadores HTTP y la CLI lean la misma config.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "pocketkit"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "pocketkit"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "pocketkit"
    return Path.home() / ".config" / "pocketkit"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def get_default_credential_file() -> Path:
    return get_user_config_dir() / "credential.json"


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

    lines = ["# pocketkit user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ClientSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core.
    - Un único contrato de configuración para librería y CLI.
    """

    model_config = SettingsConfigDict(
        env_prefix="POCKETKIT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="http://127.0.0.1:8090",
        min_length=8,
        description="URL base del servidor (absoluta).",
    )
    lang: str = Field(
        default="en-US",
        min_length=1,
        description="Valor enviado en `Accept-Language`.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="pocketkit/0.1",
        min_length=1,
        description="User-Agent de las peticiones.",
    )
    max_per_page: int | None = Field(
        default=500,
        ge=1,
        description="Techo de `per_page` en listados; `None` lo desactiva.",
    )
    credential_file: Path | None = Field(
        default=None,
        description="Archivo JSON donde persistir la credencial (CLI).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging para la CLI.",
    )
