"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- El cliente REST y la CLI leen host/credenciales/defaults de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_APPLICATION = "live"
DEFAULT_STREAM_FILE = "myStream"
DEFAULT_APP_INSTANCE = "_definst_"
DEFAULT_PORT = 8087


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "wowza-d2"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "wowza-d2"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "wowza-d2"
    return Path.home() / ".config" / "wowza-d2"


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


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Las claves existentes se conservan; los valores `None` se ignoran.
    """

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            # Archivo ilegible: se reescribe desde cero.
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# wowza-d2 user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración de conexión al servidor Wowza.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el cliente.
    - Un único contrato de configuración para CLI/adapters.

    Es inmutable: los defaults de aplicación/stream/instancia se leen en cada
    llamada y ninguna operación los modifica.
    """

    model_config = SettingsConfigDict(
        env_prefix="WOWZA_D2_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    host: str = Field(
        default="localhost",
        min_length=1,
        description="Host del servidor Wowza Streaming Engine.",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="Puerto de la REST API (8087 por defecto en Wowza).",
    )
    scheme: Literal["http", "https"] = Field(
        default="http",
        description="Esquema de la URL base.",
    )
    username: str = Field(
        default="",
        description="Usuario para autenticación digest.",
    )
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Password para autenticación digest.",
    )

    application: str = Field(
        default=DEFAULT_APPLICATION,
        min_length=1,
        description="Aplicación por defecto (p.ej. 'live', 'webrtc').",
    )
    stream_file: str = Field(
        default=DEFAULT_STREAM_FILE,
        min_length=1,
        description="Stream file por defecto (sin sufijo '.stream').",
    )
    app_instance: str = Field(
        default=DEFAULT_APP_INSTANCE,
        min_length=1,
        description="Instancia de aplicación por defecto.",
    )
    media_caster_type: str = Field(
        default="rtp",
        min_length=1,
        description="Tipo de MediaCaster de los stream files (informativo).",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging de la CLI (DEBUG, INFO, WARNING, ERROR).",
    )
