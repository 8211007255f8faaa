"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el adaptador Docker, el probe HTTP y el orquestador lean los
  mismos nombres de contenedores/servicios y los mismos límites de polling.
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
        return base / "droppr"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "droppr"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "droppr"
    return Path.home() / ".config" / "droppr"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central del rebuild.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Los defaults reproducen el stack droppr; otro stack solo cambia env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix="DROPPR_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero, luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    project_dir: Path | None = Field(
        default=None,
        description="Directorio del compose project (None: directorio actual).",
    )
    compose_file: str = Field(
        default="docker-compose.yml",
        min_length=1,
        description="Compose file, relativo a `project_dir`.",
    )
    docker_binary: str = Field(
        default="docker",
        min_length=1,
        description="Ejecutable del CLI de Docker.",
    )

    proxy_container: str = Field(
        default="droppr",
        min_length=1,
        description="Contenedor Nginx principal (liveness + puerto).",
    )
    proxy_service: str = Field(
        default="droppr",
        min_length=1,
        description="Servicio compose del proxy (pull best-effort).",
    )
    proxy_container_port: str = Field(
        default="80/tcp",
        min_length=1,
        description="Puerto interno del proxy para `docker port`.",
    )

    tunnel_supported: bool = Field(
        default=True,
        description="False: variante sin túnel, el perfil nunca se activa.",
    )
    tunnel_container: str = Field(
        default="cloudflared-droppr",
        min_length=1,
        description="Nombre exacto del contenedor del túnel (auto-detect).",
    )
    tunnel_service: str = Field(
        default="cloudflared-droppr",
        min_length=1,
        description="Servicio compose del túnel.",
    )
    tunnel_image: str = Field(
        default="cloudflare/cloudflared:latest",
        min_length=1,
        description="Imagen upstream del túnel (pull best-effort).",
    )
    tunnel_profile: str = Field(
        default="tunnel",
        min_length=1,
        description="Perfil compose que activa el túnel.",
    )

    default_host_port: int = Field(
        default=8098,
        ge=1,
        le=65535,
        description="Puerto host si no se puede leer el mapping.",
    )
    health_path: str = Field(
        default="/",
        min_length=1,
        description="Ruta HTTP del readiness probe.",
    )
    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout por request del probe (segundos).",
    )

    liveness_attempts: int = Field(
        default=60,
        ge=1,
        le=60,
        description="Intentos máximos esperando el contenedor `Up`.",
    )
    readiness_attempts: int = Field(
        default=30,
        ge=1,
        le=30,
        description="Intentos máximos del readiness probe HTTP.",
    )
    poll_interval_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Pausa entre intentos de polling (segundos).",
    )

    def resolved_project_dir(self) -> Path:
        return (self.project_dir or Path.cwd()).resolve()

    def compose_path(self) -> Path:
        return self.resolved_project_dir() / self.compose_file
