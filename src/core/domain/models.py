"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta e inmutabilidad de la configuración de invocación, que se
  resuelve una vez antes de cualquier acción destructiva.
- Normaliza la salida de `docker compose ps` (varios formatos según versión)
  en una estructura común.

Nota:
- Estos modelos describen *qué* se decide/observa, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class TunnelMode(str, Enum):
    """How the tunnel profile is chosen for a run."""

    AUTO = "auto"
    ON = "on"
    OFF = "off"

    @classmethod
    def from_flag(cls, tunnel: bool | None) -> "TunnelMode":
        """Map the tri-state `--tunnel/--no-tunnel` flag to a mode."""

        if tunnel is None:
            return cls.AUTO
        return cls.ON if tunnel else cls.OFF


class InvocationConfig(BaseModel):
    """Configuración de una invocación, construida una sola vez desde la CLI."""

    model_config = ConfigDict(frozen=True)

    clean: bool = Field(
        default=False,
        description="Construir imágenes sin caché (`--no-cache`).",
    )
    tunnel_mode: TunnelMode = Field(
        default=TunnelMode.AUTO,
        description="auto: refleja el estado actual del contenedor del túnel.",
    )
    dry_run: bool = Field(
        default=False,
        description="Solo imprimir los pasos planificados.",
    )


class ContainerState(BaseModel):
    """Una fila de `docker compose ps`."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(..., alias="Name")
    service: str = Field(default="", alias="Service")
    state: str = Field(default="", alias="State")
    status: str = Field(default="", alias="Status")
    ports: str = Field(default="", alias="Ports")

    @classmethod
    def from_ps_entry(cls, entry: dict[str, Any]) -> "ContainerState":
        """Build from a decoded `ps --format json` object.

        Older compose releases only expose `Publishers`, newer ones add a
        preformatted `Ports` string.
        """

        data = dict(entry)
        if not data.get("Ports") and isinstance(data.get("Publishers"), list):
            published = []
            for pub in data["Publishers"]:
                if not isinstance(pub, dict) or not pub.get("PublishedPort"):
                    continue
                published.append(
                    f"{pub.get('URL') or '0.0.0.0'}:{pub['PublishedPort']}"
                    f"->{pub.get('TargetPort')}/{pub.get('Protocol') or 'tcp'}"
                )
            data["Ports"] = ", ".join(published)
        return cls.model_validate(data)


class RebuildOutcome(BaseModel):
    """Resultado de una ejecución del orquestador (real o dry-run)."""

    use_tunnel: bool
    dry_run: bool = False
    planned: list[str] = Field(
        default_factory=list,
        description="Pasos planificados (solo en dry-run).",
    )
    container_up: bool | None = Field(
        default=None,
        description="None si no se llegó a comprobar.",
    )
    http_url: str | None = None
    http_ok: bool | None = None
    warnings: list[str] = Field(default_factory=list)
    containers: list[ContainerState] = Field(default_factory=list)
