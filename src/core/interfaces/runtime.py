"""Contratos del runtime de contenedores y del probe HTTP.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El orquestador se prueba con un runtime falso que registra llamadas, sin
  tocar el daemon de Docker.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import ContainerState


@runtime_checkable
class ContainerRuntime(Protocol):
    """Operaciones de compose/docker que usa el rebuild.

    Reglas de diseño:
    - Los métodos mutantes (`build`, `pull_*`, `down`, `up`) lanzan
      `RuntimeCommandError` si el comando falla; decidir si es fatal es cosa
      del orquestador.
    - `profiles` se pasa en cada llamada: el perfil activo forma parte de
      cada invocación de compose.
    """

    def validate_config(self, profiles: Sequence[str]) -> None: ...

    def build(self, profiles: Sequence[str], *, no_cache: bool = False) -> None: ...

    def pull_service(self, service: str, profiles: Sequence[str]) -> None: ...

    def pull_image(self, image: str) -> None: ...

    def down(self, profiles: Sequence[str], *, remove_orphans: bool = True) -> None: ...

    def up(self, profiles: Sequence[str], *, detach: bool = True) -> None: ...

    def running_containers(self) -> dict[str, str]:
        """Nombre -> status de `docker ps` (solo contenedores en ejecución)."""

        ...

    def host_port(self, container: str, container_port: str) -> int | None: ...

    def ps(self, profiles: Sequence[str]) -> list[ContainerState]: ...

    def describe(self, action: str, profiles: Sequence[str], *args: str) -> str:
        """Línea de comando legible, usada por el dry-run."""

        ...


@runtime_checkable
class HealthProbe(Protocol):
    """Una petición GET con clasificación éxito/fallo."""

    def check(self, url: str) -> tuple[bool, str]: ...
