"""Adaptador `ContainerRuntime` sobre el CLI de Docker.

Por qué subprocess y no el SDK:
- El stack se gestiona con `docker compose` (perfiles, build, orphans); el SDK
  de Docker no cubre compose.
- Mantiene exactamente la semántica de los comandos que un operador correría a
  mano, lo que facilita el dry-run.
"""

from __future__ import annotations

import json
import shlex
import subprocess
from pathlib import Path
from typing import Any, Callable, Sequence

from pydantic import ValidationError

from core.config import AppSettings
from core.domain.errors import RuntimeCommandError
from core.domain.models import ContainerState

Runner = Callable[..., subprocess.CompletedProcess]


class DockerComposeRuntime:
    """Ejecuta compose/docker en el directorio del proyecto."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        runner: Runner = subprocess.run,
        on_command: Callable[[str], None] | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._runner = runner
        self._on_command = on_command

    @property
    def project_dir(self) -> Path:
        return self._settings.resolved_project_dir()

    def _compose(self, profiles: Sequence[str]) -> list[str]:
        cmd = [self._settings.docker_binary, "compose", "-f", self._settings.compose_file]
        for profile in profiles:
            cmd += ["--profile", profile]
        return cmd

    def _run(
        self,
        cmd: list[str],
        *,
        capture: bool = False,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        if self._on_command:
            self._on_command(shlex.join(cmd))
        try:
            result = self._runner(
                cmd,
                cwd=str(self.project_dir),
                capture_output=capture,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise RuntimeCommandError(cmd, 127, str(exc)) from exc
        if check and result.returncode != 0:
            raise RuntimeCommandError(cmd, result.returncode, result.stderr or "")
        return result

    def describe(self, action: str, profiles: Sequence[str], *args: str) -> str:
        return shlex.join([*self._compose(profiles), action, *args])

    def validate_config(self, profiles: Sequence[str]) -> None:
        # Output is the fully rendered config; only the exit code matters.
        self._run([*self._compose(profiles), "config"], capture=True)

    def build(self, profiles: Sequence[str], *, no_cache: bool = False) -> None:
        cmd = [*self._compose(profiles), "build"]
        if no_cache:
            cmd.append("--no-cache")
        self._run(cmd)

    def pull_service(self, service: str, profiles: Sequence[str]) -> None:
        self._run([*self._compose(profiles), "pull", service])

    def pull_image(self, image: str) -> None:
        self._run([self._settings.docker_binary, "pull", image], capture=True)

    def down(self, profiles: Sequence[str], *, remove_orphans: bool = True) -> None:
        cmd = [*self._compose(profiles), "down"]
        if remove_orphans:
            cmd.append("--remove-orphans")
        self._run(cmd)

    def up(self, profiles: Sequence[str], *, detach: bool = True) -> None:
        cmd = [*self._compose(profiles), "up"]
        if detach:
            cmd.append("-d")
        self._run(cmd)

    def running_containers(self) -> dict[str, str]:
        try:
            result = self._run(
                [self._settings.docker_binary, "ps", "--format", "{{.Names}}\t{{.Status}}"],
                capture=True,
                check=False,
            )
        except RuntimeCommandError:
            return {}
        if result.returncode != 0:
            return {}

        containers: dict[str, str] = {}
        for line in (result.stdout or "").splitlines():
            name, _, status = line.strip().partition("\t")
            if name:
                containers[name] = status.strip()
        return containers

    def host_port(self, container: str, container_port: str) -> int | None:
        try:
            result = self._run(
                [self._settings.docker_binary, "port", container, container_port],
                capture=True,
                check=False,
            )
        except RuntimeCommandError:
            return None
        if result.returncode != 0:
            return None
        return parse_port_mapping(result.stdout or "")

    def ps(self, profiles: Sequence[str]) -> list[ContainerState]:
        result = self._run([*self._compose(profiles), "ps", "--format", "json"], capture=True)
        return parse_ps_output(result.stdout or "")


def parse_port_mapping(output: str) -> int | None:
    """Puerto host de la primera línea de `docker port` (`0.0.0.0:8098`, `[::]:8098`)."""

    lines = [line.strip() for line in output.splitlines() if line.strip()]
    if not lines:
        return None
    candidate = lines[0].rsplit(":", 1)[-1].strip()
    if not candidate.isdigit():
        return None
    port = int(candidate)
    return port if 0 < port <= 65535 else None


def parse_ps_output(output: str) -> list[ContainerState]:
    """Decodifica `compose ps --format json`.

    Compose < 2.21 emite un array JSON; versiones nuevas, un objeto por línea.
    Entradas ilegibles se descartan: la tabla final es solo informativa.
    """

    text = output.strip()
    if not text:
        return []

    entries: list[Any]
    if text.startswith("["):
        try:
            entries = json.loads(text)
        except json.JSONDecodeError:
            return []
        if not isinstance(entries, list):
            return []
    else:
        entries = []
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                continue

    containers: list[ContainerState] = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("Name"):
            continue
        try:
            containers.append(ContainerState.from_ps_entry(entry))
        except ValidationError:
            continue
    return containers
