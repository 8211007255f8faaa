"""Errores del dominio.

Fatales (abortan el rebuild, exit 1):
- `ComposeFileNotFoundError`: falta el compose file, antes de cualquier mutación.
- `RuntimeCommandError`: un comando `docker` obligatorio falló.

Los pasos best-effort capturan `RuntimeCommandError` y lo degradan a warning.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class RebuildError(Exception):
    """Base para errores que terminan el rebuild con exit code distinto de 0."""

    exit_code = 1


class ComposeFileNotFoundError(RebuildError):
    def __init__(self, compose_file: Path, project_dir: Path) -> None:
        self.compose_file = compose_file
        self.project_dir = project_dir
        super().__init__(f"{compose_file.name} not found in {project_dir}")


class RuntimeCommandError(RebuildError):
    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"`{' '.join(self.command)}` exited with {returncode}{detail}")
