"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Todo el texto va como `Text` (no markup): los comandos docker contienen
  corchetes y `{{.Names}}` que Rich interpretaría como estilos.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.domain.models import ContainerState

TAG = "[SRDROPPR]"


def print_step(console: Console, message: str, *, style: str = "") -> None:
    """Línea de progreso con el prefijo del programa."""

    line = Text.assemble((TAG, "bold cyan"), " ", (message, style))
    console.print(line, soft_wrap=True)


def print_warning(console: Console, message: str) -> None:
    print_step(console, f"Warning: {message}", style="yellow")


def print_error(console: Console, message: str) -> None:
    print_step(console, f"Error: {message}", style="bold red")


def print_command(console: Console, command: str) -> None:
    console.print(Text(f"  $ {command}", style="dim"), soft_wrap=True)


def print_plan(console: Console, steps: list[str], project_dir: Path) -> None:
    """Salida del dry-run: cada paso una vez, en orden."""

    print_step(console, f"DRY RUN: Would run the following steps in {project_dir}:")
    for step in steps:
        console.print(Text(f"  - {step}"), soft_wrap=True)


def build_status_table(containers: list[ContainerState]) -> Table:
    """Tabla final de `docker compose ps`."""

    table = Table(title="Current Droppr containers")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Service", style="white")
    table.add_column("State", style="green")
    table.add_column("Status", style="white")
    table.add_column("Ports", style="magenta")
    for c in containers:
        state_style = "green" if c.state == "running" else "red"
        table.add_row(
            Text(c.name),
            Text(c.service),
            Text(c.state, style=state_style),
            Text(c.status),
            Text(c.ports),
        )
    return table
