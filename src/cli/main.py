"""CLI `srdroppr` / `sedrppr`: safe rebuild of the droppr stack."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from adapters.docker_compose import DockerComposeRuntime
from adapters.http_client import HttpProbe
from cli.ui_components import (
    build_status_table,
    print_command,
    print_error,
    print_plan,
    print_step,
    print_warning,
)
from core.config import AppSettings, get_user_env_file
from core.domain.errors import RebuildError
from core.domain.models import InvocationConfig, TunnelMode
from core.services.rebuild import RebuildHooks, rebuild

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    help=(
        "Safe Rebuild Droppr: stop the stack, rebuild images and restart it, "
        "keeping the Cloudflare tunnel profile if it is currently running.\n\n"
        "`sedrppr` and `srdroppr` are equivalent."
    ),
)

_console = Console()
_err_console = Console(stderr=True)


@app.command()
def main(
    clean: bool = typer.Option(False, "--clean", help="Build with --no-cache."),
    tunnel: bool | None = typer.Option(
        None,
        "--tunnel/--no-tunnel",
        help="Force the tunnel profile on/off (default: auto-detect; last flag wins).",
        show_default=False,
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print actions without executing."),
    project_dir: Path | None = typer.Option(
        None,
        "--project-dir",
        "-C",
        file_okay=False,
        help="Directory holding the compose file and its .env (default: current directory).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo every docker command."),
) -> None:
    """Stop, rebuild and restart the droppr compose stack, then check it is serving."""

    config = InvocationConfig(
        clean=clean,
        tunnel_mode=TunnelMode.from_flag(tunnel),
        dry_run=dry_run,
    )

    if project_dir is None:
        settings = AppSettings()
    else:
        # The project's .env replaces the one in the working directory.
        settings = AppSettings(
            project_dir=project_dir,
            _env_file=(str(project_dir / ".env"), str(get_user_env_file())),
        )

    hooks = RebuildHooks(
        info=lambda msg: print_step(_console, msg),
        warning=lambda msg: print_warning(_err_console, msg),
        command=(lambda cmd: print_command(_console, cmd)) if verbose else None,
    )
    runtime = DockerComposeRuntime(settings, on_command=hooks.emit_command)

    try:
        if config.dry_run:
            outcome = rebuild(settings=settings, config=config, runtime=runtime, hooks=hooks)
        else:
            with HttpProbe(settings) as probe:
                outcome = rebuild(
                    settings=settings,
                    config=config,
                    runtime=runtime,
                    probe=probe,
                    hooks=hooks,
                )
    except RebuildError as exc:
        print_error(_err_console, str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    if outcome.dry_run:
        print_plan(_console, outcome.planned, settings.resolved_project_dir())
        return

    print_step(_console, "Current Droppr containers:")
    _console.print(build_status_table(outcome.containers))
    print_step(_console, "Safe rebuild (droppr) completed.", style="green")


def run() -> None:
    app()
