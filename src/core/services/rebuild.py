"""Safe-rebuild orchestration for the droppr compose stack.

The CLI only parses flags and renders output; everything that decides what
runs, in which order and what is fatal lives here so the same flow can be
driven by tests with a fake runtime. Side-effects on the terminal go through
`RebuildHooks`.

Failure policy per step:
- config / build / up: fatal (`RuntimeCommandError` propagates).
- pulls / down: best-effort, downgraded to warnings.
- liveness / readiness polls: bounded, a timeout is a warning only.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from core.config import AppSettings
from core.domain.errors import ComposeFileNotFoundError, RuntimeCommandError
from core.domain.models import InvocationConfig, RebuildOutcome, TunnelMode
from core.interfaces.runtime import ContainerRuntime, HealthProbe

Sleep = Callable[[float], None]


@dataclass
class RebuildHooks:
    """Optional callbacks for UI layers (progress, warnings, command echo)."""

    info: Callable[[str], None] | None = None
    warning: Callable[[str], None] | None = None
    command: Callable[[str], None] | None = None

    def emit_info(self, message: str) -> None:
        if self.info:
            self.info(message)

    def emit_warning(self, message: str) -> None:
        if self.warning:
            self.warning(message)

    def emit_command(self, command: str) -> None:
        if self.command:
            self.command(command)


def build_health_url(port: int, path: str = "/", host: str = "localhost") -> str:
    if not path.startswith("/"):
        path = "/" + path
    return f"http://{host}:{port}{path}"


def ensure_compose_file(settings: AppSettings) -> None:
    path = settings.compose_path()
    if not path.is_file():
        raise ComposeFileNotFoundError(path, settings.resolved_project_dir())


def resolve_tunnel(
    config: InvocationConfig,
    runtime: ContainerRuntime,
    settings: AppSettings,
) -> bool:
    """Decide whether the tunnel profile is active for this run.

    `auto` mirrors the current state: the tunnel is kept only if a container
    with exactly the tunnel name is running right now.
    """

    if not settings.tunnel_supported:
        return False
    if config.tunnel_mode is TunnelMode.ON:
        return True
    if config.tunnel_mode is TunnelMode.OFF:
        return False
    return settings.tunnel_container in runtime.running_containers()


def active_profiles(use_tunnel: bool, settings: AppSettings) -> list[str]:
    return [settings.tunnel_profile] if use_tunnel else []


def plan_steps(
    config: InvocationConfig,
    use_tunnel: bool,
    runtime: ContainerRuntime,
    settings: AppSettings,
) -> list[str]:
    """Ordered, human readable list of what a real run would execute."""

    profiles = active_profiles(use_tunnel, settings)
    build_args = ["--no-cache"] if config.clean else []

    steps = [
        runtime.describe("config", profiles),
        runtime.describe("build", profiles, *build_args),
        runtime.describe("pull", profiles, settings.proxy_service),
    ]
    if use_tunnel:
        steps.append(runtime.describe("pull", profiles, settings.tunnel_service))
        steps.append(f"{settings.docker_binary} pull {settings.tunnel_image}")
    steps += [
        runtime.describe("down", profiles, "--remove-orphans"),
        runtime.describe("up", profiles, "-d"),
        f"wait for container: {settings.proxy_container}",
        f"http check: {build_health_url(settings.default_host_port, settings.health_path)}"
        f" (port from `{settings.docker_binary} port {settings.proxy_container}"
        f" {settings.proxy_container_port}`)",
        runtime.describe("ps", profiles),
    ]
    return steps


def wait_for_container(
    runtime: ContainerRuntime,
    name: str,
    *,
    attempts: int,
    interval: float,
    sleep: Sleep = time.sleep,
) -> bool:
    """Liveness poll: at most `attempts` listings of running containers."""

    for attempt in range(1, attempts + 1):
        status = runtime.running_containers().get(name)
        if status is not None and "Up" in status:
            return True
        if attempt < attempts:
            sleep(interval)
    return False


def wait_for_http(
    probe: HealthProbe,
    url: str,
    *,
    attempts: int,
    interval: float,
    sleep: Sleep = time.sleep,
) -> bool:
    """Readiness poll: at most `attempts` GET requests."""

    for attempt in range(1, attempts + 1):
        ok, _detail = probe.check(url)
        if ok:
            return True
        if attempt < attempts:
            sleep(interval)
    return False


def _best_effort(
    action: Callable[[], None],
    *,
    description: str,
    outcome: RebuildOutcome,
    hooks: RebuildHooks,
) -> None:
    try:
        action()
    except RuntimeCommandError as exc:
        message = f"{description} failed (ignored): {exc}"
        outcome.warnings.append(message)
        hooks.emit_warning(message)


def rebuild(
    *,
    settings: AppSettings,
    config: InvocationConfig,
    runtime: ContainerRuntime,
    probe: HealthProbe | None = None,
    hooks: RebuildHooks | None = None,
    sleep: Sleep = time.sleep,
) -> RebuildOutcome:
    """Run (or plan, on dry-run) the full stop/rebuild/restart sequence.

    Raises `ComposeFileNotFoundError` before touching the runtime and
    `RuntimeCommandError` when a fatal step fails.
    """

    hooks = hooks or RebuildHooks()

    if config.clean:
        hooks.emit_info("Clean mode enabled: Disabling build cache.")

    ensure_compose_file(settings)

    use_tunnel = resolve_tunnel(config, runtime, settings)
    profiles = active_profiles(use_tunnel, settings)
    outcome = RebuildOutcome(use_tunnel=use_tunnel, dry_run=config.dry_run)

    if config.dry_run:
        outcome.planned = plan_steps(config, use_tunnel, runtime, settings)
        return outcome

    hooks.emit_info("Validating compose file...")
    runtime.validate_config(profiles)

    flags = "--no-cache" if config.clean else "None"
    hooks.emit_info(f"Building Droppr images (Flags: {flags})...")
    runtime.build(profiles, no_cache=config.clean)

    hooks.emit_info("Pulling upstream images (best-effort)...")
    _best_effort(
        lambda: runtime.pull_service(settings.proxy_service, profiles),
        description=f"pull {settings.proxy_service}",
        outcome=outcome,
        hooks=hooks,
    )
    if use_tunnel:
        _best_effort(
            lambda: runtime.pull_service(settings.tunnel_service, profiles),
            description=f"pull {settings.tunnel_service}",
            outcome=outcome,
            hooks=hooks,
        )
        _best_effort(
            lambda: runtime.pull_image(settings.tunnel_image),
            description=f"pull {settings.tunnel_image}",
            outcome=outcome,
            hooks=hooks,
        )

    hooks.emit_info("Bringing down Droppr stack (remove orphans)...")
    _best_effort(
        lambda: runtime.down(profiles, remove_orphans=True),
        description="compose down",
        outcome=outcome,
        hooks=hooks,
    )

    if use_tunnel:
        hooks.emit_info("Starting Droppr stack (tunnel profile enabled)...")
    else:
        hooks.emit_info("Starting Droppr stack...")
    runtime.up(profiles, detach=True)

    hooks.emit_info(f"Waiting for Nginx container ({settings.proxy_container}) to be Up...")
    outcome.container_up = wait_for_container(
        runtime,
        settings.proxy_container,
        attempts=settings.liveness_attempts,
        interval=settings.poll_interval_seconds,
        sleep=sleep,
    )
    if outcome.container_up:
        hooks.emit_info("Nginx container is Up.")
    else:
        window = settings.liveness_attempts * settings.poll_interval_seconds
        message = f"Nginx container did not report Up within {window:g}s"
        outcome.warnings.append(message)
        hooks.emit_warning(message)

    if probe is not None:
        port = runtime.host_port(settings.proxy_container, settings.proxy_container_port)
        url = build_health_url(port or settings.default_host_port, settings.health_path)
        outcome.http_url = url
        hooks.emit_info(f"Checking HTTP ({url})...")
        outcome.http_ok = wait_for_http(
            probe,
            url,
            attempts=settings.readiness_attempts,
            interval=settings.poll_interval_seconds,
            sleep=sleep,
        )
        if outcome.http_ok:
            hooks.emit_info("HTTP check OK.")
        else:
            message = f"HTTP check failed at {url}"
            outcome.warnings.append(message)
            hooks.emit_warning(message)

    try:
        outcome.containers = runtime.ps(profiles)
    except RuntimeCommandError as exc:
        message = f"Could not list containers: {exc}"
        outcome.warnings.append(message)
        hooks.emit_warning(message)

    return outcome
