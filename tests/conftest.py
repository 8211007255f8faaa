"""Shared fixtures: a recording fake runtime and probe."""

from __future__ import annotations

import shlex
from pathlib import Path

import pytest

from core.config import AppSettings
from core.domain.errors import RuntimeCommandError
from core.domain.models import ContainerState

MUTATING = {"build", "pull_service", "pull_image", "down", "up"}


class FakeRuntime:
    """In-memory `ContainerRuntime` that records every call."""

    def __init__(
        self,
        *,
        running: dict[str, str] | None = None,
        fail: set[str] | None = None,
        up_after: int | None = 0,
        port: int | None = 8080,
        proxy: str = "droppr",
    ) -> None:
        self.running = dict(running or {})
        self.fail = set(fail or ())
        self.up_after = up_after
        self.port = port
        self.proxy = proxy
        self.calls: list[tuple] = []
        self.listings = 0
        self.on_command = None

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if self.on_command:
            self.on_command(f"docker {name}")
        if name in self.fail:
            raise RuntimeCommandError(["docker", name], 1, f"{name} boom")

    @property
    def mutations(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in MUTATING]

    @property
    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def describe(self, action, profiles, *args):
        cmd = ["docker", "compose", "-f", "docker-compose.yml"]
        for p in profiles:
            cmd += ["--profile", p]
        return shlex.join([*cmd, action, *args])

    def validate_config(self, profiles):
        self._record("validate_config", tuple(profiles))

    def build(self, profiles, *, no_cache=False):
        self._record("build", tuple(profiles), no_cache)

    def pull_service(self, service, profiles):
        self._record("pull_service", service, tuple(profiles))

    def pull_image(self, image):
        self._record("pull_image", image)

    def down(self, profiles, *, remove_orphans=True):
        self._record("down", tuple(profiles), remove_orphans)

    def up(self, profiles, *, detach=True):
        self._record("up", tuple(profiles), detach)

    def running_containers(self):
        self.listings += 1
        self.calls.append(("running_containers",))
        snapshot = dict(self.running)
        if self.up_after is not None and self.listings > self.up_after and any(
            c[0] == "up" for c in self.calls
        ):
            snapshot[self.proxy] = "Up 2 seconds"
        return snapshot

    def host_port(self, container, container_port):
        self.calls.append(("host_port", container, container_port))
        return self.port

    def ps(self, profiles):
        self._record("ps", tuple(profiles))
        return [
            ContainerState(Name=self.proxy, Service=self.proxy, State="running", Status="Up 3 seconds")
        ]


class FakeProbe:
    def __init__(self, ok_after: int | None = 1) -> None:
        self.ok_after = ok_after
        self.urls: list[str] = []

    def check(self, url):
        self.urls.append(url)
        if self.ok_after is not None and len(self.urls) >= self.ok_after:
            return True, "HTTP 200"
        return False, "HTTP 502"


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / "docker-compose.yml").write_text("services: {}\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(project_dir: Path) -> AppSettings:
    return AppSettings(project_dir=project_dir, _env_file=None)


@pytest.fixture
def no_sleep():
    slept: list[float] = []
    return slept.append, slept
