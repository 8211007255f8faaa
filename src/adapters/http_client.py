"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers del readiness probe.
- Facilita testeo: se puede inyectar un `httpx.Client` con `MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

USER_AGENT = "droppr-rebuild/0.1"


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con los defaults del probe."""

    settings = settings or AppSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT, "Accept": "*/*"},
        transport=transport,
    )


class HttpProbe:
    """`HealthProbe` basado en httpx: éxito solo con 2xx (tras redirects)."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or build_client(settings)

    def check(self, url: str) -> tuple[bool, str]:
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            return False, str(exc) or exc.__class__.__name__
        return response.is_success, f"HTTP {response.status_code}"

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpProbe":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
