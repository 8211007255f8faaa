"""Tests for the HTTP readiness probe (adapters.http_client)."""

import httpx

from adapters.http_client import HttpProbe, build_client


def _probe(settings, handler):
    client = build_client(settings, transport=httpx.MockTransport(handler))
    return HttpProbe(settings, client=client)


class TestHttpProbe:
    """Tests for success/failure classification."""

    def test_success(self, settings):
        with _probe(settings, lambda request: httpx.Response(200, text="ok")) as probe:
            assert probe.check("http://localhost:8098/") == (True, "HTTP 200")

    def test_server_error(self, settings):
        with _probe(settings, lambda request: httpx.Response(502)) as probe:
            ok, detail = probe.check("http://localhost:8098/")

        assert not ok
        assert detail == "HTTP 502"

    def test_redirect_is_followed(self, settings):
        def handler(request):
            if request.url.path == "/":
                return httpx.Response(302, headers={"Location": "/login"})
            return httpx.Response(200)

        with _probe(settings, handler) as probe:
            assert probe.check("http://localhost:8098/")[0]

    def test_connection_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _probe(settings, handler) as probe:
            ok, detail = probe.check("http://localhost:8098/")

        assert not ok
        assert "connection refused" in detail
