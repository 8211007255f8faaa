"""Tests for AppSettings (core.config)."""

import pytest
from pydantic import ValidationError

from core.config import AppSettings


class TestPollLimits:
    """Tests for the bounded polling windows."""

    def test_defaults(self):
        settings = AppSettings(_env_file=None)

        assert settings.liveness_attempts == 60
        assert settings.readiness_attempts == 30
        assert settings.default_host_port == 8098

    def test_lower_limits_accepted(self):
        settings = AppSettings(_env_file=None, liveness_attempts=5, readiness_attempts=2)

        assert settings.liveness_attempts == 5
        assert settings.readiness_attempts == 2

    def test_liveness_above_window_rejected(self, monkeypatch):
        monkeypatch.setenv("DROPPR_LIVENESS_ATTEMPTS", "500")

        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_readiness_above_window_rejected(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, readiness_attempts=31)


class TestEnvFile:
    """Tests for .env loading."""

    def test_reads_project_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("DROPPR_PROXY_CONTAINER=files-proxy\n", encoding="utf-8")

        settings = AppSettings(_env_file=str(env_file))

        assert settings.proxy_container == "files-proxy"
