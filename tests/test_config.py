"""Tests for environment-driven settings and the startup secret guard."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from mcpay.config import DEFAULT_WEBHOOK_SECRET, Settings, get_settings
from mcpay.serve import create_app

_ENV_VARS = (
    "MC_WEBHOOK_SECRET",
    "MC_ENVIRONMENT",
    "MC_HOST",
    "MC_PORT",
    "PORT",
    "MC_LEDGER_CAPACITY",
    "MC_CORS_ORIGINS",
    "MC_RATE_LIMIT",
    "MC_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    def test_defaults(self):
        s = Settings()
        assert s.webhook_secret == DEFAULT_WEBHOOK_SECRET == "dev-secret-change-me"
        assert s.environment == "development"
        assert s.port == 3000
        assert s.ledger_capacity == 200
        assert s.cors_origins == ["*"]
        assert s.rate_limit == "120/minute"
        assert s.uses_default_secret is True
        assert s.is_production is False


class TestEnvOverrides:
    def test_secret_from_env(self, monkeypatch):
        monkeypatch.setenv("MC_WEBHOOK_SECRET", "s3cret")
        s = Settings()
        assert s.webhook_secret == "s3cret"
        assert s.uses_default_secret is False

    @pytest.mark.parametrize("name", ["PORT", "MC_PORT"])
    def test_port_aliases(self, monkeypatch, name):
        monkeypatch.setenv(name, "8081")
        assert Settings().port == 8081

    def test_capacity_and_origins(self, monkeypatch):
        monkeypatch.setenv("MC_LEDGER_CAPACITY", "5")
        monkeypatch.setenv("MC_CORS_ORIGINS", '["https://a.example","https://b.example"]')
        s = Settings()
        assert s.ledger_capacity == 5
        assert s.cors_origins == ["https://a.example", "https://b.example"]

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("MC_WEBHOOK_SECRET=from-dotenv\n")
        assert Settings().webhook_secret == "from-dotenv"

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestValidation:
    @pytest.mark.parametrize("secret", ["", "   "])
    def test_blank_secret_rejected(self, secret):
        with pytest.raises(ValidationError):
            Settings(webhook_secret=secret)

    @pytest.mark.parametrize("capacity", [0, -3])
    def test_capacity_must_be_positive(self, capacity):
        with pytest.raises(ValidationError):
            Settings(ledger_capacity=capacity)

    @pytest.mark.parametrize("env", ["production", "PROD", " Production "])
    def test_is_production(self, env):
        assert Settings(environment=env).is_production is True


class TestStartupSecretGuard:
    def test_production_refuses_default_secret(self):
        with pytest.raises(RuntimeError, match="placeholder"):
            create_app(Settings(environment="production", rate_limit=""))

    def test_production_accepts_real_secret(self):
        app = create_app(Settings(environment="production", webhook_secret="real", rate_limit=""))
        assert app.state.settings.webhook_secret == "real"

    def test_development_warns_on_default_secret(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mcpay.serve"):
            create_app(Settings(rate_limit=""))
        assert any("insecure development secret" in r.getMessage() for r in caplog.records)

    def test_ledger_capacity_from_settings(self):
        app = create_app(Settings(webhook_secret="x", ledger_capacity=7, rate_limit=""))
        assert app.state.ledger.capacity == 7
