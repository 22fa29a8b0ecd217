"""Tests for settings defaults and environment overrides."""

import pytest

from bopp.config import AppSettings, AuthSettings, RateSettings, StorageSettings


def test_defaults() -> None:
    assert RateSettings().history_cap == 50
    assert RateSettings().default_history_limit == 5
    auth = AuthSettings()
    assert auth.otp_ttl_seconds == 300
    assert auth.default_admin_password.get_secret_value() == "admin"
    assert auth.protected_user_ids == ("admin", "employee")
    assert auth.clear_otp_on_success is False
    assert StorageSettings().data_dir == "data"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_OTP_TTL_SECONDS", "120")
    monkeypatch.setenv("RATES_HISTORY_CAP", "10")
    monkeypatch.setenv("STORAGE_BACKEND", "sqlite")

    assert AuthSettings().otp_ttl_seconds == 120
    assert RateSettings().history_cap == 10
    assert StorageSettings().backend == "sqlite"


def test_app_settings_composes_sections() -> None:
    settings = AppSettings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.api.port == 8000
    assert settings.rates.history_cap == 50


def test_log_format_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FORMAT", "json")

    assert AppSettings(_env_file=None).log_format == "json"
