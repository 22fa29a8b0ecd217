"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from bopp.logging import LogFormat


class StorageSettings(BaseSettings):
    """Where and how record sets are persisted."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: Literal["json", "memory", "sqlite"] = "json"
    data_dir: str = "data"  # relative to the process working directory
    sqlite_path: str = "data/bopp.db"


class RateSettings(BaseSettings):
    """Rate store behaviour.

    All fields configurable via RATES_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="RATES_")

    history_cap: int = 50  # oldest entries beyond this are dropped on save
    default_history_limit: int = 5
    seed_history: bool = True  # write the initial demo history when absent


class AuthSettings(BaseSettings):
    """User directory and OTP login parameters.

    All fields configurable via AUTH_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    otp_ttl_seconds: int = 300
    default_admin_id: str = "admin"
    default_admin_password: SecretStr = SecretStr("admin")
    protected_user_ids: tuple[str, ...] = ("admin", "employee")
    response_delay_seconds: float = 0.05  # cosmetic pacing for the UI
    clear_otp_on_success: bool = False
    password_hash_iterations: int = 100_000


class ApiSettings(BaseSettings):
    """HTTP API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8000
    enabled: bool = True


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: LogFormat = "console"
    storage: StorageSettings = StorageSettings()
    rates: RateSettings = RateSettings()
    auth: AuthSettings = AuthSettings()
    api: ApiSettings = ApiSettings()
