from __future__ import annotations

from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

from src.checks.catalog import is_http_url


class ConfigError(Exception):
    """Raised when startup configuration is unusable. Fatal to the whole run."""


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Services under test
    api_url: str = "http://localhost:8080"
    frontend_url: str = "http://localhost:3000"

    # Per-check request timeout, no retries
    check_timeout_ms: int = 10_000

    # Optional YAML file replacing the built-in checks
    checks_file: str = ""

    # Logging
    log_level: str = "INFO"

    @field_validator("api_url", "frontend_url")
    @classmethod
    def _valid_base_url(cls, value: str) -> str:
        if not is_http_url(value):
            raise ValueError(f"not an absolute http(s) URL: {value!r}")
        return value.strip().rstrip("/")

    @field_validator("check_timeout_ms")
    @classmethod
    def _positive_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number of milliseconds")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value!r}")
        return level


def load_settings(**overrides: Any) -> Settings:
    """Read settings once at startup; ``overrides`` win over the environment."""
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e
