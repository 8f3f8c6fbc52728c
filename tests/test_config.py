"""Tests for startup configuration."""

from __future__ import annotations

import pytest

from src.config import ConfigError, Settings, load_settings


@pytest.mark.usefixtures("clean_env")
class TestSettings:
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.api_url == "http://localhost:8080"
        assert s.frontend_url == "http://localhost:3000"
        assert s.check_timeout_ms == 10_000
        assert s.checks_file == ""
        assert s.log_level == "INFO"

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_URL", "https://api.staging.example.com/")
        monkeypatch.setenv("FRONTEND_URL", "http://web:3000")
        monkeypatch.setenv("CHECK_TIMEOUT_MS", "2500")
        s = Settings(_env_file=None)
        assert s.api_url == "https://api.staging.example.com"
        assert s.frontend_url == "http://web:3000"
        assert s.check_timeout_ms == 2500

    def test_dotenv_file(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("FRONTEND_URL=http://from-dotenv:3000\n", encoding="utf-8")
        assert Settings().frontend_url == "http://from-dotenv:3000"

    def test_log_level_normalized(self) -> None:
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


@pytest.mark.usefixtures("clean_env")
class TestLoadSettings:
    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_URL", "http://env:1")
        s = load_settings(api_url="http://flag:2")
        assert s.api_url == "http://flag:2"

    def test_none_overrides_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_URL", "http://env:1")
        s = load_settings(api_url=None, check_timeout_ms=None)
        assert s.api_url == "http://env:1"
        assert s.check_timeout_ms == 10_000

    @pytest.mark.parametrize("bad", ["localhost:8080", "ftp://host", "http://", "not a url"])
    def test_malformed_base_url(self, bad: str) -> None:
        with pytest.raises(ConfigError, match="api_url"):
            load_settings(api_url=bad)

    def test_malformed_env_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRONTEND_URL", "frontend")
        with pytest.raises(ConfigError, match="frontend_url"):
            load_settings()

    def test_non_positive_timeout(self) -> None:
        with pytest.raises(ConfigError, match="check_timeout_ms"):
            load_settings(check_timeout_ms=0)

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ConfigError, match="log_level"):
            load_settings(log_level="LOUD")
