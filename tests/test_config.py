"""Tests for configuration loading."""

import pytest

from src.config import AppSettings, GeminiSettings, configure_logging, validate_all_settings


class TestAppSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("APP_CURRENCY", raising=False)
        monkeypatch.delenv("APP_DEFAULT_CUSTOMER", raising=False)
        settings = AppSettings()
        assert settings.currency == "AED"
        assert settings.default_customer == "Unknown"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("APP_CURRENCY", "USD")
        monkeypatch.setenv("APP_MENU_FILE", "/etc/bookkeeper/menu.json")
        settings = AppSettings()
        assert settings.currency == "USD"
        assert settings.menu_file == "/etc/bookkeeper/menu.json"

    def test_only_settings_the_app_reads(self):
        assert set(AppSettings.model_fields) == {
            "log_level", "log_format", "currency", "default_customer", "menu_file",
        }

    def test_bad_log_level(self):
        with pytest.raises(ValueError):
            AppSettings(log_level="CHATTY")


class TestValidateAllSettings:

    def test_missing_keys_reported(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        status = validate_all_settings()

        assert status["app"] is True
        assert status["gemini"] is False
        assert "gemini_error" in status

    def test_gemini_configured(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        assert validate_all_settings()["gemini"] is True
        assert GeminiSettings().model_name == "gemini-1.5-flash"


class TestLogging:

    def test_configure_console(self):
        configure_logging(level="DEBUG", format="console")
