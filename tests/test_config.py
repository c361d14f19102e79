"""
Tests for pydantic-settings configuration.
"""

import pytest
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP

from finplan.config import (
    AppSettings,
    ReportSettings,
    TransferSettings,
    get_settings,
    validate_all_settings,
)


class TestDefaults:
    """Tests for default values."""

    def test_report_defaults(self):
        """Test two places, half-even rounding."""
        settings = ReportSettings()
        assert settings.percentage_places == 2
        assert settings.rounding_mode == ROUND_HALF_EVEN

    def test_transfer_defaults(self):
        """Test the default export indent."""
        assert TransferSettings().export_indent == 2

    def test_app_defaults(self):
        """Test app defaults."""
        settings = AppSettings()
        assert settings.log_level == "INFO"
        assert settings.audit_trail_limit == 1000
        assert settings.debug_mode is False
        assert settings.effective_log_level == "INFO"


class TestEnvironment:
    """Tests for environment overrides."""

    def test_report_env_override(self, monkeypatch):
        """Test FINPLAN_REPORT_ variables."""
        monkeypatch.setenv("FINPLAN_REPORT_PERCENTAGE_PLACES", "1")
        monkeypatch.setenv("FINPLAN_REPORT_PERCENTAGE_ROUNDING", "half_up")
        settings = get_settings().report
        assert settings.percentage_places == 1
        assert settings.rounding_mode == ROUND_HALF_UP

    def test_log_level_normalized(self, monkeypatch):
        """Test that log levels are upper-cased."""
        monkeypatch.setenv("FINPLAN_LOG_LEVEL", "debug")
        assert get_settings().app.log_level == "DEBUG"

    def test_debug_mode_forces_debug_level(self, monkeypatch):
        """Test that debug mode wins over log_level."""
        monkeypatch.setenv("FINPLAN_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("FINPLAN_DEBUG_MODE", "1")
        settings = get_settings().app
        assert settings.log_level == "ERROR"
        assert settings.effective_log_level == "DEBUG"

    def test_unprefixed_variables_ignored(self, monkeypatch):
        """Test that a host LOG_LEVEL does not leak in."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert AppSettings().log_level == "INFO"


class TestValidation:
    """Tests for rejected values."""

    def test_unknown_rounding(self):
        """Test the rounding pattern."""
        with pytest.raises(ValueError):
            ReportSettings(percentage_rounding="banker")

    def test_places_bound(self):
        """Test the places bound."""
        with pytest.raises(ValueError):
            ReportSettings(percentage_places=7)

    def test_unknown_log_level(self):
        """Test the log level check."""
        with pytest.raises(ValueError):
            AppSettings(log_level="LOUD")

    def test_validate_all_settings_reports_failures(self, monkeypatch):
        """Test the section health check."""
        monkeypatch.setenv("FINPLAN_TRANSFER_EXPORT_INDENT", "99")
        results = validate_all_settings()
        assert results["app"] is True
        assert results["report"] is True
        assert results["transfer"] is False
        assert "transfer_error" in results


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
