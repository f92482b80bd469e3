"""Tests for core types, exceptions, settings and logging."""

import json
import logging

import pytest
from rich.logging import RichHandler

from clavix.core import (
    ClavixError,
    ConfigurationError,
    OptimizationMode,
    PatternError,
    PatternMode,
    WorkspaceError,
    get_settings,
    reload_settings,
    setup_logging,
)
from clavix.core.config import IntelligenceSettings, LoggingSettings, Settings
from clavix.core.logging_config import JSONFormatter


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_base_error_message(self):
        err = ClavixError("Something failed")
        assert str(err) == "Something failed"
        assert err.details == {}

    def test_error_with_details(self):
        err = ClavixError("Failed", details={"key": "value"})
        assert "Details" in str(err)
        assert err.details["key"] == "value"

    def test_pattern_error_records_id(self):
        err = PatternError("Boom", pattern_id="objective-clarifier")
        assert err.pattern_id == "objective-clarifier"
        assert err.details["pattern_id"] == "objective-clarifier"
        assert isinstance(err, ClavixError)

    def test_configuration_error_records_key(self):
        err = ConfigurationError("Duplicate", config_key="patterns")
        assert err.details["config_key"] == "patterns"

    def test_workspace_error_keeps_cause(self):
        cause = OSError("disk full")
        err = WorkspaceError("Cannot write", path="/tmp/x", cause=cause)
        assert err.path == "/tmp/x"
        assert err.cause is cause


class TestTypes:
    """Tests for mode enums."""

    @pytest.mark.parametrize("value,expected", [
        ("fast", OptimizationMode.FAST),
        ("DEEP", OptimizationMode.DEEP),
        (" prd ", OptimizationMode.PRD),
        (OptimizationMode.CONVERSATIONAL, OptimizationMode.CONVERSATIONAL),
    ])
    def test_parse_mode(self, value, expected):
        assert OptimizationMode.parse(value) is expected

    def test_parse_unknown_mode(self):
        assert OptimizationMode.parse("turbo") is None
        assert OptimizationMode.parse(None) is None

    def test_workflow_modes(self):
        assert OptimizationMode.PRD.is_workflow
        assert OptimizationMode.CONVERSATIONAL.is_workflow
        assert not OptimizationMode.FAST.is_workflow
        assert not OptimizationMode.DEEP.is_workflow

    def test_pattern_mode_matches(self):
        assert PatternMode.BOTH.matches(OptimizationMode.FAST)
        assert PatternMode.BOTH.matches(OptimizationMode.DEEP)
        assert PatternMode.DEEP.matches(OptimizationMode.DEEP)
        assert not PatternMode.DEEP.matches(OptimizationMode.FAST)
        assert not PatternMode.FAST.matches(OptimizationMode.DEEP)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.intelligence.default_mode == "fast"
        assert settings.workspace.root_dir == ".clavix"
        assert settings.workspace.instructions_file == "AGENTS.md"
        assert settings.logging.level == "WARNING"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CLAVIX_DEFAULT_MODE", "deep")
        monkeypatch.setenv("CLAVIX_SAVE_PROMPTS", "true")
        monkeypatch.setenv("CLAVIX_DEBUG", "1")

        assert IntelligenceSettings().default_mode == "deep"
        assert IntelligenceSettings().save_prompts is True
        assert LoggingSettings().debug is True

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reload_picks_up_version(self, monkeypatch):
        get_settings()
        monkeypatch.setenv("CLAVIX_VERSION", "9.9.9")
        assert reload_settings().version == "9.9.9"

    def test_version_is_never_empty(self):
        assert get_settings().version


class TestLogging:
    """Tests for logging setup."""

    def test_text_format_uses_rich(self):
        logger = setup_logging(LoggingSettings())
        assert logger.name == "clavix"
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_json_format(self):
        logger = setup_logging(LoggingSettings(CLAVIX_LOG_FORMAT="json"))
        handler = logger.handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)

    def test_debug_forces_debug_level(self):
        logger = setup_logging(LoggingSettings(CLAVIX_DEBUG=True, CLAVIX_LOG_LEVEL="ERROR"))
        assert logger.level == logging.DEBUG

    def test_setup_is_repeatable(self):
        setup_logging(LoggingSettings())
        logger = setup_logging(LoggingSettings())
        assert len(logger.handlers) == 1

    def test_json_formatter_output(self):
        record = logging.LogRecord(
            "clavix.test", logging.WARNING, __file__, 1, "Pattern %s failed", ("x",), None
        )
        payload = json.loads(JSONFormatter().format(record))
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "clavix.test"
        assert payload["message"] == "Pattern x failed"
