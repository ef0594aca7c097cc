"""Tests for the pydantic-settings configuration layer."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from portfolio_navigator.config.settings import (
    DEFAULT_BLOCKED_PATTERNS,
    DetectionSettings,
    ExecutionSettings,
    MiddlewareSettings,
    RateLimitSettings,
    SecuritySettings,
    Settings,
    ToolLoggingSettings,
    ValidationSettings,
    get_settings,
)


class TestDefaults:
    def test_rate_limit_defaults(self) -> None:
        s = RateLimitSettings()
        assert s.enabled is True
        assert s.max_requests == 100
        assert s.window_s == 60.0

    def test_security_defaults(self) -> None:
        s = SecuritySettings()
        assert s.enabled is True
        assert s.max_argument_size == 10_000
        assert s.blocked_patterns == DEFAULT_BLOCKED_PATTERNS
        assert s.require_auth is False

    def test_validation_defaults(self) -> None:
        s = ValidationSettings()
        assert s.strict_mode is True
        assert s.allow_additional_properties is False

    def test_logging_defaults(self) -> None:
        s = ToolLoggingSettings()
        assert s.enabled is True
        assert s.log_level == "info"
        assert s.log_successful_executions is True
        assert s.log_failed_executions is True

    def test_execution_defaults(self) -> None:
        s = ExecutionSettings()
        assert s.default_timeout_s == 10.0
        assert s.retry_delay_s == 1.0
        assert s.stats_limit == 100
        assert s.history_limit == 1000
        assert s.usage_history_limit == 20

    def test_detection_defaults(self) -> None:
        assert DetectionSettings().context_history_limit == 50

    def test_blocked_patterns_not_shared_between_instances(self) -> None:
        a = SecuritySettings()
        a.blocked_patterns.append("extra")
        assert "extra" not in SecuritySettings().blocked_patterns


class TestValidation:
    def test_non_positive_max_requests_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RateLimitSettings(max_requests=0)

    def test_non_positive_window_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RateLimitSettings(window_s=0)

    def test_invalid_blocked_pattern_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid blocked pattern"):
            SecuritySettings(blocked_patterns=["(unclosed"])

    def test_log_level_normalized(self) -> None:
        assert ToolLoggingSettings(log_level=" WARN ").log_level == "warning"
        assert ToolLoggingSettings(log_level="Debug").log_level == "debug"

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError, match="TOOL_LOG_LOG_LEVEL"):
            ToolLoggingSettings(log_level="verbose")

    def test_root_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError, match="log_level"):
            Settings(log_level="chatty")


class TestEnvironment:
    def test_rate_limit_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "5")
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
        s = RateLimitSettings()
        assert s.max_requests == 5
        assert s.enabled is False

    def test_execution_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXECUTION_DEFAULT_TIMEOUT_S", "2.5")
        assert ExecutionSettings().default_timeout_s == 2.5

    def test_middleware_composes_env_backed_children(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SECURITY_REQUIRE_AUTH", "true")
        s = MiddlewareSettings()
        assert s.security.require_auth is True

    def test_get_settings_returns_fresh_instance(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DETECTION_CONTEXT_HISTORY_LIMIT", "7")
        s = get_settings()
        assert s.detection.context_history_limit == 7
        assert isinstance(s.middleware, MiddlewareSettings)
