"""Tests for structlog setup and level resolution."""

from __future__ import annotations

import logging

import pytest
import structlog

from portfolio_navigator.config.settings import Settings
from portfolio_navigator.infra.logging import (
    COMPONENT,
    configure_logging,
    resolve_log_level,
    setup_logging,
)


class TestResolveLogLevel:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warn", logging.WARNING),
            ("Warning", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_known_levels(self, name: str, expected: int) -> None:
        assert resolve_log_level(name) == expected

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_log_level("loud")


class TestSetupLogging:
    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_json_output_renders_event(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(json_output=True, log_level="INFO")
        structlog.get_logger().info("tool_registered", tool_name="get_projects")
        out = capsys.readouterr().out
        assert '"event": "tool_registered"' in out
        assert '"tool_name": "get_projects"' in out

    def test_level_filters_lower_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(json_output=True, log_level="WARNING")
        structlog.get_logger().info("context_tracked")
        assert capsys.readouterr().out == ""

    def test_events_tagged_with_component(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(json_output=True)
        structlog.get_logger().warning("tool_rate_limited")
        assert f'"component": "{COMPONENT}"' in capsys.readouterr().out

    def test_configure_from_settings(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(Settings(log_json=True, log_level="error"))
        log = structlog.get_logger()
        log.warning("tool_returned_error")
        log.error("tool_execution_failed")
        out = capsys.readouterr().out
        assert "tool_returned_error" not in out
        assert '"event": "tool_execution_failed"' in out

    def test_configure_reads_env(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        configure_logging()
        structlog.get_logger().debug("context_tracked")
        assert "context_tracked" in capsys.readouterr().out
