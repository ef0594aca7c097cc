"""Shared pytest fixtures for portfolio-navigator tests.

Process-wide singletons (the default context detector and the default
registry) are reset around every test so tests never see each other's
tracked contexts or usage.
"""

from __future__ import annotations

import pytest

from portfolio_navigator.config.settings import (
    MiddlewareSettings,
    RateLimitSettings,
    ToolLoggingSettings,
)
from portfolio_navigator.detection.page_context import ContextTracker, PageContextDetector
from portfolio_navigator.tools.context import ToolContext
from portfolio_navigator.tools.context_aware import reset_default_registry

SESSION_ID = "session-test-0001"


class FakeClock:
    """Monotonic clock stand-in; advance() moves time forward."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _reset_singletons():
    ContextTracker.reset_instance()
    reset_default_registry()
    yield
    ContextTracker.reset_instance()
    reset_default_registry()


@pytest.fixture()
def context() -> ToolContext:
    return ToolContext(
        current_page="home",
        theme="light",
        session_id=SESSION_ID,
        user_agent="pytest",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def detector() -> PageContextDetector:
    return PageContextDetector(history_limit=50)


@pytest.fixture()
def quiet_settings() -> MiddlewareSettings:
    """Middleware settings with execution logging off and a generous rate limit."""
    return MiddlewareSettings(
        rate_limit=RateLimitSettings(max_requests=1000, window_s=60.0),
        logging=ToolLoggingSettings(enabled=False),
    )
