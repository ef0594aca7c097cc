"""Cross-cutting execution pipeline for tool calls.

Gates run in a fixed order and the first failing gate short-circuits
without invoking the tool:

    rate limit -> security screening -> contract validation -> execute
    -> post-processing (sanitize string leaves, stamp metadata)

Rate-limit state lives in a RateLimitStore owned by the middleware
instance; it is process-local and single-loop by construction.
"""

from __future__ import annotations

import json
import math
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from portfolio_navigator.config.settings import MiddlewareSettings
from portfolio_navigator.infra.logging import resolve_log_level
from portfolio_navigator.tools.context_utils import is_valid_session_id
from portfolio_navigator.tools.results import ToolResult
from portfolio_navigator.tools.schema import validate_arguments

if TYPE_CHECKING:
    from portfolio_navigator.tools.base import Tool, ToolExecutionConfig
    from portfolio_navigator.tools.context import ToolContext

logger = structlog.get_logger()

PROCESSED_BY = "ToolExecutionMiddleware"

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_INLINE_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)
_ALERT_CALL = re.compile(r"alert\([^)]*\)", re.IGNORECASE)


def default_rate_limit_key(context: ToolContext) -> str:
    return f"{context.session_id}-{context.user_agent}"


def sanitize_data(data: Any) -> Any:
    """Recursively strip script blocks, javascript: schemes, inline handlers
    and alert() calls from every string leaf."""
    if isinstance(data, str):
        data = _SCRIPT_BLOCK.sub("", data)
        data = _JS_SCHEME.sub("", data)
        data = _INLINE_HANDLER.sub("", data)
        return _ALERT_CALL.sub("", data)
    if isinstance(data, list):
        return [sanitize_data(item) for item in data]
    if isinstance(data, tuple):
        return tuple(sanitize_data(item) for item in data)
    if isinstance(data, dict):
        return {key: sanitize_data(value) for key, value in data.items()}
    return data


def serialize_arguments(arguments: Any) -> str:
    return json.dumps(arguments, default=str, ensure_ascii=False)


@dataclass
class RateLimitWindow:
    count: int
    reset_time: float


class RateLimitStore:
    """Key -> fixed window counters. Owned by one middleware instance."""

    def __init__(self) -> None:
        self._windows: dict[str, RateLimitWindow] = {}

    def get(self, key: str) -> RateLimitWindow | None:
        return self._windows.get(key)

    def set(self, key: str, window: RateLimitWindow) -> None:
        self._windows[key] = window

    def clear(self) -> None:
        self._windows.clear()

    def prune(self, now: float) -> int:
        """Drop windows that expired before now. Returns how many were removed."""
        expired = [key for key, window in self._windows.items() if window.reset_time < now]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)


@dataclass(frozen=True)
class GateOutcome:
    allowed: bool
    message: str = ""


class RateLimiter:
    """Fixed window per key: count requests until reset_time, then start over.

    Expired windows are pruned at most once per window length, so the store
    holds roughly the keys seen during the last two windows.
    """

    def __init__(
        self,
        *,
        max_requests: int,
        window_s: float,
        store: RateLimitStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_s = window_s
        self.store = store if store is not None else RateLimitStore()
        self._clock = clock
        self._next_prune: float | None = None

    def check(self, key: str) -> GateOutcome:
        now = self._clock()
        if self._next_prune is None or now >= self._next_prune:
            self.store.prune(now)
            self._next_prune = now + self.window_s

        current = self.store.get(key)

        if current is None or now > current.reset_time:
            self.store.set(key, RateLimitWindow(count=1, reset_time=now + self.window_s))
            return GateOutcome(allowed=True)

        if current.count >= self.max_requests:
            reset_in = math.ceil(current.reset_time - now)
            return GateOutcome(
                allowed=False,
                message=f"Rate limit exceeded. Try again in {reset_in} seconds.",
            )

        current.count += 1
        return GateOutcome(allowed=True)


class ToolExecutionMiddleware:
    """Wraps a raw tool execution with rate limiting, security screening,
    contract validation, result sanitization and structured logging."""

    def __init__(
        self,
        settings: MiddlewareSettings | None = None,
        *,
        key_generator: Callable[[ToolContext], str] = default_rate_limit_key,
        clock: Callable[[], float] = time.monotonic,
        store: RateLimitStore | None = None,
    ) -> None:
        self._settings = settings or MiddlewareSettings()
        self._key_generator = key_generator
        self._clock = clock
        self._store = store if store is not None else RateLimitStore()
        self._build_gates()

    def _build_gates(self) -> None:
        rate = self._settings.rate_limit
        self._rate_limiter = RateLimiter(
            max_requests=rate.max_requests,
            window_s=rate.window_s,
            store=self._store,
            clock=self._clock,
        )
        self._blocked = [
            re.compile(p, re.IGNORECASE) for p in self._settings.security.blocked_patterns
        ]
        self._min_log_level = resolve_log_level(self._settings.logging.log_level)

    @property
    def settings(self) -> MiddlewareSettings:
        return self._settings

    async def execute_with_middleware(
        self,
        tool: Tool,
        arguments: dict,
        context: ToolContext,
        config: ToolExecutionConfig | None = None,
    ) -> ToolResult:
        started = time.monotonic()

        rate = self._check_rate_limit(context)
        if not rate.allowed:
            self._log("warning", "tool_rate_limited", tool_name=tool.name,
                      context=context.to_log_dict())
            return self._error("RATE_LIMIT_EXCEEDED", rate.message or "Rate limit exceeded")

        security = self._check_security(arguments, context)
        if not security.allowed:
            self._log("warning", "tool_security_violation", tool_name=tool.name,
                      reason=security.message)
            return self._error("SECURITY_VIOLATION", security.message or "Security violation")

        validation = validate_arguments(
            tool.parameters,
            arguments,
            check_schema=self._settings.validation.strict_mode,
            allow_additional_properties=self._settings.validation.allow_additional_properties,
        )
        if not validation.valid:
            self._log("warning", "tool_invalid_arguments", tool_name=tool.name,
                      errors=validation.errors)
            return self._error(
                "INVALID_ARGUMENTS", validation.message, suggestions=validation.suggestions or None
            )

        self._log("info", "tool_executing", tool_name=tool.name,
                  arguments=arguments, context=context.to_log_dict())

        try:
            result = await tool.execute(arguments, context, config)
        except Exception as exc:
            if self._settings.logging.log_failed_executions:
                self._log("error", "tool_execution_failed", tool_name=tool.name,
                          error=str(exc) or type(exc).__name__,
                          execution_time_ms=self._elapsed_ms(started))
            return self._error("EXECUTION_ERROR", str(exc) or "Unknown execution error")

        processed = self._process_result(result, tool.name)
        elapsed = self._elapsed_ms(started)
        if processed.success and self._settings.logging.log_successful_executions:
            self._log("info", "tool_executed", tool_name=tool.name, execution_time_ms=elapsed,
                      result_size=len(serialize_arguments(processed.data)))
        elif not processed.success and self._settings.logging.log_failed_executions:
            self._log("warning", "tool_returned_error", tool_name=tool.name,
                      error_code=processed.error_code, execution_time_ms=elapsed)
        return processed

    def _check_rate_limit(self, context: ToolContext) -> GateOutcome:
        if not self._settings.rate_limit.enabled:
            return GateOutcome(allowed=True)
        key = self._key_generator(context) or context.session_id
        return self._rate_limiter.check(key)

    def _check_security(self, arguments: dict, context: ToolContext) -> GateOutcome:
        security = self._settings.security
        if not security.enabled:
            return GateOutcome(allowed=True)

        if security.require_auth and not is_valid_session_id(context.session_id):
            return GateOutcome(allowed=False, message="A valid session identifier is required")

        serialized = serialize_arguments(arguments)
        size = len(serialized.encode("utf-8"))
        if size > security.max_argument_size:
            return GateOutcome(
                allowed=False,
                message=f"Arguments too large: {size} bytes (max: {security.max_argument_size})",
            )

        lowered = serialized.lower()
        for pattern in self._blocked:
            if pattern.search(lowered):
                return GateOutcome(
                    allowed=False, message="Arguments contain potentially unsafe content"
                )
        return GateOutcome(allowed=True)

    def _process_result(self, result: ToolResult, tool_name: str) -> ToolResult:
        if not result.success:
            return result
        return replace(
            result,
            data=sanitize_data(result.data) if result.data is not None else None,
            metadata={
                **result.metadata,
                "executed_at": datetime.now(UTC).isoformat(),
                "tool_name": tool_name,
                "processed_by": PROCESSED_BY,
            },
        )

    def _error(
        self, code: str, message: str, *, suggestions: list[str] | None = None
    ) -> ToolResult:
        return ToolResult.fail(
            code,
            message,
            suggestions=suggestions or ["Please check your input and try again"],
        )

    def _elapsed_ms(self, started: float) -> float:
        return round((time.monotonic() - started) * 1000, 2)

    def _log(self, level: str, event: str, **fields: Any) -> None:
        if not self._settings.logging.enabled:
            return
        if resolve_log_level(level) < self._min_log_level:
            return
        getattr(logger, level)(event, component=PROCESSED_BY, **fields)

    def get_stats(self) -> dict[str, Any]:
        return {
            "rate_limit_entries": len(self._store),
            "settings": self._settings.model_dump(),
        }

    def clear_rate_limit_cache(self) -> None:
        self._store.clear()

    def update_settings(self, **changes: Any) -> None:
        """Replace whole sub-settings, e.g. update_settings(rate_limit=RateLimitSettings(...)).

        The rate-limit store survives the update.
        """
        self._settings = self._settings.model_copy(update=changes)
        self._build_gates()
