from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import structlog

from portfolio_navigator.infra.errors import ToolError
from portfolio_navigator.tools.context import context_errors
from portfolio_navigator.tools.results import ToolAction, ToolExecutionStats, ToolResult
from portfolio_navigator.tools.schema import validate_arguments

if TYPE_CHECKING:
    from portfolio_navigator.tools.context import ToolContext

logger = structlog.get_logger()

DEFAULT_TIMEOUT_S = 10.0
DEFAULT_RETRY_DELAY_S = 1.0
DEFAULT_STATS_LIMIT = 100


class ToolCategory(StrEnum):
    navigation = "navigation"
    ui_control = "ui_control"
    data_access = "data_access"
    general = "general"


@dataclass(frozen=True)
class ToolExecutionConfig:
    """Per-call execution options.

    retry_attempts counts retries after the first failure; 0 is treated as 1
    when retry is set.
    """

    validate_args: bool = True
    timeout_s: float = DEFAULT_TIMEOUT_S
    retry: bool = False
    retry_attempts: int = 1
    retry_delay_s: float = DEFAULT_RETRY_DELAY_S


@runtime_checkable
class Tool(Protocol):
    """Anything the registry can hold: a named, schema-described capability."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def parameters(self) -> dict: ...

    async def execute(
        self,
        arguments: dict,
        context: ToolContext,
        config: ToolExecutionConfig | None = None,
    ) -> ToolResult: ...


class BaseTool(ABC):
    """Abstract base class for portfolio tools.

    execute() is the per-tool envelope: argument and context validation,
    a timeout around _execute(), optional retry with a fixed delay, and a
    bounded per-tool statistics buffer. Subclasses implement _execute() and
    either return a ToolResult or raise (ToolError for a specific code).
    """

    def __init__(self, *, stats_limit: int = DEFAULT_STATS_LIMIT) -> None:
        self._stats: deque[ToolExecutionStats] = deque(maxlen=stats_limit)

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name used in function calling."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        ...

    @property
    @abstractmethod
    def parameters(self) -> dict:
        """JSON Schema describing the tool's input parameters."""
        ...

    @property
    def category(self) -> ToolCategory:
        """Coarse classification used for category lookups."""
        return ToolCategory.general

    @abstractmethod
    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        """Tool body. Runs only after arguments and context passed validation."""
        ...

    async def execute(
        self,
        arguments: dict,
        context: ToolContext,
        config: ToolExecutionConfig | None = None,
    ) -> ToolResult:
        config = config or ToolExecutionConfig()
        started = time.monotonic()

        if config.validate_args:
            validation = validate_arguments(self.parameters, arguments)
            if not validation.valid:
                result = ToolResult.fail(
                    "INVALID_ARGUMENTS",
                    f"Invalid arguments: {', '.join(validation.errors)}",
                    suggestions=["Check the tool parameters and try again"],
                )
                self._record(started, result)
                return result

        problems = context_errors(context)
        if problems:
            result = ToolResult.fail("INVALID_CONTEXT", f"Invalid context: {problems[0]}")
            self._record(started, result)
            return result

        try:
            result = await asyncio.wait_for(
                self._execute(arguments, context), timeout=config.timeout_s
            )
        except Exception as exc:
            failure = self._error_result(exc, config.timeout_s)
            self._record(started, failure)

            attempts = config.retry_attempts or 1
            if config.retry and attempts > 0:
                logger.info(
                    "tool_retry_scheduled",
                    tool_name=self.name,
                    error_code=failure.error_code,
                    attempts_left=attempts - 1,
                )
                await asyncio.sleep(config.retry_delay_s)
                return await self.execute(
                    arguments,
                    context,
                    replace(config, retry_attempts=attempts - 1, retry=attempts > 1),
                )
            return failure

        self._record(started, result)
        return result

    def _error_result(self, exc: Exception, timeout_s: float) -> ToolResult:
        if isinstance(exc, TimeoutError):
            return ToolResult.fail(
                "EXECUTION_TIMEOUT",
                f"Tool execution timed out after {timeout_s}s",
                suggestions=[
                    "Try again with a simpler request",
                    "Check if the system is responsive",
                ],
            )
        if isinstance(exc, ToolError):
            return ToolResult.fail(exc.code, str(exc), suggestions=exc.suggestions)
        if str(exc):
            return ToolResult.fail(
                "EXECUTION_ERROR",
                str(exc),
                suggestions=[
                    "Check the tool arguments and try again",
                    "Contact support if the issue persists",
                ],
            )
        return ToolResult.fail(
            "UNKNOWN_ERROR", "An unknown error occurred during tool execution"
        )

    def _record(self, started: float, result: ToolResult) -> None:
        self._stats.append(
            ToolExecutionStats(
                tool_name=self.name,
                execution_time_ms=(time.monotonic() - started) * 1000,
                success=result.success,
                timestamp=datetime.now(UTC),
                error_code=result.error_code,
            )
        )

    def get_execution_stats(self) -> list[ToolExecutionStats]:
        return list(self._stats)

    def clear_execution_stats(self) -> None:
        self._stats.clear()

    # Result helpers for subclasses

    def success(self, data: Any = None, actions: list[ToolAction] | None = None) -> ToolResult:
        return ToolResult.ok(data, actions)

    def failure(
        self,
        code: str,
        message: str,
        *,
        suggestions: list[str] | None = None,
        fallback: Any = None,
    ) -> ToolResult:
        return ToolResult.fail(code, message, suggestions=suggestions, fallback=fallback)
