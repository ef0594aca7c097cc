"""Custom exception hierarchy for portfolio-navigator.

All application-specific exceptions inherit from NavigatorError,
which carries an error code that maps onto ToolResult error codes.
Exceptions are for programming/configuration faults and for tool bodies
that want to fail with a specific code; everything that crosses the
registry boundary is converted into a structured ToolResult.
"""

from __future__ import annotations


class NavigatorError(Exception):
    """Base exception for all portfolio-navigator errors."""

    def __init__(self, message: str, *, code: str = "INTERNAL_ERROR") -> None:
        super().__init__(message)
        self.code = code


class ToolError(NavigatorError):
    """Raised inside a tool body to fail with a tool-specific code.

    BaseTool converts it into ToolResult.fail(code, message, suggestions).
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "TOOL_ERROR",
        suggestions: list[str] | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.suggestions = list(suggestions or [])


class ToolRegistrationError(NavigatorError, ValueError):
    """Duplicate or malformed tool passed to ToolRegistry.register()."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="TOOL_REGISTRATION_ERROR")


class ContextError(NavigatorError, ValueError):
    """Invalid ToolContext produced by a context transform."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_CONTEXT")
