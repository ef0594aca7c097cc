from __future__ import annotations

import copy
import uuid
from collections import deque
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from portfolio_navigator.infra.errors import ToolRegistrationError
from portfolio_navigator.tools.base import Tool
from portfolio_navigator.tools.middleware import ToolExecutionMiddleware
from portfolio_navigator.tools.results import ToolCall, ToolResult

if TYPE_CHECKING:
    from portfolio_navigator.tools.base import ToolExecutionConfig
    from portfolio_navigator.tools.context import ToolContext

logger = structlog.get_logger()

DEFAULT_HISTORY_LIMIT = 1000


class ToolRegistry:
    """Registry for portfolio tools. Provides lookup, dispatch through the
    execution middleware, and a bounded execution history."""

    def __init__(
        self,
        middleware: ToolExecutionMiddleware | None = None,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        default_config: ToolExecutionConfig | None = None,
    ) -> None:
        self._tools: dict[str, Tool] = {}
        self._middleware = middleware or ToolExecutionMiddleware()
        self._history: deque[ToolCall] = deque(maxlen=history_limit)
        # used when execute_tool() is called without a config
        self._default_config = default_config

    @property
    def middleware(self) -> ToolExecutionMiddleware:
        return self._middleware

    def register(self, tool: Tool) -> None:
        """Register a tool. Raises ToolRegistrationError (a ValueError) if the
        name is already registered or the tool is malformed."""
        self._validate_tool(tool)
        if tool.name in self._tools:
            raise ToolRegistrationError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        logger.info("tool_registered", tool_name=tool.name)

    def unregister(self, name: str) -> bool:
        removed = self._tools.pop(name, None) is not None
        if removed:
            logger.info("tool_unregistered", tool_name=name)
        return removed

    def get(self, name: str) -> Tool | None:
        """Get a tool by name. Returns None if not found."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def tool_names(self) -> list[str]:
        return list(self._tools)

    def get_tools_by_category(self, category: str) -> list[Tool]:
        """Tools whose category matches, or whose name/description mentions it."""
        needle = category.lower()
        return [
            tool
            for tool in self._tools.values()
            if str(getattr(tool, "category", "")) == needle
            or needle in tool.name.lower()
            or needle in tool.description.lower()
        ]

    # -- outward projections for the function-calling orchestrator ----------

    def get_function_definitions(self) -> list[dict[str, Any]]:
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            }
            for tool in self._tools.values()
        ]

    def get_schemas(self) -> dict[str, dict[str, Any]]:
        """Per-tool wrapper schema: {name: const, description: const, parameters}."""
        return {
            name: {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "const": name},
                    "description": {"type": "string", "const": tool.description},
                    "parameters": tool.parameters,
                },
                "required": ["name", "parameters"],
            }
            for name, tool in self._tools.items()
        }

    def get_tools_schema(self) -> list[dict[str, Any]]:
        """Return tools in OpenAI function calling format.

        Output format:
        [{"type": "function", "function": {"name": ..., "description": ..., "parameters": ...}}]
        """
        return [
            {"type": "function", "function": definition}
            for definition in self.get_function_definitions()
        ]

    # -- execution -----------------------------------------------------------

    async def execute_tool(
        self,
        name: str,
        arguments: dict[str, Any],
        context: ToolContext,
        config: ToolExecutionConfig | None = None,
    ) -> ToolResult:
        """Execute a tool by name. Never raises; failures come back as results."""
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("tool_not_found", tool_name=name)
            return ToolResult.fail(
                "TOOL_NOT_FOUND",
                f'Tool "{name}" is not registered',
                suggestions=[
                    "Check the tool name spelling",
                    f"Available tools: {', '.join(self._tools)}",
                ],
            )

        try:
            result = await self._middleware.execute_with_middleware(
                tool, arguments, context, config or self._default_config
            )
        except Exception as exc:
            logger.exception("tool_dispatch_failed", tool_name=name)
            result = ToolResult.fail(
                "EXECUTION_FAILED",
                str(exc) or "Unknown execution error",
                suggestions=["Check tool arguments and try again"],
            )

        # history keeps its own copy; callers may reuse their argument dicts
        self._history.append(
            ToolCall(id=f"{name}-{uuid.uuid4().hex[:12]}", name=name,
                     arguments=copy.deepcopy(arguments), result=result)
        )
        return result

    async def execute_tool_chain(
        self,
        calls: Iterable[Mapping[str, Any]],
        context: ToolContext,
        config: ToolExecutionConfig | None = None,
    ) -> list[ToolResult]:
        """Run [{"name": ..., "args": {...}}, ...] strictly in order.

        Stops after the first failure unless config.retry is set. An entry
        without a usable name fails as TOOL_NOT_FOUND.
        """
        results: list[ToolResult] = []
        for call in calls:
            name = call.get("name")
            args = call.get("args")
            result = await self.execute_tool(
                name if isinstance(name, str) else "",
                dict(args) if isinstance(args, Mapping) else {},
                context,
                config,
            )
            results.append(result)
            if not result.success and not (config is not None and config.retry):
                break
        return results

    # -- history -------------------------------------------------------------

    def get_execution_history(self) -> list[ToolCall]:
        return list(self._history)

    def get_tool_execution_history(self, name: str, limit: int = 10) -> list[ToolCall]:
        calls = [call for call in self._history if call.name == name]
        return calls[-limit:] if limit > 0 else []

    def clear_execution_history(self) -> None:
        self._history.clear()

    def clear_all_tools(self) -> None:
        self._tools.clear()

    def get_stats(self) -> dict[str, Any]:
        successful = sum(1 for call in self._history if call.result.success)
        return {
            "total_tools": len(self._tools),
            "total_executions": len(self._history),
            "successful_executions": successful,
            "failed_executions": len(self._history) - successful,
            "tool_names": self.tool_names(),
        }

    @staticmethod
    def _validate_tool(tool: Any) -> None:
        name = getattr(tool, "name", None)
        if not isinstance(name, str) or not name:
            raise ToolRegistrationError("Tool must have a valid name")
        description = getattr(tool, "description", None)
        if not isinstance(description, str) or not description:
            raise ToolRegistrationError(f"Tool {name!r} must have a valid description")
        if not isinstance(getattr(tool, "parameters", None), dict):
            raise ToolRegistrationError(f"Tool {name!r} must have a valid parameters schema")
        if not callable(getattr(tool, "execute", None)):
            raise ToolRegistrationError(f"Tool {name!r} must have an execute function")
