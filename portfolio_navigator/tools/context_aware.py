from __future__ import annotations

from collections import Counter, deque
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import structlog

from portfolio_navigator.config.settings import get_settings
from portfolio_navigator.detection.page_context import ContextTracker, PageContextDetector
from portfolio_navigator.suggestions.engine import (
    ContextualToolSuggestions,
    ToolFilterCriteria,
    ToolSuggestion,
)
from portfolio_navigator.tools.base import ToolExecutionConfig
from portfolio_navigator.tools.builtins import register_builtins
from portfolio_navigator.tools.context_utils import (
    new_session_id,
    path_to_page_section,
    sanitize_context,
)
from portfolio_navigator.tools.middleware import ToolExecutionMiddleware
from portfolio_navigator.tools.registry import DEFAULT_HISTORY_LIMIT, ToolRegistry
from portfolio_navigator.tools.results import NavigateAction, ThemeAction

if TYPE_CHECKING:
    from portfolio_navigator.detection.page_context import ContextTrackingEntry
    from portfolio_navigator.suggestions.help import ContextualHelp
    from portfolio_navigator.tools.base import Tool
    from portfolio_navigator.tools.context import ToolContext
    from portfolio_navigator.tools.results import ToolAction, ToolResult

logger = structlog.get_logger()

DEFAULT_USAGE_HISTORY_LIMIT = 20


def context_after_actions(context: ToolContext, actions: list[ToolAction]) -> ToolContext | None:
    """Context implied by navigate/theme actions, or None if nothing changes.

    Actions fold in order, so a later navigate wins over an earlier one.
    """
    updated: ToolContext | None = None
    for action in actions:
        base = updated or context
        if isinstance(action, NavigateAction):
            page, _ = path_to_page_section(action.target)
            section = action.data.get("section")
            updated = replace(
                base,
                current_page=page,
                current_section=section if isinstance(section, str) else None,
            )
        elif isinstance(action, ThemeAction):
            updated = replace(base, theme=action.target)
    return updated


class ContextAwareToolRegistry(ToolRegistry):
    """ToolRegistry that also ranks its tools for the current context and
    learns from recent usage.

    Every registered tool is mirrored into a suggestion engine; executions
    are tracked on a page-context detector (the process-wide default unless
    one is injected).
    """

    def __init__(
        self,
        middleware: ToolExecutionMiddleware | None = None,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        default_config: ToolExecutionConfig | None = None,
        detector: PageContextDetector | None = None,
        usage_history_limit: int = DEFAULT_USAGE_HISTORY_LIMIT,
    ) -> None:
        super().__init__(middleware, history_limit=history_limit, default_config=default_config)
        self._suggestions = ContextualToolSuggestions()
        self._detector = detector or ContextTracker.get_instance()
        self._recent_usage: deque[str] = deque(maxlen=usage_history_limit)

    @property
    def detector(self) -> PageContextDetector:
        return self._detector

    def register(self, tool: Tool) -> None:
        super().register(tool)
        self._suggestions.register_tool(tool)

    def unregister(self, name: str) -> bool:
        self._suggestions.unregister_tool(name)
        return super().unregister(name)

    def clear_all_tools(self) -> None:
        super().clear_all_tools()
        self._suggestions = ContextualToolSuggestions()
        self.reset_contextual_data()

    # -- suggestions ---------------------------------------------------------

    def get_contextual_suggestions(
        self, context: ToolContext, user_message: str | None = None
    ) -> list[ToolSuggestion]:
        self._detector.track_context(context, "suggestion-request")
        return self._suggestions.get_suggestions(context, user_message)

    def get_smart_recommendations(
        self, context: ToolContext, user_message: str | None = None
    ) -> list[ToolSuggestion]:
        return self._suggestions.get_smart_recommendations(
            context, list(self._recent_usage), user_message
        )

    def get_contextual_help(self, context: ToolContext) -> ContextualHelp:
        return self._suggestions.get_contextual_help(context)

    def get_relevant_tools(self, context: ToolContext, intent: str | None = None) -> list[Tool]:
        return self._suggestions.filter_tools_by_context(
            ToolFilterCriteria(
                page=context.current_page,
                section=context.current_section,
                intent=intent,
                theme=context.theme,
            )
        )

    def get_contextual_function_definitions(self, context: ToolContext) -> list[dict[str, Any]]:
        """Function definitions annotated with relevance/context, most relevant first."""
        by_name = {s.tool.name: s for s in self.get_contextual_suggestions(context)}
        definitions = []
        for definition in self.get_function_definitions():
            suggestion = by_name.get(definition["name"])
            definitions.append(
                {
                    **definition,
                    "relevance": suggestion.relevance if suggestion else None,
                    "context": suggestion.context if suggestion else None,
                }
            )
        return sorted(definitions, key=lambda d: d["relevance"] or 0.0, reverse=True)

    def get_workflow_tools(self, workflow: str) -> list[Tool]:
        return self._suggestions.get_workflow(workflow)

    # -- execution -----------------------------------------------------------

    async def execute_tool(
        self,
        name: str,
        arguments: dict[str, Any],
        context: ToolContext,
        config: ToolExecutionConfig | None = None,
    ) -> ToolResult:
        self._detector.track_context(context, f"tool-execution:{name}")

        result = await super().execute_tool(name, arguments, context, config)

        if name in self:
            self._recent_usage.append(name)

        if result.success and result.actions:
            updated = context_after_actions(context, result.actions)
            if updated is not None:
                self._detector.track_context(updated, f"tool-result:{name}")
        return result

    # -- context -------------------------------------------------------------

    def detect_page_context(
        self,
        *,
        url: str | None = None,
        chat_message: str | None = None,
        navigation_history: list[str] | None = None,
        referrer: str | None = None,
        **overrides: Any,
    ) -> ToolContext:
        """Sanitized context from raw signals; overrides are ToolContext fields."""
        detection = self._detector.detect_from_multiple_sources(
            url=url,
            chat_message=chat_message,
            navigation_history=navigation_history,
            referrer=referrer,
        )
        base: dict[str, Any] = {
            "current_page": detection.page,
            "current_section": detection.section,
            "session_id": new_session_id(),
        }
        context = sanitize_context(**{**base, **overrides})
        self._detector.track_context(context, "context-detection")
        return context

    def get_context_history(self, limit: int | None = None) -> list[ContextTrackingEntry]:
        return self._detector.get_context_history(limit)

    def get_usage_analytics(self) -> dict[str, Any]:
        current = self._detector.get_current_context()
        return {
            "recent_usage": list(self._recent_usage),
            "usage_patterns": dict(Counter(self._recent_usage)),
            "context_history": self.get_context_history(10),
            "suggestions": self.get_contextual_suggestions(current) if current else [],
        }

    def reset_contextual_data(self) -> None:
        self._recent_usage.clear()
        self._detector.clear_history()


_default_registry: ContextAwareToolRegistry | None = None


def get_default_registry() -> ContextAwareToolRegistry:
    """Process-wide registry with the built-in tools, built on first use from settings."""
    global _default_registry
    if _default_registry is None:
        settings = get_settings()
        execution = settings.execution
        registry = ContextAwareToolRegistry(
            ToolExecutionMiddleware(settings.middleware),
            history_limit=execution.history_limit,
            default_config=ToolExecutionConfig(
                timeout_s=execution.default_timeout_s,
                retry_delay_s=execution.retry_delay_s,
            ),
            usage_history_limit=execution.usage_history_limit,
        )
        register_builtins(registry, stats_limit=execution.stats_limit)
        logger.info("default_registry_initialized", tool_count=len(registry))
        _default_registry = registry
    return _default_registry


def reset_default_registry() -> None:
    global _default_registry
    _default_registry = None
