from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from portfolio_navigator.constants import DEFAULT_PAGE, DEFAULT_THEME, VALID_PAGES, VALID_THEMES
from portfolio_navigator.infra.errors import ContextError


@dataclass(frozen=True)
class ToolContext:
    """Execution environment snapshot passed to every tool invocation.

    Built fresh per request by the hosting application (browser or server
    signals). The framework never mutates it; with_updates() returns a new,
    validated value. A raw instance may carry out-of-range values so that
    BaseTool can report INVALID_CONTEXT; producers in context_utils always
    sanitize current_page into the closed page set.
    """

    current_page: str = DEFAULT_PAGE
    theme: str = DEFAULT_THEME
    session_id: str = ""
    user_agent: str = "Unknown"
    current_section: str | None = None

    def with_updates(self, **changes: Any) -> ToolContext:
        """Return a copy with changes applied. Raises ContextError if invalid.

        The receiver is never touched, so a failed update leaves the
        previous context intact.
        """
        updated = dataclasses.replace(self, **changes)
        errors = context_errors(updated, strict=True)
        if errors:
            raise ContextError(f"Context update failed: {errors[0]}")
        return updated

    def to_log_dict(self) -> dict[str, Any]:
        """Fields safe for logging; session id truncated."""
        return {
            "current_page": self.current_page,
            "theme": self.theme,
            "session_id": f"{self.session_id[:8]}..." if self.session_id else "",
        }


def context_errors(context: ToolContext, *, strict: bool = False) -> list[str]:
    """Structural checks shared by BaseTool and ToolContext.with_updates()."""
    errors: list[str] = []
    if not isinstance(context.current_page, str) or not context.current_page:
        errors.append("current_page is required and must be a string")
    if context.theme not in VALID_THEMES:
        errors.append('theme must be either "light" or "dark"')
    if not isinstance(context.session_id, str) or not context.session_id:
        errors.append("session_id is required and must be a string")
    if strict and (
        not isinstance(context.user_agent, str) or not context.user_agent
    ):
        errors.append("user_agent is required and must be a string")
    if context.current_section is not None and not isinstance(context.current_section, str):
        errors.append("current_section must be a string if provided")
    if strict and context.current_page not in VALID_PAGES:
        errors.append(
            f"current_page must be one of: {', '.join(VALID_PAGES)} (got '{context.current_page}')"
        )
    return errors
