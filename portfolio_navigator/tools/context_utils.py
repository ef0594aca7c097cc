"""Sanitizing, validating and transforming ToolContext values.

Every producer of a ToolContext in this package goes through
sanitize_context() (directly or via for_server()/from_url()), which
guarantees current_page is a member of the closed page set.
"""

from __future__ import annotations

import re
import secrets
import time
from dataclasses import dataclass, field, fields
from typing import Any
from urllib.parse import urlsplit

from portfolio_navigator.constants import (
    DEFAULT_PAGE,
    DEFAULT_THEME,
    USER_AGENT_MAX_LENGTH,
    VALID_PAGES,
    VALID_THEMES,
)
from portfolio_navigator.tools.context import ToolContext

_SESSION_ID_UNSAFE = re.compile(r"[^a-zA-Z0-9\-_]")
_SESSION_ID_SHAPE = re.compile(r"^[a-zA-Z0-9\-_]+$")
_SESSION_ID_MIN_LENGTH = 10


# -- sanitizers ---------------------------------------------------------------


def sanitize_page(page: Any) -> str:
    """Lowercased page if it is in the closed set, otherwise 'home'. Idempotent."""
    if not isinstance(page, str) or not page:
        return DEFAULT_PAGE
    cleaned = page.strip().lower()
    return cleaned if cleaned in VALID_PAGES else DEFAULT_PAGE


def sanitize_section(section: Any) -> str | None:
    if not isinstance(section, str):
        return None
    cleaned = section.strip().lower()
    return cleaned or None


def sanitize_theme(theme: Any) -> str:
    return "dark" if theme == "dark" else DEFAULT_THEME


def new_session_id(prefix: str = "session") -> str:
    return f"{prefix}-{int(time.time() * 1000):x}-{secrets.token_hex(5)}"


def sanitize_session_id(session_id: Any) -> str:
    if not isinstance(session_id, str) or not session_id:
        return new_session_id()
    cleaned = _SESSION_ID_UNSAFE.sub("", session_id)
    return cleaned or new_session_id()


def sanitize_user_agent(user_agent: Any) -> str:
    if not isinstance(user_agent, str):
        return "Unknown"
    cleaned = user_agent.strip()[:USER_AGENT_MAX_LENGTH]
    return cleaned or "Unknown"


def sanitize_context(
    *,
    current_page: Any = DEFAULT_PAGE,
    current_section: Any = None,
    theme: Any = DEFAULT_THEME,
    session_id: Any = "",
    user_agent: Any = "Unknown",
) -> ToolContext:
    return ToolContext(
        current_page=sanitize_page(current_page),
        current_section=sanitize_section(current_section),
        theme=sanitize_theme(theme),
        session_id=sanitize_session_id(session_id),
        user_agent=sanitize_user_agent(user_agent),
    )


# -- validators ---------------------------------------------------------------


def is_valid_page(page: Any) -> bool:
    return isinstance(page, str) and page.lower() in VALID_PAGES


def is_valid_theme(theme: Any) -> bool:
    return theme in VALID_THEMES


def is_valid_session_id(session_id: Any) -> bool:
    return (
        isinstance(session_id, str)
        and bool(_SESSION_ID_SHAPE.match(session_id))
        and len(session_id) >= _SESSION_ID_MIN_LENGTH
    )


def is_valid_user_agent(user_agent: Any) -> bool:
    return isinstance(user_agent, str) and bool(user_agent.strip())


@dataclass(frozen=True)
class ContextValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_context(context: ToolContext) -> ContextValidation:
    """Full validation, stricter than the structural check BaseTool applies."""
    errors: list[str] = []
    warnings: list[str] = []

    if not is_valid_page(context.current_page):
        errors.append(
            f'Invalid current_page: "{context.current_page}". '
            f"Must be one of: {', '.join(VALID_PAGES)}"
        )
    if not is_valid_theme(context.theme):
        errors.append(f'Invalid theme: "{context.theme}". Must be "light" or "dark"')
    if not is_valid_session_id(context.session_id):
        errors.append(
            f'Invalid session_id: "{context.session_id}". Must be a valid session identifier'
        )
    if not is_valid_user_agent(context.user_agent):
        errors.append(f'Invalid user_agent: "{context.user_agent}". Must be a non-empty string')
    if context.current_section is not None and not isinstance(context.current_section, str):
        warnings.append(
            "current_section should be a string if provided, "
            f"got: {type(context.current_section).__name__}"
        )

    return ContextValidation(valid=not errors, errors=errors, warnings=warnings)


# -- transformers -------------------------------------------------------------


def path_to_page_section(path: Any) -> tuple[str, str | None]:
    """'/about/experience?x=1' -> ('about', 'experience'). Unknown pages map to home."""
    if not isinstance(path, str) or not path:
        return DEFAULT_PAGE, None

    cleaned = path.split("?", 1)[0].strip("/").lower()
    if not cleaned or cleaned == "index":
        return DEFAULT_PAGE, None

    segments = cleaned.split("/")
    page = sanitize_page(segments[0])
    section = sanitize_section(segments[1]) if len(segments) > 1 and segments[1] else None
    return page, section


def page_section_to_path(page: str, section: str | None = None) -> str:
    sanitized_page = sanitize_page(page)
    if sanitized_page == DEFAULT_PAGE:
        return "/"

    path = f"/{sanitized_page}"
    sanitized_section = sanitize_section(section)
    if sanitized_section:
        path += f"#{sanitized_section}"
    return path


def from_url(url: str, **overrides: Any) -> ToolContext:
    """Context for a browser-originated request; page/section from the URL."""
    parts = urlsplit(url or "/")
    page, section = path_to_page_section(parts.path)
    if section is None and parts.fragment:
        section = parts.fragment
    base: dict[str, Any] = {
        "current_page": page,
        "current_section": section,
        "theme": DEFAULT_THEME,
        "session_id": new_session_id(),
        "user_agent": "Unknown",
    }
    return sanitize_context(**{**base, **overrides})


def for_server(page: str = DEFAULT_PAGE, **overrides: Any) -> ToolContext:
    """Context for server-side rendering."""
    base: dict[str, Any] = {
        "current_page": page,
        "theme": DEFAULT_THEME,
        "user_agent": "Server",
        "session_id": new_session_id("server"),
    }
    return sanitize_context(**{**base, **overrides})


# -- comparators --------------------------------------------------------------


def are_equal(a: ToolContext, b: ToolContext) -> bool:
    return a == b


def get_differences(a: ToolContext, b: ToolContext) -> dict[str, Any]:
    """Fields of b that differ from a."""
    return {
        f.name: getattr(b, f.name)
        for f in fields(ToolContext)
        if getattr(a, f.name) != getattr(b, f.name)
    }


def has_significant_change(a: ToolContext, b: ToolContext) -> bool:
    """Page, section or theme changed (session and user agent ignored)."""
    return (
        a.current_page != b.current_page
        or a.current_section != b.current_section
        or a.theme != b.theme
    )
