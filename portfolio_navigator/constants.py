"""Closed vocabularies shared across tools, detection and suggestions."""

from __future__ import annotations

from enum import StrEnum


class Page(StrEnum):
    home = "home"
    about = "about"
    projects = "projects"
    resume = "resume"
    contact = "contact"


class Theme(StrEnum):
    light = "light"
    dark = "dark"


VALID_PAGES: tuple[str, ...] = tuple(p.value for p in Page)
VALID_THEMES: tuple[str, ...] = tuple(t.value for t in Theme)

DEFAULT_PAGE = Page.home.value
DEFAULT_THEME = Theme.light.value

# Pages reachable by navigation tools (contact is a modal, not a route).
ROUTABLE_PAGES: tuple[str, ...] = ("home", "about", "projects", "resume")

PAGE_ROUTES: dict[str, str] = {
    "home": "/",
    "about": "/about",
    "projects": "/projects",
    "resume": "/resume",
}

PAGE_SECTIONS: dict[str, tuple[str, ...]] = {
    "home": ("hero", "stats", "skills"),
    "about": ("hero", "experience", "background"),
    "projects": ("showcase", "filters"),
    "resume": ("display", "download"),
}

USER_AGENT_MAX_LENGTH = 500
