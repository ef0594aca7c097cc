"""Contextual tool suggestions: which registered tools matter right now.

Scoring passes are independent and combined by union; the result is
deduplicated by tool name (highest relevance wins) and sorted by
relevance, descending. The engine only ranks tools, it never runs them.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from portfolio_navigator.constants import DEFAULT_PAGE
from portfolio_navigator.suggestions.help import ContextualHelp, help_for_page

if TYPE_CHECKING:
    from portfolio_navigator.tools.base import Tool
    from portfolio_navigator.tools.context import ToolContext

MAX_SUGGESTIONS = 10
MAX_RECOMMENDATIONS = 5

PRIMARY_RELEVANCE = 0.9
SECONDARY_RELEVANCE = 0.6
TERTIARY_RELEVANCE = 0.3
SECTION_BOOST = 0.2
THEME_RELEVANCE = 0.2


class SuggestionPriority(StrEnum):
    high = "high"
    medium = "medium"
    low = "low"


@dataclass(frozen=True)
class PageTiers:
    primary: tuple[str, ...]
    secondary: tuple[str, ...]
    tertiary: tuple[str, ...]

    def all(self) -> tuple[str, ...]:
        return self.primary + self.secondary + self.tertiary


PAGE_TOOL_TIERS: dict[str, PageTiers] = {
    "home": PageTiers(
        primary=("navigate_to_page", "get_projects", "get_skills"),
        secondary=("open_modal", "toggle_theme"),
        tertiary=("trigger_download",),
    ),
    "about": PageTiers(
        primary=("get_experience", "get_skills", "navigate_to_page"),
        secondary=("get_projects", "open_modal"),
        tertiary=("toggle_theme", "trigger_download"),
    ),
    "projects": PageTiers(
        primary=("get_projects", "navigate_to_page", "open_modal"),
        secondary=("get_skills", "get_experience"),
        tertiary=("toggle_theme", "trigger_download"),
    ),
    "resume": PageTiers(
        primary=("trigger_download", "get_experience", "get_skills"),
        secondary=("navigate_to_page", "open_modal"),
        tertiary=("get_projects", "toggle_theme"),
    ),
    "contact": PageTiers(
        primary=("open_modal", "navigate_to_page"),
        secondary=("get_experience", "get_projects"),
        tertiary=("get_skills", "toggle_theme", "trigger_download"),
    ),
}

INTENT_TOOLS: dict[str, tuple[str, ...]] = {
    "navigation": ("navigate_to_page", "open_modal"),
    "information": ("get_projects", "get_experience", "get_skills"),
    "action": ("trigger_download", "toggle_theme", "open_modal"),
    "contact": ("open_modal", "navigate_to_page"),
    "download": ("trigger_download",),
    "theme": ("toggle_theme",),
    "projects": ("get_projects", "navigate_to_page"),
    "experience": ("get_experience", "navigate_to_page"),
    "skills": ("get_skills", "get_experience"),
}

INTENT_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "navigation": (
        re.compile(r"\b(go to|navigate|visit|show|take me)\b"),
        re.compile(r"\b(page|section|area)\b"),
    ),
    "information": (
        re.compile(r"\b(tell me|show me|what|how|describe)\b"),
        re.compile(r"\b(about|info|information|details)\b"),
    ),
    "action": (
        re.compile(r"\b(download|open|close|toggle|switch)\b"),
        re.compile(r"\b(do|perform|execute|run)\b"),
    ),
    "contact": (
        re.compile(r"\b(contact|email|message|reach|connect)\b"),
        re.compile(r"\b(touch|communication|can)\b"),
    ),
    "download": (
        re.compile(r"\b(download|get|save|pdf)\b"),
        re.compile(r"\b(resume|cv|document)\b"),
    ),
    "theme": (
        re.compile(r"\b(theme|dark|light|mode)\b"),
        re.compile(r"\b(switch|toggle|change)\b"),
    ),
    "projects": (
        re.compile(r"\b(project|portfolio|work|build)\b"),
        re.compile(r"\b(code|development|app)\b"),
    ),
    "experience": (
        re.compile(r"\b(experience|work|job|career)\b"),
        re.compile(r"\b(background|history)\b"),
    ),
    "skills": (
        re.compile(r"\b(skill|technology|tech|programming)\b"),
        re.compile(r"\b(language|framework|tool)\b"),
    ),
}

SECTION_TOOLS: dict[str, tuple[str, ...]] = {
    "experience": ("get_experience", "navigate_to_page"),
    "skills": ("get_skills", "get_experience"),
    "projects": ("get_projects", "navigate_to_page"),
    "education": ("get_experience", "navigate_to_page"),
    "contact": ("open_modal", "navigate_to_page"),
}

COMPLEMENTARY_TOOLS: dict[str, tuple[str, ...]] = {
    "get_projects": ("get_skills", "navigate_to_page", "open_modal"),
    "get_experience": ("get_skills", "get_projects", "trigger_download"),
    "get_skills": ("get_experience", "get_projects", "navigate_to_page"),
    "navigate_to_page": ("get_projects", "get_experience", "open_modal"),
    "open_modal": ("navigate_to_page", "get_projects", "get_experience"),
    "toggle_theme": ("navigate_to_page", "get_projects"),
    "trigger_download": ("get_experience", "open_modal", "navigate_to_page"),
}

WORKFLOWS: dict[str, tuple[str, ...]] = {
    "project-exploration": ("get_projects", "navigate_to_page", "open_modal"),
    "background-research": ("get_experience", "get_skills", "trigger_download"),
    "contact-flow": ("navigate_to_page", "open_modal", "get_experience"),
    "resume-flow": ("trigger_download", "get_experience", "get_skills"),
}

THEME_TOOL = "toggle_theme"


@dataclass(frozen=True)
class ToolSuggestion:
    tool: Tool
    relevance: float
    reason: str
    context: str
    priority: SuggestionPriority


@dataclass(frozen=True)
class IntentMatch:
    intent: str
    confidence: float


@dataclass(frozen=True)
class ToolFilterCriteria:
    page: str
    section: str | None = None
    intent: str | None = None
    theme: str | None = None
    device_type: str | None = None


def detect_intents(message: str) -> list[IntentMatch]:
    """Intents found in free text, most confident first.

    Each matching pattern adds 0.3; every match beyond the first adds 0.1.
    """
    lowered = message.lower()
    found: list[IntentMatch] = []
    for intent, patterns in INTENT_PATTERNS.items():
        matches = sum(1 for pattern in patterns if pattern.search(lowered))
        if matches:
            confidence = min(round(matches * 0.3 + (matches - 1) * 0.1, 4), 1.0)
            found.append(IntentMatch(intent=intent, confidence=confidence))
    return sorted(found, key=lambda m: m.confidence, reverse=True)


def priority_for(confidence: float) -> SuggestionPriority:
    if confidence > 0.6:
        return SuggestionPriority.high
    if confidence > 0.3:
        return SuggestionPriority.medium
    return SuggestionPriority.low


def deduplicate_and_sort(suggestions: Iterable[ToolSuggestion]) -> list[ToolSuggestion]:
    """Keep the most relevant suggestion per tool name; sort descending."""
    best: dict[str, ToolSuggestion] = {}
    for suggestion in suggestions:
        existing = best.get(suggestion.tool.name)
        if existing is None or suggestion.relevance > existing.relevance:
            best[suggestion.tool.name] = suggestion
    return sorted(best.values(), key=lambda s: s.relevance, reverse=True)


def _tiers_for(page: str) -> PageTiers:
    return PAGE_TOOL_TIERS.get(page.lower(), PAGE_TOOL_TIERS[DEFAULT_PAGE])


class ContextualToolSuggestions:
    """Ranks known tools against a ToolContext, free text and recent usage."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register_tool(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def register_tools(self, tools: Iterable[Tool]) -> None:
        for tool in tools:
            self.register_tool(tool)

    def unregister_tool(self, name: str) -> None:
        self._tools.pop(name, None)

    def get_suggestions(
        self, context: ToolContext, user_message: str | None = None
    ) -> list[ToolSuggestion]:
        suggestions = self._page_suggestions(context.current_page, context.current_section)
        if user_message:
            suggestions.extend(self._intent_suggestions(user_message))
        suggestions.extend(self._theme_suggestions(context))
        return deduplicate_and_sort(suggestions)[:MAX_SUGGESTIONS]

    def get_smart_recommendations(
        self,
        context: ToolContext,
        recent_usage: list[str],
        user_message: str | None = None,
    ) -> list[ToolSuggestion]:
        """Complementary and workflow-next-step tools for recent usage.

        context and user_message are accepted for call-site symmetry with
        get_suggestions(); neither pass scores on them.
        """
        usage = Counter(recent_usage)
        suggestions = self._complementary_suggestions(usage)
        suggestions.extend(self._workflow_suggestions(recent_usage))
        return deduplicate_and_sort(suggestions)[:MAX_RECOMMENDATIONS]

    def filter_tools_by_context(self, criteria: ToolFilterCriteria) -> list[Tool]:
        allowed = set(_tiers_for(criteria.page).all())
        tools = [tool for tool in self._tools.values() if tool.name in allowed]

        if criteria.intent and criteria.intent in INTENT_TOOLS:
            intent_tools = set(INTENT_TOOLS[criteria.intent])
            return [tool for tool in tools if tool.name in intent_tools]
        return tools

    def get_contextual_help(self, context: ToolContext) -> ContextualHelp:
        return help_for_page(context.current_page)

    def get_workflow(self, name: str) -> list[Tool]:
        """Registered tools of a named workflow, in step order."""
        return [self._tools[step] for step in WORKFLOWS.get(name, ()) if step in self._tools]

    # -- scoring passes ------------------------------------------------------

    def _page_suggestions(self, page: str, section: str | None) -> list[ToolSuggestion]:
        page = page.lower()
        tiers = _tiers_for(page)
        suggestions: list[ToolSuggestion] = []
        for names, relevance, reason, priority in (
            (tiers.primary, PRIMARY_RELEVANCE, "Highly relevant for", SuggestionPriority.high),
            (tiers.secondary, SECONDARY_RELEVANCE, "Useful for", SuggestionPriority.medium),
            (tiers.tertiary, TERTIARY_RELEVANCE, "Available on", SuggestionPriority.low),
        ):
            for name in names:
                tool = self._tools.get(name)
                if tool is not None:
                    suggestions.append(
                        ToolSuggestion(
                            tool=tool,
                            relevance=relevance,
                            reason=f"{reason} {page} page",
                            context=f"page:{page}",
                            priority=priority,
                        )
                    )

        if not section:
            return suggestions

        section = section.lower()
        section_tools = SECTION_TOOLS.get(section, ())
        return [
            replace(
                s,
                relevance=min(round(s.relevance + SECTION_BOOST, 4), 1.0),
                reason=f"{s.reason} (especially for {section} section)",
            )
            if s.tool.name in section_tools
            else s
            for s in suggestions
        ]

    def _intent_suggestions(self, message: str) -> list[ToolSuggestion]:
        suggestions: list[ToolSuggestion] = []
        for match in detect_intents(message):
            for name in INTENT_TOOLS.get(match.intent, ()):
                tool = self._tools.get(name)
                if tool is not None:
                    suggestions.append(
                        ToolSuggestion(
                            tool=tool,
                            relevance=match.confidence,
                            reason=f"Matches intent: {match.intent}",
                            context=f"intent:{match.intent}",
                            priority=priority_for(match.confidence),
                        )
                    )
        return suggestions

    def _theme_suggestions(self, context: ToolContext) -> list[ToolSuggestion]:
        tool = self._tools.get(THEME_TOOL)
        if tool is None:
            return []
        opposite = "dark" if context.theme == "light" else "light"
        return [
            ToolSuggestion(
                tool=tool,
                relevance=THEME_RELEVANCE,
                reason=f"Switch to {opposite} theme",
                context=f"theme:{context.theme}",
                priority=SuggestionPriority.low,
            )
        ]

    def _complementary_suggestions(self, usage: Counter[str]) -> list[ToolSuggestion]:
        suggestions: list[ToolSuggestion] = []
        for used, count in usage.items():
            for name in COMPLEMENTARY_TOOLS.get(used, ()):
                tool = self._tools.get(name)
                if tool is None or name in usage:
                    continue
                suggestions.append(
                    ToolSuggestion(
                        tool=tool,
                        relevance=min(round(0.4 + count * 0.1, 4), 0.8),
                        reason=f"Complements recently used {used}",
                        context=f"usage-pattern:{used}",
                        priority=SuggestionPriority.medium,
                    )
                )
        return suggestions

    def _workflow_suggestions(self, recent_usage: list[str]) -> list[ToolSuggestion]:
        used = set(recent_usage)
        suggestions: list[ToolSuggestion] = []
        for workflow, steps in WORKFLOWS.items():
            matched = [step for step in steps if step in used]
            if not matched:
                continue
            for step in steps:
                tool = self._tools.get(step)
                if step in used or tool is None:
                    continue
                suggestions.append(
                    ToolSuggestion(
                        tool=tool,
                        relevance=min(round(0.6 + len(matched) * 0.1, 4), 1.0),
                        reason=f"Next step in {workflow} workflow",
                        context=f"workflow:{workflow}",
                        priority=SuggestionPriority.medium,
                    )
                )
        return suggestions
