"""Tests for the contextual tool suggestion engine."""

from __future__ import annotations

import pytest

from portfolio_navigator.suggestions.engine import (
    MAX_RECOMMENDATIONS,
    MAX_SUGGESTIONS,
    ContextualToolSuggestions,
    SuggestionPriority,
    ToolFilterCriteria,
    ToolSuggestion,
    deduplicate_and_sort,
    detect_intents,
    priority_for,
)
from portfolio_navigator.suggestions.help import PAGE_HELP, help_for_page
from portfolio_navigator.tools.builtins.data_access import (
    GetExperienceTool,
    GetProjectsTool,
    GetSkillsTool,
)
from portfolio_navigator.tools.builtins.navigation import NavigateToPageTool, OpenModalTool
from portfolio_navigator.tools.builtins.ui_control import ToggleThemeTool, TriggerDownloadTool
from portfolio_navigator.tools.context import ToolContext


@pytest.fixture()
def engine() -> ContextualToolSuggestions:
    engine = ContextualToolSuggestions()
    engine.register_tools(
        [
            GetProjectsTool(),
            GetExperienceTool(),
            GetSkillsTool(),
            NavigateToPageTool(),
            OpenModalTool(),
            ToggleThemeTool(),
            TriggerDownloadTool(),
        ]
    )
    return engine


def _names(suggestions: list[ToolSuggestion]) -> list[str]:
    return [s.tool.name for s in suggestions]


def _assert_well_formed(suggestions: list[ToolSuggestion]) -> None:
    names = _names(suggestions)
    assert len(names) == len(set(names))
    relevances = [s.relevance for s in suggestions]
    assert relevances == sorted(relevances, reverse=True)


class TestIntentDetection:
    def test_single_pattern(self) -> None:
        matches = detect_intents("dark")
        assert [(m.intent, m.confidence) for m in matches] == [("theme", 0.3)]

    def test_two_patterns_score_higher(self) -> None:
        matches = {m.intent: m.confidence for m in detect_intents("switch to dark mode")}
        assert matches["theme"] == pytest.approx(0.7)
        assert matches["action"] == pytest.approx(0.3)

    def test_sorted_descending(self) -> None:
        confidences = [m.confidence for m in detect_intents("download my resume pdf now")]
        assert confidences == sorted(confidences, reverse=True)

    def test_nothing_found(self) -> None:
        assert detect_intents("zzz") == []

    def test_priority_for(self) -> None:
        assert priority_for(0.7) == SuggestionPriority.high
        assert priority_for(0.6) == SuggestionPriority.medium
        assert priority_for(0.31) == SuggestionPriority.medium
        assert priority_for(0.3) == SuggestionPriority.low


class TestGetSuggestions:
    def test_home_page_tiers(self, engine: ContextualToolSuggestions, context: ToolContext) -> None:
        suggestions = engine.get_suggestions(context)
        _assert_well_formed(suggestions)
        by_name = {s.tool.name: s for s in suggestions}
        assert by_name["get_projects"].relevance == pytest.approx(0.9)
        assert by_name["get_projects"].priority == SuggestionPriority.high
        assert by_name["open_modal"].relevance == pytest.approx(0.6)
        assert by_name["trigger_download"].relevance == pytest.approx(0.3)
        assert by_name["get_projects"].context == "page:home"

    def test_theme_tool_keeps_higher_page_score(
        self, engine: ContextualToolSuggestions, context: ToolContext
    ) -> None:
        by_name = {s.tool.name: s for s in engine.get_suggestions(context)}
        assert by_name["toggle_theme"].relevance == pytest.approx(0.6)

    def test_section_boost(self, engine: ContextualToolSuggestions, context: ToolContext) -> None:
        about = context.with_updates(current_page="about", current_section="experience")
        by_name = {s.tool.name: s for s in engine.get_suggestions(about)}
        assert by_name["get_experience"].relevance == pytest.approx(1.0)
        assert "experience section" in by_name["get_experience"].reason
        assert by_name["get_skills"].relevance == pytest.approx(0.9)

    def test_intent_raises_relevance(
        self, engine: ContextualToolSuggestions, context: ToolContext
    ) -> None:
        resume = context.with_updates(current_page="resume")
        plain = {s.tool.name: s.relevance for s in engine.get_suggestions(resume)}
        with_intent = {
            s.tool.name: s
            for s in engine.get_suggestions(resume, "switch to dark mode theme please")
        }
        assert plain["toggle_theme"] == pytest.approx(0.3)
        assert with_intent["toggle_theme"].relevance == pytest.approx(0.7)
        assert with_intent["toggle_theme"].context == "intent:theme"

    def test_unknown_page_uses_home_tiers(self, engine: ContextualToolSuggestions) -> None:
        ctx = ToolContext(current_page="blog", session_id="session-test-0001")
        assert _names(engine.get_suggestions(ctx))[:3] == [
            "navigate_to_page",
            "get_projects",
            "get_skills",
        ]

    @pytest.mark.parametrize("page", ["home", "about", "projects", "resume", "contact"])
    def test_every_page_well_formed(
        self, engine: ContextualToolSuggestions, context: ToolContext, page: str
    ) -> None:
        suggestions = engine.get_suggestions(
            context.with_updates(current_page=page), "show me projects and download resume"
        )
        _assert_well_formed(suggestions)
        assert len(suggestions) <= MAX_SUGGESTIONS

    def test_unregistered_tools_not_suggested(self, context: ToolContext) -> None:
        engine = ContextualToolSuggestions()
        engine.register_tool(GetProjectsTool())
        assert _names(engine.get_suggestions(context)) == ["get_projects"]
        engine.unregister_tool("get_projects")
        assert engine.get_suggestions(context) == []


class TestSmartRecommendations:
    def test_complementary_tools(
        self, engine: ContextualToolSuggestions, context: ToolContext
    ) -> None:
        recs = engine.get_smart_recommendations(context, ["get_projects"])
        _assert_well_formed(recs)
        names = _names(recs)
        assert "get_projects" not in names
        assert {"get_skills", "navigate_to_page", "open_modal"} <= set(names)

    def test_repeated_usage_raises_relevance(
        self, engine: ContextualToolSuggestions, context: ToolContext
    ) -> None:
        once = engine.get_smart_recommendations(context, ["toggle_theme"])
        thrice = engine.get_smart_recommendations(context, ["toggle_theme"] * 3)
        assert {s.tool.name: s.relevance for s in once}["get_projects"] == pytest.approx(0.5)
        assert {s.tool.name: s.relevance for s in thrice}["get_projects"] == pytest.approx(0.7)

    def test_workflow_next_step(
        self, engine: ContextualToolSuggestions, context: ToolContext
    ) -> None:
        recs = engine.get_smart_recommendations(context, ["trigger_download", "get_experience"])
        by_name = {s.tool.name: s for s in recs}
        assert by_name["get_skills"].relevance == pytest.approx(0.8)
        assert by_name["get_skills"].context.startswith("workflow:")

    def test_limited(self, engine: ContextualToolSuggestions, context: ToolContext) -> None:
        recs = engine.get_smart_recommendations(
            context, ["get_projects", "toggle_theme", "trigger_download"]
        )
        assert len(recs) <= MAX_RECOMMENDATIONS

    def test_no_usage(self, engine: ContextualToolSuggestions, context: ToolContext) -> None:
        assert engine.get_smart_recommendations(context, []) == []


class TestFilterAndHelp:
    def test_filter_by_page(self, engine: ContextualToolSuggestions) -> None:
        tools = engine.filter_tools_by_context(ToolFilterCriteria(page="contact"))
        assert {t.name for t in tools} == {
            "open_modal",
            "navigate_to_page",
            "get_experience",
            "get_projects",
            "get_skills",
            "toggle_theme",
            "trigger_download",
        }

    def test_filter_by_intent(self, engine: ContextualToolSuggestions) -> None:
        tools = engine.filter_tools_by_context(ToolFilterCriteria(page="about", intent="download"))
        assert [t.name for t in tools] == ["trigger_download"]

    def test_unknown_intent_ignored(self, engine: ContextualToolSuggestions) -> None:
        tools = engine.filter_tools_by_context(ToolFilterCriteria(page="home", intent="dance"))
        assert len(tools) == 6

    def test_help(self, engine: ContextualToolSuggestions, context: ToolContext) -> None:
        help_ = engine.get_contextual_help(context.with_updates(current_page="projects"))
        assert help_ is PAGE_HELP["projects"]
        assert help_.suggested_questions

    def test_help_fallback(self) -> None:
        assert help_for_page("blog") is PAGE_HELP["home"]
        assert help_for_page("ABOUT") is PAGE_HELP["about"]

    def test_every_page_has_help(self) -> None:
        for page in ("home", "about", "projects", "resume", "contact"):
            entry = PAGE_HELP[page]
            assert entry.page_description
            assert entry.available_actions
            assert entry.navigation_suggestions

    def test_workflow(self, engine: ContextualToolSuggestions) -> None:
        assert [t.name for t in engine.get_workflow("resume-flow")] == [
            "trigger_download",
            "get_experience",
            "get_skills",
        ]
        assert engine.get_workflow("nope") == []


class TestDeduplicate:
    def test_keeps_highest(self) -> None:
        tool = GetProjectsTool()
        low = ToolSuggestion(tool, 0.2, "r", "c", SuggestionPriority.low)
        high = ToolSuggestion(tool, 0.8, "r", "c", SuggestionPriority.high)
        assert deduplicate_and_sort([low, high]) == [high]
