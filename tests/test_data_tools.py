"""Tests for get_projects, get_experience and get_skills."""

from __future__ import annotations

from datetime import date

import pytest

from portfolio_navigator.data.experience import Experience
from portfolio_navigator.infra.errors import ToolError
from portfolio_navigator.tools.builtins.data_access import (
    GetExperienceTool,
    GetProjectsTool,
    GetSkillsTool,
    extract_achievements,
    format_months,
    months_between,
    parse_filter_date,
    parse_month_year,
    parse_period,
)
from portfolio_navigator.tools.context import ToolContext

TODAY = date(2026, 1, 1)


def _experience_tool() -> GetExperienceTool:
    return GetExperienceTool(today=lambda: TODAY)


class TestDateHelpers:
    def test_parse_month_year(self) -> None:
        assert parse_month_year("May 2023") == date(2023, 5, 1)
        assert parse_month_year("Sept 2021") == date(2021, 9, 1)
        assert parse_month_year("2020") == date(2020, 1, 1)

    def test_parse_month_year_rejects_garbage(self) -> None:
        with pytest.raises(ToolError) as exc_info:
            parse_month_year("Smarch 2020")
        assert exc_info.value.code == "DATA_ACCESS_ERROR"

    def test_parse_period_present(self) -> None:
        assert parse_period("June 2024 - Present", TODAY) == (date(2024, 6, 1), TODAY)

    def test_parse_filter_date(self) -> None:
        assert parse_filter_date("2023-06") == date(2023, 6, 1)
        assert parse_filter_date("2023") == date(2023, 1, 1)
        with pytest.raises(ToolError, match="Invalid date filter"):
            parse_filter_date("2023-13")

    @pytest.mark.parametrize(
        ("months", "expected"),
        [
            (0, "0 months"),
            (1, "1 month"),
            (12, "1 year"),
            (19, "1 year 7 months"),
            (26, "2 years 2 months"),
        ],
    )
    def test_format_months(self, months: int, expected: str) -> None:
        assert format_months(months) == expected

    def test_months_between(self) -> None:
        assert months_between(date(2024, 6, 1), date(2026, 1, 1)) == 19


class TestGetProjects:
    @pytest.mark.asyncio
    async def test_defaults(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute({}, context)
        assert result.success
        summary = result.data["summary"]
        assert summary["total_found"] == 9
        assert summary["returned"] == 9
        first = result.data["projects"][0]
        assert first["name"] == "EarthLink"
        assert first["type"] == "showcase"
        assert "links" in first

    @pytest.mark.asyncio
    async def test_filter_by_category(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute({"category": "E-commerce"}, context)
        names = {p["name"] for p in result.data["projects"]}
        assert names == {"Rapid Store"}
        assert result.data["summary"]["total_found"] == 2
        assert result.data["summary"]["categories"] == ["E-commerce"]

    @pytest.mark.asyncio
    async def test_filter_by_technology(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute({"technology": "graphql"}, context)
        assert result.data["summary"]["total_found"] == 3
        assert "GraphQL" in result.data["summary"]["technologies"]

    @pytest.mark.asyncio
    async def test_search(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute({"search": "rapid"}, context)
        assert result.data["summary"]["total_found"] == 6
        assert result.data["summary"]["filters"]["search"] == "rapid"

    @pytest.mark.asyncio
    async def test_blogs_only(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute(
            {"include_blogs": True, "include_showcase": False, "category": "Blog"}, context
        )
        assert result.data["summary"]["total_found"] == 3
        assert all(p["type"] == "blog" for p in result.data["projects"])

    @pytest.mark.asyncio
    async def test_limit_and_compact(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute({"limit": 2, "include_details": False}, context)
        assert result.data["summary"]["returned"] == 2
        assert result.data["summary"]["total_found"] == 9
        assert set(result.data["projects"][0]) == {"name", "type", "category", "technologies"}

    @pytest.mark.asyncio
    async def test_limit_must_be_integer(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute({"limit": "5"}, context)
        assert result.error_code == "INVALID_ARGUMENTS"

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, context: ToolContext) -> None:
        result = await GetProjectsTool().execute({"category": "Games"}, context)
        assert result.error_code == "INVALID_ARGUMENTS"


class TestGetExperience:
    @pytest.mark.asyncio
    async def test_defaults_sorted_newest_first(self, context: ToolContext) -> None:
        result = await _experience_tool().execute({}, context)
        assert result.success
        entries = result.data["experience"]
        assert [e["company"] for e in entries] == [
            "Xansr Media",
            "Central Electricity Authority of India",
        ]
        assert entries[0]["duration"] == "1 year 7 months"
        assert entries[1]["duration"] == "2 months"
        summary = result.data["summary"]
        assert summary["total_experience"] == 2
        assert summary["total_duration"] == "1 year 9 months"

    @pytest.mark.asyncio
    async def test_details(self, context: ToolContext) -> None:
        result = await _experience_tool().execute({"sort_by": "date_asc"}, context)
        first = result.data["experience"][0]
        assert len(first["achievements"]) == 3
        assert {"Java", "PHP", "MySQL", "Spring Boot"} <= set(first["technologies"])
        assert "5,000 files" in first["key_metrics"]
        assert "10+ rooms" in first["key_metrics"]

    @pytest.mark.asyncio
    async def test_without_details(self, context: ToolContext) -> None:
        result = await _experience_tool().execute({"include_details": False}, context)
        assert "achievements" not in result.data["experience"][0]

    @pytest.mark.asyncio
    async def test_filter_company_and_role(self, context: ToolContext) -> None:
        tool = _experience_tool()
        by_company = await tool.execute({"company": "xansr"}, context)
        by_role = await tool.execute({"role": "apprenticeship"}, context)
        assert by_company.data["summary"]["companies"] == ["Xansr Media"]
        assert by_role.data["summary"]["total_experience"] == 2

    @pytest.mark.asyncio
    async def test_date_range(self, context: ToolContext) -> None:
        tool = _experience_tool()
        recent = await tool.execute({"date_range": {"start": "2024"}}, context)
        early = await tool.execute({"date_range": {"end": "2023-12"}}, context)
        assert recent.data["summary"]["companies"] == ["Xansr Media"]
        assert early.data["summary"]["companies"] == ["Central Electricity Authority of India"]

    @pytest.mark.asyncio
    async def test_invalid_date_range(self, context: ToolContext) -> None:
        result = await _experience_tool().execute({"date_range": {"start": "soon"}}, context)
        assert result.error_code == "DATA_ACCESS_ERROR"
        assert result.error.suggestions == ["Check date format (use YYYY-MM or YYYY)"]

    @pytest.mark.asyncio
    async def test_sort_by_company(self, context: ToolContext) -> None:
        result = await _experience_tool().execute({"sort_by": "company"}, context)
        assert result.data["experience"][0]["company"].startswith("Central")

    @pytest.mark.asyncio
    async def test_injected_experience(self, context: ToolContext) -> None:
        tool = GetExperienceTool(
            [
                Experience(
                    "Engineer", "Acme", "https://acme.test", "Jan 2020 - Jan 2021", "Did things."
                )
            ],
            today=lambda: TODAY,
        )
        result = await tool.execute({}, context)
        assert result.data["experience"][0]["duration"] == "1 year"
        assert result.data["experience"][0]["achievements"] == []

    def test_extract_achievements(self) -> None:
        text = "Improved latency by 20%. Attended meetings. We built a CLI!"
        assert extract_achievements(text) == ["Improved latency by 20%", "We built a CLI"]


class TestGetSkills:
    @pytest.mark.asyncio
    async def test_defaults_grouped(self, context: ToolContext) -> None:
        result = await GetSkillsTool().execute({}, context)
        assert result.success
        assert result.data["total_categories"] == 5
        assert result.data["total_skills"] == 41
        summary = result.data["summary"]
        assert summary["top_skills"] == [
            "React", "Javascript", "Typescript", "Nodejs", "Python", "Java", "Nextjs", "FastAPI",
        ]
        assert summary["proficiency_distribution"] == {
            "expert": 12,
            "advanced": 10,
            "intermediate": 19,
            "beginner": 0,
        }

    @pytest.mark.asyncio
    async def test_category(self, context: ToolContext) -> None:
        result = await GetSkillsTool().execute({"category": "DevOps"}, context)
        assert result.data["total_categories"] == 1
        assert result.data["categories"][0]["skill_count"] == 6

    @pytest.mark.asyncio
    async def test_search_matches_aliases(self, context: ToolContext) -> None:
        result = await GetSkillsTool().execute({"search": "js", "group_by": "flat"}, context)
        names = {s["name"] for s in result.data["skills"]}
        assert names == {"React", "Nextjs", "Nodejs", "Javascript"}

    @pytest.mark.asyncio
    async def test_search_across_categories(self, context: ToolContext) -> None:
        result = await GetSkillsTool().execute({"search": "azure", "group_by": "flat"}, context)
        assert result.data["total_count"] == 3
        assert {s["category"] for s in result.data["skills"]} == {
            "AI/ML",
            "Tools & Cloud Platforms",
        }

    @pytest.mark.asyncio
    async def test_proficiency_filter(self, context: ToolContext) -> None:
        result = await GetSkillsTool().execute(
            {"proficiency_level": "expert", "group_by": "flat"}, context
        )
        assert result.data["total_count"] == 12
        assert all(s["proficiency"] == "expert" for s in result.data["skills"])

    @pytest.mark.asyncio
    async def test_icons_and_relations(self, context: ToolContext) -> None:
        result = await GetSkillsTool().execute(
            {"search": "react", "group_by": "flat", "include_icons": True}, context
        )
        (react,) = result.data["skills"]
        assert react["icon"] == "/icons/reactjs.svg"
        assert react["aliases"] == ["ReactJS", "React.js"]
        assert "Nextjs" in react["related_skills"]

    @pytest.mark.asyncio
    async def test_no_match(self, context: ToolContext) -> None:
        result = await GetSkillsTool().execute({"search": "cobol"}, context)
        assert result.data["total_categories"] == 0
        assert result.data["summary"]["total_found"] == 0
