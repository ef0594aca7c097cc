"""Read-only portfolio content tools: projects, experience, skills."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from datetime import date
from typing import TYPE_CHECKING, Any

from portfolio_navigator.data.experience import EXPERIENCE, Experience
from portfolio_navigator.data.projects import BLOGS, PROJECT_CATEGORIES, PROJECT_SHOWCASE, PROJECTS
from portfolio_navigator.data.skills import (
    PROFICIENCY_LEVELS,
    RELATED_SKILLS,
    SKILL_ALIASES,
    SKILL_CATEGORIES,
    SKILL_SECTIONS,
    TOP_SKILLS_ORDER,
    SkillSection,
    proficiency_of,
)
from portfolio_navigator.infra.errors import ToolError
from portfolio_navigator.tools.base import DEFAULT_STATS_LIMIT, BaseTool, ToolCategory
from portfolio_navigator.tools.results import ToolResult

if TYPE_CHECKING:
    from portfolio_navigator.data.projects import Project
    from portfolio_navigator.tools.context import ToolContext

_MONTHS = {
    name: index
    for index, names in enumerate(
        [
            ("jan", "january"), ("feb", "february"), ("mar", "march"), ("apr", "april"),
            ("may",), ("jun", "june"), ("jul", "july"), ("aug", "august"),
            ("sep", "sept", "september"), ("oct", "october"), ("nov", "november"),
            ("dec", "december"),
        ],
        start=1,
    )
    for name in names
}

_ACHIEVEMENT_WORDS = (
    "%", "increased", "improved", "reduced", "built", "developed", "implemented", "created",
)

_TECH_KEYWORDS = (
    "Java", "JavaScript", "TypeScript", "Python", "PHP", "React", "Next.js", "Node.js",
    "FastAPI", "Spring Boot", "MySQL", "MongoDB", "GraphQL", "Docker", "Kubernetes",
    "AWS", "Azure", "GitHub Actions", "CI/CD", "MERN", "OpenAI",
)

_PERCENT = re.compile(r"\d+%")
_COUNTED_THINGS = re.compile(r"\d[\d,]*\+?\s*(?:files|stations|hours|minutes|rooms|attendees)")


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


def format_months(total: int) -> str:
    years, months = divmod(max(total, 0), 12)
    if years == 0:
        return _plural(months, "month")
    if months == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')} {_plural(months, 'month')}"


def parse_month_year(text: str) -> date:
    """'May 2023' or '2023' -> first day of that month (January for a bare year)."""
    parts = text.strip().split()
    try:
        if len(parts) == 2:
            return date(int(parts[1]), _MONTHS[parts[0].lower()], 1)
        return date(int(parts[0]), 1, 1)
    except (KeyError, ValueError, IndexError) as e:
        raise ToolError(f"Unrecognized date: {text!r}", code="DATA_ACCESS_ERROR") from e


def parse_period(period: str, today: date) -> tuple[date, date]:
    start, _, end = period.partition(" - ")
    end = end.strip() or "Present"
    return parse_month_year(start), today if end == "Present" else parse_month_year(end)


def parse_filter_date(text: str) -> date:
    """'2023-06' or '2023' -> first day of that month."""
    try:
        if "-" in text:
            year, month = text.split("-", 1)
            return date(int(year), int(month), 1)
        return date(int(text), 1, 1)
    except ValueError as e:
        raise ToolError(
            f"Invalid date filter: {text!r}",
            code="DATA_ACCESS_ERROR",
            suggestions=["Check date format (use YYYY-MM or YYYY)"],
        ) from e


def months_between(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


class GetProjectsTool(BaseTool):
    """Projects, showcase entries and blog posts with filters and a summary."""

    @property
    def name(self) -> str:
        return "get_projects"

    @property
    def description(self) -> str:
        return "Retrieve project data with filtering by technology, category, and keyword search"

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.data_access

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "enum": list(PROJECT_CATEGORIES),
                    "description": 'Filter projects by category (e.g., "Enterprise", "E-commerce")',
                },
                "technology": {
                    "type": "string",
                    "description": 'Filter projects by technology used (e.g., "React", "GraphQL")',
                },
                "search": {
                    "type": "string",
                    "description": "Search projects by keyword in name or description",
                },
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 50,
                    "default": 10,
                    "description": "Maximum number of projects to return",
                },
                "include_details": {
                    "type": "boolean",
                    "default": True,
                    "description": "Include images, links and the full description",
                },
                "include_showcase": {
                    "type": "boolean",
                    "default": True,
                    "description": "Include showcase projects in results",
                },
                "include_blogs": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include blog posts in results",
                },
            },
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        category = arguments.get("category")
        technology = arguments.get("technology")
        search = arguments.get("search")
        limit = arguments.get("limit", 10)
        include_details = arguments.get("include_details", True)

        projects: list[Project] = []
        if arguments.get("include_showcase", True):
            projects.extend(PROJECT_SHOWCASE)
        projects.extend(PROJECTS)
        if arguments.get("include_blogs", False):
            projects.extend(BLOGS)

        if category:
            projects = [p for p in projects if category.lower() in p.category.lower()]
        if technology:
            tech = technology.lower()
            projects = [p for p in projects if any(tech in t.lower() for t in p.technologies)]
        if search:
            needle = search.lower()
            projects = [
                p
                for p in projects
                if needle in p.name.lower()
                or needle in p.description.lower()
                or any(needle in t.lower() for t in p.technologies)
            ]

        results = [self._format(p, include_details) for p in projects[:limit]]
        return self.success(
            {
                "projects": results,
                "summary": {
                    "total_found": len(projects),
                    "returned": len(results),
                    "filters": {
                        "category": category,
                        "technology": technology,
                        "search": search,
                    },
                    "categories": list(dict.fromkeys(p.category for p in projects)),
                    "technologies": list(
                        dict.fromkeys(t for p in projects for t in p.technologies)
                    ),
                },
            }
        )

    @staticmethod
    def _format(project: Project, include_details: bool) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": project.name,
            "type": project.kind,
            "category": project.category,
            "technologies": list(project.technologies),
        }
        if include_details:
            out |= {
                "description": project.description,
                "images": list(project.images),
                "links": {
                    "source": project.source_url,
                    "live": project.live_url,
                    "href": project.href,
                },
                "favicon": project.favicon,
            }
        return out


class GetExperienceTool(BaseTool):
    """Work history with company/role/date filters, derived durations and metrics."""

    def __init__(
        self,
        experience: Sequence[Experience] = EXPERIENCE,
        *,
        today: Callable[[], date] = date.today,
        stats_limit: int = DEFAULT_STATS_LIMIT,
    ) -> None:
        super().__init__(stats_limit=stats_limit)
        self._experience = tuple(experience)
        self._today = today

    @property
    def name(self) -> str:
        return "get_experience"

    @property
    def description(self) -> str:
        return (
            "Retrieve professional experience data with filtering by company, role, "
            "and date range"
        )

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.data_access

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "company": {
                    "type": "string",
                    "description": "Filter by company name (partial match supported)",
                },
                "role": {
                    "type": "string",
                    "description": "Filter by job role or title (partial match supported)",
                },
                "date_range": {
                    "type": "object",
                    "properties": {
                        "start": {
                            "type": "string",
                            "description": "Start date for filtering (YYYY-MM or YYYY)",
                        },
                        "end": {
                            "type": "string",
                            "description": "End date for filtering (YYYY-MM or YYYY)",
                        },
                    },
                    "additionalProperties": False,
                },
                "include_details": {
                    "type": "boolean",
                    "default": True,
                    "description": "Include detailed descriptions and achievements",
                },
                "sort_by": {
                    "type": "string",
                    "enum": ["date_desc", "date_asc", "company", "role"],
                    "default": "date_desc",
                    "description": "Sort order for results",
                },
            },
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        company = arguments.get("company")
        role = arguments.get("role")
        date_range = arguments.get("date_range")
        include_details = arguments.get("include_details", True)
        sort_by = arguments.get("sort_by", "date_desc")
        today = self._today()

        entries = list(self._experience)
        if company:
            entries = [e for e in entries if company.lower() in e.company.lower()]
        if role:
            entries = [e for e in entries if role.lower() in e.title.lower()]
        if date_range:
            entries = self._within(entries, date_range, today)

        entries = self._sorted(entries, sort_by, today)
        results = [self._format(e, include_details, today) for e in entries]
        total_months = sum(months_between(*parse_period(e.date, today)) for e in entries)

        return self.success(
            {
                "experience": results,
                "summary": {
                    "total_experience": len(results),
                    "companies": list(dict.fromkeys(r["company"] for r in results)),
                    "roles": list(dict.fromkeys(r["title"] for r in results)),
                    "total_duration": format_months(total_months),
                    "filters": {"company": company, "role": role, "date_range": date_range},
                },
            }
        )

    @staticmethod
    def _within(entries: list[Experience], date_range: dict, today: date) -> list[Experience]:
        start = parse_filter_date(date_range["start"]) if date_range.get("start") else None
        end = parse_filter_date(date_range["end"]) if date_range.get("end") else None
        kept = []
        for entry in entries:
            began, ended = parse_period(entry.date, today)
            if start is not None and ended < start:
                continue
            if end is not None and began > end:
                continue
            kept.append(entry)
        return kept

    @staticmethod
    def _sorted(entries: list[Experience], sort_by: str, today: date) -> list[Experience]:
        match sort_by:
            case "date_asc":
                return sorted(entries, key=lambda e: parse_period(e.date, today)[0])
            case "company":
                return sorted(entries, key=lambda e: e.company.lower())
            case "role":
                return sorted(entries, key=lambda e: e.title.lower())
            case _:
                return sorted(entries, key=lambda e: parse_period(e.date, today)[0], reverse=True)

    @staticmethod
    def _format(entry: Experience, include_details: bool, today: date) -> dict[str, Any]:
        out: dict[str, Any] = {
            "title": entry.title,
            "company": entry.company,
            "company_url": entry.company_url,
            "date": entry.date,
            "duration": format_months(months_between(*parse_period(entry.date, today))),
        }
        if include_details:
            out |= {
                "description": entry.description,
                "achievements": extract_achievements(entry.description),
                "technologies": extract_technologies(entry.description),
                "key_metrics": extract_metrics(entry.description),
            }
        return out


def extract_achievements(description: str) -> list[str]:
    sentences = (s.strip() for s in re.split(r"[.!](?:\s|$)", description))
    return [s for s in sentences if s and any(word in s for word in _ACHIEVEMENT_WORDS)]


def extract_technologies(description: str) -> list[str]:
    lowered = description.lower()
    return [tech for tech in _TECH_KEYWORDS if tech.lower() in lowered]


def extract_metrics(description: str) -> list[str]:
    metrics = []
    for match in _PERCENT.finditer(description):
        window = description[max(0, match.start() - 50) : match.end() + 50]
        metrics.append(window.strip())
    metrics.extend(m.group(0) for m in _COUNTED_THINGS.finditer(description))
    return metrics


class GetSkillsTool(BaseTool):
    """Skills grouped by category or flat, with aliases and inferred proficiency."""

    @property
    def name(self) -> str:
        return "get_skills"

    @property
    def description(self) -> str:
        return "Retrieve skills data with category-based organization and search functionality"

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.data_access

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "enum": list(SKILL_CATEGORIES),
                    "description": "Filter skills by category",
                },
                "search": {
                    "type": "string",
                    "description": "Search skills by name or related terms",
                },
                "include_icons": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include icon information for skills",
                },
                "group_by": {
                    "type": "string",
                    "enum": ["category", "flat"],
                    "default": "category",
                    "description": "Group skills by category or return flat list",
                },
                "proficiency_level": {
                    "type": "string",
                    "enum": list(PROFICIENCY_LEVELS),
                    "description": "Filter by proficiency level",
                },
            },
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        category = arguments.get("category")
        search = arguments.get("search")
        include_icons = arguments.get("include_icons", False)
        group_by = arguments.get("group_by", "category")
        proficiency_level = arguments.get("proficiency_level")

        sections = list(SKILL_SECTIONS)
        if category:
            sections = [s for s in sections if s.name == category]
        if search:
            needle = search.lower()
            sections = self._keep(
                sections,
                lambda name: needle in name.lower()
                or any(needle in alias.lower() for alias in SKILL_ALIASES.get(name, ())),
            )
        if proficiency_level:
            sections = self._keep(sections, lambda name: proficiency_of(name) == proficiency_level)

        def describe(name: str, icon: str) -> dict[str, Any]:
            out: dict[str, Any] = {
                "name": name,
                "proficiency": proficiency_of(name),
                "aliases": list(SKILL_ALIASES.get(name, ())),
                "related_skills": list(RELATED_SKILLS.get(name, ())),
            }
            if include_icons:
                out["icon"] = icon
            return out

        if group_by == "flat":
            flat = [
                {**describe(skill.name, skill.icon), "category": section.name}
                for section in sections
                for skill in section.skills
            ]
            data: dict[str, Any] = {"skills": flat, "total_count": len(flat)}
        else:
            grouped = [
                {
                    "category": section.name,
                    "skills": [describe(skill.name, skill.icon) for skill in section.skills],
                    "skill_count": len(section.skills),
                }
                for section in sections
            ]
            data = {
                "categories": grouped,
                "total_categories": len(grouped),
                "total_skills": sum(group["skill_count"] for group in grouped),
            }

        names = [skill.name for section in sections for skill in section.skills]
        distribution = dict.fromkeys(reversed(PROFICIENCY_LEVELS), 0)
        for name in names:
            distribution[proficiency_of(name)] += 1

        data["summary"] = {
            "total_found": len(names),
            "categories": [section.name for section in sections],
            "top_skills": [s for s in TOP_SKILLS_ORDER if s in names][:8],
            "filters": {
                "category": category,
                "search": search,
                "proficiency_level": proficiency_level,
            },
            "proficiency_distribution": distribution,
        }
        return self.success(data)

    @staticmethod
    def _keep(
        sections: list[SkillSection], predicate: Callable[[str], bool]
    ) -> list[SkillSection]:
        kept = []
        for section in sections:
            skills = tuple(skill for skill in section.skills if predicate(skill.name))
            if skills:
                kept.append(SkillSection(name=section.name, skills=skills))
        return kept
