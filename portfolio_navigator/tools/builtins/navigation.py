from __future__ import annotations

import time
from typing import TYPE_CHECKING

from portfolio_navigator.constants import DEFAULT_PAGE, PAGE_ROUTES, PAGE_SECTIONS, ROUTABLE_PAGES
from portfolio_navigator.tools.base import BaseTool, ToolCategory
from portfolio_navigator.tools.results import ModalAction, NavigateAction, ScrollAction, ToolResult

if TYPE_CHECKING:
    from portfolio_navigator.tools.context import ToolContext


def routable_page(page: str) -> str:
    """The routed page a context is on; non-routed pages (contact) count as home."""
    return page if page in ROUTABLE_PAGES else DEFAULT_PAGE


class NavigateToPageTool(BaseTool):
    """Route to a portfolio page, optionally scrolling to one of its sections."""

    @property
    def name(self) -> str:
        return "navigate_to_page"

    @property
    def description(self) -> str:
        return (
            "Navigate to a specific page in the portfolio with optional section "
            "targeting and smooth scrolling"
        )

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.navigation

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "page": {
                    "type": "string",
                    "enum": list(ROUTABLE_PAGES),
                    "description": "The page to navigate to",
                },
                "section": {
                    "type": "string",
                    "description": "Optional section within the page to scroll to",
                },
                "smooth": {
                    "type": "boolean",
                    "default": True,
                    "description": "Whether to use smooth scrolling when navigating to sections",
                },
            },
            "required": ["page"],
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        page = arguments["page"]
        section = arguments.get("section")
        smooth = arguments.get("smooth", True)

        valid_sections = PAGE_SECTIONS[page]
        if section and section not in valid_sections:
            return self.failure(
                "INVALID_SECTION",
                f'Invalid section "{section}" for page "{page}". '
                f"Valid sections are: {', '.join(valid_sections)}",
                suggestions=[f"Try one of: {', '.join(valid_sections)}"],
                fallback={"page": page, "section": None},
            )

        route = PAGE_ROUTES[page]
        is_current_page = routable_page(context.current_page) == page
        action = NavigateAction(
            target=route,
            data={"section": section, "smooth": smooth, "is_current_page": is_current_page},
        )
        return self.success(
            {
                "page": page,
                "route": route,
                "section": section,
                "smooth": smooth,
                "is_current_page": is_current_page,
                "message": self._message(page, section, is_current_page),
            },
            [action],
        )

    @staticmethod
    def _message(page: str, section: str | None, is_current_page: bool) -> str:
        if is_current_page and section:
            return f"Scrolling to the {section} section on the current page."
        if is_current_page:
            return f"You're already on the {page} page."
        if section:
            return f"Navigating to the {page} page and scrolling to the {section} section."
        return f"Navigating to the {page} page."


class NavigateToSectionTool(BaseTool):
    """Scroll to a section, routing to another page first when one is named."""

    @property
    def name(self) -> str:
        return "navigate_to_section"

    @property
    def description(self) -> str:
        return (
            "Navigate to a specific section within the current page or any page "
            "with smooth scrolling and highlighting"
        )

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.navigation

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "section": {"type": "string", "description": "The section to navigate to"},
                "page": {
                    "type": "string",
                    "enum": list(ROUTABLE_PAGES),
                    "description": "Optional page to navigate to first (defaults to current page)",
                },
                "smooth": {
                    "type": "boolean",
                    "default": True,
                    "description": "Whether to use smooth scrolling",
                },
                "highlight": {
                    "type": "boolean",
                    "default": True,
                    "description": "Whether to highlight the section after scrolling",
                },
            },
            "required": ["section"],
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        section = arguments["section"]
        page = arguments.get("page")
        smooth = arguments.get("smooth", True)
        highlight = arguments.get("highlight", True)

        current = routable_page(context.current_page)
        target_page = page or current
        available = PAGE_SECTIONS.get(target_page, ())

        if section not in available:
            return self.failure(
                "INVALID_SECTION",
                f'Section "{section}" not found on {target_page} page. '
                f"Available sections: {', '.join(available)}",
                suggestions=[f"Try one of: {', '.join(available)}"]
                if available
                else ["Navigate to a different page first"],
                fallback={
                    "current_page": context.current_page,
                    "available_sections": list(available),
                },
            )

        needs_page_navigation = page is not None and target_page != current
        if needs_page_navigation:
            action = NavigateAction(
                target=PAGE_ROUTES[target_page],
                data={"section": section, "smooth": smooth, "highlight": highlight},
            )
            message = f"Navigating to the {target_page} page and scrolling to the {section} section."
        else:
            action = ScrollAction(target=section, data={"smooth": smooth, "highlight": highlight})
            message = f"Scrolling to the {section} section on the current page."

        return self.success(
            {
                "section": section,
                "page": target_page,
                "smooth": smooth,
                "highlight": highlight,
                "needs_page_navigation": needs_page_navigation,
                "message": message,
            },
            [action],
        )


class OpenModalTool(BaseTool):
    """Open the contact form or a project-details dialog."""

    @property
    def name(self) -> str:
        return "open_modal"

    @property
    def description(self) -> str:
        return (
            "Open a modal dialog for contact forms, project details, "
            "or other interactive content"
        )

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.navigation

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "modal": {
                    "type": "string",
                    "enum": ["contact", "project-details"],
                    "description": "The type of modal to open",
                },
                "data": {
                    "type": "object",
                    "description": "Optional data to pre-populate the modal with",
                    "properties": {
                        "project_id": {
                            "type": "string",
                            "description": "Project ID for project details modal",
                        },
                        "subject": {
                            "type": "string",
                            "description": "Pre-filled subject for contact form",
                        },
                        "message": {
                            "type": "string",
                            "description": "Pre-filled message for contact form",
                        },
                    },
                    "additionalProperties": True,
                },
            },
            "required": ["modal"],
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        modal = arguments["modal"]
        data = dict(arguments.get("data") or {})

        # reachable only when argument validation is switched off
        project_id = data.get("project_id")
        if modal == "project-details" and project_id is not None and not isinstance(
            project_id, str
        ):
            return self.failure(
                "INVALID_PROJECT_ID",
                "Project ID must be a string",
                suggestions=["Provide a valid project ID string"],
            )

        action = ModalAction(target=modal, data={**data, "timestamp": int(time.time() * 1000)})
        return self.success(
            {"modal": modal, "data": data, "message": self._message(modal, data)},
            [action],
        )

    @staticmethod
    def _message(modal: str, data: dict) -> str:
        match modal:
            case "contact" if data.get("subject"):
                return f'Opening contact form with subject: "{data["subject"]}"'
            case "contact":
                return "Opening the contact form for you."
            case "project-details" if data.get("project_id"):
                return f"Opening details for project: {data['project_id']}"
            case "project-details":
                return "Opening project details modal."
            case _:
                return f"Opening {modal} modal."
