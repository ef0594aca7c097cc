from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from portfolio_navigator.tools.base import DEFAULT_STATS_LIMIT, BaseTool, ToolCategory
from portfolio_navigator.tools.results import DownloadAction, ScrollAction, ThemeAction, ToolResult

if TYPE_CHECKING:
    from portfolio_navigator.tools.context import ToolContext

DEFAULT_RESUME_PATH = "/resume.pdf"

UI_ACTIONS = ("focus", "scroll", "highlight", "show", "hide")


class ToggleThemeTool(BaseTool):
    """Switch between light and dark, or set one explicitly."""

    @property
    def name(self) -> str:
        return "toggle_theme"

    @property
    def description(self) -> str:
        return "Switch between light and dark themes or set a specific theme"

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.ui_control

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "theme": {
                    "type": "string",
                    "description": (
                        'Theme to set: "light", "dark", or "toggle" to switch to opposite'
                    ),
                },
            },
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        requested = arguments.get("theme", "toggle")

        if requested == "toggle":
            target = "dark" if context.theme == "light" else "light"
        elif requested in ("light", "dark"):
            target = requested
        else:
            return self.failure(
                "INVALID_THEME",
                f'Invalid theme value: {requested}. Must be "light", "dark", or "toggle"',
                suggestions=['Use "light", "dark", or "toggle" as the theme value'],
                fallback={"current_theme": context.theme},
            )

        if context.theme == target:
            return self.success(
                {
                    "message": f"Theme is already set to {target}",
                    "current_theme": target,
                    "changed": False,
                }
            )

        action = ThemeAction(
            target=target, data={"previous_theme": context.theme, "new_theme": target}
        )
        return self.success(
            {
                "message": f"Theme switched from {context.theme} to {target}",
                "previous_theme": context.theme,
                "new_theme": target,
                "changed": True,
            },
            [action],
        )


class TriggerDownloadTool(BaseTool):
    """Download the resume PDF (the only downloadable file)."""

    def __init__(
        self, resume_path: str = DEFAULT_RESUME_PATH, *, stats_limit: int = DEFAULT_STATS_LIMIT
    ) -> None:
        super().__init__(stats_limit=stats_limit)
        self._resume_path = resume_path

    @property
    def name(self) -> str:
        return "trigger_download"

    @property
    def description(self) -> str:
        return "Trigger download of files like resume PDF"

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.ui_control

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "file": {"type": "string", "description": "File to download"},
                "format": {
                    "type": "string",
                    "description": "File format (currently only PDF supported)",
                    "default": "pdf",
                },
                "track_download": {
                    "type": "boolean",
                    "description": "Whether to track this download for analytics",
                    "default": True,
                },
            },
            "required": ["file"],
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        file = arguments["file"]
        fmt = arguments.get("format", "pdf")
        track_download = arguments.get("track_download", True)

        if file != "resume":
            return self.failure(
                "UNSUPPORTED_FILE",
                f'Unsupported file type: {file}. Currently only "resume" is supported',
                suggestions=['Use "resume" as the file parameter'],
                fallback={"available_files": ["resume"]},
            )
        if fmt != "pdf":
            return self.failure(
                "UNSUPPORTED_FORMAT",
                f'Unsupported format: {fmt}. Currently only "pdf" is supported',
                suggestions=['Use "pdf" as the format parameter'],
                fallback={"available_formats": ["pdf"]},
            )

        file_name = self._resume_path.rsplit("/", 1)[-1]
        action = DownloadAction(
            target=self._resume_path,
            data={
                "file_name": file_name,
                "file_type": file,
                "format": fmt,
                "track_download": track_download,
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )
        return self.success(
            {
                "message": f"Initiating download of {file_name}",
                "file": file,
                "format": fmt,
                "file_name": file_name,
                "file_path": self._resume_path,
                "track_download": track_download,
            },
            [action],
        )


class ManageUIStateTool(BaseTool):
    """Focus, scroll to, highlight, show or hide an element.

    Every UI action is delivered as a scroll action whose data carries the
    requested ui_action, since the action set the UI understands is closed.
    """

    @property
    def name(self) -> str:
        return "manage_ui_state"

    @property
    def description(self) -> str:
        return (
            "Manage UI state and interface interactions like focus, scroll position, "
            "and element visibility"
        )

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.ui_control

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "action": {"type": "string", "description": "UI action to perform"},
                "target": {
                    "type": "string",
                    "description": "Target element selector or identifier",
                },
                "options": {
                    "type": "object",
                    "properties": {
                        "smooth": {
                            "type": "boolean",
                            "description": "Use smooth scrolling/transitions",
                            "default": True,
                        },
                        "duration": {
                            "type": "number",
                            "description": "Animation duration in milliseconds",
                            "default": 300,
                        },
                        "offset": {
                            "type": "number",
                            "description": "Scroll offset in pixels",
                            "default": 0,
                        },
                    },
                    "additionalProperties": False,
                },
            },
            "required": ["action", "target"],
            "additionalProperties": False,
        }

    async def _execute(self, arguments: dict, context: ToolContext) -> ToolResult:
        ui_action = arguments.get("action")
        target = arguments.get("target")
        options = arguments.get("options") or {}
        smooth = options.get("smooth", True)
        duration = options.get("duration", 300)
        offset = options.get("offset", 0)

        if ui_action not in UI_ACTIONS:
            return self.failure(
                "INVALID_ACTION",
                f"Invalid UI action: {ui_action}. Must be one of: {', '.join(UI_ACTIONS)}",
                suggestions=[f"Use one of: {', '.join(UI_ACTIONS)}"],
                fallback={"available_actions": list(UI_ACTIONS)},
            )
        if not isinstance(target, str) or not target.strip():
            return self.failure(
                "INVALID_TARGET",
                "Target must be a non-empty string",
                suggestions=["Provide a valid element selector or identifier"],
            )

        action = ScrollAction(
            target=target,
            data={
                "ui_action": ui_action,
                "smooth": smooth,
                "duration": duration,
                "offset": offset,
                "timestamp": datetime.now(UTC).isoformat(),
                "context": {"current_page": context.current_page, "theme": context.theme},
            },
        )
        return self.success(
            {
                "message": f'UI action "{ui_action}" applied to target "{target}"',
                "action": ui_action,
                "target": target,
                "options": {"smooth": smooth, "duration": duration, "offset": offset},
            },
            [action],
        )
