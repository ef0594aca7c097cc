from __future__ import annotations

from typing import TYPE_CHECKING

from portfolio_navigator.tools.base import DEFAULT_STATS_LIMIT
from portfolio_navigator.tools.builtins.data_access import (
    GetExperienceTool,
    GetProjectsTool,
    GetSkillsTool,
)
from portfolio_navigator.tools.builtins.navigation import (
    NavigateToPageTool,
    NavigateToSectionTool,
    OpenModalTool,
)
from portfolio_navigator.tools.builtins.ui_control import (
    DEFAULT_RESUME_PATH,
    ManageUIStateTool,
    ToggleThemeTool,
    TriggerDownloadTool,
)

if TYPE_CHECKING:
    from portfolio_navigator.tools.registry import ToolRegistry


def register_builtins(
    registry: ToolRegistry,
    *,
    resume_path: str = DEFAULT_RESUME_PATH,
    stats_limit: int = DEFAULT_STATS_LIMIT,
) -> None:
    """Register all built-in portfolio tools with the registry.

    Data access first, then navigation, then UI control. Raises
    ToolRegistrationError if any of them is already registered.
    """
    registry.register(GetProjectsTool(stats_limit=stats_limit))
    registry.register(GetExperienceTool(stats_limit=stats_limit))
    registry.register(GetSkillsTool(stats_limit=stats_limit))

    registry.register(NavigateToPageTool(stats_limit=stats_limit))
    registry.register(OpenModalTool(stats_limit=stats_limit))
    registry.register(NavigateToSectionTool(stats_limit=stats_limit))

    registry.register(ToggleThemeTool(stats_limit=stats_limit))
    registry.register(TriggerDownloadTool(resume_path, stats_limit=stats_limit))
    registry.register(ManageUIStateTool(stats_limit=stats_limit))
