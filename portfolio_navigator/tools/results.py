"""Result, action and history types exchanged across the tool boundary.

ToolResult is what every execution path returns; ToolAction variants are
what the UI collaborator interprets (navigate, download, theme, modal,
scroll). Actions are validated when constructed, so a malformed action
never leaves a tool.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _BaseAction(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    target: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class NavigateAction(_BaseAction):
    """Route change; target is a site path such as '/about'."""

    type: Literal["navigate"] = "navigate"


class DownloadAction(_BaseAction):
    """File download; target is the public file path."""

    type: Literal["download"] = "download"


class ThemeAction(_BaseAction):
    """Theme switch; target is the theme to apply."""

    type: Literal["theme"] = "theme"
    target: Literal["light", "dark"]


class ModalAction(_BaseAction):
    """Open a modal dialog; target is the modal kind."""

    type: Literal["modal"] = "modal"


class ScrollAction(_BaseAction):
    """Scroll to (and optionally act on) an in-page element."""

    type: Literal["scroll"] = "scroll"


ToolAction = Annotated[
    NavigateAction | DownloadAction | ThemeAction | ModalAction | ScrollAction,
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[ToolAction] = TypeAdapter(ToolAction)


def parse_action(raw: dict[str, Any]) -> ToolAction:
    """Build the matching action variant from a plain dict.

    Raises pydantic.ValidationError for unknown types or invalid targets.
    """
    return _action_adapter.validate_python(raw)


@dataclass(frozen=True)
class ToolErrorInfo:
    code: str
    message: str
    suggestions: list[str] = field(default_factory=list)
    fallback: Any = None


@dataclass(frozen=True)
class ToolResult:
    """Tagged outcome of a tool execution.

    Exactly one side is populated: success carries data/actions, failure
    carries error. Enforced at construction.
    """

    success: bool
    data: Any = None
    actions: list[ToolAction] = field(default_factory=list)
    error: ToolErrorInfo | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("Successful ToolResult must not carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("Failed ToolResult requires an error")
            if self.data is not None or self.actions:
                raise ValueError("Failed ToolResult must not carry data or actions")

    @classmethod
    def ok(
        cls,
        data: Any = None,
        actions: list[ToolAction] | None = None,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> ToolResult:
        return cls(success=True, data=data, actions=list(actions or []), metadata=metadata or {})

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        suggestions: list[str] | None = None,
        fallback: Any = None,
    ) -> ToolResult:
        return cls(
            success=False,
            error=ToolErrorInfo(
                code=code,
                message=message,
                suggestions=list(suggestions or []),
                fallback=fallback,
            ),
        )

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error else None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form handed back to the orchestrator."""
        out: dict[str, Any] = {"success": self.success}
        if self.success:
            out["data"] = self.data
            out["actions"] = [a.model_dump() for a in self.actions]
        else:
            assert self.error is not None
            out["error"] = {
                "code": self.error.code,
                "message": self.error.message,
                "suggestions": list(self.error.suggestions),
                "fallback": self.error.fallback,
            }
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out


@dataclass(frozen=True)
class ToolCall:
    """Execution history entry recorded by ToolRegistry."""

    id: str
    name: str
    arguments: dict[str, Any]
    result: ToolResult
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class ToolExecutionStats:
    """Per-attempt statistics recorded by BaseTool."""

    tool_name: str
    execution_time_ms: float
    success: bool
    timestamp: datetime
    error_code: str | None = None
