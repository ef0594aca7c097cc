"""Tests for ToolResult invariants and the action union."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from portfolio_navigator.tools.results import (
    DownloadAction,
    ModalAction,
    NavigateAction,
    ScrollAction,
    ThemeAction,
    ToolResult,
    parse_action,
)


class TestToolResult:
    def test_ok(self) -> None:
        result = ToolResult.ok({"a": 1}, [NavigateAction(target="/about")])
        assert result.success
        assert result.error is None
        assert result.error_code is None
        assert len(result.actions) == 1

    def test_fail(self) -> None:
        result = ToolResult.fail("X", "boom", suggestions=["retry"], fallback={"page": "home"})
        assert not result.success
        assert result.error_code == "X"
        assert result.error is not None
        assert result.error.suggestions == ["retry"]
        assert result.data is None
        assert result.actions == []

    def test_success_with_error_rejected(self) -> None:
        failed = ToolResult.fail("X", "boom")
        with pytest.raises(ValueError, match="must not carry an error"):
            ToolResult(success=True, error=failed.error)

    def test_failure_without_error_rejected(self) -> None:
        with pytest.raises(ValueError, match="requires an error"):
            ToolResult(success=False)

    def test_failure_with_data_rejected(self) -> None:
        failed = ToolResult.fail("X", "boom")
        with pytest.raises(ValueError, match="must not carry data"):
            ToolResult(success=False, data={"x": 1}, error=failed.error)

    def test_to_dict_success(self) -> None:
        result = ToolResult.ok({"a": 1}, [ThemeAction(target="dark")], metadata={"m": 1})
        assert result.to_dict() == {
            "success": True,
            "data": {"a": 1},
            "actions": [{"target": "dark", "data": {}, "type": "theme"}],
            "metadata": {"m": 1},
        }

    def test_to_dict_failure(self) -> None:
        out = ToolResult.fail("INVALID_THEME", "bad").to_dict()
        assert out == {
            "success": False,
            "error": {
                "code": "INVALID_THEME",
                "message": "bad",
                "suggestions": [],
                "fallback": None,
            },
        }


class TestActions:
    @pytest.mark.parametrize(
        ("raw", "cls"),
        [
            ({"type": "navigate", "target": "/about"}, NavigateAction),
            ({"type": "download", "target": "/resume.pdf"}, DownloadAction),
            ({"type": "theme", "target": "dark"}, ThemeAction),
            ({"type": "modal", "target": "contact"}, ModalAction),
            ({"type": "scroll", "target": "hero", "data": {"smooth": True}}, ScrollAction),
        ],
    )
    def test_parse_action_picks_variant(self, raw: dict, cls: type) -> None:
        assert isinstance(parse_action(raw), cls)

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_action({"type": "explode", "target": "x"})

    def test_theme_target_is_closed(self) -> None:
        with pytest.raises(ValidationError):
            ThemeAction(target="sepia")

    def test_empty_target_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NavigateAction(target="")

    def test_actions_are_frozen(self) -> None:
        action = NavigateAction(target="/about")
        with pytest.raises(ValidationError):
            action.target = "/projects"  # type: ignore[misc]
