from __future__ import annotations

import re
from typing import Self

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env once at module import; every BaseSettings subclass sees the env vars
load_dotenv()

DEFAULT_BLOCKED_PATTERNS: list[str] = [
    r"<\s*/?\s*script",
    r"javascript:",
    r"data:",
    r"vbscript:",
    r"\bon[a-z]+\s*=",
]

_LOG_LEVELS = ("debug", "info", "warning", "error")


class RateLimitSettings(BaseSettings):
    """Per-key fixed-window rate limiting. Env vars prefixed with RATE_LIMIT_."""

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_")

    enabled: bool = True
    max_requests: int = Field(100, gt=0)
    window_s: float = Field(60.0, gt=0)


class SecuritySettings(BaseSettings):
    """Argument screening before execution. Env vars prefixed with SECURITY_."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    enabled: bool = True
    max_argument_size: int = Field(10_000, gt=0)  # bytes of serialized arguments
    blocked_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BLOCKED_PATTERNS)
    )
    require_auth: bool = False  # only enforces a well-formed session id

    @field_validator("blocked_patterns")
    @classmethod
    def _validate_patterns(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid blocked pattern {pattern!r}: {e}") from e
        return v


class ValidationSettings(BaseSettings):
    """Argument contract validation. Env vars prefixed with VALIDATION_."""

    model_config = SettingsConfigDict(env_prefix="VALIDATION_")

    strict_mode: bool = True  # also check the tool schema itself
    allow_additional_properties: bool = False


class ToolLoggingSettings(BaseSettings):
    """Middleware execution logging. Env vars prefixed with TOOL_LOG_."""

    model_config = SettingsConfigDict(env_prefix="TOOL_LOG_")

    enabled: bool = True
    log_level: str = "info"
    log_successful_executions: bool = True
    log_failed_executions: bool = True

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        v = v.strip().lower()
        if v == "warn":
            v = "warning"
        if v not in _LOG_LEVELS:
            raise ValueError(f"TOOL_LOG_LOG_LEVEL must be one of {_LOG_LEVELS} (got '{v}')")
        return v


class ExecutionSettings(BaseSettings):
    """Tool execution envelope and history limits. Env vars prefixed with EXECUTION_."""

    model_config = SettingsConfigDict(env_prefix="EXECUTION_")

    default_timeout_s: float = Field(10.0, gt=0)
    retry_delay_s: float = Field(1.0, ge=0)
    stats_limit: int = Field(100, gt=0)  # per-tool stats ring buffer
    history_limit: int = Field(1000, gt=0)  # registry ToolCall ring buffer
    usage_history_limit: int = Field(20, gt=0)  # recent tool names for recommendations


class DetectionSettings(BaseSettings):
    """Page-context detection. Env vars prefixed with DETECTION_."""

    model_config = SettingsConfigDict(env_prefix="DETECTION_")

    context_history_limit: int = Field(50, gt=0)


class MiddlewareSettings(BaseSettings):
    """Composite of the gate settings consumed by ToolExecutionMiddleware."""

    model_config = SettingsConfigDict(extra="ignore")

    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    logging: ToolLoggingSettings = Field(default_factory=ToolLoggingSettings)


class Settings(BaseSettings):
    """Root settings composing all sub-configurations."""

    model_config = SettingsConfigDict(extra="ignore")

    middleware: MiddlewareSettings = Field(default_factory=MiddlewareSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    log_json: bool = True
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _validate(self) -> Self:
        if self.log_level.strip().lower() not in {*_LOG_LEVELS, "warn", "critical"}:
            raise ValueError(f"log_level must be a standard level name, got {self.log_level}")
        return self


def get_settings() -> Settings:
    """Load and validate settings. Raises ValidationError on invalid values."""
    return Settings()
