"""Heuristic page-context detection from URL, chat text, navigation history
and referrer, plus a bounded per-detector log of context changes.

Confidence scale: 0.95 for a parsed URL, at most 0.9 for chat text
(1.0 with a section hit), 0.1 for the default fallback.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar
from urllib.parse import urlsplit

import structlog

from portfolio_navigator.config.settings import DetectionSettings
from portfolio_navigator.constants import DEFAULT_PAGE
from portfolio_navigator.tools.context import ToolContext
from portfolio_navigator.tools.context_utils import (
    for_server,
    is_valid_page,
    new_session_id,
    path_to_page_section,
    sanitize_context,
    sanitize_page,
    sanitize_section,
)

logger = structlog.get_logger()

DEFAULT_CONTEXT_HISTORY_LIMIT = 50

URL_CONFIDENCE = 0.95
FALLBACK_CONFIDENCE = 0.1
CHAT_BASE_CONFIDENCE = 0.3
CHAT_MAX_CONFIDENCE = 0.9
SECTION_BOOST = 0.1
NAVIGATION_BOOST = 0.05
REFERRER_PENALTY = 0.1
CORROBORATION_BOOST = 0.05


class DetectionSource(StrEnum):
    url = "url"
    referrer = "referrer"
    chat = "chat"
    navigation = "navigation"
    default = "default"


PAGE_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    "home": [
        re.compile(r"\b(home|main|landing|index)\b"),
        re.compile(r"\b(welcome|intro|start)\b"),
        re.compile(r"\b(overview|summary)\b"),
    ],
    "about": [
        re.compile(r"\b(about|bio|background|experience)\b"),
        re.compile(r"\b(career|work|job|employment)\b"),
        re.compile(r"\b(education|qualification|degree)\b"),
        re.compile(r"\b(personal|profile|resume)\b"),
    ],
    "projects": [
        re.compile(r"\b(project|portfolio|work|build)\b"),
        re.compile(r"\b(code|development|app|website)\b"),
        re.compile(r"\b(github|repository|demo)\b"),
        re.compile(r"\b(showcase|gallery)\b"),
    ],
    "resume": [
        re.compile(r"\b(resume|cv|curriculum)\b"),
        re.compile(r"\b(download|pdf|document)\b"),
        re.compile(r"\b(qualification|certification)\b"),
    ],
    "contact": [
        re.compile(r"\b(contact|email|message|reach)\b"),
        re.compile(r"\b(connect|communication|touch)\b"),
        re.compile(r"\b(linkedin|social|network)\b"),
    ],
}

# first hit wins, so order matters
SECTION_PATTERNS: dict[str, re.Pattern[str]] = {
    "skills": re.compile(r"\b(skill|technology|tech|programming|language)\b"),
    "experience": re.compile(r"\b(experience|work|job|career|employment)\b"),
    "education": re.compile(r"\b(education|degree|university|college|school)\b"),
    "achievements": re.compile(r"\b(achievement|award|recognition|accomplishment)\b"),
    "projects": re.compile(r"\b(project|portfolio|work|build|development)\b"),
}


@dataclass(frozen=True)
class PageContextDetection:
    page: str
    confidence: float
    source: DetectionSource
    section: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ContextTrackingEntry:
    timestamp: datetime
    context: ToolContext
    source: str
    previous_context: ToolContext | None = None


@dataclass(frozen=True)
class DetectionValidation:
    valid: bool
    sanitized: PageContextDetection
    errors: list[str] = field(default_factory=list)


def _fallback(**metadata: Any) -> PageContextDetection:
    return PageContextDetection(
        page=DEFAULT_PAGE,
        confidence=FALLBACK_CONFIDENCE,
        source=DetectionSource.default,
        metadata=metadata,
    )


def chat_confidence(message: str, pattern: re.Pattern[str]) -> float:
    """Score one pattern against an already-lowercased message."""
    match = pattern.search(message)
    if match is None:
        return 0.0

    confidence = CHAT_BASE_CONFIDENCE
    if len(match.group(0)) > 3:
        confidence += 0.1
    if match.start() == 0:
        confidence += 0.1

    occurrences = sum(1 for _ in pattern.finditer(message))
    if occurrences > 1:
        confidence += min(occurrences * 0.05, 0.2)

    if len(message) < 50:
        confidence += 0.1

    return min(round(confidence, 4), CHAT_MAX_CONFIDENCE)


class PageContextDetector:
    """Classifies navigational context from noisy signals and keeps a
    bounded log of tracked contexts (oldest evicted first)."""

    def __init__(self, *, history_limit: int = DEFAULT_CONTEXT_HISTORY_LIMIT) -> None:
        self._history: deque[ContextTrackingEntry] = deque(maxlen=history_limit)

    # -- single-source detectors ---------------------------------------------

    def detect_from_url(self, url: str) -> PageContextDetection:
        if not isinstance(url, str) or not url.strip():
            return _fallback(error="Empty or invalid URL")
        if not (url.startswith("http") or url.startswith("/")):
            return _fallback(error="Invalid URL format")

        try:
            parts = urlsplit(url)
        except ValueError as e:
            return _fallback(error=str(e) or "Invalid URL format")

        page, section = path_to_page_section(parts.path or "/")
        if section is None and parts.fragment:
            section = parts.fragment

        return PageContextDetection(
            page=page,
            section=section,
            confidence=URL_CONFIDENCE,
            source=DetectionSource.url,
            metadata={
                "original_url": url,
                "pathname": parts.path or "/",
                "hash": f"#{parts.fragment}" if parts.fragment else "",
                "search": f"?{parts.query}" if parts.query else "",
            },
        )

    def detect_from_chat_message(self, message: str) -> PageContextDetection:
        lowered = message.lower()
        best = PageContextDetection(
            page=DEFAULT_PAGE, confidence=FALLBACK_CONFIDENCE, source=DetectionSource.chat
        )

        for page, patterns in PAGE_PATTERNS.items():
            for pattern in patterns:
                confidence = chat_confidence(lowered, pattern)
                # strict: ties keep the earlier page
                if confidence > best.confidence:
                    best = PageContextDetection(
                        page=page,
                        confidence=confidence,
                        source=DetectionSource.chat,
                        metadata={
                            "matched_pattern": pattern.pattern,
                            "original_message": message,
                        },
                    )

        for section, pattern in SECTION_PATTERNS.items():
            if pattern.search(lowered):
                return replace(
                    best,
                    section=section,
                    confidence=min(round(best.confidence + SECTION_BOOST, 4), 1.0),
                )
        return best

    def detect_from_navigation(self, navigation_history: list[str]) -> PageContextDetection:
        if not navigation_history:
            return _fallback()

        detection = self.detect_from_url(navigation_history[-1])
        return replace(
            detection,
            source=DetectionSource.navigation,
            confidence=min(round(detection.confidence + NAVIGATION_BOOST, 4), 1.0),
            metadata={**detection.metadata, "navigation_history": list(navigation_history[-3:])},
        )

    def detect_from_referrer(self, referrer: str) -> PageContextDetection:
        if not referrer:
            return _fallback()

        detection = self.detect_from_url(referrer)
        return replace(
            detection,
            source=DetectionSource.referrer,
            confidence=max(round(detection.confidence - REFERRER_PENALTY, 4), FALLBACK_CONFIDENCE),
            metadata={**detection.metadata, "referrer": referrer},
        )

    def detect_from_multiple_sources(
        self,
        *,
        url: str | None = None,
        chat_message: str | None = None,
        navigation_history: list[str] | None = None,
        referrer: str | None = None,
    ) -> PageContextDetection:
        """Highest-confidence single-source result, boosted per extra source."""
        detections: list[PageContextDetection] = []
        if url:
            detections.append(self.detect_from_url(url))
        if chat_message:
            detections.append(self.detect_from_chat_message(chat_message))
        if navigation_history is not None:
            detections.append(self.detect_from_navigation(navigation_history))
        if referrer:
            detections.append(self.detect_from_referrer(referrer))

        if not detections:
            return _fallback()

        best = detections[0]
        for detection in detections[1:]:
            if detection.confidence > best.confidence:
                best = detection

        merged: dict[str, Any] = {}
        for detection in detections:
            merged.update(detection.metadata)

        return replace(
            best,
            confidence=min(
                round(best.confidence + (len(detections) - 1) * CORROBORATION_BOOST, 4), 1.0
            ),
            metadata={
                **merged,
                "sources_used": [str(d.source) for d in detections],
                "total_sources": len(detections),
            },
        )

    # -- tracking ------------------------------------------------------------

    def track_context(self, context: ToolContext, source: str) -> None:
        previous = self._history[-1].context if self._history else None
        self._history.append(
            ContextTrackingEntry(
                timestamp=datetime.now(UTC),
                context=context,
                source=source,
                previous_context=previous,
            )
        )
        logger.debug(
            "context_tracked",
            source=source,
            current_page=context.current_page,
            current_section=context.current_section,
        )

    def get_context_history(self, limit: int | None = None) -> list[ContextTrackingEntry]:
        history = list(self._history)
        return history[-limit:] if limit else history

    def get_current_context(self) -> ToolContext | None:
        return self._history[-1].context if self._history else None

    def get_context_changes(self, since: datetime) -> list[ContextTrackingEntry]:
        return [entry for entry in self._history if entry.timestamp >= since]

    def clear_history(self) -> None:
        self._history.clear()

    def validate_detected_context(self, detection: PageContextDetection) -> DetectionValidation:
        """Re-check a detection; the sanitized copy has a valid page and a
        confidence clamped to [0, 1]."""
        errors: list[str] = []
        if not is_valid_page(detection.page):
            errors.append(f"Invalid page: {detection.page}")
        if detection.section is not None and not isinstance(detection.section, str):
            errors.append(f"Invalid section type: {type(detection.section).__name__}")
        if not 0 <= detection.confidence <= 1:
            errors.append(f"Invalid confidence: {detection.confidence}")

        sanitized = replace(
            detection,
            page=sanitize_page(detection.page),
            section=sanitize_section(detection.section),
            confidence=max(0.0, min(1.0, detection.confidence)),
        )
        return DetectionValidation(valid=not errors, sanitized=sanitized, errors=errors)


class ContextTracker:
    """Process-wide default detector, built lazily."""

    _instance: ClassVar[PageContextDetector | None] = None

    @classmethod
    def get_instance(cls) -> PageContextDetector:
        if cls._instance is None:
            cls._instance = PageContextDetector(
                history_limit=DetectionSettings().context_history_limit
            )
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    @classmethod
    def detect_current_context(
        cls,
        *,
        url: str | None = None,
        referrer: str | None = None,
        **overrides: Any,
    ) -> ToolContext:
        """Context from request signals when given, else a server-side default.

        overrides are ToolContext field names and win over detected values.
        """
        detector = cls.get_instance()

        if url or referrer:
            detection = detector.detect_from_multiple_sources(url=url, referrer=referrer)
            base: dict[str, Any] = {
                "current_page": detection.page,
                "current_section": detection.section,
                "session_id": new_session_id(),
            }
            context = sanitize_context(**{**base, **overrides})
            detector.track_context(context, "request-detection")
            return context

        context = for_server(DEFAULT_PAGE, **overrides)
        detector.track_context(context, "server-fallback")
        return context
