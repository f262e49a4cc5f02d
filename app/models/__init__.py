"""Domain data models for screenplay breakdown."""

from app.models.enums import (
    ElementSource,
    ElementStatus,
    ElementType,
    MatchStatus,
    RevisionDecision,
    ScriptFormat,
    ScriptStatus,
)
from app.models.matching import ExistingElement, MatchReport, MatchResult, MissingElement
from app.models.screenplay import (
    DetectedElement,
    DetectionResult,
    PageText,
    ParsedStructuredDocument,
    SceneInfo,
    StructuredParagraph,
    TaggedElement,
)

__all__ = [
    "ElementSource",
    "ElementStatus",
    "ElementType",
    "MatchStatus",
    "RevisionDecision",
    "ScriptFormat",
    "ScriptStatus",
    "ExistingElement",
    "MatchReport",
    "MatchResult",
    "MissingElement",
    "DetectedElement",
    "DetectionResult",
    "PageText",
    "ParsedStructuredDocument",
    "SceneInfo",
    "StructuredParagraph",
    "TaggedElement",
]
