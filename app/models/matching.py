"""Data models consumed and produced by the element matcher."""

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from app.models.enums import ElementSource, ElementStatus, MatchStatus


@dataclass(frozen=True)
class ExistingElement:
    """A persisted element of the parent script, as seen by the matcher."""

    id: UUID
    name: str
    type: str
    status: ElementStatus = ElementStatus.ACTIVE
    source: ElementSource = ElementSource.AUTO
    highlight_page: Optional[int] = None
    highlight_text: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    """Correspondence decided for one detected element."""

    detected_name: str
    detected_type: str
    detected_page: Optional[int]
    detected_highlight_text: Optional[str]
    status: MatchStatus
    old_element_id: Optional[UUID] = None
    similarity: Optional[float] = None


@dataclass(frozen=True)
class MissingElement:
    """An existing element that no detected element matched."""

    id: UUID
    name: str
    type: str


@dataclass
class MatchReport:
    matches: List[MatchResult] = field(default_factory=list)
    missing: List[MissingElement] = field(default_factory=list)

    def by_status(self, status: MatchStatus) -> List[MatchResult]:
        return [m for m in self.matches if m.status == status]

    @property
    def needs_reconciliation(self) -> bool:
        """True when a human has to decide FUZZY or MISSING outcomes."""
        return bool(self.missing) or any(m.status == MatchStatus.FUZZY for m in self.matches)
