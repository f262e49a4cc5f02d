"""Data models produced by screenplay parsing and element detection."""

from dataclasses import dataclass, field
from typing import List, Optional

from app.models.enums import ElementType


@dataclass(frozen=True)
class PageText:
    """Plain text of a single page.

    Attributes:
        page_number: Page number (1-indexed)
        text: Extracted text content of the page
    """

    page_number: int
    text: str


@dataclass
class SceneInfo:
    """A scene opened by a slugline / scene heading.

    ``characters`` behaves as an ordered set: names are appended the first
    time they are cued inside the scene.
    """

    scene_number: int
    location: str
    characters: List[str] = field(default_factory=list)

    def add_character(self, name: str) -> None:
        if name not in self.characters:
            self.characters.append(name)

    def to_dict(self) -> dict:
        return {
            "scene_number": self.scene_number,
            "location": self.location,
            "characters": list(self.characters),
        }


@dataclass(frozen=True)
class DetectedElement:
    """An element found in a script; only the first occurrence is kept."""

    name: str
    type: ElementType
    highlight_page: int
    highlight_text: str
    suggested_department: Optional[str] = None


@dataclass
class DetectionResult:
    """Output contract shared by both detection strategies."""

    elements: List[DetectedElement] = field(default_factory=list)
    scenes: List[SceneInfo] = field(default_factory=list)

    def scene_data(self) -> List[dict]:
        return [scene.to_dict() for scene in self.scenes]


@dataclass(frozen=True)
class StructuredParagraph:
    """A typed FDX paragraph (Scene Heading, Character, Action, ...)."""

    type: str
    text: str
    page: int


@dataclass(frozen=True)
class TaggedElement:
    """An element tagged in the FDX TagData block."""

    category: str
    name: str


@dataclass
class ParsedStructuredDocument:
    """Result of parsing a Final Draft (.fdx) document."""

    paragraphs: List[StructuredParagraph] = field(default_factory=list)
    tagged_elements: List[TaggedElement] = field(default_factory=list)
    page_count: int = 1
