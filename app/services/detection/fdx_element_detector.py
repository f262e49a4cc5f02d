"""Element detection over a parsed Final Draft document."""

from typing import Dict, List, Optional

from app.constants.departments import TAG_CATEGORY_DEPARTMENT_MAP
from app.models.enums import ElementType
from app.models.screenplay import (
    DetectedElement,
    DetectionResult,
    ParsedStructuredDocument,
    SceneInfo,
)
from app.services.detection.element_detector import (
    PARENTHETICAL_PATTERN,
    add_element,
    detect_props,
    sort_elements,
)

SCENE_HEADING = "Scene Heading"
CHARACTER = "Character"
ACTION = "Action"

DEFAULT_TAG_PAGE = 1


def _locate_tag_page(parsed: ParsedStructuredDocument, tag_name: str) -> int:
    """Best-effort page of the first paragraph mentioning ``tag_name``."""
    needle = tag_name.lower()
    for para in parsed.paragraphs:
        if needle in para.text.lower():
            return para.page
    return DEFAULT_TAG_PAGE


def detect_fdx_props_from_actions(parsed: ParsedStructuredDocument) -> List[DetectedElement]:
    """Run the embedded ALL-CAPS prop scanner over Action paragraphs."""
    prop_map: Dict[str, DetectedElement] = {}
    for para in parsed.paragraphs:
        if para.type != ACTION:
            continue
        for line in para.text.split("\n"):
            detect_props(prop_map, line, para.page)
    return list(prop_map.values())


def detect_fdx_elements(
    parsed: ParsedStructuredDocument,
    include_action_props: bool = False,
) -> DetectionResult:
    """Detect elements from FDX paragraphs and TagData.

    Args:
        parsed: Parsed FDX document
        include_action_props: Also scan Action paragraphs for embedded props

    Returns:
        DetectionResult with unique elements and the scene table
    """
    element_map: Dict[str, DetectedElement] = {}
    scenes: List[SceneInfo] = []
    current_scene: Optional[SceneInfo] = None

    for para in parsed.paragraphs:
        if para.type == SCENE_HEADING:
            name = para.text.strip()
            if not name:
                continue
            add_element(element_map, name, ElementType.LOCATION, para.page, para.text)
            current_scene = SceneInfo(scene_number=len(scenes) + 1, location=name)
            scenes.append(current_scene)

        elif para.type == CHARACTER:
            name = PARENTHETICAL_PATTERN.sub("", para.text.strip()).strip()
            if not name:
                continue
            add_element(element_map, name, ElementType.CHARACTER, para.page, para.text)
            if current_scene is not None:
                current_scene.add_character(name)

        # Action, Dialogue, Parenthetical, Transition carry no elements here

    for tag in parsed.tagged_elements:
        name = tag.name.upper()
        if name in element_map:
            continue
        # Unknown categories get no department rather than the OTHER default
        element_map[name] = DetectedElement(
            name=name,
            type=ElementType.OTHER,
            highlight_page=_locate_tag_page(parsed, tag.name),
            highlight_text=name,
            suggested_department=TAG_CATEGORY_DEPARTMENT_MAP.get(tag.category),
        )

    if include_action_props:
        for prop in detect_fdx_props_from_actions(parsed):
            element_map.setdefault(prop.name, prop)

    return DetectionResult(elements=sort_elements(element_map.values()), scenes=scenes)
