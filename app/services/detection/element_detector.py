"""Heuristic element detection over plain page text.

Each line of each page is classified, in priority order, as a slugline
(location + new scene), a character cue, or a line that may carry embedded
ALL-CAPS props. Only the first occurrence of a name is kept.
"""

import re
from typing import Dict, Iterable, List, Optional

from app.constants.departments import ELEMENT_TYPE_DEPARTMENT_MAP
from app.models.enums import ElementType
from app.models.screenplay import DetectedElement, DetectionResult, PageText, SceneInfo

# Phrases that appear in ALL-CAPS in scripts but are not elements
NOISE_PHRASES = frozenset({
    "CONTINUED",
    "CONT'D",
    "FADE IN",
    "FADE OUT",
    "FADE TO BLACK",
    "CUT TO",
    "CUT TO BLACK",
    "DISSOLVE TO",
    "SMASH CUT TO",
    "MATCH CUT TO",
    "JUMP CUT TO",
    "TIME CUT",
    "INTERCUT",
    "FLASHBACK",
    "END FLASHBACK",
    "MONTAGE",
    "END MONTAGE",
    "SERIES OF SHOTS",
    "BACK TO SCENE",
    "LATER",
    "MOMENTS LATER",
    "CONTINUOUS",
    "SUPER",
    "TITLE CARD",
    "THE END",
    "MORE",
    "ANGLE ON",
    "CLOSE ON",
    "CLOSE UP",
    "WIDE SHOT",
    "INSERT",
    "PAN",
    "POV",
    "PRELAP",
    "BEAT",
    "PAUSE",
    "SILENCE",
    "END CREDITS",
    "OPENING CREDITS",
    "V.O.",
    "O.S.",
    "O.C.",
})

SLUGLINE_PATTERN = re.compile(r"^(INT\.|EXT\.|INT\./EXT\.|I/E\.)\s+", re.IGNORECASE)
ALL_CAPS_PATTERN = re.compile(r"^[A-Z][A-Z\s.'\-,]+$")
PARENTHETICAL_PATTERN = re.compile(r"\s*\(.*?\)\s*$")
CONTD_PATTERN = re.compile(r"\s*\(?\s*CONT['’]D\s*\)?\s*$", re.IGNORECASE)
EMBEDDED_CAPS_PATTERN = re.compile(r"\b[A-Z]{3,}(?:\s+[A-Z]{2,})*\b")

MIN_SINGLE_WORD_PROP_LENGTH = 3


def is_slugline(text: str) -> bool:
    return bool(SLUGLINE_PATTERN.match(text.strip()))


def is_noise(candidate: str) -> bool:
    """Whether an ALL-CAPS candidate is script jargon rather than an element.

    A candidate is noise when it equals a noise phrase, or starts with one
    immediately followed by a space or colon ("FADE IN:" is noise, "FADED"
    and "PANEL" are not).
    """
    raw = candidate.strip()
    if raw in NOISE_PHRASES or raw.rstrip(":.").strip() in NOISE_PHRASES:
        return True
    for phrase in NOISE_PHRASES:
        if raw.startswith(phrase) and len(raw) > len(phrase) and raw[len(phrase)] in (" ", ":"):
            return True
    return False


def strip_character_extensions(line: str) -> str:
    """Remove (V.O.), (O.S.), (CONT'D) style suffixes from a character cue."""
    cleaned = PARENTHETICAL_PATTERN.sub("", line).strip()
    return CONTD_PATTERN.sub("", cleaned).strip()


def suggest_department(element_type: ElementType) -> Optional[str]:
    return ELEMENT_TYPE_DEPARTMENT_MAP.get(element_type)


def add_element(
    element_map: Dict[str, DetectedElement],
    name: str,
    element_type: ElementType,
    page: int,
    line_text: str,
    department: Optional[str] = None,
) -> bool:
    """Record an element unless its name was already seen.

    Returns:
        True if the element was added, False if it was a repeat
    """
    if name in element_map:
        return False
    element_map[name] = DetectedElement(
        name=name,
        type=element_type,
        highlight_page=page,
        highlight_text=line_text,
        suggested_department=department if department is not None else suggest_department(element_type),
    )
    return True


def detect_props(element_map: Dict[str, DetectedElement], line: str, page: int) -> None:
    """Scan a mixed-case line for embedded ALL-CAPS runs and record them as props.

    Hyphenated compounds are split by the word boundary (``SEMI-AUTOMATIC``
    yields ``SEMI``); that is a known limitation of the heuristic.
    """
    text = line.strip()
    for match in EMBEDDED_CAPS_PATTERN.finditer(text):
        candidate = re.sub(r"\s+", " ", match.group(0)).strip()
        if " " not in candidate and len(candidate) < MIN_SINGLE_WORD_PROP_LENGTH:
            continue
        if is_noise(candidate) or is_slugline(candidate):
            continue
        add_element(element_map, candidate, ElementType.OTHER, page, text)


def sort_elements(elements: Iterable[DetectedElement]) -> List[DetectedElement]:
    """Order by highlight page, then by name within a page."""
    return sorted(elements, key=lambda e: (e.highlight_page, e.name))


def detect_elements(pages: Iterable[PageText]) -> DetectionResult:
    """Detect characters, locations and props in page text.

    Args:
        pages: Ordered page texts of one script

    Returns:
        DetectionResult with unique elements and the scene table
    """
    element_map: Dict[str, DetectedElement] = {}
    scenes: List[SceneInfo] = []
    current_scene: Optional[SceneInfo] = None

    for page in pages:
        for raw_line in page.text.split("\n"):
            line = raw_line.strip()
            if len(line) < 2:
                continue

            if is_slugline(line):
                location = re.sub(r":\s*$", "", line).strip()
                add_element(element_map, location, ElementType.LOCATION, page.page_number, line)
                current_scene = SceneInfo(scene_number=len(scenes) + 1, location=location)
                scenes.append(current_scene)
                continue

            cleaned = strip_character_extensions(line)
            if len(cleaned) >= 2 and ALL_CAPS_PATTERN.match(cleaned):
                name = re.sub(r"[:\s]+$", "", cleaned).strip()
                if not name or is_noise(name):
                    continue
                add_element(element_map, name, ElementType.CHARACTER, page.page_number, line)
                if current_scene is not None:
                    current_scene.add_character(name)
                continue

            if ALL_CAPS_PATTERN.match(line):
                continue

            detect_props(element_map, line, page.page_number)

    return DetectionResult(elements=sort_elements(element_map.values()), scenes=scenes)
