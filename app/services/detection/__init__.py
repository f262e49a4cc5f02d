"""Heuristic element detection strategies."""

from app.services.detection.element_detector import detect_elements, detect_props, is_noise
from app.services.detection.fdx_element_detector import (
    detect_fdx_elements,
    detect_fdx_props_from_actions,
)
from app.services.detection.script_loader import LoadedScript, parse_and_detect

__all__ = [
    "detect_elements",
    "detect_props",
    "is_noise",
    "detect_fdx_elements",
    "detect_fdx_props_from_actions",
    "LoadedScript",
    "parse_and_detect",
]
