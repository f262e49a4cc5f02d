"""Revision element matching."""

from app.services.matching.element_matcher import (
    FUZZY_THRESHOLD,
    match_elements,
    normalize_name,
    similarity,
)

__all__ = ["FUZZY_THRESHOLD", "match_elements", "normalize_name", "similarity"]
