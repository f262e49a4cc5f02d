"""Similarity-based correspondence between existing and detected elements.

Pure and deterministic: every call owns its lookup map and consumed set.
"""

import re
from typing import Dict, List, Optional, Sequence, Set
from uuid import UUID

from rapidfuzz.distance import Levenshtein

from app.models.enums import ElementStatus, MatchStatus
from app.models.matching import ExistingElement, MatchReport, MatchResult, MissingElement
from app.models.screenplay import DetectedElement

FUZZY_THRESHOLD = 0.7

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Trim, upper-case and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", name.strip().upper())


def similarity(a: str, b: str) -> float:
    """Normalized edit-distance similarity in [0, 1]; two empty strings score 1."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / max_len


def match_elements(
    existing: Sequence[ExistingElement],
    detected: Sequence[DetectedElement],
    threshold: float = FUZZY_THRESHOLD,
) -> MatchReport:
    """Match freshly detected elements against a script's existing elements.

    Archived elements never participate. Each pooled element is consumed by at
    most one detected element; fuzzy ties go to the first element in pool
    order, so callers should supply ``existing`` in a stable order.

    Args:
        existing: Elements of the parent script
        detected: Elements detected in the revision, in detection order
        threshold: Minimum similarity for a FUZZY match

    Returns:
        MatchReport with one MatchResult per detected element and the
        unconsumed pool as missing
    """
    pool = [e for e in existing if e.status != ElementStatus.ARCHIVED]
    normalized_pool = [(e, normalize_name(e.name)) for e in pool]

    # Several pooled elements may share a normalized name; only the first is an exact target
    exact_lookup: Dict[str, ExistingElement] = {}
    for element, key in normalized_pool:
        exact_lookup.setdefault(key, element)

    consumed: Set[UUID] = set()
    matches: List[MatchResult] = []

    for det in detected:
        det_key = normalize_name(det.name)
        det_type = getattr(det.type, "value", det.type)

        exact = exact_lookup.get(det_key)
        if exact is not None and exact.id not in consumed:
            consumed.add(exact.id)
            matches.append(
                MatchResult(
                    detected_name=det.name,
                    detected_type=det_type,
                    detected_page=det.highlight_page,
                    detected_highlight_text=det.highlight_text,
                    status=MatchStatus.EXACT,
                    old_element_id=exact.id,
                    similarity=1.0,
                )
            )
            continue

        best_match: Optional[ExistingElement] = None
        best_score = 0.0
        for element, key in normalized_pool:
            if element.id in consumed:
                continue
            score = similarity(det_key, key)
            if score >= threshold and score > best_score:
                best_score = score
                best_match = element

        if best_match is not None:
            consumed.add(best_match.id)
            matches.append(
                MatchResult(
                    detected_name=det.name,
                    detected_type=det_type,
                    detected_page=det.highlight_page,
                    detected_highlight_text=det.highlight_text,
                    status=MatchStatus.FUZZY,
                    old_element_id=best_match.id,
                    similarity=best_score,
                )
            )
        else:
            matches.append(
                MatchResult(
                    detected_name=det.name,
                    detected_type=det_type,
                    detected_page=det.highlight_page,
                    detected_highlight_text=det.highlight_text,
                    status=MatchStatus.NEW,
                )
            )

    missing = [
        MissingElement(id=e.id, name=e.name, type=e.type)
        for e in pool
        if e.id not in consumed
    ]

    return MatchReport(matches=matches, missing=missing)
