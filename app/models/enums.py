"""Enumerations shared by detection, matching and persistence."""

from enum import Enum


class ElementType(str, Enum):
    CHARACTER = "CHARACTER"
    LOCATION = "LOCATION"
    OTHER = "OTHER"


class ElementStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class ElementSource(str, Enum):
    AUTO = "AUTO"
    MANUAL = "MANUAL"


class MatchStatus(str, Enum):
    """Correspondence between a detected element and the existing set."""
    EXACT = "EXACT"
    FUZZY = "FUZZY"
    NEW = "NEW"
    MISSING = "MISSING"


class RevisionDecision(str, Enum):
    """Human decision applied to an escalated revision match."""
    MAP = "MAP"
    CREATE_NEW = "CREATE_NEW"
    KEEP = "KEEP"
    ARCHIVE = "ARCHIVE"


class ScriptStatus(str, Enum):
    """Lifecycle of a script record.

    PROCESSING -> REVIEWING | RECONCILING | READY | ERROR
    RECONCILING -> READY | ERROR
    ERROR is terminal.
    """
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    REVIEWING = "REVIEWING"
    RECONCILING = "RECONCILING"
    READY = "READY"
    ERROR = "ERROR"


class ScriptFormat(str, Enum):
    PDF = "PDF"
    FDX = "FDX"
