"""Database module for SQLAlchemy models and session management."""

from app.core.database import Base, get_session_maker
from app.database.models import Department, Element, RevisionMatch, Script

__all__ = [
    "Base",
    "get_session_maker",
    "Department",
    "Element",
    "RevisionMatch",
    "Script",
]
