"""Repository layer modules."""

from app.repositories.base_repository import BaseRepository
from app.repositories.department_repository import DepartmentRepository
from app.repositories.element_repository import ElementRepository
from app.repositories.revision_match_repository import RevisionMatchRepository
from app.repositories.script_repository import ScriptRepository

__all__ = [
    "BaseRepository",
    "DepartmentRepository",
    "ElementRepository",
    "RevisionMatchRepository",
    "ScriptRepository",
]
