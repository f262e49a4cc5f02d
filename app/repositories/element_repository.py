"""Repository for Element records."""

from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Element
from app.models.enums import ElementSource, ElementStatus, ElementType
from app.models.matching import ExistingElement
from app.repositories.base_repository import BaseRepository


class ElementRepository(BaseRepository[Element]):
    """Repository for managing Element records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Element)

    async def get_for_matching(self, script_id: UUID) -> List[Element]:
        """Get the non-archived, non-deleted elements of a script.

        Rows come back ordered by ``(created_at, id)`` so the matcher sees a
        stable pool order across runs.
        """
        query = (
            select(Element)
            .where(
                Element.script_id == script_id,
                Element.status != ElementStatus.ARCHIVED.value,
                Element.deleted_at.is_(None),
            )
            .order_by(Element.created_at, Element.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_active_names(self, script_id: UUID) -> Set[str]:
        """Names of ACTIVE, non-deleted elements on a script."""
        query = select(Element.name).where(
            Element.script_id == script_id,
            Element.status == ElementStatus.ACTIVE.value,
            Element.deleted_at.is_(None),
        )
        result = await self.session.execute(query)
        return set(result.scalars().all())

    async def create_element(
        self,
        script_id: UUID,
        name: str,
        type: ElementType | str,
        highlight_page: Optional[int] = None,
        highlight_text: Optional[str] = None,
        department_id: Optional[UUID] = None,
    ) -> Element:
        """Create an AUTO/ACTIVE element on a script."""
        return await self.create(
            script_id=script_id,
            name=name,
            type=getattr(type, "value", type),
            highlight_page=highlight_page,
            highlight_text=highlight_text,
            department_id=department_id,
            status=ElementStatus.ACTIVE.value,
            source=ElementSource.AUTO.value,
        )

    @staticmethod
    def to_existing(element: Element) -> ExistingElement:
        """Convert a row into the read-only matcher input."""
        return ExistingElement(
            id=element.id,
            name=element.name,
            type=element.type,
            status=ElementStatus(element.status),
            source=ElementSource(element.source),
            highlight_page=element.highlight_page,
            highlight_text=element.highlight_text,
        )
