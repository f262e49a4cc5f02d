"""Repository for RevisionMatch records."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import RevisionMatch
from app.repositories.base_repository import BaseRepository


class RevisionMatchRepository(BaseRepository[RevisionMatch]):
    """Repository for managing RevisionMatch records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, RevisionMatch)

    async def get_by_script(self, script_id: UUID) -> List[RevisionMatch]:
        """Get all matches of a script in creation order."""
        return await self.get_all(
            filters={"new_script_id": script_id},
            order_by=[RevisionMatch.created_at, RevisionMatch.id],
        )

    async def get_unresolved_by_ids(self, script_id: UUID, ids: List[UUID]) -> List[RevisionMatch]:
        """Get the unresolved matches of a script among ``ids``."""
        if not ids:
            return []
        query = select(RevisionMatch).where(
            RevisionMatch.new_script_id == script_id,
            RevisionMatch.id.in_(ids),
            RevisionMatch.resolved.is_(False),
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
