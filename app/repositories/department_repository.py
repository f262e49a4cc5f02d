"""Repository for Department records."""

from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Department
from app.repositories.base_repository import BaseRepository


class DepartmentRepository(BaseRepository[Department]):
    """Repository for managing Department records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Department)

    async def get_name_map(self, production_id: Optional[UUID]) -> Dict[str, UUID]:
        """Map department name to id for a production's live departments."""
        if production_id is None:
            return {}
        query = select(Department.name, Department.id).where(
            Department.production_id == production_id,
            Department.deleted_at.is_(None),
        )
        result = await self.session.execute(query)
        return {row.name: row.id for row in result}
