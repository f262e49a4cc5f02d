"""Repository for Script records."""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Script
from app.models.enums import ScriptStatus
from app.repositories.base_repository import BaseRepository


class ScriptRepository(BaseRepository[Script]):
    """Repository for managing Script records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Script)

    async def update_status(
        self,
        script: Script,
        status: ScriptStatus,
        page_count: Optional[int] = None,
        scene_data: Optional[list] = None,
    ) -> Script:
        """Move a script to ``status``, optionally storing page count and scenes."""
        values: Dict[str, Any] = {"status": status.value}
        if page_count is not None:
            values["page_count"] = page_count
        if scene_data is not None:
            values["scene_data"] = scene_data

        self.logger.info(
            "Updating script status",
            extra={"script_id": str(script.id), "from": script.status, "to": status.value},
        )
        return await self.update_instance(script, **values)
