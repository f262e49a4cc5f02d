"""Script lifecycle helpers shared by the processor and the reconciler."""

from typing import Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.enums import ScriptStatus
from app.models.screenplay import DetectedElement
from app.repositories.element_repository import ElementRepository
from app.repositories.script_repository import ScriptRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Only in-flight scripts may fail; ERROR is terminal
ERROR_ELIGIBLE_STATUSES = frozenset({ScriptStatus.PROCESSING.value})


async def create_detected_elements(
    element_repo: ElementRepository,
    script_id: UUID,
    detected: Iterable[DetectedElement],
    departments: Dict[str, UUID],
) -> int:
    """Persist detected elements as AUTO/ACTIVE rows on ``script_id``."""
    created = 0
    for element in detected:
        department_id = (
            departments.get(element.suggested_department) if element.suggested_department else None
        )
        await element_repo.create_element(
            script_id=script_id,
            name=element.name,
            type=element.type,
            highlight_page=element.highlight_page,
            highlight_text=element.highlight_text,
            department_id=department_id,
        )
        created += 1
    return created


async def mark_script_error(
    session_maker: async_sessionmaker[AsyncSession],
    script_id: UUID,
) -> Optional[ScriptStatus]:
    """Move a script to ERROR in its own short transaction.

    Returns:
        The status the script is left in: ERROR when written, its current
        status when it was not in flight, None if it is missing or the
        write failed.
    """
    try:
        async with session_maker() as session:
            async with session.begin():
                repo = ScriptRepository(session)
                script = await repo.get_by_id(script_id)
                if script is None or script.status not in ERROR_ELIGIBLE_STATUSES:
                    LOGGER.warning(
                        "Script not moved to ERROR",
                        extra={
                            "script_id": str(script_id),
                            "status": script.status if script is not None else None,
                        },
                    )
                    return ScriptStatus(script.status) if script is not None else None
                await repo.update_status(script, ScriptStatus.ERROR)
        return ScriptStatus.ERROR
    except Exception:
        LOGGER.error(
            "Failed to set ERROR status",
            exc_info=True,
            extra={"script_id": str(script_id)},
        )
        return None


async def get_script_status(
    session_maker: async_sessionmaker[AsyncSession],
    script_id: UUID,
) -> Optional[ScriptStatus]:
    """Read a script's current status without changing it."""
    async with session_maker() as session:
        script = await ScriptRepository(session).get_by_id(script_id)
        return ScriptStatus(script.status) if script is not None else None
