"""First-pass processing of an uploaded script."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.exceptions import ConflictError, DocumentNotFoundError
from app.models.enums import ScriptFormat, ScriptStatus
from app.repositories.department_repository import DepartmentRepository
from app.repositories.element_repository import ElementRepository
from app.repositories.script_repository import ScriptRepository
from app.services.base_service import BaseService
from app.services.detection.script_loader import LoadedScript, parse_and_detect
from app.services.revision.lifecycle import (
    create_detected_elements,
    get_script_status,
    mark_script_error,
)
from app.services.revision.processing_progress import ProcessingProgress, progress_store
from app.services.storage_service import StorageService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ScriptProcessor(BaseService):
    """Detects and stores the elements of a newly uploaded script.

    A first version lands in REVIEWING for the breakdown wizard; a script
    with a parent goes straight to READY.
    """

    def __init__(
        self,
        session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
        storage: Optional[StorageService] = None,
        progress: Optional[ProcessingProgress] = None,
        include_action_props: Optional[bool] = None,
    ):
        super().__init__(session_maker)
        self.storage = storage or StorageService()
        self.progress = progress or progress_store
        self.include_action_props = (
            include_action_props
            if include_action_props is not None
            else settings.detection.scan_action_props
        )

    async def process_script(
        self,
        script_id: UUID,
        storage_key: str,
        extract_elements: bool = True,
    ) -> ScriptStatus:
        """Process a script; never raises.

        Returns:
            The status the script ended in
        """
        return await self.execute(script_id, storage_key, extract_elements)

    async def run(
        self,
        script_id: UUID,
        storage_key: str,
        extract_elements: bool = True,
    ) -> ScriptStatus:
        log_extra = {"script_id": str(script_id), "storage_key": storage_key}

        try:
            self.progress.set(script_id, 10, "Fetching script")
            data = await self.storage.download_file(storage_key)

            self.progress.set(script_id, 30, "Parsing script")
            loaded = parse_and_detect(
                data,
                storage_key,
                extract_elements=extract_elements,
                include_action_props=self.include_action_props,
            )
            self.progress.set(script_id, 60, "Detecting elements")

            status = await self._save(script_id, loaded)
            self.progress.set(script_id, 100, "Complete")
        except (ConflictError, DocumentNotFoundError) as e:
            LOGGER.warning("Script processing skipped", extra={**log_extra, "reason": str(e)})
            current = await get_script_status(self.session_maker, script_id)
            return current or ScriptStatus.ERROR
        except Exception:
            LOGGER.error("Script processing failed", exc_info=True, extra=log_extra)
            final = await mark_script_error(self.session_maker, script_id)
            return final or ScriptStatus.ERROR
        finally:
            self.progress.clear(script_id)

        LOGGER.info(
            "Script processed",
            extra={**log_extra, "status": status.value, "elements": len(loaded.result.elements)},
        )
        return status

    async def _save(self, script_id: UUID, loaded: LoadedScript) -> ScriptStatus:
        async with self.session_maker() as session:
            async with session.begin():
                script_repo = ScriptRepository(session)
                script = await script_repo.get_by_id(script_id)
                if script is None:
                    raise DocumentNotFoundError(f"Script {script_id} not found")
                if script.status != ScriptStatus.PROCESSING.value:
                    raise ConflictError(
                        f"Script {script_id} is {script.status}, expected PROCESSING"
                    )

                departments = await DepartmentRepository(session).get_name_map(
                    script.production_id
                )

                self.progress.set(script_id, 80, "Saving elements")
                await create_detected_elements(
                    ElementRepository(session),
                    script_id,
                    loaded.result.elements,
                    departments,
                )

                status = (
                    ScriptStatus.READY if script.parent_script_id else ScriptStatus.REVIEWING
                )
                await script_repo.update_status(
                    script,
                    status,
                    page_count=loaded.page_count,
                    scene_data=loaded.result.scene_data() or None,
                )
                if loaded.format == ScriptFormat.FDX:
                    await script_repo.update_instance(script, format=ScriptFormat.FDX.value)

        return status
