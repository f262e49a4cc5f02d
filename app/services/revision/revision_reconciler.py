"""Reconciles the elements of a revised script against its parent version."""

from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.exceptions import ConflictError, DocumentNotFoundError
from app.models.enums import MatchStatus, ScriptStatus
from app.models.matching import MatchReport
from app.models.screenplay import DetectedElement
from app.repositories.department_repository import DepartmentRepository
from app.repositories.element_repository import ElementRepository
from app.repositories.revision_match_repository import RevisionMatchRepository
from app.repositories.script_repository import ScriptRepository
from app.services.base_service import BaseService
from app.services.detection.script_loader import LoadedScript, parse_and_detect
from app.services.matching.element_matcher import match_elements
from app.services.revision.lifecycle import (
    create_detected_elements,
    get_script_status,
    mark_script_error,
)
from app.services.storage_service import StorageService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class RevisionReconciler(BaseService):
    """Drives a revision from PROCESSING to READY, RECONCILING or ERROR.

    EXACT matches move the parent's element onto the new script, NEW
    detections become fresh elements, and every FUZZY match or MISSING
    element is recorded as a RevisionMatch for a human to resolve. All of
    it happens in a single transaction; any failure leaves the script in
    ERROR instead.
    """

    def __init__(
        self,
        session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
        storage: Optional[StorageService] = None,
        threshold: Optional[float] = None,
        include_action_props: Optional[bool] = None,
    ):
        super().__init__(session_maker)
        self.storage = storage or StorageService()
        self.threshold = threshold if threshold is not None else settings.fuzzy_match_threshold
        self.include_action_props = (
            include_action_props
            if include_action_props is not None
            else settings.detection.scan_action_props
        )

    async def reconcile_revision(
        self,
        new_script_id: UUID,
        parent_script_id: UUID,
        storage_key: str,
    ) -> ScriptStatus:
        """Reconcile a revision; never raises.

        Returns:
            The status the script ended in
        """
        return await self.execute(new_script_id, parent_script_id, storage_key)

    async def run(
        self,
        new_script_id: UUID,
        parent_script_id: UUID,
        storage_key: str,
    ) -> ScriptStatus:
        log_extra = {
            "script_id": str(new_script_id),
            "parent_script_id": str(parent_script_id),
            "storage_key": storage_key,
        }
        LOGGER.info("Starting revision reconciliation", extra=log_extra)

        try:
            data = await self.storage.download_file(storage_key)
            loaded = parse_and_detect(
                data,
                storage_key,
                include_action_props=self.include_action_props,
            )
            status = await self._apply(new_script_id, parent_script_id, loaded)
        except (ConflictError, DocumentNotFoundError) as e:
            LOGGER.warning(
                "Revision reconciliation skipped", extra={**log_extra, "reason": str(e)}
            )
            current = await get_script_status(self.session_maker, new_script_id)
            return current or ScriptStatus.ERROR
        except Exception:
            LOGGER.error("Revision reconciliation failed", exc_info=True, extra=log_extra)
            final = await mark_script_error(self.session_maker, new_script_id)
            return final or ScriptStatus.ERROR

        LOGGER.info(
            "Revision reconciliation finished",
            extra={**log_extra, "status": status.value},
        )
        return status

    async def _apply(
        self,
        new_script_id: UUID,
        parent_script_id: UUID,
        loaded: LoadedScript,
    ) -> ScriptStatus:
        async with self.session_maker() as session:
            async with session.begin():
                script_repo = ScriptRepository(session)
                script = await script_repo.get_by_id(new_script_id)
                if script is None:
                    raise DocumentNotFoundError(f"Script {new_script_id} not found")
                if script.status != ScriptStatus.PROCESSING.value:
                    raise ConflictError(
                        f"Script {new_script_id} is {script.status}, expected PROCESSING"
                    )

                element_repo = ElementRepository(session)
                rows = await element_repo.get_for_matching(parent_script_id)
                rows_by_id = {row.id: row for row in rows}

                report = match_elements(
                    [element_repo.to_existing(row) for row in rows],
                    loaded.result.elements,
                    threshold=self.threshold,
                )

                # EXACT: carry the parent's element forward with its new highlight
                for match in report.by_status(MatchStatus.EXACT):
                    await element_repo.update_instance(
                        rows_by_id[match.old_element_id],
                        script_id=new_script_id,
                        highlight_page=match.detected_page,
                        highlight_text=match.detected_highlight_text,
                    )

                departments = await DepartmentRepository(session).get_name_map(
                    script.production_id
                )
                detected_by_name: Dict[str, DetectedElement] = {
                    element.name: element for element in loaded.result.elements
                }
                await create_detected_elements(
                    element_repo,
                    new_script_id,
                    [detected_by_name[m.detected_name] for m in report.by_status(MatchStatus.NEW)],
                    departments,
                )

                if report.needs_reconciliation:
                    await self._record_pending(session, new_script_id, report)
                    status = ScriptStatus.RECONCILING
                else:
                    status = ScriptStatus.READY

                await script_repo.update_status(
                    script,
                    status,
                    page_count=loaded.page_count,
                    scene_data=loaded.result.scene_data(),
                )

        LOGGER.debug(
            "Revision matches applied",
            extra={
                "script_id": str(new_script_id),
                "exact": len(report.by_status(MatchStatus.EXACT)),
                "fuzzy": len(report.by_status(MatchStatus.FUZZY)),
                "new": len(report.by_status(MatchStatus.NEW)),
                "missing": len(report.missing),
            },
        )
        return status

    async def _record_pending(
        self,
        session: AsyncSession,
        new_script_id: UUID,
        report: MatchReport,
    ) -> None:
        """Create one RevisionMatch per FUZZY match and per MISSING element."""
        match_repo = RevisionMatchRepository(session)

        for match in report.by_status(MatchStatus.FUZZY):
            await match_repo.create(
                new_script_id=new_script_id,
                detected_name=match.detected_name,
                detected_type=match.detected_type,
                detected_page=match.detected_page,
                detected_highlight_text=match.detected_highlight_text,
                match_status=MatchStatus.FUZZY.value,
                old_element_id=match.old_element_id,
                similarity=match.similarity,
                resolved=False,
            )

        for missing in report.missing:
            await match_repo.create(
                new_script_id=new_script_id,
                detected_name=missing.name,
                detected_type=missing.type,
                detected_page=None,
                detected_highlight_text=None,
                match_status=MatchStatus.MISSING.value,
                old_element_id=missing.id,
                similarity=None,
                resolved=False,
            )
