"""Fire-and-forget submission of script processing and revision work.

Each submit call starts a Temporal workflow and returns its id without
waiting. The outcome is visible only through the script's status.
"""

from typing import Awaitable, Callable, Dict, Optional, Sequence
from uuid import UUID

from temporalio.client import Client as TemporalClient
from temporalio.exceptions import WorkflowAlreadyStartedError

from app.core.config import settings
from app.core.exceptions import ConflictError, ValidationError
from app.core.temporal_client import get_temporal_client
from app.schemas.revision import RevisionDecisionItem
from app.services.revision.implied_elements import IMPLIED_MODES
from app.services.revision.reconciliation_resolver import ReconciliationResolver
from app.temporal.core.constants import (
    IMPLIED_ELEMENTS_ID_PREFIX,
    PROCESS_SCRIPT_ID_PREFIX,
    RECONCILE_REVISION_ID_PREFIX,
    RESOLVE_REVISION_ID_PREFIX,
    workflow_id_for,
)
from app.temporal.revision.workflows import (
    GenerateImpliedElementsWorkflow,
    ProcessScriptWorkflow,
    ReconcileRevisionWorkflow,
    ResolveRevisionWorkflow,
)
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class RevisionTaskService:
    """Enqueues processing, reconciliation and resolution runs."""

    def __init__(
        self,
        client_factory: Callable[[], Awaitable[TemporalClient]] = get_temporal_client,
        resolver: Optional[ReconciliationResolver] = None,
        task_queue: Optional[str] = None,
    ):
        self.client_factory = client_factory
        self.resolver = resolver or ReconciliationResolver()
        self.task_queue = task_queue or settings.temporal_task_queue

    async def submit_processing(
        self,
        script_id: UUID,
        storage_key: str,
        extract_elements: bool = True,
    ) -> str:
        """Start first-pass processing of an uploaded script."""
        return await self._start(
            ProcessScriptWorkflow.run,
            {
                "script_id": str(script_id),
                "storage_key": storage_key,
                "extract_elements": extract_elements,
            },
            workflow_id_for(PROCESS_SCRIPT_ID_PREFIX, script_id),
        )

    async def submit_reconciliation(
        self,
        new_script_id: UUID,
        parent_script_id: UUID,
        storage_key: str,
    ) -> str:
        """Start reconciliation of a revision against its parent."""
        return await self._start(
            ReconcileRevisionWorkflow.run,
            {
                "new_script_id": str(new_script_id),
                "parent_script_id": str(parent_script_id),
                "storage_key": storage_key,
            },
            workflow_id_for(RECONCILE_REVISION_ID_PREFIX, new_script_id),
        )

    async def submit_resolution(
        self,
        script_id: UUID,
        decisions: Sequence[RevisionDecisionItem],
    ) -> str:
        """Validate a decision batch, then start its resolution.

        Raises:
            DocumentNotFoundError, ConflictError, ValidationError: Raised
                synchronously when the batch cannot be applied
        """
        await self.resolver.check_decisions(script_id, decisions)
        return await self._start(
            ResolveRevisionWorkflow.run,
            {
                "script_id": str(script_id),
                "decisions": [item.model_dump(mode="json") for item in decisions],
            },
            workflow_id_for(RESOLVE_REVISION_ID_PREFIX, script_id),
        )

    async def submit_implied_elements(
        self,
        script_id: UUID,
        production_id: UUID,
        mode: str,
    ) -> str:
        """Start generation of implied wardrobe and hair & makeup elements.

        Raises:
            ValidationError: If ``mode`` is not recognised
        """
        if mode not in IMPLIED_MODES:
            raise ValidationError(
                f"Invalid mode {mode!r}. Must be one of: {', '.join(IMPLIED_MODES)}"
            )
        return await self._start(
            GenerateImpliedElementsWorkflow.run,
            {
                "script_id": str(script_id),
                "production_id": str(production_id),
                "mode": mode,
            },
            workflow_id_for(IMPLIED_ELEMENTS_ID_PREFIX, script_id),
        )

    async def _start(self, workflow_run, payload: Dict, workflow_id: str) -> str:
        client = await self.client_factory()
        try:
            handle = await client.start_workflow(
                workflow_run,
                payload,
                id=workflow_id,
                task_queue=self.task_queue,
            )
        except WorkflowAlreadyStartedError as e:
            LOGGER.warning(
                f"Temporal workflow {workflow_id} already running",
                extra={"workflow_id": workflow_id},
            )
            raise ConflictError(f"Workflow {workflow_id} is already running", original_error=e)

        LOGGER.info(
            "Workflow submitted",
            extra={"workflow_id": handle.id, "task_queue": self.task_queue},
        )
        return handle.id
