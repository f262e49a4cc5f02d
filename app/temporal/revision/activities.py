"""Activities that run the script processing and revision services."""

from typing import Dict, List
from uuid import UUID

from temporalio import activity

from app.models.enums import ScriptStatus
from app.schemas.revision import RevisionDecisionItem
from app.services.revision.implied_elements import ImpliedElementService
from app.services.revision.reconciliation_resolver import ReconciliationResolver
from app.services.revision.revision_reconciler import RevisionReconciler
from app.services.revision.script_processor import ScriptProcessor
from app.temporal.core.activity_registry import ActivityRegistry


@ActivityRegistry.register("revision", "process_script")
@activity.defn
async def process_script(script_id: str, storage_key: str, extract_elements: bool = True) -> str:
    """Detect and store elements for a newly uploaded script."""
    activity.logger.info(
        f"Processing script {script_id}",
        extra={"script_id": script_id, "storage_key": storage_key},
    )
    status = await ScriptProcessor().process_script(
        UUID(script_id), storage_key, extract_elements=extract_elements
    )
    return status.value


@ActivityRegistry.register("revision", "reconcile_revision")
@activity.defn
async def reconcile_revision(new_script_id: str, parent_script_id: str, storage_key: str) -> str:
    """Reconcile a revision against its parent; failures end in ERROR."""
    activity.logger.info(
        f"Reconciling revision {new_script_id}",
        extra={"script_id": new_script_id, "parent_script_id": parent_script_id},
    )
    status = await RevisionReconciler().reconcile_revision(
        UUID(new_script_id), UUID(parent_script_id), storage_key
    )
    return status.value


@ActivityRegistry.register("revision", "resolve_revision")
@activity.defn
async def resolve_revision(script_id: str, decisions: List[Dict]) -> str:
    """Apply a batch of decisions; the batch is re-validated in its transaction."""
    items = [RevisionDecisionItem.model_validate(item) for item in decisions]
    activity.logger.info(
        f"Resolving revision {script_id}",
        extra={"script_id": script_id, "decisions": len(items)},
    )
    await ReconciliationResolver().resolve_revision(UUID(script_id), items)
    return ScriptStatus.READY.value


@ActivityRegistry.register("revision", "generate_implied_elements")
@activity.defn
async def generate_implied_elements(script_id: str, production_id: str, mode: str) -> int:
    """Create wardrobe and hair & makeup elements from the script's scenes."""
    activity.logger.info(
        f"Generating implied elements for script {script_id}",
        extra={"script_id": script_id, "mode": mode},
    )
    return await ImpliedElementService().generate(UUID(script_id), UUID(production_id), mode)
