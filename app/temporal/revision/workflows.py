"""Single-activity workflows for script processing and revisions.

Each run executes its activity exactly once. Completion is observable only
through the script's persisted status.
"""

from datetime import timedelta
from typing import Dict

from temporalio import workflow
from temporalio.common import RetryPolicy

from app.temporal.core.constants import DEFAULT_ACTIVITY_TIMEOUT_SECONDS
from app.temporal.core.workflow_registry import WorkflowRegistry, WorkflowType

NO_RETRY = RetryPolicy(maximum_attempts=1)


@WorkflowRegistry.register(category=WorkflowType.PROCESSING)
@workflow.defn
class ProcessScriptWorkflow:
    """Runs first-pass detection for an uploaded script."""

    @workflow.run
    async def run(self, payload: Dict) -> str:
        return await workflow.execute_activity(
            "process_script",
            args=[
                payload["script_id"],
                payload["storage_key"],
                payload.get("extract_elements", True),
            ],
            start_to_close_timeout=timedelta(seconds=DEFAULT_ACTIVITY_TIMEOUT_SECONDS),
            retry_policy=NO_RETRY,
        )


@WorkflowRegistry.register(category=WorkflowType.REVISION)
@workflow.defn
class ReconcileRevisionWorkflow:
    """Reconciles a revision against its parent script."""

    @workflow.run
    async def run(self, payload: Dict) -> str:
        return await workflow.execute_activity(
            "reconcile_revision",
            args=[payload["new_script_id"], payload["parent_script_id"], payload["storage_key"]],
            start_to_close_timeout=timedelta(seconds=DEFAULT_ACTIVITY_TIMEOUT_SECONDS),
            retry_policy=NO_RETRY,
        )


@WorkflowRegistry.register(category=WorkflowType.REVISION)
@workflow.defn
class ResolveRevisionWorkflow:
    """Applies a batch of human decisions to a RECONCILING script."""

    @workflow.run
    async def run(self, payload: Dict) -> str:
        return await workflow.execute_activity(
            "resolve_revision",
            args=[payload["script_id"], payload["decisions"]],
            start_to_close_timeout=timedelta(seconds=DEFAULT_ACTIVITY_TIMEOUT_SECONDS),
            retry_policy=NO_RETRY,
        )


@WorkflowRegistry.register(category=WorkflowType.PROCESSING)
@workflow.defn
class GenerateImpliedElementsWorkflow:
    """Adds implied wardrobe and hair & makeup elements to a processed script."""

    @workflow.run
    async def run(self, payload: Dict) -> int:
        return await workflow.execute_activity(
            "generate_implied_elements",
            args=[payload["script_id"], payload["production_id"], payload["mode"]],
            start_to_close_timeout=timedelta(seconds=DEFAULT_ACTIVITY_TIMEOUT_SECONDS),
            retry_policy=NO_RETRY,
        )
