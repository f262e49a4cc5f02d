"""Temporal worker for script processing and revision reconciliation.

This worker:
- Connects to the configured Temporal server
- Discovers and registers all workflows and activities
- Runs one worker per task queue
"""

import asyncio
from typing import Dict, List

from temporalio.worker import Worker
from temporalio.worker.workflow_sandbox import SandboxedWorkflowRunner, SandboxRestrictions

from app.core.config import settings
from app.core.database import close_database, init_database
from app.core.temporal_client import get_temporal_client
from app.temporal.core.activity_registry import ActivityRegistry
from app.temporal.core.discovery import discover_all
from app.temporal.core.workflow_registry import WorkflowRegistry
from app.utils.logging import get_logger

logger = get_logger(__name__)

MAX_CONNECT_RETRIES = 5
RETRY_DELAY_SECONDS = 5


async def connect_with_retries():
    """Connect to Temporal, retrying a few times while the server starts."""
    for attempt in range(MAX_CONNECT_RETRIES):
        try:
            logger.info(
                f"Connecting to Temporal server at {settings.temporal_host}:{settings.temporal_port} "
                f"(Attempt {attempt + 1}/{MAX_CONNECT_RETRIES})"
            )
            return await get_temporal_client()
        except Exception as e:
            if attempt < MAX_CONNECT_RETRIES - 1:
                logger.warning(
                    f"Connection attempt {attempt + 1} failed: {e}. Retrying in {RETRY_DELAY_SECONDS}s..."
                )
                await asyncio.sleep(RETRY_DELAY_SECONDS)
            else:
                logger.error(
                    f"Failed to connect to Temporal server after {MAX_CONNECT_RETRIES} attempts: {e}"
                )
                raise


def build_workers(client) -> List[Worker]:
    """Create one worker per task queue with every registered activity."""
    all_workflows = WorkflowRegistry.get_all_workflows()
    all_activities = ActivityRegistry.get_all_activities()
    logger.info(f"Registered {len(all_workflows)} workflows and {len(all_activities)} activities")

    queues: Dict[str, list] = {}
    for wf_name, metadata in all_workflows.items():
        queues.setdefault(metadata.task_queue, []).append(metadata.workflow_class)
        logger.debug(f"Workflow '{wf_name}' assigned to queue '{metadata.task_queue}'")

    logger.info(f"Queues: {list(queues.keys())}")
    return [
        Worker(
            client,
            task_queue=queue_name,
            workflows=workflows,
            activities=list(all_activities.values()),
            max_concurrent_activities=10,
            max_concurrent_workflow_tasks=20,
            workflow_runner=SandboxedWorkflowRunner(
                restrictions=SandboxRestrictions.default.with_passthrough_all_modules()
            ),
        )
        for queue_name, workflows in queues.items()
    ]


async def main():
    """Start the Temporal worker(s)."""
    discover_all()
    await init_database(create_tables=False)

    client = await connect_with_retries()
    workers = build_workers(client)

    logger.info("Workers are now polling for tasks...")
    try:
        await asyncio.gather(*(worker.run() for worker in workers))
    finally:
        await close_database()


def run():
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Workers stopped by user")
    except Exception as e:
        logger.error(f"Worker failed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    run()
