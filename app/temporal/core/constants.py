"""Shared constants for Temporal workflows."""

from app.core.config import settings

# Task Queues
REVISIONS_TASK_QUEUE = settings.temporal_task_queue

# Timeouts
DEFAULT_ACTIVITY_TIMEOUT_SECONDS = 600  # 10 minutes

# Workflow id prefixes; one id per script so a second run is refused while one is open
PROCESS_SCRIPT_ID_PREFIX = "process-script"
RECONCILE_REVISION_ID_PREFIX = "reconcile-revision"
RESOLVE_REVISION_ID_PREFIX = "resolve-revision"
IMPLIED_ELEMENTS_ID_PREFIX = "implied-elements"


def workflow_id_for(prefix: str, script_id) -> str:
    return f"{prefix}-{script_id}"
