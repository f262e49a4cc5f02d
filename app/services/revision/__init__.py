"""Script processing, revision reconciliation and resolution."""

from app.services.revision.implied_elements import ImpliedElementService, build_implied_elements
from app.services.revision.processing_progress import ProcessingProgress, progress_store
from app.services.revision.reconciliation_resolver import ReconciliationResolver
from app.services.revision.revision_reconciler import RevisionReconciler
from app.services.revision.script_processor import ScriptProcessor

__all__ = [
    "ImpliedElementService",
    "ProcessingProgress",
    "ReconciliationResolver",
    "RevisionReconciler",
    "ScriptProcessor",
    "build_implied_elements",
    "progress_store",
]
