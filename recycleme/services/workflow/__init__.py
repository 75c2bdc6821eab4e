from recycleme.services.workflow.guard import SubmissionGuard
from recycleme.services.workflow.orchestrator import WorkflowOrchestrator

__all__ = ["SubmissionGuard", "WorkflowOrchestrator"]
