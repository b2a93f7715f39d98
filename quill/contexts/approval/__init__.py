"""
Approval Context

Responsibilities:
- Wraps suggested edits in a review workflow
- Applies per-change approve/reject decisions with partial-success semantics
- Tracks workflow status (draft -> in_review -> completed)
- Applies approved edits back onto the original content

Owns: Workflow state, decision protocol, workflow store interface
Never: Generates suggested changes or scores documents
"""

from quill.contexts.approval.exceptions import (
    InvalidChangeError,
    StaleWorkflowError,
    WorkflowClosedError,
    WorkflowNotFoundError,
)
from quill.contexts.approval.service import WorkflowService
from quill.contexts.approval.store import InMemoryWorkflowStore
from quill.contexts.approval.workflow_structure import (
    Approval,
    ApprovalWorkflow,
    ChangePosition,
    ChangeType,
    Decision,
    DecisionError,
    DecisionResult,
    Impact,
    SuggestedChange,
    WorkflowStatus,
    next_status,
)

__all__ = [
    "Approval",
    "ApprovalWorkflow",
    "ChangePosition",
    "ChangeType",
    "Decision",
    "DecisionError",
    "DecisionResult",
    "Impact",
    "InMemoryWorkflowStore",
    "InvalidChangeError",
    "StaleWorkflowError",
    "SuggestedChange",
    "WorkflowClosedError",
    "WorkflowNotFoundError",
    "WorkflowService",
    "WorkflowStatus",
    "next_status",
]
