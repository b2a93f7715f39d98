"""
Approval workflow service.

Entry point for creating review workflows over suggested changes and applying
reviewer decisions to them.

Example:
    >>> service = WorkflowService()
    >>> workflow = service.create_workflow([
    ...     {"category": "spelling", "original": "recieve", "suggested": "receive"},
    ... ])
    >>> result = service.submit_decisions(workflow.id, [
    ...     {"change_id": "change_0", "approved": True},
    ... ])
    >>> result.workflow.status
    <WorkflowStatus.COMPLETED: 'completed'>
"""

import uuid
from collections import Counter
from dataclasses import replace
from typing import Callable, Iterable, Optional

from quill.contexts.approval.exceptions import (
    InvalidChangeError,
    StaleWorkflowError,
    WorkflowClosedError,
    WorkflowNotFoundError,
)
from quill.contexts.approval.logger import (
    _log_debug,
    _log_error,
    _log_warning,
    log_decisions_applied,
    log_workflow_created,
)
from quill.contexts.approval.store import InMemoryWorkflowStore
from quill.contexts.approval.workflow_structure import (
    ApprovalWorkflow,
    ChangeType,
    Decision,
    DecisionError,
    DecisionResult,
    SuggestedChange,
    WorkflowStatus,
    next_status,
)
from quill.utils.exceptions import ErrorCategory, QuillError, ValidationError
from quill.utils.timestamp import now_exact

# Read-apply-commit attempts before a concurrent update is reported to the caller
COMMIT_ATTEMPTS = 3

EventSink = Callable[[str, str, dict], None]


class WorkflowService:
    """
    Creates workflows and applies decision batches to them.

    Args:
        store: Object with get/list/create/commit (defaults to InMemoryWorkflowStore)
        event_sink: Optional callable(event_type, workflow_id, fields) receiving
            workflow_created, decision_applied and workflow_completed events
    """

    def __init__(self, store=None, event_sink: Optional[EventSink] = None):
        self.store = store if store is not None else InMemoryWorkflowStore()
        self.event_sink = event_sink

    def _emit(self, event_type: str, workflow_id: str, **fields) -> None:
        if self.event_sink is not None:
            self.event_sink(event_type, workflow_id, fields)

    # =========================================================================
    # CREATION
    # =========================================================================

    def create_workflow(
        self,
        changes: Iterable,
        document_type: str = "resume",
        original_content: Optional[str] = None,
    ) -> ApprovalWorkflow:
        """
        Create a workflow with every change pending.

        Args:
            changes: SuggestedChange objects or mappings (see SuggestedChange.from_dict)
            document_type: Document the changes apply to
            original_content: Optional text the changes were computed against;
                required later by apply_approved_changes()

        Returns:
            New workflow in draft, or completed when there are no changes

        Raises:
            InvalidChangeError: If a change is malformed, has a duplicate id, or
                has a position outside original_content
            ValidationError: If changes is not a list of changes
        """
        if changes is None or isinstance(changes, (str, bytes, dict)):
            raise ValidationError("changes must be a list", detail=type(changes).__name__)
        if original_content is not None and not isinstance(original_content, str):
            raise ValidationError(
                "original_content must be a string", detail=type(original_content).__name__
            )

        parsed = []
        seen_ids = set()
        for index, data in enumerate(changes):
            change = SuggestedChange.from_dict(data, index)
            if change.id in seen_ids:
                raise InvalidChangeError("Duplicate change id", change_id=change.id)
            if (
                original_content is not None
                and change.position is not None
                and change.position.end > len(original_content)
            ):
                raise InvalidChangeError(
                    "position extends past the original content",
                    change_id=change.id,
                    field_name="position",
                    value=change.position.to_dict(),
                )
            seen_ids.add(change.id)
            parsed.append(change)

        timestamp = now_exact()
        workflow = ApprovalWorkflow(
            id=f"wf_{uuid.uuid4().hex[:12]}",
            status=next_status(WorkflowStatus.DRAFT, 0, len(parsed)),
            changes=tuple(parsed),
            document_type=document_type,
            original_content=original_content,
            created_at=timestamp,
            updated_at=timestamp,
        )
        workflow = self.store.create(workflow)

        log_workflow_created(workflow.id, workflow.total, workflow.status.value)
        self._emit(
            "workflow_created",
            workflow.id,
            document_type=document_type,
            total=workflow.total,
            status=workflow.status.value,
        )
        return workflow

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_workflow(self, workflow_id: str) -> ApprovalWorkflow:
        """
        Raises:
            WorkflowNotFoundError: If no workflow has this id
        """
        workflow = self.store.get(workflow_id)
        if workflow is None:
            raise WorkflowNotFoundError(workflow_id)
        return workflow

    def list_workflows(self, status=None) -> list[ApprovalWorkflow]:
        """
        List workflows, newest first, optionally filtered by status.

        Raises:
            ValidationError: If status is not a known workflow status
        """
        workflows = self.store.list()
        if status is not None:
            try:
                status = WorkflowStatus(status)
            except ValueError:
                raise ValidationError("Unknown workflow status", detail=str(status)) from None
            workflows = [workflow for workflow in workflows if workflow.status == status]
        return sorted(workflows, key=lambda workflow: workflow.created_at, reverse=True)

    def workflow_analytics(self) -> dict:
        """
        Summarize every stored workflow.

        Returns:
            Dict with workflow counts per status and change counts per
            decision, category and type. approval_rate is the share of decided
            changes that were approved, in percent.
        """
        workflows = self.store.list()
        status_counts = Counter(workflow.status.value for workflow in workflows)

        changes = [change for workflow in workflows for change in workflow.changes]
        decision_counts = Counter(change.approval.value for change in changes)
        decided = decision_counts["approved"] + decision_counts["rejected"]

        return {
            "workflows": {
                "total": len(workflows),
                **{status.value: status_counts[status.value] for status in WorkflowStatus},
            },
            "changes": {
                "total": len(changes),
                "approved": decision_counts["approved"],
                "rejected": decision_counts["rejected"],
                "pending": decision_counts["pending"],
                "approval_rate": (
                    round(decision_counts["approved"] / decided * 100, 1) if decided else 0.0
                ),
                "by_category": dict(Counter(change.category for change in changes)),
                "by_type": dict(Counter(change.change_type.value for change in changes)),
            },
        }

    # =========================================================================
    # DECISIONS
    # =========================================================================

    def submit_decisions(self, workflow_id: str, decisions: Iterable) -> DecisionResult:
        """
        Apply a batch of decisions to a workflow.

        Each entry is validated on its own: an unknown change id or a
        malformed entry becomes a DecisionError while the remaining entries
        still apply. The batch is applied to a copy and committed in one step.
        Deciding an already-decided change overwrites the earlier decision.

        Args:
            workflow_id: Workflow to update
            decisions: Decision objects or mappings with change_id, approved, note

        Returns:
            DecisionResult with the committed workflow and item-level errors

        Raises:
            WorkflowNotFoundError: If the workflow does not exist
            WorkflowClosedError: If the workflow is already completed
            ValidationError: If decisions is not a list
        """
        if decisions is None or isinstance(decisions, (str, bytes, dict)):
            raise ValidationError("decisions must be a list", detail=type(decisions).__name__)
        entries = list(decisions)

        for attempt in range(1, COMMIT_ATTEMPTS + 1):
            current = self.get_workflow(workflow_id)
            if current.is_completed:
                raise WorkflowClosedError(workflow_id)

            updated, applied, errors = _apply_decisions(current, entries)
            try:
                committed = self.store.commit(updated, expected_version=current.version)
                break
            except StaleWorkflowError:
                _log_debug(f"Workflow {workflow_id} changed during commit (attempt {attempt})")
                if attempt == COMMIT_ATTEMPTS:
                    _log_error(f"Workflow {workflow_id}: giving up after {attempt} commit attempts")
                    raise

        log_decisions_applied(
            workflow_id,
            applied,
            len(errors),
            committed.decided_count,
            committed.total,
            committed.status.value,
        )
        self._emit(
            "decision_applied",
            workflow_id,
            applied=applied,
            errors=len(errors),
            decided=committed.decided_count,
            total=committed.total,
            status=committed.status.value,
        )
        if committed.is_completed:
            self._emit(
                "workflow_completed",
                workflow_id,
                approved=len(committed.approved_changes),
                rejected=len(committed.rejected_changes),
            )

        return DecisionResult(workflow=committed, errors=tuple(errors), applied=applied)

    # =========================================================================
    # APPLYING CHANGES
    # =========================================================================

    def apply_approved_changes(self, workflow_id: str) -> str:
        """
        Apply every approved change to the workflow's original content.

        Positioned changes are applied back to front so earlier offsets stay
        valid; changes without a position then replace the first occurrence of
        their original text. Reorder changes are not applied.

        Returns:
            The edited content

        Raises:
            WorkflowNotFoundError: If the workflow does not exist
            ValidationError: If the workflow was created without original content
        """
        workflow = self.get_workflow(workflow_id)
        if workflow.original_content is None:
            raise ValidationError(
                "Workflow has no original content to apply changes to", detail=workflow_id
            )

        approved = workflow.approved_changes
        positioned = sorted(
            (change for change in approved if change.position is not None),
            key=lambda change: change.position.start,
            reverse=True,
        )
        unpositioned = [change for change in approved if change.position is None]

        content = workflow.original_content
        for change in positioned:
            content = _apply_positioned(content, change)

        for change in unpositioned:
            if change.change_type == ChangeType.REORDER:
                _log_debug(f"Skipping reorder change {change.id}")
                continue
            if change.original and change.original in content:
                content = content.replace(change.original, change.suggested, 1)
            else:
                _log_warning(f"Change {change.id}: original text not found, skipped")

        return content


def _apply_decisions(
    workflow: ApprovalWorkflow, entries: list
) -> tuple[ApprovalWorkflow, int, list[DecisionError]]:
    """Return an updated copy of workflow, the number applied, and item errors."""
    changes = {change.id: change for change in workflow.changes}
    errors = []
    applied = 0

    for entry in entries:
        try:
            decision = Decision.parse(entry)
        except QuillError as e:
            errors.append(
                DecisionError(
                    change_id=getattr(e, "change_id", None),
                    category=e.category,
                    message=e.message,
                )
            )
            continue

        if decision.change_id not in changes:
            errors.append(
                DecisionError(
                    change_id=decision.change_id,
                    category=ErrorCategory.NOT_FOUND,
                    message=f"Unknown change id: {decision.change_id}",
                )
            )
            continue

        changes[decision.change_id] = changes[decision.change_id].decide(
            decision.approved, decision.note
        )
        applied += 1

    updated_changes = tuple(changes[change.id] for change in workflow.changes)
    decided = sum(1 for change in updated_changes if change.is_decided)

    updated = replace(
        workflow,
        changes=updated_changes,
        status=next_status(workflow.status, decided, len(updated_changes)),
        updated_at=now_exact(),
    )
    return updated, applied, errors


def _apply_positioned(content: str, change: SuggestedChange) -> str:
    start, end = change.position.start, change.position.end
    if end > len(content):
        _log_warning(f"Change {change.id}: position outside content, skipped")
        return content

    if change.change_type == ChangeType.DELETION:
        return content[:start] + content[end:]
    if change.change_type == ChangeType.ADDITION:
        return content[:start] + change.suggested + content[start:]
    if change.change_type == ChangeType.MODIFICATION:
        return content[:start] + change.suggested + content[end:]

    _log_debug(f"Skipping reorder change {change.id}")
    return content
