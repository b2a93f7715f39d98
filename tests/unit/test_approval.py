"""
Unit tests for the approval workflow.

Tests workflow creation, decision batches, status transitions, concurrent
commits and applying approved changes in quill.contexts.approval.
"""

import threading

import pytest

from quill.contexts.approval import (
    Approval,
    ChangeType,
    Decision,
    InMemoryWorkflowStore,
    InvalidChangeError,
    StaleWorkflowError,
    WorkflowClosedError,
    WorkflowNotFoundError,
    WorkflowService,
    WorkflowStatus,
    next_status,
)
from quill.utils.exceptions import ConflictError, ErrorCategory, ValidationError


def _changes():
    return [
        {"id": "c1", "category": "spelling", "original": "recieve", "suggested": "receive"},
        {"id": "c2", "category": "grammar", "original": "a engineer", "suggested": "an engineer"},
        {"id": "c3", "category": "style", "original": "helped", "suggested": "assisted"},
    ]


@pytest.fixture
def service():
    return WorkflowService()


@pytest.mark.unit
class TestNextStatus:
    """Tests for next_status function."""

    def test_transitions(self):
        """Test draft, in_review and completed thresholds."""
        assert next_status(WorkflowStatus.DRAFT, 0, 3) == WorkflowStatus.DRAFT
        assert next_status(WorkflowStatus.DRAFT, 1, 3) == WorkflowStatus.IN_REVIEW
        assert next_status(WorkflowStatus.IN_REVIEW, 3, 3) == WorkflowStatus.COMPLETED
        assert next_status(WorkflowStatus.DRAFT, 0, 0) == WorkflowStatus.COMPLETED

    def test_completed_is_terminal(self):
        """Test a completed workflow never moves back."""
        assert next_status(WorkflowStatus.COMPLETED, 0, 3) == WorkflowStatus.COMPLETED


@pytest.mark.unit
class TestCreateWorkflow:
    """Tests for WorkflowService.create_workflow."""

    def test_new_workflow_is_draft(self, service):
        """Test every change starts pending and the workflow in draft."""
        workflow = service.create_workflow(_changes())

        assert workflow.status == WorkflowStatus.DRAFT
        assert workflow.total == 3
        assert workflow.version == 0
        assert all(change.approval == Approval.PENDING for change in workflow.changes)
        assert service.get_workflow(workflow.id) == workflow

    def test_ids_assigned_and_input_approval_ignored(self, service):
        """Test missing ids become change_<index> and input decisions are dropped."""
        workflow = service.create_workflow(
            [
                {"category": "spelling", "original": "a", "suggested": "b"},
                {"category": "style", "original": "c", "suggested": "d", "approval": "approved"},
            ]
        )

        assert [change.id for change in workflow.changes] == ["change_0", "change_1"]
        assert workflow.changes[1].approval == Approval.PENDING

    def test_zero_changes_is_completed(self, service):
        """Test a workflow with nothing to review is created completed."""
        workflow = service.create_workflow([])
        assert workflow.status == WorkflowStatus.COMPLETED

    def test_field_defaults_and_coercion(self, service):
        """Test impact and type strings are coerced and defaults applied."""
        workflow = service.create_workflow(
            [{"id": "x", "original": "a", "suggested": "", "impact": "HIGH", "type": "deletion"}]
        )
        change = workflow.changes[0]

        assert change.category == "general"
        assert change.confidence == 50
        assert change.impact.value == "high"
        assert change.change_type == ChangeType.DELETION

    @pytest.mark.parametrize(
        "change",
        [
            {"id": "x", "original": "a", "suggested": "b", "confidence": 150},
            {"id": "x", "original": "a", "suggested": "b", "confidence": True},
            {"id": "x", "original": "a", "suggested": "b", "impact": "huge"},
            {"id": "x", "original": 5, "suggested": "b"},
            {"id": "", "original": "a", "suggested": "b"},
            {"id": "x", "original": "a", "suggested": "b", "position": {"start": 5, "end": 2}},
            {"id": "x", "original": "a", "suggested": "b", "position": "3-4"},
            "not a mapping",
        ],
    )
    def test_malformed_change_rejected(self, service, change):
        """Test malformed changes raise InvalidChangeError and store nothing."""
        with pytest.raises(InvalidChangeError):
            service.create_workflow([change])
        assert service.list_workflows() == []

    def test_duplicate_ids_rejected(self, service):
        """Test two changes with one id are rejected."""
        changes = _changes()
        changes[2]["id"] = "c1"
        with pytest.raises(InvalidChangeError) as exc_info:
            service.create_workflow(changes)
        assert exc_info.value.change_id == "c1"

    def test_position_past_content_rejected(self, service):
        """Test positions must fall inside the original content."""
        change = {"id": "x", "original": "a", "suggested": "b", "position": {"start": 0, "end": 9}}
        with pytest.raises(InvalidChangeError):
            service.create_workflow([change], original_content="short")

    def test_changes_must_be_a_list(self, service):
        """Test a string or mapping in place of the change list is rejected."""
        for bad in ("changes", {"id": "x"}, None):
            with pytest.raises(ValidationError):
                service.create_workflow(bad)


@pytest.mark.unit
class TestSubmitDecisions:
    """Tests for WorkflowService.submit_decisions."""

    def test_partial_decisions_move_to_in_review(self, service):
        """Test deciding some changes leaves the workflow in review."""
        workflow = service.create_workflow(_changes())
        result = service.submit_decisions(workflow.id, [{"change_id": "c1", "approved": True}])

        assert result.ok
        assert result.applied == 1
        assert result.workflow.status == WorkflowStatus.IN_REVIEW
        assert result.workflow.version == 1
        assert result.workflow.change("c1").approval == Approval.APPROVED

    def test_item_errors_do_not_block_valid_entries(self, service):
        """Test unknown ids and malformed entries are reported per item."""
        workflow = service.create_workflow(_changes())
        result = service.submit_decisions(
            workflow.id,
            [
                {"change_id": "c1", "approved": True},
                {"change_id": "nope", "approved": True},
                {"change_id": "c2", "approved": False, "note": "keep original"},
                {"change_id": "c3", "approved": "yes"},
            ],
        )

        assert result.applied == 2
        assert [(e.change_id, e.category) for e in result.errors] == [
            ("nope", ErrorCategory.NOT_FOUND),
            ("c3", ErrorCategory.VALIDATION),
        ]
        assert result.workflow.change("c2").note == "keep original"
        assert result.workflow.change("c3").approval == Approval.PENDING

    def test_all_decided_completes(self, service):
        """Test deciding every change completes the workflow."""
        workflow = service.create_workflow(_changes())
        result = service.submit_decisions(
            workflow.id, [Decision(change.id, True) for change in workflow.changes]
        )

        assert result.workflow.status == WorkflowStatus.COMPLETED
        assert len(result.workflow.approved_changes) == 3

    def test_later_decision_overwrites_earlier(self, service):
        """Test re-deciding a change keeps the last decision."""
        workflow = service.create_workflow(_changes())
        service.submit_decisions(workflow.id, [{"change_id": "c1", "approved": True}])
        result = service.submit_decisions(workflow.id, [{"id": "c1", "approved": False}])

        assert result.workflow.change("c1").approval == Approval.REJECTED
        assert result.workflow.decided_count == 1

    def test_completed_workflow_is_closed(self, service):
        """Test decisions on a completed workflow raise WorkflowClosedError."""
        workflow = service.create_workflow([])
        with pytest.raises(WorkflowClosedError):
            service.submit_decisions(workflow.id, [{"change_id": "c1", "approved": True}])

    def test_unknown_workflow(self, service):
        """Test a missing workflow raises WorkflowNotFoundError."""
        with pytest.raises(WorkflowNotFoundError):
            service.get_workflow("wf_missing")
        with pytest.raises(WorkflowNotFoundError):
            service.submit_decisions("wf_missing", [])

    def test_decisions_must_be_a_list(self, service):
        """Test a single mapping in place of the decision list is rejected."""
        workflow = service.create_workflow(_changes())
        with pytest.raises(ValidationError):
            service.submit_decisions(workflow.id, {"change_id": "c1", "approved": True})

    def test_concurrent_batches_all_land(self, service):
        """Test concurrent batches on one workflow are serialized, none lost."""
        workflow = service.create_workflow(_changes())
        barrier = threading.Barrier(3)
        failures = []

        def decide(change_id):
            barrier.wait()
            try:
                service.submit_decisions(workflow.id, [{"change_id": change_id, "approved": True}])
            except Exception as e:
                failures.append(e)

        threads = [threading.Thread(target=decide, args=(cid,)) for cid in ("c1", "c2", "c3")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        final = service.get_workflow(workflow.id)
        assert failures == []
        assert final.decided_count == 3
        assert final.status == WorkflowStatus.COMPLETED
        assert final.version == 3

    def test_events_emitted(self):
        """Test the event sink sees creation, decision and completion events."""
        events = []
        service = WorkflowService(event_sink=lambda kind, wf_id, fields: events.append(kind))
        workflow = service.create_workflow(_changes()[:1])
        service.submit_decisions(workflow.id, [{"change_id": "c1", "approved": True}])

        assert events == ["workflow_created", "decision_applied", "workflow_completed"]


@pytest.mark.unit
class TestApplyApprovedChanges:
    """Tests for WorkflowService.apply_approved_changes."""

    def test_positioned_changes_applied_back_to_front(self, service):
        """Test modification, deletion and addition by position."""
        original = "We recieve feedback daily from clients."
        workflow = service.create_workflow(
            [
                {
                    "id": "m",
                    "original": "recieve",
                    "suggested": "receive",
                    "position": {"start": 3, "end": 10},
                },
                {
                    "id": "d",
                    "original": " daily",
                    "suggested": "",
                    "type": "deletion",
                    "position": {"start": 19, "end": 25},
                },
                {
                    "id": "a",
                    "original": "",
                    "suggested": "key ",
                    "type": "addition",
                    "position": {"start": 31, "end": 31},
                },
            ],
            original_content=original,
        )
        service.submit_decisions(
            workflow.id, [{"change_id": cid, "approved": True} for cid in ("m", "d", "a")]
        )

        applied = service.apply_approved_changes(workflow.id)
        assert applied == "We receive feedback from key clients."

    def test_rejected_and_unpositioned_changes(self, service):
        """Test rejected changes are skipped and unpositioned ones replace text."""
        workflow = service.create_workflow(_changes(), original_content="I helped a engineer.")
        service.submit_decisions(
            workflow.id,
            [
                {"change_id": "c1", "approved": True},
                {"change_id": "c2", "approved": False},
                {"change_id": "c3", "approved": True},
            ],
        )

        # c1's original text is absent and is skipped
        assert service.apply_approved_changes(workflow.id) == "I assisted a engineer."

    def test_requires_original_content(self, service):
        """Test applying changes without original content is rejected."""
        workflow = service.create_workflow(_changes())
        with pytest.raises(ValidationError):
            service.apply_approved_changes(workflow.id)


@pytest.mark.unit
class TestQueries:
    """Tests for listing and analytics."""

    def test_list_filter_by_status(self, service):
        """Test list_workflows filters on status."""
        open_workflow = service.create_workflow(_changes())
        done_workflow = service.create_workflow([])

        assert [w.id for w in service.list_workflows("draft")] == [open_workflow.id]
        assert [w.id for w in service.list_workflows(WorkflowStatus.COMPLETED)] == [
            done_workflow.id
        ]
        assert len(service.list_workflows()) == 2
        with pytest.raises(ValidationError):
            service.list_workflows("archived")

    def test_analytics(self, service):
        """Test status counts, decision counts and the approval rate."""
        workflow = service.create_workflow(_changes())
        service.create_workflow([])
        service.submit_decisions(
            workflow.id,
            [{"change_id": "c1", "approved": True}, {"change_id": "c2", "approved": False}],
        )
        analytics = service.workflow_analytics()

        assert analytics["workflows"] == {
            "total": 2,
            "draft": 0,
            "in_review": 1,
            "completed": 1,
        }
        assert analytics["changes"]["approved"] == 1
        assert analytics["changes"]["rejected"] == 1
        assert analytics["changes"]["pending"] == 1
        assert analytics["changes"]["approval_rate"] == 50.0
        assert analytics["changes"]["by_category"] == {"spelling": 1, "grammar": 1, "style": 1}

    def test_analytics_empty(self, service):
        """Test analytics with no workflows."""
        analytics = service.workflow_analytics()
        assert analytics["workflows"]["total"] == 0
        assert analytics["changes"]["approval_rate"] == 0.0


@pytest.mark.unit
class TestStore:
    """Tests for InMemoryWorkflowStore."""

    def test_stale_commit_rejected(self):
        """Test a commit with an outdated version raises StaleWorkflowError."""
        store = InMemoryWorkflowStore()
        workflow = WorkflowService(store=store).create_workflow(_changes())
        store.commit(workflow, expected_version=0)

        with pytest.raises(StaleWorkflowError) as exc_info:
            store.commit(workflow, expected_version=0)
        assert exc_info.value.actual_version == 1

    def test_duplicate_create_rejected(self):
        """Test creating the same workflow id twice raises ConflictError."""
        store = InMemoryWorkflowStore()
        workflow = WorkflowService(store=store).create_workflow([])
        with pytest.raises(ConflictError):
            store.create(workflow)
        assert len(store) == 1
