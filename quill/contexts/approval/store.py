"""
In-memory workflow storage.

The service talks to its store through four methods: get, list, create and
commit. Any object providing them can be passed to WorkflowService, e.g. a
database-backed store when workflows must survive a restart.

commit() is a compare-and-swap on ApprovalWorkflow.version, performed under a
per-workflow lock, so a batch either lands whole or not at all.
"""

import threading
from dataclasses import replace
from typing import Optional

from quill.contexts.approval.exceptions import StaleWorkflowError, WorkflowNotFoundError
from quill.contexts.approval.workflow_structure import ApprovalWorkflow
from quill.utils.exceptions import ConflictError


class InMemoryWorkflowStore:
    """Thread-safe dict of workflow id -> ApprovalWorkflow."""

    def __init__(self):
        self._workflows: dict[str, ApprovalWorkflow] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, workflow_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(workflow_id)
            if lock is None:
                lock = self._locks[workflow_id] = threading.Lock()
            return lock

    def get(self, workflow_id: str) -> Optional[ApprovalWorkflow]:
        return self._workflows.get(workflow_id)

    def list(self) -> list[ApprovalWorkflow]:
        with self._registry_lock:
            return list(self._workflows.values())

    def create(self, workflow: ApprovalWorkflow) -> ApprovalWorkflow:
        """
        Store a new workflow.

        Raises:
            ConflictError: If the id is already taken
        """
        with self._lock_for(workflow.id):
            if workflow.id in self._workflows:
                raise ConflictError("Workflow already exists", detail=workflow.id)
            self._workflows[workflow.id] = workflow
        return workflow

    def commit(self, workflow: ApprovalWorkflow, expected_version: int) -> ApprovalWorkflow:
        """
        Replace the stored workflow if it is still at expected_version.

        Returns:
            The stored workflow, with version expected_version + 1

        Raises:
            WorkflowNotFoundError: If the workflow was never created
            StaleWorkflowError: If another commit landed first
        """
        with self._lock_for(workflow.id):
            current = self._workflows.get(workflow.id)
            if current is None:
                raise WorkflowNotFoundError(workflow.id)
            if current.version != expected_version:
                raise StaleWorkflowError(workflow.id, expected_version, current.version)

            stored = replace(workflow, version=expected_version + 1)
            self._workflows[workflow.id] = stored
            return stored

    def __len__(self) -> int:
        return len(self._workflows)
