"""Custom exceptions for the approval context with workflow references."""

from typing import Optional

from quill.utils.exceptions import ConflictError, NotFoundError, ValidationError


class WorkflowNotFoundError(NotFoundError):
    """
    Exception raised when a workflow id is not in the store.

    Attributes:
        workflow_id: The id that was looked up
    """

    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        super().__init__(f"Workflow not found: {workflow_id}")


class WorkflowClosedError(ConflictError):
    """
    Exception raised when decisions are submitted to a completed workflow.

    Attributes:
        workflow_id: The completed workflow
    """

    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        super().__init__(
            f"Workflow {workflow_id} is completed and no longer accepts decisions",
        )


class StaleWorkflowError(ConflictError):
    """
    Exception raised by a store when a commit carries an outdated version.

    Attributes:
        workflow_id: Workflow being committed
        expected_version: Version the caller read
        actual_version: Version currently stored
    """

    def __init__(self, workflow_id: str, expected_version: int, actual_version: int):
        self.workflow_id = workflow_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Workflow {workflow_id} changed concurrently",
            detail=f"expected version {expected_version}, found {actual_version}",
        )


class InvalidChangeError(ValidationError):
    """
    Exception raised when a suggested change or decision is malformed.

    Attributes:
        message: Error description
        change_id: Id of the offending change, when known
        field_name: Offending field, when known
    """

    def __init__(
        self,
        message: str,
        change_id: Optional[str] = None,
        field_name: Optional[str] = None,
        value=None,
    ):
        self.change_id = change_id
        self.field_name = field_name

        # Build enhanced error message
        parts = [message]
        if change_id:
            parts.append(f"change={change_id}")
        if field_name:
            parts.append(f"field={field_name}")

        detail = None if value is None else repr(value)
        super().__init__(" | ".join(parts), detail=detail)
