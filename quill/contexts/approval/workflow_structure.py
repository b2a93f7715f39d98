"""
Approval workflow data structures.

A workflow wraps the suggested changes produced for one document and tracks a
per-change approve/reject decision. Status moves draft -> in_review ->
completed and only ever changes through next_status(), called once per applied
decision batch. Every structure here is frozen; the service builds an updated
copy and commits it to the store as a whole.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from quill.contexts.approval.exceptions import InvalidChangeError
from quill.utils.exceptions import ErrorCategory


class WorkflowStatus(str, Enum):
    DRAFT = "draft"
    IN_REVIEW = "in_review"
    COMPLETED = "completed"


class Approval(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Impact(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChangeType(str, Enum):
    ADDITION = "addition"
    DELETION = "deletion"
    MODIFICATION = "modification"
    REORDER = "reorder"


def next_status(current: WorkflowStatus, decided: int, total: int) -> WorkflowStatus:
    """
    Status after a decision batch has been applied.

    Completed is terminal. Otherwise: nothing decided -> draft, everything
    decided -> completed, anything in between -> in_review.
    """
    if current == WorkflowStatus.COMPLETED:
        return WorkflowStatus.COMPLETED
    if decided >= total:
        return WorkflowStatus.COMPLETED
    if decided == 0:
        return WorkflowStatus.DRAFT
    return WorkflowStatus.IN_REVIEW


def _coerce_enum(enum_cls, value, default, change_id, field_name):
    if value is None:
        return default
    try:
        return enum_cls(value.lower() if isinstance(value, str) else value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidChangeError(
            f"{field_name} must be one of: {allowed}",
            change_id=change_id,
            field_name=field_name,
            value=value,
        ) from None


@dataclass(frozen=True)
class ChangePosition:
    """Character range [start, end) in the original content."""

    start: int
    end: int
    section: Optional[str] = None

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "section": self.section}


@dataclass(frozen=True)
class SuggestedChange:
    """
    One original -> suggested edit awaiting a human decision.

    Attributes:
        id: Unique within its workflow
        category: Free-form grouping (e.g., "grammar", "keywords")
        original: Text being replaced
        suggested: Replacement text
        reason: Why the edit was suggested
        impact: low | medium | high
        confidence: Producer's confidence, 0-100
        change_type: addition | deletion | modification | reorder
        position: Optional location in the original content
        approval: pending | approved | rejected
        note: Optional reviewer note attached with the decision
    """

    id: str
    category: str
    original: str
    suggested: str
    reason: str = ""
    impact: Impact = Impact.MEDIUM
    confidence: float = 50
    change_type: ChangeType = ChangeType.MODIFICATION
    position: Optional[ChangePosition] = None
    approval: Approval = Approval.PENDING
    note: Optional[str] = None

    @property
    def is_decided(self) -> bool:
        return self.approval != Approval.PENDING

    def decide(self, approved: bool, note: Optional[str] = None) -> "SuggestedChange":
        """Return a copy carrying the decision."""
        return replace(
            self,
            approval=Approval.APPROVED if approved else Approval.REJECTED,
            note=note,
        )

    @classmethod
    def from_dict(cls, data, index: int) -> "SuggestedChange":
        """
        Build a pending change from a mapping, validating every field.

        Any approval state carried by the input is discarded.

        Args:
            data: Mapping with category/original/suggested and optional
                id, reason, impact, confidence, type, position
            index: Position in the input list, used for auto-assigned ids

        Raises:
            InvalidChangeError: If any field is malformed
        """
        if isinstance(data, SuggestedChange):
            data = data.to_dict()
        if not isinstance(data, Mapping):
            raise InvalidChangeError(
                f"Change #{index} must be a mapping", value=type(data).__name__
            )

        change_id = data.get("id")
        if change_id is None:
            change_id = f"change_{index}"
        elif not isinstance(change_id, str) or not change_id.strip():
            raise InvalidChangeError("Change id must be a non-empty string", value=change_id)
        change_id = change_id.strip()

        text_fields = {}
        for name in ("category", "original", "suggested", "reason"):
            value = data.get(name, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise InvalidChangeError(
                    f"{name} must be a string", change_id=change_id, field_name=name, value=value
                )
            text_fields[name] = value

        confidence = data.get("confidence", 50)
        if (
            isinstance(confidence, bool)
            or not isinstance(confidence, (int, float))
            or not 0 <= confidence <= 100
        ):
            raise InvalidChangeError(
                "confidence must be a number between 0 and 100",
                change_id=change_id,
                field_name="confidence",
                value=confidence,
            )

        impact = _coerce_enum(Impact, data.get("impact"), Impact.MEDIUM, change_id, "impact")
        change_type = _coerce_enum(
            ChangeType,
            data.get("change_type", data.get("type")),
            ChangeType.MODIFICATION,
            change_id,
            "type",
        )
        return cls(
            id=change_id,
            category=text_fields["category"] or "general",
            original=text_fields["original"],
            suggested=text_fields["suggested"],
            reason=text_fields["reason"],
            impact=impact,
            confidence=confidence,
            change_type=change_type,
            position=_parse_position(data.get("position"), change_id),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "original": self.original,
            "suggested": self.suggested,
            "reason": self.reason,
            "impact": self.impact.value,
            "confidence": self.confidence,
            "type": self.change_type.value,
            "position": self.position.to_dict() if self.position else None,
            "approval": self.approval.value,
            "note": self.note,
        }


def _parse_position(data, change_id: str) -> Optional[ChangePosition]:
    if data is None:
        return None
    if isinstance(data, ChangePosition):
        return data
    if not isinstance(data, Mapping):
        raise InvalidChangeError(
            "position must be a mapping with start and end",
            change_id=change_id,
            field_name="position",
            value=data,
        )

    start, end = data.get("start"), data.get("end")
    valid = (
        isinstance(start, int)
        and isinstance(end, int)
        and not isinstance(start, bool)
        and not isinstance(end, bool)
        and 0 <= start <= end
    )
    if not valid:
        raise InvalidChangeError(
            "position needs integer start <= end, both >= 0",
            change_id=change_id,
            field_name="position",
            value=data,
        )
    return ChangePosition(start=start, end=end, section=data.get("section"))


@dataclass(frozen=True)
class ApprovalWorkflow:
    """
    Review state for one batch of suggested changes.

    version increases by one on every committed update and is what the store
    compares on commit.
    """

    id: str
    status: WorkflowStatus
    changes: tuple = ()
    document_type: str = "resume"
    original_content: Optional[str] = None
    version: int = 0
    created_at: str = ""
    updated_at: str = ""

    @property
    def total(self) -> int:
        return len(self.changes)

    @property
    def decided_count(self) -> int:
        return sum(1 for change in self.changes if change.is_decided)

    @property
    def is_completed(self) -> bool:
        return self.status == WorkflowStatus.COMPLETED

    def change(self, change_id: str) -> Optional[SuggestedChange]:
        for change in self.changes:
            if change.id == change_id:
                return change
        return None

    def changes_with(self, approval: Approval) -> list[SuggestedChange]:
        return [change for change in self.changes if change.approval == approval]

    @property
    def approved_changes(self) -> list[SuggestedChange]:
        return self.changes_with(Approval.APPROVED)

    @property
    def rejected_changes(self) -> list[SuggestedChange]:
        return self.changes_with(Approval.REJECTED)

    @property
    def pending_changes(self) -> list[SuggestedChange]:
        return self.changes_with(Approval.PENDING)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status.value,
            "document_type": self.document_type,
            "version": self.version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "decided": self.decided_count,
            "total": self.total,
            "changes": [change.to_dict() for change in self.changes],
        }


@dataclass(frozen=True)
class Decision:
    """A reviewer's verdict on one change."""

    change_id: str
    approved: bool
    note: Optional[str] = None

    @classmethod
    def parse(cls, entry) -> "Decision":
        """
        Validate one decision entry.

        Accepts a Decision or a mapping with change_id (or id), approved
        and an optional note.

        Raises:
            InvalidChangeError: If the id is missing or approved is not a bool
        """
        if isinstance(entry, Decision):
            return entry
        if not isinstance(entry, Mapping):
            raise InvalidChangeError(
                "Decision must be a mapping", value=type(entry).__name__
            )

        change_id = entry.get("change_id", entry.get("id"))
        if not isinstance(change_id, str) or not change_id.strip():
            raise InvalidChangeError(
                "Decision is missing change_id", field_name="change_id", value=change_id
            )

        approved = entry.get("approved")
        if not isinstance(approved, bool):
            raise InvalidChangeError(
                "approved must be true or false",
                change_id=change_id,
                field_name="approved",
                value=approved,
            )

        note = entry.get("note")
        if note is not None and not isinstance(note, str):
            raise InvalidChangeError(
                "note must be a string", change_id=change_id, field_name="note", value=note
            )

        return cls(change_id=change_id.strip(), approved=approved, note=note)


@dataclass(frozen=True)
class DecisionError:
    """Item-level failure inside a decision batch."""

    change_id: Optional[str]
    category: ErrorCategory
    message: str

    def to_dict(self) -> dict:
        return {
            "change_id": self.change_id,
            "category": self.category.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class DecisionResult:
    """Outcome of submit_decisions: the committed workflow plus per-item errors."""

    workflow: ApprovalWorkflow
    errors: tuple = field(default_factory=tuple)
    applied: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "workflow": self.workflow.to_dict(),
            "applied": self.applied,
            "errors": [error.to_dict() for error in self.errors],
        }
