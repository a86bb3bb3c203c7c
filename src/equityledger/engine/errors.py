"""EquityLedger engine errors."""

from decimal import Decimal
from typing import Any


class EquityLedgerError(Exception):
    """Base error for EquityLedger operations."""

    retryable = False

    def __init__(self, message: str, code: str = "EQUITYLEDGER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Body for error responses."""
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class InvalidInput(EquityLedgerError):
    """Malformed caller arguments."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "INVALID_INPUT")
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class NotFound(EquityLedgerError):
    """Referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found: {entity_id}", "NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id


class AllocationExceeded(EquityLedgerError):
    """Approving would push a project past its equity pool."""

    def __init__(self, project_id: Any, allocated: Decimal, requested: Decimal, ceiling: Decimal):
        super().__init__(
            f"Project {project_id} has {allocated} of {ceiling} equity allocated; "
            f"granting {requested} more would exceed the pool",
            "ALLOCATION_EXCEEDED",
        )
        self.project_id = project_id
        self.allocated = allocated
        self.requested = requested
        self.ceiling = ceiling

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body.update(
            allocated=str(self.allocated),
            requested=str(self.requested),
            ceiling=str(self.ceiling),
        )
        return body


class InvalidTransition(EquityLedgerError):
    """Status move not allowed by the lifecycle tables."""

    def __init__(self, entity: str, current_status: str, requested_status: str):
        super().__init__(
            f"Invalid {entity} transition from {current_status} to {requested_status}",
            "INVALID_TRANSITION",
        )
        self.entity = entity
        self.current_status = current_status
        self.requested_status = requested_status


class MissingPrerequisiteDocument(EquityLedgerError):
    """Award agreement requested before a work contract exists."""

    def __init__(self, accepted_job_id: Any, required: str):
        super().__init__(
            f"Accepted job {accepted_job_id} has no {required} document",
            "MISSING_PREREQUISITE_DOCUMENT",
        )
        self.accepted_job_id = accepted_job_id
        self.required = required


class NotSignable(EquityLedgerError):
    """Signature attempted outside review/final."""

    def __init__(self, document_id: Any, status: str):
        super().__init__(
            f"Document {document_id} cannot be signed in status {status}",
            "NOT_SIGNABLE",
        )
        self.document_id = document_id
        self.status = status


class DeletionBlocked(EquityLedgerError):
    """Item carries logged time or progress."""

    def __init__(self, item_id: Any, reason: str):
        super().__init__(f"Item {item_id} cannot be deleted: {reason}", "DELETION_BLOCKED")
        self.item_id = item_id
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["reason"] = self.reason
        return body


class PartialApprovalFailure(EquityLedgerError):
    """Approval cascade failed at a named step; nothing was committed."""

    retryable = True

    def __init__(self, task_id: Any, step: str, completed_steps: list[str]):
        super().__init__(
            f"Approval of task {task_id} failed at step '{step}'",
            "PARTIAL_APPROVAL_FAILURE",
        )
        self.task_id = task_id
        self.step = step
        self.completed_steps = list(completed_steps)

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body.update(step=self.step, completed_steps=self.completed_steps)
        return body


class TransientStoreError(EquityLedgerError):
    """Store call timed out or lost its connection."""

    retryable = True

    def __init__(self, intent: str, detail: str = ""):
        super().__init__(
            f"Ledger store unavailable during {intent}" + (f": {detail}" if detail else ""),
            "TRANSIENT_STORE_ERROR",
        )
        self.intent = intent
        self.detail = detail
