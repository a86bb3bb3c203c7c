"""Results returned by engine intents."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from equityledger.models.enums import TaskStatus, WorkItemKind
from equityledger.models.project import Task


class EffortResult(BaseModel):
    """Task snapshot after logging effort."""

    task_id: UUID
    time_entry_id: UUID
    hours_logged: Decimal
    completion_percentage: int
    status: TaskStatus
    project_completion_percentage: int


class ApprovalResult(BaseModel):
    """Outcome of a task approval."""

    task: Task
    equity_granted: Decimal
    project_equity_allocated: Decimal
    project_equity_allocation: Decimal
    already_approved: bool = False


class DeletionCheck(BaseModel):
    """Whether an item may be removed, and why not if it may not."""

    item_id: UUID
    item_kind: WorkItemKind
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed
