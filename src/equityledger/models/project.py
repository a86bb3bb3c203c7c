"""Project, task and time entry models."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from equityledger.models.enums import TaskStatus


class Project(BaseModel):
    """A business project holding a fixed equity pool."""

    project_id: UUID
    business_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None

    # Equity pool (fixed at creation) and the share already committed
    equity_allocation: Decimal
    equity_allocated: Decimal = Decimal(0)

    # Equity-weighted mean of task completion
    completion_percentage: int = 0

    created_at: datetime
    updated_at: datetime

    @property
    def equity_remaining(self) -> Decimal:
        return self.equity_allocation - self.equity_allocated


class Task(BaseModel):
    """A unit of work inside a project carrying a slice of its equity."""

    # Identity
    task_id: UUID
    project_id: UUID

    # Descriptive (opaque to the engine)
    title: str
    description: Optional[str] = None

    # Equity committed to this task when approved
    equity_allocation: Decimal = Decimal(0)

    # Progress
    status: TaskStatus = TaskStatus.OPEN
    completion_percentage: int = Field(default=0, ge=0, le=100)
    estimated_hours: Optional[Decimal] = None
    hours_logged: Decimal = Decimal(0)
    last_activity_at: Optional[datetime] = None

    # Approval
    equity_earned: Optional[Decimal] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    def has_progress(self) -> bool:
        return self.hours_logged > 0 or self.completion_percentage > 0


class TimeEntry(BaseModel):
    """Immutable record of logged effort."""

    time_entry_id: UUID
    task_id: UUID
    ticket_id: Optional[UUID] = None
    actor_id: str
    hours_logged: Decimal
    description: str = ""
    start_time: datetime
    end_time: datetime
    created_at: datetime
