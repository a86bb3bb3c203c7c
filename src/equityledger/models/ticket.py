"""Ticket (work item) and archive models."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from equityledger.models.enums import WorkItemKind


class TicketNote(BaseModel):
    """One entry in a ticket's append-only note log."""

    id: str
    action: str
    user: str
    timestamp: datetime
    comment: Optional[str] = None
    equity: Optional[Decimal] = None


class Ticket(BaseModel):
    """Board card tracking a task for the counterparty doing the work."""

    ticket_id: UUID
    project_id: Optional[UUID] = None
    task_id: Optional[UUID] = None
    job_app_id: Optional[UUID] = None

    title: str
    description: Optional[str] = None
    status: str = "todo"
    priority: str = "medium"
    ticket_type: str = "task"
    reporter_id: Optional[str] = None
    assignee_id: Optional[str] = None
    due_date: Optional[datetime] = None

    estimated_hours: Optional[Decimal] = None
    hours_logged: Decimal = Decimal(0)
    completion_percentage: int = 0
    equity_points: Optional[Decimal] = None

    notes: list[TicketNote] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime


class DeletedWorkItem(BaseModel):
    """Archived copy of a task or ticket removed by the deletion guard."""

    archive_id: UUID
    original_id: UUID
    item_kind: WorkItemKind
    project_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    status: str
    completion_percentage: int = 0
    estimated_hours: Optional[Decimal] = None
    snapshot: dict[str, Any] = Field(default_factory=dict)
    deleted_by: str
    deleted_at: datetime
