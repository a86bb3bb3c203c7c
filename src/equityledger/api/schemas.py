"""API request/response schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field


# ============================================================================
# Shared schemas
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ErrorBody(BaseModel):
    """Body carried under ``detail`` for engine errors."""

    code: str
    message: str
    retryable: bool = False


# ============================================================================
# Projects & tasks
# ============================================================================


class ProjectResponse(BaseModel):
    """Project (equity pool) response."""

    project_id: UUID
    business_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    equity_allocation: float
    equity_allocated: float
    equity_remaining: float
    completion_percentage: int
    created_at: datetime
    updated_at: datetime


class RecomputeResponse(BaseModel):
    project_id: UUID
    completion_percentage: int


class TaskResponse(BaseModel):
    """Task response."""

    task_id: UUID
    project_id: UUID
    title: str
    description: Optional[str] = None
    equity_allocation: float
    status: str
    completion_percentage: int
    estimated_hours: Optional[float] = None
    hours_logged: float
    last_activity_at: Optional[datetime] = None
    equity_earned: Optional[float] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class LogEffortRequest(BaseModel):
    """Log effort request."""

    actor_id: str = Field(..., description="Who did the work")
    hours: float = Field(..., description="Hours worked, must be positive")
    description: str = Field("", description="What was done")


class LogEffortResponse(BaseModel):
    task_id: UUID
    time_entry_id: UUID
    hours_logged: float
    completion_percentage: int
    status: str
    project_completion_percentage: int


class SetEstimateRequest(BaseModel):
    """Set estimated hours request; null clears the estimate."""

    estimated_hours: Optional[float] = Field(None, description="Estimated hours, >= 0")


class ApproveTaskRequest(BaseModel):
    """Approve task request."""

    approver_id: str = Field(..., description="Who approves the work")
    notes: Optional[str] = Field(None, description="Approval notes")


class ApproveTaskResponse(BaseModel):
    task: TaskResponse
    equity_granted: float
    project_equity_allocated: float
    project_equity_allocation: float
    already_approved: bool


class UpdateTaskStatusRequest(BaseModel):
    """Manual task status change."""

    status: str = Field(..., description="Target status, e.g. in-progress")
    actor_id: str = Field(..., description="Who moved the task")


# ============================================================================
# Documents
# ============================================================================


class GenerateDocumentRequest(BaseModel):
    """Generate document request."""

    document_type: str = Field(..., description="nda, work_contract or award_agreement")
    business_id: UUID
    counterparty_id: UUID
    project_id: UUID
    application_id: Optional[UUID] = Field(None, description="Required for nda")
    accepted_job_id: Optional[UUID] = Field(
        None, description="Required for work_contract and award_agreement"
    )
    completed_deliverables: Optional[str] = Field(
        None, description="Award agreements: description of the completed work"
    )


class GenerateDocumentResponse(BaseModel):
    document_id: UUID


class DocumentResponse(BaseModel):
    """Legal document response."""

    document_id: UUID
    document_type: str
    status: str
    business_id: Optional[UUID] = None
    counterparty_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    job_application_id: Optional[UUID] = None
    accepted_job_id: Optional[UUID] = None
    version: str
    template_version: Optional[str] = None
    storage_path: str
    content: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    executed_at: Optional[datetime] = None


class AdvanceDocumentRequest(BaseModel):
    status: str = Field(..., description="Target status, e.g. review")


class SignDocumentRequest(BaseModel):
    """Sign document request."""

    signer_id: str
    signature_data: str = Field(..., description="Signature payload (e.g. drawn image data)")
    remarks: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class SignDocumentResponse(BaseModel):
    signature_id: UUID


class SignatureResponse(BaseModel):
    signature_id: UUID
    document_id: UUID
    signer_id: str
    signature_data: str
    signature_metadata: dict[str, Any]
    version: str
    created_at: datetime


class ListSignaturesResponse(BaseModel):
    signatures: list[SignatureResponse]


# ============================================================================
# Work items
# ============================================================================


class DeletionCheckResponse(BaseModel):
    item_id: UUID
    item_kind: str
    allowed: bool
    reason: Optional[str] = None


class DeleteItemResponse(BaseModel):
    item_id: UUID
    archive_id: UUID


class AddNoteRequest(BaseModel):
    actor_id: str
    comment: str


class TicketResponse(BaseModel):
    """Ticket response."""

    ticket_id: UUID
    project_id: Optional[UUID] = None
    task_id: Optional[UUID] = None
    title: str
    status: str
    hours_logged: float
    completion_percentage: int
    equity_points: Optional[float] = None
    notes: list[dict[str, Any]]
    updated_at: datetime
