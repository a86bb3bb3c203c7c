"""REST API router."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse

from equityledger.api.deps import get_engine, verify_api_key
from equityledger.api.schemas import (
    AddNoteRequest,
    AdvanceDocumentRequest,
    ApproveTaskRequest,
    ApproveTaskResponse,
    DeleteItemResponse,
    DeletionCheckResponse,
    DocumentResponse,
    GenerateDocumentRequest,
    GenerateDocumentResponse,
    HealthResponse,
    ListSignaturesResponse,
    LogEffortRequest,
    LogEffortResponse,
    ProjectResponse,
    RecomputeResponse,
    SetEstimateRequest,
    SignatureResponse,
    SignDocumentRequest,
    SignDocumentResponse,
    TaskResponse,
    TicketResponse,
    UpdateTaskStatusRequest,
)
from equityledger.documents import render_html_preview
from equityledger.engine import (
    AllocationExceeded,
    DeletionBlocked,
    EquityLedgerEngine,
    EquityLedgerError,
    InvalidInput,
    InvalidTransition,
    MissingPrerequisiteDocument,
    NotFound,
    NotSignable,
    PartialApprovalFailure,
    TransientStoreError,
)
from equityledger.models import Project, Task

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

ERROR_STATUS: dict[type[EquityLedgerError], int] = {
    InvalidInput: 422,
    NotFound: 404,
    AllocationExceeded: 409,
    InvalidTransition: 409,
    MissingPrerequisiteDocument: 409,
    NotSignable: 409,
    DeletionBlocked: 409,
    PartialApprovalFailure: 503,
    TransientStoreError: 503,
}


def http_error(error: EquityLedgerError) -> HTTPException:
    """Translate an engine error into an HTTP error with a structured body."""
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(error, cls)),
        500,
    )
    headers = {"Retry-After": "1"} if error.retryable else None
    return HTTPException(status_code=status_code, detail=error.to_dict(), headers=headers)


def _task_response(task: Task) -> TaskResponse:
    return TaskResponse(**task.model_dump(mode="json"))


def _project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        **project.model_dump(mode="json"),
        equity_remaining=float(project.equity_remaining),
    )


# ============================================================================
# Health
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version="0.1.0")


# ============================================================================
# Projects & tasks
# ============================================================================


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: UUID, engine: EquityLedgerEngine = Depends(get_engine)):
    """Get a project's equity pool and completion."""
    try:
        project = await engine.get_project(project_id)
    except EquityLedgerError as e:
        raise http_error(e)
    return _project_response(project)


@router.post("/projects/{project_id}/recompute", response_model=RecomputeResponse)
async def recompute_project(project_id: UUID, engine: EquityLedgerEngine = Depends(get_engine)):
    """Recompute equity-weighted project completion."""
    try:
        completion = await engine.recompute_project_completion(project_id)
    except EquityLedgerError as e:
        raise http_error(e)
    return RecomputeResponse(project_id=project_id, completion_percentage=completion)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: UUID, engine: EquityLedgerEngine = Depends(get_engine)):
    """Get a task."""
    try:
        task = await engine.get_task(task_id)
    except EquityLedgerError as e:
        raise http_error(e)
    return _task_response(task)


@router.post("/tasks/{task_id}/time-entries", response_model=LogEffortResponse)
async def log_effort(
    task_id: UUID,
    request: LogEffortRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """
    Log hours against a task.

    Not idempotent: a retried request logs the hours again.
    """
    try:
        result = await engine.log_effort(
            task_id=task_id,
            actor_id=request.actor_id,
            hours=request.hours,
            description=request.description,
        )
    except EquityLedgerError as e:
        raise http_error(e)
    return LogEffortResponse(**result.model_dump(mode="json"))


@router.post("/tasks/{task_id}/estimate", response_model=TaskResponse)
async def set_estimate(
    task_id: UUID,
    request: SetEstimateRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Change a task's estimated hours."""
    try:
        task = await engine.set_estimated_hours(task_id, request.estimated_hours)
    except EquityLedgerError as e:
        raise http_error(e)
    return _task_response(task)


@router.post("/tasks/{task_id}/approve", response_model=ApproveTaskResponse)
async def approve_task(
    task_id: UUID,
    request: ApproveTaskRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Approve a task and grant its equity. Safe to retry."""
    try:
        result = await engine.approve_task(task_id, request.approver_id, notes=request.notes)
    except EquityLedgerError as e:
        raise http_error(e)
    return ApproveTaskResponse(
        task=_task_response(result.task),
        equity_granted=float(result.equity_granted),
        project_equity_allocated=float(result.project_equity_allocated),
        project_equity_allocation=float(result.project_equity_allocation),
        already_approved=result.already_approved,
    )


@router.post("/tasks/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: UUID,
    request: UpdateTaskStatusRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Move a task to another status (never approved)."""
    try:
        task = await engine.update_task_status(task_id, request.status, request.actor_id)
    except EquityLedgerError as e:
        raise http_error(e)
    return _task_response(task)


# ============================================================================
# Documents
# ============================================================================


@router.post("/documents", response_model=GenerateDocumentResponse)
async def generate_document(
    request: GenerateDocumentRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Generate an agreement in draft. Returns the existing id if already generated."""
    try:
        document_id = await engine.generate_document(
            document_type=request.document_type,
            business_id=request.business_id,
            counterparty_id=request.counterparty_id,
            project_id=request.project_id,
            application_id=request.application_id,
            accepted_job_id=request.accepted_job_id,
            completed_deliverables=request.completed_deliverables,
        )
    except EquityLedgerError as e:
        raise http_error(e)
    return GenerateDocumentResponse(document_id=document_id)


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    output_format: Optional[str] = Query(None, alias="format", pattern="^(json|html)$"),
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Get a document; ``?format=html`` returns the rendered preview."""
    try:
        document = await engine.get_document(document_id)
    except EquityLedgerError as e:
        raise http_error(e)
    if output_format == "html":
        return HTMLResponse(render_html_preview(document.content or ""))
    return DocumentResponse(**document.model_dump(mode="json"))


@router.post("/documents/{document_id}/status", response_model=DocumentResponse)
async def advance_document_status(
    document_id: UUID,
    request: AdvanceDocumentRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Advance a document through its lifecycle."""
    try:
        document = await engine.advance_document_status(document_id, request.status)
    except EquityLedgerError as e:
        raise http_error(e)
    return DocumentResponse(**document.model_dump(mode="json"))


@router.post("/documents/{document_id}/signatures", response_model=SignDocumentResponse)
async def sign_document(
    document_id: UUID,
    request: SignDocumentRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Sign a document in review or final. Does not change its status."""
    try:
        signature_id = await engine.sign_document(
            document_id,
            request.signer_id,
            request.signature_data,
            remarks=request.remarks,
            metadata=request.metadata,
        )
    except EquityLedgerError as e:
        raise http_error(e)
    return SignDocumentResponse(signature_id=signature_id)


@router.get("/documents/{document_id}/signatures", response_model=ListSignaturesResponse)
async def list_signatures(document_id: UUID, engine: EquityLedgerEngine = Depends(get_engine)):
    """List a document's signatures, oldest first."""
    try:
        signatures = await engine.list_signatures(document_id)
    except EquityLedgerError as e:
        raise http_error(e)
    return ListSignaturesResponse(
        signatures=[SignatureResponse(**s.model_dump(mode="json")) for s in signatures]
    )


# ============================================================================
# Work items
# ============================================================================


@router.get("/items/{item_id}/deletable", response_model=DeletionCheckResponse)
async def can_delete(item_id: UUID, engine: EquityLedgerEngine = Depends(get_engine)):
    """Whether a ticket or task may be deleted."""
    try:
        check = await engine.can_delete(item_id)
    except EquityLedgerError as e:
        raise http_error(e)
    return DeletionCheckResponse(**check.model_dump(mode="json"))


@router.delete("/items/{item_id}", response_model=DeleteItemResponse)
async def delete_item(
    item_id: UUID,
    actor_id: str = Query(..., description="Who deletes the item"),
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Archive and remove a ticket or task without logged time or progress."""
    try:
        archive_id = await engine.soft_delete(item_id, actor_id)
    except EquityLedgerError as e:
        raise http_error(e)
    return DeleteItemResponse(item_id=item_id, archive_id=archive_id)


@router.post("/tickets/{ticket_id}/notes", response_model=TicketResponse)
async def add_ticket_note(
    ticket_id: UUID,
    request: AddNoteRequest,
    engine: EquityLedgerEngine = Depends(get_engine),
):
    """Append a note to a ticket."""
    try:
        ticket = await engine.add_ticket_note(ticket_id, request.actor_id, request.comment)
    except EquityLedgerError as e:
        raise http_error(e)
    return TicketResponse(**ticket.model_dump(mode="json"))
