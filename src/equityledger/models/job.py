"""Job application and accepted job models."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from equityledger.models.enums import ApplicationStatus, DocumentStatus, DocumentType


class JobApplication(BaseModel):
    """A counterparty's application to a project task."""

    job_app_id: UUID
    task_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    applicant_id: UUID
    status: ApplicationStatus = ApplicationStatus.PENDING

    # Mirror of the linked NDA
    nda_document_id: Optional[UUID] = None
    nda_status: Optional[DocumentStatus] = None

    created_at: datetime
    updated_at: datetime


class AcceptedJob(BaseModel):
    """Finalized match between a counterparty and a task; anchors contracts."""

    accepted_job_id: UUID
    job_app_id: UUID
    equity_agreed: Decimal = Decimal(0)
    agreed_at: Optional[datetime] = None
    accepted_discourse: Optional[str] = None

    # Mirrors of the contract documents
    work_contract_document_id: Optional[UUID] = None
    work_contract_status: Optional[DocumentStatus] = None
    award_agreement_document_id: Optional[UUID] = None
    award_agreement_status: Optional[DocumentStatus] = None

    created_at: datetime
    updated_at: datetime

    def document_id_for(self, document_type: DocumentType) -> Optional[UUID]:
        if document_type is DocumentType.WORK_CONTRACT:
            return self.work_contract_document_id
        if document_type is DocumentType.AWARD_AGREEMENT:
            return self.award_agreement_document_id
        return None
