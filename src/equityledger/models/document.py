"""Legal document, signature and template models."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from equityledger.models.enums import DocumentStatus, DocumentType


class LegalDocument(BaseModel):
    """A generated agreement moving through its status lifecycle."""

    document_id: UUID
    document_type: DocumentType
    status: DocumentStatus = DocumentStatus.DRAFT

    # Owning references (which ones are set depends on the type)
    business_id: Optional[UUID] = None
    counterparty_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    job_application_id: Optional[UUID] = None
    accepted_job_id: Optional[UUID] = None

    version: str
    template_version: Optional[str] = None

    # Opaque content handle plus the rendered text
    storage_path: str
    content: Optional[str] = None

    created_at: datetime
    updated_at: datetime
    executed_at: Optional[datetime] = None


class Signature(BaseModel):
    """Append-only signature on a specific document version."""

    signature_id: UUID
    document_id: UUID
    signer_id: str
    signature_data: str
    signature_metadata: dict[str, Any] = Field(default_factory=dict)
    version: str
    created_at: datetime


class DocumentTemplate(BaseModel):
    """Template text with ``{{placeholder}}`` fields."""

    template_id: Optional[UUID] = None
    template_type: DocumentType
    template_version: str
    template_name: str
    template_content: str
    is_active: bool = True


class DocumentData(BaseModel):
    """Values substituted into a template."""

    business_name: str = Field(alias="businessName")
    business_rep_name: str = Field(default="", alias="businessRepName")
    business_rep_title: str = Field(default="Representative", alias="businessRepTitle")
    business_email: str = Field(default="", alias="businessEmail")
    business_phone: str = Field(default="", alias="businessPhone")
    jobseeker_name: str = Field(alias="jobseekerName")
    jobseeker_email: str = Field(default="", alias="jobseekerEmail")
    jobseeker_phone: str = Field(default="", alias="jobseekerPhone")
    effective_date: str = Field(alias="effectiveDate")
    duration: str = Field(alias="duration")
    confidentiality_period: str = Field(alias="confidentialityPeriod")
    arbitration_org: str = Field(alias="arbitrationOrg")

    # Contract and award fields
    project_title: Optional[str] = Field(default=None, alias="projectTitle")
    project_description: Optional[str] = Field(default=None, alias="projectDescription")
    equity_amount: Optional[str] = Field(default=None, alias="equityAmount")
    equity_class: Optional[str] = Field(default=None, alias="equityClass")
    entity_type: Optional[str] = Field(default=None, alias="entityType")
    contract_date: Optional[str] = Field(default=None, alias="contractDate")
    completed_deliverables: Optional[str] = Field(default=None, alias="completedDeliverables")

    model_config = {"populate_by_name": True}

    def placeholders(self) -> dict[str, str]:
        """Template field name -> value, skipping unset optional fields."""
        return {
            key: value
            for key, value in self.model_dump(by_alias=True).items()
            if value is not None
        }
