"""SQLAlchemy table definitions."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from equityledger.db.base import Base
from equityledger.models.enums import (
    ApplicationStatus,
    DocumentStatus,
    DocumentType,
    TaskStatus,
    WorkItemKind,
    enum_values,
)
from equityledger.utils.time import ensure_utc


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp that stays aware on stores lacking tz support."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_result_value(self, value, dialect):
        return ensure_utc(value)


# Percentages and equity amounts; exact so the allocation ceiling compares exactly
Amount = Numeric(12, 4, asdecimal=True)


def _status_enum(enum_cls, name: str) -> Enum:
    return Enum(enum_cls, name=name, values_callable=enum_values, validate_strings=True)


class BusinessTable(Base):
    """Businesses table - agreement counterparties on the business side."""

    __tablename__ = "businesses"

    business_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    entity_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    equity_class: Mapped[str | None] = mapped_column(String(100), nullable=True)


class ProfileTable(Base):
    """Profiles table - job seekers."""

    __tablename__ = "profiles"

    profile_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)


class ProjectTable(Base):
    """Projects table - equity pools."""

    __tablename__ = "business_projects"

    project_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    business_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("businesses.business_id"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Equity pool (fixed) and committed share
    equity_allocation: Mapped[Decimal] = mapped_column(Amount, nullable=False)
    equity_allocated: Mapped[Decimal] = mapped_column(Amount, nullable=False, default=Decimal(0))

    completion_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (Index("idx_projects_business", "business_id"),)


class TaskTable(Base):
    """Project sub-tasks table - units of work carrying equity."""

    __tablename__ = "project_sub_tasks"

    task_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    project_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("business_projects.project_id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    equity_allocation: Mapped[Decimal] = mapped_column(Amount, nullable=False, default=Decimal(0))

    # Progress
    status: Mapped[TaskStatus] = mapped_column(
        _status_enum(TaskStatus, "taskstatus"), nullable=False, default=TaskStatus.OPEN
    )
    completion_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    estimated_hours: Mapped[Decimal | None] = mapped_column(Amount, nullable=True)
    hours_logged: Mapped[Decimal] = mapped_column(Amount, nullable=False, default=Decimal(0))
    last_activity_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    # Approval
    equity_earned: Mapped[Decimal | None] = mapped_column(Amount, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (Index("idx_tasks_project_status", "project_id", "status"),)


class TimeEntryTable(Base):
    """Time entries table - append-only effort log."""

    __tablename__ = "time_entries"

    time_entry_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    task_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("project_sub_tasks.task_id"), nullable=False
    )
    ticket_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    actor_id: Mapped[str] = mapped_column(String(255), nullable=False)
    hours_logged: Mapped[Decimal] = mapped_column(Amount, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    start_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (
        Index("idx_time_entries_task", "task_id", "created_at"),
        Index("idx_time_entries_ticket", "ticket_id"),
    )


class TicketTable(Base):
    """Tickets table - board cards linked to tasks."""

    __tablename__ = "tickets"

    ticket_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    project_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    task_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("project_sub_tasks.task_id", ondelete="SET NULL"), nullable=True
    )
    job_app_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="todo")
    priority: Mapped[str] = mapped_column(String(50), nullable=False, default="medium")
    ticket_type: Mapped[str] = mapped_column(String(50), nullable=False, default="task")
    reporter_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assignee_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    estimated_hours: Mapped[Decimal | None] = mapped_column(Amount, nullable=True)
    hours_logged: Mapped[Decimal] = mapped_column(Amount, nullable=False, default=Decimal(0))
    completion_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    equity_points: Mapped[Decimal | None] = mapped_column(Amount, nullable=True)

    # Append-only note log
    notes: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (
        Index("idx_tickets_task", "task_id"),
        Index("idx_tickets_project_status", "project_id", "status"),
    )


class DeletedWorkItemTable(Base):
    """Archive of removed tasks and tickets."""

    __tablename__ = "deleted_work_items"

    archive_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    original_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    item_kind: Mapped[WorkItemKind] = mapped_column(
        _status_enum(WorkItemKind, "workitemkind"), nullable=False
    )
    project_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    completion_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    estimated_hours: Mapped[Decimal | None] = mapped_column(Amount, nullable=True)
    snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    deleted_by: Mapped[str] = mapped_column(String(255), nullable=False)
    deleted_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (Index("idx_deleted_items_original", "original_id"),)


class JobApplicationTable(Base):
    """Job applications table."""

    __tablename__ = "job_applications"

    job_app_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    task_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("project_sub_tasks.task_id", ondelete="SET NULL"), nullable=True
    )
    project_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    applicant_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    status: Mapped[ApplicationStatus] = mapped_column(
        _status_enum(ApplicationStatus, "applicationstatus"),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )

    # NDA mirror
    nda_document_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    nda_status: Mapped[DocumentStatus | None] = mapped_column(
        _status_enum(DocumentStatus, "documentstatus"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (Index("idx_job_applications_task", "task_id", "status"),)


class AcceptedJobTable(Base):
    """Accepted jobs table - anchors work contracts and award agreements."""

    __tablename__ = "accepted_jobs"

    accepted_job_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    job_app_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("job_applications.job_app_id"), nullable=False
    )
    equity_agreed: Mapped[Decimal] = mapped_column(Amount, nullable=False, default=Decimal(0))
    agreed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    accepted_discourse: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Contract mirrors
    work_contract_document_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    work_contract_status: Mapped[DocumentStatus | None] = mapped_column(
        _status_enum(DocumentStatus, "documentstatus"), nullable=True
    )
    award_agreement_document_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    award_agreement_status: Mapped[DocumentStatus | None] = mapped_column(
        _status_enum(DocumentStatus, "documentstatus"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (UniqueConstraint("job_app_id", name="uq_accepted_job_application"),)


class LegalDocumentTable(Base):
    """Legal documents table."""

    __tablename__ = "legal_documents"

    document_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    document_type: Mapped[DocumentType] = mapped_column(
        _status_enum(DocumentType, "documenttype"), nullable=False
    )
    status: Mapped[DocumentStatus] = mapped_column(
        _status_enum(DocumentStatus, "documentstatus"),
        nullable=False,
        default=DocumentStatus.DRAFT,
    )

    business_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    counterparty_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    project_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    job_application_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    accepted_job_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    version: Mapped[str] = mapped_column(String(20), nullable=False)
    template_version: Mapped[str | None] = mapped_column(String(20), nullable=True)
    storage_path: Mapped[str] = mapped_column(String(512), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    executed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    __table_args__ = (
        Index("idx_documents_application", "job_application_id", "document_type"),
        Index("idx_documents_accepted_job", "accepted_job_id", "document_type"),
    )


class SignatureTable(Base):
    """Document signatures table - append-only."""

    __tablename__ = "document_signatures"

    signature_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    document_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("legal_documents.document_id"), nullable=False
    )
    signer_id: Mapped[str] = mapped_column(String(255), nullable=False)
    signature_data: Mapped[str] = mapped_column(Text, nullable=False)
    signature_metadata: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    version: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (Index("idx_signatures_document", "document_id", "created_at"),)


class DocumentTemplateTable(Base):
    """Document templates table."""

    __tablename__ = "document_templates"

    template_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    template_type: Mapped[DocumentType] = mapped_column(
        _status_enum(DocumentType, "documenttype"), nullable=False
    )
    template_version: Mapped[str] = mapped_column(String(20), nullable=False)
    template_name: Mapped[str] = mapped_column(String(255), nullable=False)
    template_content: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("template_type", "template_version", name="uq_template_version"),
    )
