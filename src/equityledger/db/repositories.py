"""Database repositories for EquityLedger entities."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from equityledger.db.tables import (
    AcceptedJobTable,
    BusinessTable,
    DeletedWorkItemTable,
    DocumentTemplateTable,
    JobApplicationTable,
    LegalDocumentTable,
    ProfileTable,
    ProjectTable,
    SignatureTable,
    TaskTable,
    TicketTable,
    TimeEntryTable,
)
from equityledger.models import (
    AcceptedJob,
    ApplicationStatus,
    Business,
    DeletedWorkItem,
    DocumentStatus,
    DocumentTemplate,
    DocumentType,
    JobApplication,
    LegalDocument,
    Profile,
    Project,
    Signature,
    Task,
    Ticket,
    TicketNote,
    TimeEntry,
    WorkItemKind,
)
from equityledger.utils.time import utc_now


class ProjectRepository:
    """Repository for project (equity pool) operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        title: str,
        equity_allocation: Decimal,
        business_id: UUID | None = None,
        description: str | None = None,
        project_id: UUID | None = None,
    ) -> Project:
        now = utc_now()
        row = ProjectTable(
            project_id=project_id or uuid4(),
            business_id=business_id,
            title=title,
            description=description,
            equity_allocation=equity_allocation,
            equity_allocated=Decimal(0),
            completion_percentage=0,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def get_row(self, project_id: UUID, for_update: bool = False) -> ProjectTable | None:
        query = (
            select(ProjectTable)
            .where(ProjectTable.project_id == project_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get(self, project_id: UUID, for_update: bool = False) -> Project | None:
        """Get a project by ID, optionally locking its row."""
        row = await self.get_row(project_id, for_update=for_update)
        return self._row_to_model(row) if row else None

    async def update(self, project_id: UUID, **values: Any) -> Project:
        row = await self.get_row(project_id)
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = utc_now()
        await self.session.flush()
        return self._row_to_model(row)

    def _row_to_model(self, row: ProjectTable) -> Project:
        """Convert database row to model."""
        return Project(
            project_id=row.project_id,
            business_id=row.business_id,
            title=row.title,
            description=row.description,
            equity_allocation=row.equity_allocation,
            equity_allocated=row.equity_allocated,
            completion_percentage=row.completion_percentage,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class TaskRepository:
    """Repository for project sub-task operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        project_id: UUID,
        title: str,
        equity_allocation: Decimal,
        description: str | None = None,
        estimated_hours: Decimal | None = None,
        task_id: UUID | None = None,
    ) -> Task:
        now = utc_now()
        row = TaskTable(
            task_id=task_id or uuid4(),
            project_id=project_id,
            title=title,
            description=description,
            equity_allocation=equity_allocation,
            estimated_hours=estimated_hours,
            hours_logged=Decimal(0),
            completion_percentage=0,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def get_row(self, task_id: UUID, for_update: bool = False) -> TaskTable | None:
        query = (
            select(TaskTable)
            .where(TaskTable.task_id == task_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get(self, task_id: UUID, for_update: bool = False) -> Task | None:
        """Get a task by ID, optionally locking its row."""
        row = await self.get_row(task_id, for_update=for_update)
        return self._row_to_model(row) if row else None

    async def list_by_project(self, project_id: UUID) -> list[Task]:
        result = await self.session.execute(
            select(TaskTable)
            .where(TaskTable.project_id == project_id)
            .order_by(TaskTable.created_at)
            .execution_options(populate_existing=True)
        )
        return [self._row_to_model(r) for r in result.scalars().all()]

    async def update(self, task_id: UUID, **values: Any) -> Task:
        """Write the given columns and bump ``updated_at``."""
        row = await self.get_row(task_id)
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = utc_now()
        await self.session.flush()
        return self._row_to_model(row)

    async def delete(self, task_id: UUID) -> None:
        await self.session.execute(delete(TaskTable).where(TaskTable.task_id == task_id))

    def _row_to_model(self, row: TaskTable) -> Task:
        """Convert database row to model."""
        return Task(
            task_id=row.task_id,
            project_id=row.project_id,
            title=row.title,
            description=row.description,
            equity_allocation=row.equity_allocation,
            status=row.status,
            completion_percentage=row.completion_percentage,
            estimated_hours=row.estimated_hours,
            hours_logged=row.hours_logged,
            last_activity_at=row.last_activity_at,
            equity_earned=row.equity_earned,
            approved_at=row.approved_at,
            approved_by=row.approved_by,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class TimeEntryRepository:
    """Repository for the append-only effort log."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        task_id: UUID,
        actor_id: str,
        hours_logged: Decimal,
        description: str,
        start_time: datetime,
        end_time: datetime,
        ticket_id: UUID | None = None,
    ) -> TimeEntry:
        row = TimeEntryTable(
            time_entry_id=uuid4(),
            task_id=task_id,
            ticket_id=ticket_id,
            actor_id=actor_id,
            hours_logged=hours_logged,
            description=description,
            start_time=start_time,
            end_time=end_time,
            created_at=utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def list_for_task(self, task_id: UUID) -> list[TimeEntry]:
        result = await self.session.execute(
            select(TimeEntryTable)
            .where(TimeEntryTable.task_id == task_id)
            .order_by(TimeEntryTable.created_at)
        )
        return [self._row_to_model(r) for r in result.scalars().all()]

    async def count_for_task(self, task_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(TimeEntryTable).where(TimeEntryTable.task_id == task_id)
        )
        return result.scalar_one()

    async def count_for_ticket(self, ticket_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(TimeEntryTable)
            .where(TimeEntryTable.ticket_id == ticket_id)
        )
        return result.scalar_one()

    def _row_to_model(self, row: TimeEntryTable) -> TimeEntry:
        """Convert database row to model."""
        return TimeEntry(
            time_entry_id=row.time_entry_id,
            task_id=row.task_id,
            ticket_id=row.ticket_id,
            actor_id=row.actor_id,
            hours_logged=row.hours_logged,
            description=row.description,
            start_time=row.start_time,
            end_time=row.end_time,
            created_at=row.created_at,
        )


class TicketRepository:
    """Repository for ticket (work item) operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        title: str,
        project_id: UUID | None = None,
        task_id: UUID | None = None,
        job_app_id: UUID | None = None,
        description: str | None = None,
        reporter_id: str | None = None,
        assignee_id: str | None = None,
        estimated_hours: Decimal | None = None,
        ticket_id: UUID | None = None,
    ) -> Ticket:
        now = utc_now()
        row = TicketTable(
            ticket_id=ticket_id or uuid4(),
            project_id=project_id,
            task_id=task_id,
            job_app_id=job_app_id,
            title=title,
            description=description,
            status="todo",
            priority="medium",
            ticket_type="task",
            reporter_id=reporter_id,
            assignee_id=assignee_id,
            estimated_hours=estimated_hours,
            hours_logged=Decimal(0),
            completion_percentage=0,
            notes=[],
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def get_row(self, ticket_id: UUID, for_update: bool = False) -> TicketTable | None:
        query = (
            select(TicketTable)
            .where(TicketTable.ticket_id == ticket_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get(self, ticket_id: UUID, for_update: bool = False) -> Ticket | None:
        row = await self.get_row(ticket_id, for_update=for_update)
        return self._row_to_model(row) if row else None

    async def get_for_task(self, task_id: UUID) -> Ticket | None:
        """The ticket tracking a task (earliest one when several link to it)."""
        result = await self.session.execute(
            select(TicketTable)
            .where(TicketTable.task_id == task_id)
            .order_by(TicketTable.created_at)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def update(self, ticket_id: UUID, **values: Any) -> Ticket:
        row = await self.get_row(ticket_id)
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = utc_now()
        await self.session.flush()
        return self._row_to_model(row)

    async def append_note(self, ticket_id: UUID, note: TicketNote, **values: Any) -> Ticket:
        """Append to the note log, optionally writing other columns alongside."""
        row = await self.get_row(ticket_id)
        # Reassign so the JSON column is flagged dirty
        row.notes = [*(row.notes or []), note.model_dump(mode="json", exclude_none=True)]
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = utc_now()
        await self.session.flush()
        return self._row_to_model(row)

    async def detach_task(self, task_id: UUID) -> None:
        await self.session.execute(
            update(TicketTable)
            .where(TicketTable.task_id == task_id)
            .values(task_id=None, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )

    async def delete(self, ticket_id: UUID) -> None:
        await self.session.execute(delete(TicketTable).where(TicketTable.ticket_id == ticket_id))

    def _row_to_model(self, row: TicketTable) -> Ticket:
        """Convert database row to model."""
        return Ticket(
            ticket_id=row.ticket_id,
            project_id=row.project_id,
            task_id=row.task_id,
            job_app_id=row.job_app_id,
            title=row.title,
            description=row.description,
            status=row.status,
            priority=row.priority,
            ticket_type=row.ticket_type,
            reporter_id=row.reporter_id,
            assignee_id=row.assignee_id,
            due_date=row.due_date,
            estimated_hours=row.estimated_hours,
            hours_logged=row.hours_logged,
            completion_percentage=row.completion_percentage,
            equity_points=row.equity_points,
            notes=[TicketNote.model_validate(n) for n in row.notes or []],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class JobApplicationRepository:
    """Repository for job application operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        applicant_id: UUID,
        task_id: UUID | None = None,
        project_id: UUID | None = None,
        status: ApplicationStatus = ApplicationStatus.PENDING,
        job_app_id: UUID | None = None,
    ) -> JobApplication:
        now = utc_now()
        row = JobApplicationTable(
            job_app_id=job_app_id or uuid4(),
            task_id=task_id,
            project_id=project_id,
            applicant_id=applicant_id,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def get_row(
        self, job_app_id: UUID, for_update: bool = False
    ) -> JobApplicationTable | None:
        query = (
            select(JobApplicationTable)
            .where(JobApplicationTable.job_app_id == job_app_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get(self, job_app_id: UUID, for_update: bool = False) -> JobApplication | None:
        row = await self.get_row(job_app_id, for_update=for_update)
        return self._row_to_model(row) if row else None

    async def get_accepted_for_task(self, task_id: UUID) -> JobApplication | None:
        """The application whose holder is doing the task, if any."""
        result = await self.session.execute(
            select(JobApplicationTable)
            .where(
                JobApplicationTable.task_id == task_id,
                JobApplicationTable.status.in_(
                    [ApplicationStatus.ACCEPTED, ApplicationStatus.COMPLETED]
                ),
            )
            .order_by(JobApplicationTable.updated_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def update(self, job_app_id: UUID, **values: Any) -> JobApplication:
        row = await self.get_row(job_app_id)
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = utc_now()
        await self.session.flush()
        return self._row_to_model(row)

    async def detach_task(self, task_id: UUID) -> None:
        await self.session.execute(
            update(JobApplicationTable)
            .where(JobApplicationTable.task_id == task_id)
            .values(task_id=None, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )

    def _row_to_model(self, row: JobApplicationTable) -> JobApplication:
        """Convert database row to model."""
        return JobApplication(
            job_app_id=row.job_app_id,
            task_id=row.task_id,
            project_id=row.project_id,
            applicant_id=row.applicant_id,
            status=row.status,
            nda_document_id=row.nda_document_id,
            nda_status=row.nda_status,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class AcceptedJobRepository:
    """Repository for accepted job operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        job_app_id: UUID,
        equity_agreed: Decimal = Decimal(0),
        accepted_job_id: UUID | None = None,
    ) -> AcceptedJob:
        now = utc_now()
        row = AcceptedJobTable(
            accepted_job_id=accepted_job_id or uuid4(),
            job_app_id=job_app_id,
            equity_agreed=equity_agreed,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def get_row(
        self, accepted_job_id: UUID, for_update: bool = False
    ) -> AcceptedJobTable | None:
        query = (
            select(AcceptedJobTable)
            .where(AcceptedJobTable.accepted_job_id == accepted_job_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get(self, accepted_job_id: UUID, for_update: bool = False) -> AcceptedJob | None:
        row = await self.get_row(accepted_job_id, for_update=for_update)
        return self._row_to_model(row) if row else None

    async def get_by_application(self, job_app_id: UUID) -> AcceptedJob | None:
        result = await self.session.execute(
            select(AcceptedJobTable)
            .where(AcceptedJobTable.job_app_id == job_app_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def update(self, accepted_job_id: UUID, **values: Any) -> AcceptedJob:
        row = await self.get_row(accepted_job_id)
        for key, value in values.items():
            setattr(row, key, value)
        row.updated_at = utc_now()
        await self.session.flush()
        return self._row_to_model(row)

    def _row_to_model(self, row: AcceptedJobTable) -> AcceptedJob:
        """Convert database row to model."""
        return AcceptedJob(
            accepted_job_id=row.accepted_job_id,
            job_app_id=row.job_app_id,
            equity_agreed=row.equity_agreed,
            agreed_at=row.agreed_at,
            accepted_discourse=row.accepted_discourse,
            work_contract_document_id=row.work_contract_document_id,
            work_contract_status=row.work_contract_status,
            award_agreement_document_id=row.award_agreement_document_id,
            award_agreement_status=row.award_agreement_status,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class DocumentRepository:
    """Repository for legal document operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        document_id: UUID,
        document_type: DocumentType,
        version: str,
        storage_path: str,
        content: str,
        template_version: str | None,
        business_id: UUID | None = None,
        counterparty_id: UUID | None = None,
        project_id: UUID | None = None,
        job_application_id: UUID | None = None,
        accepted_job_id: UUID | None = None,
        created_at: datetime | None = None,
    ) -> LegalDocument:
        now = created_at or utc_now()
        row = LegalDocumentTable(
            document_id=document_id,
            document_type=document_type,
            status=DocumentStatus.DRAFT,
            business_id=business_id,
            counterparty_id=counterparty_id,
            project_id=project_id,
            job_application_id=job_application_id,
            accepted_job_id=accepted_job_id,
            version=version,
            template_version=template_version,
            storage_path=storage_path,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def get_row(
        self, document_id: UUID, for_update: bool = False
    ) -> LegalDocumentTable | None:
        query = (
            select(LegalDocumentTable)
            .where(LegalDocumentTable.document_id == document_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get(self, document_id: UUID, for_update: bool = False) -> LegalDocument | None:
        row = await self.get_row(document_id, for_update=for_update)
        return self._row_to_model(row) if row else None

    async def list(
        self,
        job_application_id: UUID | None = None,
        accepted_job_id: UUID | None = None,
        document_type: DocumentType | None = None,
    ) -> list[LegalDocument]:
        """List documents with optional filtering, oldest first."""
        query = select(LegalDocumentTable)

        if job_application_id:
            query = query.where(LegalDocumentTable.job_application_id == job_application_id)
        if accepted_job_id:
            query = query.where(LegalDocumentTable.accepted_job_id == accepted_job_id)
        if document_type:
            query = query.where(LegalDocumentTable.document_type == document_type)

        result = await self.session.execute(
            query.order_by(LegalDocumentTable.created_at).execution_options(populate_existing=True)
        )
        return [self._row_to_model(r) for r in result.scalars().all()]

    async def count(self, document_type: DocumentType | None = None) -> int:
        query = select(func.count()).select_from(LegalDocumentTable)
        if document_type:
            query = query.where(LegalDocumentTable.document_type == document_type)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def update_status(
        self,
        document_id: UUID,
        status: DocumentStatus,
        executed_at: datetime | None = None,
    ) -> LegalDocument:
        row = await self.get_row(document_id)
        row.status = status
        row.updated_at = utc_now()
        if executed_at:
            row.executed_at = executed_at
        await self.session.flush()
        return self._row_to_model(row)

    def _row_to_model(self, row: LegalDocumentTable) -> LegalDocument:
        """Convert database row to model."""
        return LegalDocument(
            document_id=row.document_id,
            document_type=row.document_type,
            status=row.status,
            business_id=row.business_id,
            counterparty_id=row.counterparty_id,
            project_id=row.project_id,
            job_application_id=row.job_application_id,
            accepted_job_id=row.accepted_job_id,
            version=row.version,
            template_version=row.template_version,
            storage_path=row.storage_path,
            content=row.content,
            created_at=row.created_at,
            updated_at=row.updated_at,
            executed_at=row.executed_at,
        )


class SignatureRepository:
    """Repository for append-only document signatures."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        document_id: UUID,
        signer_id: str,
        signature_data: str,
        version: str,
        signature_metadata: dict[str, Any],
    ) -> Signature:
        row = SignatureTable(
            signature_id=uuid4(),
            document_id=document_id,
            signer_id=signer_id,
            signature_data=signature_data,
            signature_metadata=signature_metadata,
            version=version,
            created_at=utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def list(self, document_id: UUID) -> list[Signature]:
        result = await self.session.execute(
            select(SignatureTable)
            .where(SignatureTable.document_id == document_id)
            .order_by(SignatureTable.created_at)
        )
        return [self._row_to_model(r) for r in result.scalars().all()]

    def _row_to_model(self, row: SignatureTable) -> Signature:
        """Convert database row to model."""
        return Signature(
            signature_id=row.signature_id,
            document_id=row.document_id,
            signer_id=row.signer_id,
            signature_data=row.signature_data,
            signature_metadata=row.signature_metadata or {},
            version=row.version,
            created_at=row.created_at,
        )


class TemplateRepository:
    """Repository for document templates."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active(self, template_type: DocumentType) -> DocumentTemplate | None:
        """Latest active template of a type."""
        result = await self.session.execute(
            select(DocumentTemplateTable)
            .where(
                DocumentTemplateTable.template_type == template_type,
                DocumentTemplateTable.is_active.is_(True),
            )
            .order_by(
                DocumentTemplateTable.template_version.desc(),
                DocumentTemplateTable.created_at.desc(),
            )
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def create(self, template: DocumentTemplate) -> DocumentTemplate:
        now = utc_now()
        row = DocumentTemplateTable(
            template_id=template.template_id or uuid4(),
            template_type=template.template_type,
            template_version=template.template_version,
            template_name=template.template_name,
            template_content=template.template_content,
            is_active=template.is_active,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    def _row_to_model(self, row: DocumentTemplateTable) -> DocumentTemplate:
        """Convert database row to model."""
        return DocumentTemplate(
            template_id=row.template_id,
            template_type=row.template_type,
            template_version=row.template_version,
            template_name=row.template_name,
            template_content=row.template_content,
            is_active=row.is_active,
        )


class PartyRepository:
    """Read access to businesses and counterparty profiles."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_business(self, business_id: UUID) -> Business | None:
        row = await self.session.get(BusinessTable, business_id)
        if row is None:
            return None
        return Business(
            business_id=row.business_id,
            company_name=row.company_name,
            contact_person=row.contact_person,
            contact_email=row.contact_email,
            contact_phone=row.contact_phone,
            entity_type=row.entity_type,
            equity_class=row.equity_class,
        )

    async def get_profile(self, profile_id: UUID) -> Profile | None:
        row = await self.session.get(ProfileTable, profile_id)
        if row is None:
            return None
        return Profile(
            profile_id=row.profile_id,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            phone=row.phone,
        )

    async def add_business(self, business: Business) -> Business:
        self.session.add(BusinessTable(**business.model_dump()))
        await self.session.flush()
        return business

    async def add_profile(self, profile: Profile) -> Profile:
        self.session.add(ProfileTable(**profile.model_dump()))
        await self.session.flush()
        return profile


class ArchiveRepository:
    """Repository for archived (soft-deleted) work items."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        original_id: UUID,
        item_kind: WorkItemKind,
        title: str,
        status: str,
        snapshot: dict[str, Any],
        deleted_by: str,
        project_id: UUID | None = None,
        description: str | None = None,
        completion_percentage: int = 0,
        estimated_hours: Decimal | None = None,
    ) -> DeletedWorkItem:
        row = DeletedWorkItemTable(
            archive_id=uuid4(),
            original_id=original_id,
            item_kind=item_kind,
            project_id=project_id,
            title=title,
            description=description,
            status=status,
            completion_percentage=completion_percentage,
            estimated_hours=estimated_hours,
            snapshot=snapshot,
            deleted_by=deleted_by,
            deleted_at=utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._row_to_model(row)

    async def get_by_original(self, original_id: UUID) -> DeletedWorkItem | None:
        result = await self.session.execute(
            select(DeletedWorkItemTable)
            .where(DeletedWorkItemTable.original_id == original_id)
            .order_by(DeletedWorkItemTable.deleted_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    def _row_to_model(self, row: DeletedWorkItemTable) -> DeletedWorkItem:
        """Convert database row to model."""
        return DeletedWorkItem(
            archive_id=row.archive_id,
            original_id=row.original_id,
            item_kind=row.item_kind,
            project_id=row.project_id,
            title=row.title,
            description=row.description,
            status=row.status,
            completion_percentage=row.completion_percentage,
            estimated_hours=row.estimated_hours,
            snapshot=row.snapshot or {},
            deleted_by=row.deleted_by,
            deleted_at=row.deleted_at,
        )
