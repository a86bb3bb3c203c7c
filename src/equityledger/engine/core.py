"""EquityLedger core engine - ledger intents."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from time import perf_counter
from typing import Any, AsyncIterator, TypeVar
from uuid import UUID, uuid4

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from equityledger.config import settings
from equityledger.db.repositories import (
    AcceptedJobRepository,
    ArchiveRepository,
    DocumentRepository,
    JobApplicationRepository,
    PartyRepository,
    ProjectRepository,
    SignatureRepository,
    TaskRepository,
    TemplateRepository,
    TicketRepository,
    TimeEntryRepository,
)
from equityledger.documents import builtin_template, render_document, storage_path
from equityledger.engine.errors import (
    AllocationExceeded,
    DeletionBlocked,
    EquityLedgerError,
    InvalidInput,
    InvalidTransition,
    MissingPrerequisiteDocument,
    NotFound,
    NotSignable,
    PartialApprovalFailure,
    TransientStoreError,
)
from equityledger.models import (
    AcceptedJob,
    ApplicationStatus,
    ApprovalResult,
    Business,
    DeletionCheck,
    DocumentData,
    DocumentStatus,
    DocumentTemplate,
    DocumentType,
    EffortResult,
    LegalDocument,
    Profile,
    Project,
    Signature,
    Task,
    TaskStatus,
    Ticket,
    TicketNote,
    WorkItemKind,
)
from equityledger.models.lifecycle import (
    can_transition_document,
    can_transition_task,
    reaches_review,
    ticket_status_for,
)
from equityledger.observability.metrics import metrics
from equityledger.utils.numbers import effort_completion, to_decimal, weighted_completion
from equityledger.utils.time import long_date, utc_now

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Amount columns are Numeric(12, 4)
AMOUNT_SCALE = 4
AMOUNT_LIMIT = Decimal("1e8")


def _is_transient(exc: Exception) -> bool:
    """Store failures worth retrying: timeouts and lost connections."""
    if isinstance(exc, (OperationalError, PoolTimeoutError, TimeoutError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def _coerce_enum(enum_cls: type[E], value: Any, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInput(f"Unknown {field}: {value!r}", field) from None


def _coerce_amount(value: Any, field: str, allow_zero: bool = False) -> Decimal:
    """Finite, non-negative amount that fits an amount column; zero only when allowed."""
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number", field)
    try:
        amount = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInput(f"{field} must be a number", field) from None
    if not amount.is_finite():
        raise InvalidInput(f"{field} must be finite", field)
    if amount < 0 or (amount == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise InvalidInput(f"{field} must be {qualifier}, got {value}", field)
    if amount >= AMOUNT_LIMIT:
        raise InvalidInput(f"{field} must be below {AMOUNT_LIMIT:f}, got {value}", field)
    if amount.normalize().as_tuple().exponent < -AMOUNT_SCALE:
        raise InvalidInput(
            f"{field} allows at most {AMOUNT_SCALE} decimal places, got {value}", field
        )
    return amount


def _require_text(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInput(f"{field} is required", field)
    return value


def _format_amount(value: Decimal) -> str:
    """Render an equity amount without trailing zeros, e.g. ``12.5``."""
    return format(value.normalize(), "f")


class EquityLedgerEngine:
    """Core engine implementing the equity ledger and document intents.

    One engine wraps one session. Every mutating intent runs inside its own
    savepoint; committing the surrounding transaction is left to the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.projects = ProjectRepository(session)
        self.tasks = TaskRepository(session)
        self.time_entries = TimeEntryRepository(session)
        self.tickets = TicketRepository(session)
        self.applications = JobApplicationRepository(session)
        self.accepted_jobs = AcceptedJobRepository(session)
        self.documents = DocumentRepository(session)
        self.signatures = SignatureRepository(session)
        self.templates = TemplateRepository(session)
        self.parties = PartyRepository(session)
        self.archive = ArchiveRepository(session)

    @asynccontextmanager
    async def _unit_of_work(self, intent: str) -> AsyncIterator[None]:
        """Run an intent's writes in one savepoint and record its outcome."""
        start = perf_counter()
        outcome = "failed"
        try:
            async with self.session.begin_nested():  # SAVEPOINT
                yield
            outcome = "ok"
        except EquityLedgerError as exc:
            if not exc.retryable:
                outcome = "rejected"
                logger.warning("%s rejected: %s", intent, exc.message)
            raise
        except Exception as exc:
            if _is_transient(exc):
                logger.warning("%s hit a store failure: %s", intent, exc)
                raise TransientStoreError(intent, type(exc).__name__) from exc
            logger.exception("%s failed; changes rolled back", intent)
            raise
        finally:
            metrics.record_intent(intent, outcome)
            metrics.observe(f"intent.{intent}.duration_ms", (perf_counter() - start) * 1000.0)

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.projects.get(project_id)
        if project is None:
            raise NotFound("Project", project_id)
        return project

    async def get_task(self, task_id: UUID) -> Task:
        task = await self.tasks.get(task_id)
        if task is None:
            raise NotFound("Task", task_id)
        return task

    async def get_ticket(self, ticket_id: UUID) -> Ticket:
        ticket = await self.tickets.get(ticket_id)
        if ticket is None:
            raise NotFound("Ticket", ticket_id)
        return ticket

    # =========================================================================
    # Time & Completion
    # =========================================================================

    def _derive_progress(
        self,
        task: Task,
        hours_logged: Decimal,
        estimated_hours: Decimal | None,
    ) -> tuple[int, TaskStatus]:
        """Completion and status implied by effort against the estimate."""
        if task.status.is_settled():
            # Approval pinned completion at 100; later effort never moves it
            return 100, task.status

        completion = effort_completion(hours_logged, estimated_hours)
        if completion is None:
            completion = task.completion_percentage

        status = task.status
        if reaches_review(task.status, completion):
            status = TaskStatus.REVIEW
        return completion, status

    async def _sync_ticket_progress(
        self,
        task_before: Task,
        task_after: Task,
        ticket: Ticket | None,
        **values: Any,
    ) -> None:
        """Mirror task progress onto its linked ticket."""
        if ticket is None:
            return
        values["completion_percentage"] = task_after.completion_percentage
        if task_after.status is TaskStatus.REVIEW and task_before.status is not TaskStatus.REVIEW:
            values["status"] = ticket_status_for(TaskStatus.REVIEW)
        await self.tickets.update(ticket.ticket_id, **values)

    async def _recompute_completion(self, project_id: UUID) -> int:
        # Project row is locked before its tasks are read; lock order is task, then project
        project = await self.projects.get(project_id, for_update=True)
        if project is None:
            raise NotFound("Project", project_id)

        tasks = await self.tasks.list_by_project(project_id)
        if not tasks:
            return project.completion_percentage

        completion = weighted_completion(
            [(task.equity_allocation, task.completion_percentage) for task in tasks]
        )
        if completion != project.completion_percentage:
            await self.projects.update(project_id, completion_percentage=completion)
        return completion

    async def log_effort(
        self,
        task_id: UUID,
        actor_id: str,
        hours: Any,
        description: str = "",
    ) -> EffortResult:
        """
        Record hours against a task and cascade the derived progress.

        Appends a time entry, increments the task's hours, re-derives its
        completion from the estimate (moving it to review at 100%), mirrors
        the progress onto the linked ticket and recomputes the project's
        completion. Not idempotent: each call appends another entry.
        """
        async with self._unit_of_work("log_effort"):
            amount = _coerce_amount(hours, "hours")
            _require_text(actor_id, "actor_id")

            task = await self.tasks.get(task_id, for_update=True)
            if task is None:
                raise NotFound("Task", task_id)
            if await self.projects.get(task.project_id) is None:
                raise NotFound("Project", task.project_id)
            hours_logged = task.hours_logged + amount
            if hours_logged >= AMOUNT_LIMIT:
                raise InvalidInput(
                    f"hours would take task {task_id} past {AMOUNT_LIMIT:f} logged hours", "hours"
                )

            now = utc_now()
            try:
                end_time = now + timedelta(hours=float(amount))
            except OverflowError:
                raise InvalidInput(f"hours {amount} run past the calendar", "hours") from None
            ticket = await self.tickets.get_for_task(task_id)
            entry = await self.time_entries.create(
                task_id=task_id,
                actor_id=actor_id,
                hours_logged=amount,
                description=description or "",
                start_time=now,
                end_time=end_time,
                ticket_id=ticket.ticket_id if ticket else None,
            )

            completion, status = self._derive_progress(task, hours_logged, task.estimated_hours)
            updated = await self.tasks.update(
                task_id,
                hours_logged=hours_logged,
                completion_percentage=completion,
                status=status,
                last_activity_at=now,
            )
            await self._sync_ticket_progress(
                task, updated, ticket, hours_logged=ticket.hours_logged + amount if ticket else None
            )
            project_completion = await self._recompute_completion(task.project_id)

        logger.info(
            "Logged %s h on task %s by %s (completion %s%%, status %s)",
            amount,
            task_id,
            actor_id,
            updated.completion_percentage,
            updated.status.value,
        )
        return EffortResult(
            task_id=task_id,
            time_entry_id=entry.time_entry_id,
            hours_logged=updated.hours_logged,
            completion_percentage=updated.completion_percentage,
            status=updated.status,
            project_completion_percentage=project_completion,
        )

    async def set_estimated_hours(self, task_id: UUID, estimated_hours: Any) -> Task:
        """Change a task's estimate and re-derive its completion."""
        async with self._unit_of_work("set_estimated_hours"):
            estimate = (
                None
                if estimated_hours is None
                else _coerce_amount(estimated_hours, "estimated_hours", allow_zero=True)
            )

            task = await self.tasks.get(task_id, for_update=True)
            if task is None:
                raise NotFound("Task", task_id)

            completion, status = self._derive_progress(task, task.hours_logged, estimate)
            updated = await self.tasks.update(
                task_id,
                estimated_hours=estimate,
                completion_percentage=completion,
                status=status,
            )
            ticket = await self.tickets.get_for_task(task_id)
            await self._sync_ticket_progress(task, updated, ticket, estimated_hours=estimate)
            await self._recompute_completion(task.project_id)

        logger.info("Set estimate of task %s to %s h", task_id, estimate)
        return updated

    async def recompute_project_completion(self, project_id: UUID) -> int:
        """Equity-weighted completion across a project's tasks. Idempotent."""
        async with self._unit_of_work("recompute_project_completion"):
            return await self._recompute_completion(project_id)

    # =========================================================================
    # Equity Allocation Guard
    # =========================================================================

    async def approve_task(
        self,
        task_id: UUID,
        approver_id: str,
        notes: str | None = None,
    ) -> ApprovalResult:
        """
        Approve a task and commit its equity against the project pool.

        The task row is locked before the project row (the same order
        log_effort uses) so concurrent approvals in one project serialize on
        the project's equity_allocated. Exceeding the pool raises
        AllocationExceeded with nothing written. Approving an already
        approved or done task returns the current state.

        The cascade runs as named steps; a failure inside any step rolls the
        whole approval back and is raised as PartialApprovalFailure, which is
        safe to retry.
        """
        async with self._unit_of_work("approve_task"):
            _require_text(approver_id, "approver_id")

            task = await self.tasks.get(task_id, for_update=True)
            if task is None:
                raise NotFound("Task", task_id)

            if task.status.is_settled():
                project = await self.get_project(task.project_id)
                return ApprovalResult(
                    task=task,
                    equity_granted=Decimal(0),
                    project_equity_allocated=project.equity_allocated,
                    project_equity_allocation=project.equity_allocation,
                    already_approved=True,
                )

            if task.status not in TaskStatus.approvable_states():
                raise InvalidTransition("task", task.status.value, TaskStatus.APPROVED.value)

            project = await self.projects.get(task.project_id, for_update=True)
            if project is None:
                raise NotFound("Project", task.project_id)

            equity = task.equity_allocation
            projected = project.equity_allocated + equity
            if projected > project.equity_allocation:
                metrics.inc_counter("equity.allocation_exceeded")
                raise AllocationExceeded(
                    project.project_id,
                    allocated=project.equity_allocated,
                    requested=equity,
                    ceiling=project.equity_allocation,
                )

            now = utc_now()
            completed: list[str] = []
            step = "task"
            try:
                task = await self.tasks.update(
                    task_id,
                    status=TaskStatus.APPROVED,
                    completion_percentage=100,
                    equity_earned=equity,
                    approved_at=now,
                    approved_by=approver_id,
                    last_activity_at=now,
                )
                completed.append(step)

                step = "project"
                project = await self.projects.update(project.project_id, equity_allocated=projected)
                completed.append(step)

                step = "accepted_job"
                application = await self.applications.get_accepted_for_task(task_id)
                accepted_job = (
                    await self.accepted_jobs.get_by_application(application.job_app_id)
                    if application
                    else None
                )
                if accepted_job:
                    values: dict[str, Any] = {"equity_agreed": equity, "agreed_at": now}
                    if notes:
                        values["accepted_discourse"] = notes
                    await self.accepted_jobs.update(accepted_job.accepted_job_id, **values)
                completed.append(step)

                step = "job_application"
                if application:
                    await self.applications.update(
                        application.job_app_id, status=ApplicationStatus.COMPLETED
                    )
                completed.append(step)

                step = "ticket"
                ticket = await self.tickets.get_for_task(task_id)
                if ticket:
                    note = TicketNote(
                        id=str(uuid4()),
                        action="Task approved",
                        user=approver_id,
                        timestamp=now,
                        comment=notes,
                        equity=equity,
                    )
                    await self.tickets.append_note(
                        ticket.ticket_id,
                        note,
                        status=ticket_status_for(TaskStatus.APPROVED),
                        equity_points=equity,
                        completion_percentage=100,
                    )
                completed.append(step)

                step = "project_completion"
                await self._recompute_completion(project.project_id)
                completed.append(step)
            except EquityLedgerError:
                raise
            except Exception as exc:
                logger.exception("Approval of task %s failed at step %s", task_id, step)
                raise PartialApprovalFailure(task_id, step, completed) from exc

        metrics.inc_counter("equity.granted", float(equity))
        logger.info(
            "Approved task %s by %s: %s equity granted (%s/%s allocated in project %s)",
            task_id,
            approver_id,
            equity,
            project.equity_allocated,
            project.equity_allocation,
            project.project_id,
        )
        return ApprovalResult(
            task=task,
            equity_granted=equity,
            project_equity_allocated=project.equity_allocated,
            project_equity_allocation=project.equity_allocation,
        )

    # =========================================================================
    # Task Lifecycle
    # =========================================================================

    async def update_task_status(self, task_id: UUID, target: Any, actor_id: str) -> Task:
        """Manual status move (e.g. a card dragged on the board).

        Never touches equity; ``approved`` is only reachable through
        approve_task. Requesting the current status is a no-op.
        """
        async with self._unit_of_work("update_task_status"):
            target_status = _coerce_enum(TaskStatus, target, "status")
            _require_text(actor_id, "actor_id")

            task = await self.tasks.get(task_id, for_update=True)
            if task is None:
                raise NotFound("Task", task_id)
            if task.status is target_status:
                return task
            if not can_transition_task(task.status, target_status):
                raise InvalidTransition("task", task.status.value, target_status.value)

            updated = await self.tasks.update(
                task_id, status=target_status, last_activity_at=utc_now()
            )
            ticket = await self.tickets.get_for_task(task_id)
            if ticket:
                await self.tickets.update(ticket.ticket_id, status=ticket_status_for(target_status))

        logger.info(
            "Task %s moved %s -> %s by %s",
            task_id,
            task.status.value,
            target_status.value,
            actor_id,
        )
        return updated

    # =========================================================================
    # Document Lifecycle
    # =========================================================================

    async def _resolve_template(self, document_type: DocumentType) -> DocumentTemplate:
        stored = await self.templates.get_active(document_type)
        return stored or builtin_template(document_type)

    async def ensure_default_templates(self) -> list[DocumentTemplate]:
        """Store the built-in template for every type without an active one."""
        created: list[DocumentTemplate] = []
        async with self._unit_of_work("ensure_default_templates"):
            for document_type in DocumentType:
                if await self.templates.get_active(document_type) is None:
                    created.append(await self.templates.create(builtin_template(document_type)))
        for template in created:
            logger.info("Seeded %s template v%s", template.template_type.value, template.template_version)
        return created

    async def _contract_equity(self, accepted_job: AcceptedJob) -> Decimal:
        """Equity named in a contract: the agreed amount, else the task's allocation."""
        if accepted_job.equity_agreed > 0:
            return accepted_job.equity_agreed
        application = await self.applications.get(accepted_job.job_app_id)
        if application and application.task_id:
            task = await self.tasks.get(application.task_id)
            if task:
                return task.equity_allocation
        return Decimal(0)

    async def _document_data(
        self,
        document_type: DocumentType,
        business: Business,
        counterparty: Profile,
        project: Project,
        accepted_job: AcceptedJob | None,
        completed_deliverables: str | None,
        effective_at: datetime,
    ) -> DocumentData:
        data = DocumentData(
            business_name=business.company_name or "",
            business_rep_name=business.contact_person or "",
            business_email=business.contact_email or "",
            business_phone=business.contact_phone or "",
            jobseeker_name=counterparty.full_name,
            jobseeker_email=counterparty.email or "",
            jobseeker_phone=counterparty.phone or "",
            effective_date=long_date(effective_at),
            duration=settings.document_duration_years,
            confidentiality_period=settings.document_confidentiality_years,
            arbitration_org=settings.document_arbitration_org,
            project_title=project.title or "Project",
            project_description=project.description or "Project description not provided",
            equity_class=business.equity_class or settings.document_equity_class,
            entity_type=business.entity_type or "Corporation",
        )
        if accepted_job is not None:
            data.equity_amount = _format_amount(await self._contract_equity(accepted_job))

        if document_type is DocumentType.AWARD_AGREEMENT:
            contract = await self.documents.get(accepted_job.work_contract_document_id)
            if contract is None:
                raise MissingPrerequisiteDocument(
                    accepted_job.accepted_job_id, DocumentType.WORK_CONTRACT.value
                )
            data.contract_date = long_date(contract.created_at)
            data.completed_deliverables = completed_deliverables or "completed the services"
        return data

    async def _mirror_document(self, document: LegalDocument, status: DocumentStatus) -> None:
        """Write a document's id and status onto the record that owns it."""
        if document.document_type is DocumentType.NDA:
            if document.job_application_id:
                await self.applications.update(
                    document.job_application_id,
                    nda_document_id=document.document_id,
                    nda_status=status,
                )
        elif document.accepted_job_id:
            prefix = (
                "work_contract"
                if document.document_type is DocumentType.WORK_CONTRACT
                else "award_agreement"
            )
            await self.accepted_jobs.update(
                document.accepted_job_id,
                **{f"{prefix}_document_id": document.document_id, f"{prefix}_status": status},
            )

    async def generate_document(
        self,
        document_type: Any,
        business_id: UUID,
        counterparty_id: UUID,
        project_id: UUID,
        application_id: UUID | None = None,
        accepted_job_id: UUID | None = None,
        completed_deliverables: str | None = None,
    ) -> UUID:
        """
        Render and store an agreement in draft, returning its id.

        NDAs hang off a job application; work contracts and award agreements
        hang off an accepted job. If the owning record already references a
        document of the type, that id is returned and nothing is written. An
        award agreement needs the accepted job's work contract first.
        """
        async with self._unit_of_work("generate_document"):
            document_type = _coerce_enum(DocumentType, document_type, "document_type")
            accepted_job: AcceptedJob | None = None

            if document_type is DocumentType.NDA:
                if application_id is None:
                    raise InvalidInput("application_id is required for nda", "application_id")
                application = await self.applications.get(application_id, for_update=True)
                if application is None:
                    raise NotFound("JobApplication", application_id)
                if application.nda_document_id:
                    return application.nda_document_id
            else:
                if accepted_job_id is None:
                    raise InvalidInput(
                        f"accepted_job_id is required for {document_type.value}",
                        "accepted_job_id",
                    )
                accepted_job = await self.accepted_jobs.get(accepted_job_id, for_update=True)
                if accepted_job is None:
                    raise NotFound("AcceptedJob", accepted_job_id)
                existing = accepted_job.document_id_for(document_type)
                if existing:
                    return existing
                if (
                    document_type is DocumentType.AWARD_AGREEMENT
                    and accepted_job.work_contract_document_id is None
                ):
                    raise MissingPrerequisiteDocument(
                        accepted_job_id, DocumentType.WORK_CONTRACT.value
                    )

            business = await self.parties.get_business(business_id)
            if business is None:
                raise NotFound("Business", business_id)
            counterparty = await self.parties.get_profile(counterparty_id)
            if counterparty is None:
                raise NotFound("Profile", counterparty_id)
            project = await self.projects.get(project_id)
            if project is None:
                raise NotFound("Project", project_id)

            now = utc_now()
            template = await self._resolve_template(document_type)
            data = await self._document_data(
                document_type,
                business,
                counterparty,
                project,
                accepted_job,
                completed_deliverables,
                now,
            )

            document_id = uuid4()
            document = await self.documents.create(
                document_id=document_id,
                document_type=document_type,
                version=settings.document_initial_version,
                storage_path=storage_path(document_type, document_id, now),
                content=render_document(template.template_content, data),
                template_version=template.template_version,
                business_id=business_id,
                counterparty_id=counterparty_id,
                project_id=project_id,
                job_application_id=application_id if document_type is DocumentType.NDA else None,
                accepted_job_id=accepted_job_id if accepted_job is not None else None,
                created_at=now,
            )
            await self._mirror_document(document, DocumentStatus.DRAFT)

        logger.info(
            "Generated %s %s for %s (template v%s)",
            document_type.value,
            document_id,
            application_id or accepted_job_id,
            template.template_version,
        )
        return document_id

    async def advance_document_status(self, document_id: UUID, target_status: Any) -> LegalDocument:
        """Move a document forward (or to amended/terminated) and mirror the status."""
        async with self._unit_of_work("advance_document_status"):
            target = _coerce_enum(DocumentStatus, target_status, "status")

            document = await self.documents.get(document_id, for_update=True)
            if document is None:
                raise NotFound("LegalDocument", document_id)
            if not can_transition_document(document.status, target):
                raise InvalidTransition("document", document.status.value, target.value)

            updated = await self.documents.update_status(
                document_id,
                target,
                executed_at=utc_now() if target is DocumentStatus.EXECUTED else None,
            )
            await self._mirror_document(updated, target)

        logger.info(
            "Document %s moved %s -> %s", document_id, document.status.value, target.value
        )
        return updated

    async def sign_document(
        self,
        document_id: UUID,
        signer_id: str,
        signature_data: str,
        remarks: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> UUID:
        """Append a signature on the document's current version.

        Signing never changes the document's status; executing it is a
        separate advance_document_status call once every party has signed.
        """
        async with self._unit_of_work("sign_document"):
            _require_text(signer_id, "signer_id")
            _require_text(signature_data, "signature_data")

            document = await self.documents.get(document_id, for_update=True)
            if document is None:
                raise NotFound("LegalDocument", document_id)
            if not document.status.is_signable():
                raise NotSignable(document_id, document.status.value)

            signature_metadata = dict(metadata or {})
            signature_metadata["timestamp"] = utc_now().isoformat()
            if remarks:
                signature_metadata["remarks"] = remarks

            signature = await self.signatures.create(
                document_id=document_id,
                signer_id=signer_id,
                signature_data=signature_data,
                version=document.version,
                signature_metadata=signature_metadata,
            )

        logger.info(
            "Document %s v%s signed by %s", document_id, document.version, signer_id
        )
        return signature.signature_id

    async def get_document(self, document_id: UUID) -> LegalDocument:
        document = await self.documents.get(document_id)
        if document is None:
            raise NotFound("LegalDocument", document_id)
        return document

    async def list_signatures(self, document_id: UUID) -> list[Signature]:
        await self.get_document(document_id)
        return await self.signatures.list(document_id)

    async def list_documents(
        self,
        application_id: UUID | None = None,
        accepted_job_id: UUID | None = None,
        document_type: Any = None,
    ) -> list[LegalDocument]:
        if document_type is not None:
            document_type = _coerce_enum(DocumentType, document_type, "document_type")
        return await self.documents.list(
            job_application_id=application_id,
            accepted_job_id=accepted_job_id,
            document_type=document_type,
        )

    # =========================================================================
    # Deletion Guard
    # =========================================================================

    async def _check_ticket(self, ticket: Ticket) -> DeletionCheck:
        reason = None
        if await self.time_entries.count_for_ticket(ticket.ticket_id) > 0:
            reason = "has_logged_time"
        elif ticket.completion_percentage > 0:
            reason = "has_progress"
        return DeletionCheck(
            item_id=ticket.ticket_id,
            item_kind=WorkItemKind.TICKET,
            allowed=reason is None,
            reason=reason,
        )

    async def _check_task(self, task: Task) -> DeletionCheck:
        reason = None
        if task.hours_logged > 0 or await self.time_entries.count_for_task(task.task_id) > 0:
            reason = "has_logged_time"
        elif task.completion_percentage > 0:
            reason = "has_progress"
        return DeletionCheck(
            item_id=task.task_id,
            item_kind=WorkItemKind.TASK,
            allowed=reason is None,
            reason=reason,
        )

    async def can_delete(self, item_id: UUID) -> DeletionCheck:
        """Whether a ticket or task (looked up in that order) may be removed."""
        ticket = await self.tickets.get(item_id)
        if ticket is not None:
            return await self._check_ticket(ticket)
        task = await self.tasks.get(item_id)
        if task is not None:
            return await self._check_task(task)
        raise NotFound("Work item", item_id)

    async def soft_delete(self, item_id: UUID, actor_id: str) -> UUID:
        """Archive and remove a ticket or task in one unit of work.

        Returns the archive id. Items with logged time or progress raise
        DeletionBlocked and stay untouched.
        """
        async with self._unit_of_work("soft_delete"):
            _require_text(actor_id, "actor_id")

            ticket = await self.tickets.get(item_id, for_update=True)
            task = None if ticket else await self.tasks.get(item_id, for_update=True)
            if ticket is None and task is None:
                raise NotFound("Work item", item_id)

            check = await (self._check_ticket(ticket) if ticket else self._check_task(task))
            if not check:
                raise DeletionBlocked(item_id, check.reason)

            item = ticket or task
            archived = await self.archive.create(
                original_id=item_id,
                item_kind=check.item_kind,
                project_id=item.project_id,
                title=item.title,
                description=item.description,
                status=item.status if ticket else item.status.value,
                completion_percentage=item.completion_percentage,
                estimated_hours=item.estimated_hours,
                snapshot=item.model_dump(mode="json"),
                deleted_by=actor_id,
            )

            if ticket:
                await self.tickets.delete(item_id)
            else:
                await self.tickets.detach_task(item_id)
                await self.applications.detach_task(item_id)
                await self.tasks.delete(item_id)

        logger.info(
            "Deleted %s %s by %s (archive %s)",
            check.item_kind.value,
            item_id,
            actor_id,
            archived.archive_id,
        )
        return archived.archive_id

    async def add_ticket_note(self, ticket_id: UUID, actor_id: str, comment: str) -> Ticket:
        """Append a free-text note to a ticket's log."""
        async with self._unit_of_work("add_ticket_note"):
            _require_text(actor_id, "actor_id")
            _require_text(comment, "comment")

            ticket = await self.tickets.get(ticket_id, for_update=True)
            if ticket is None:
                raise NotFound("Ticket", ticket_id)
            note = TicketNote(
                id=str(uuid4()),
                action="Note added",
                user=actor_id,
                timestamp=utc_now(),
                comment=comment,
            )
            updated = await self.tickets.append_note(ticket_id, note)

        logger.debug("Note added to ticket %s by %s", ticket_id, actor_id)
        return updated
