"""Initial EquityLedger schema."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    "taskstatus": ("open", "in-progress", "review", "blocked", "approved", "done"),
    "applicationstatus": ("pending", "accepted", "rejected", "withdrawn", "completed"),
    "documenttype": ("nda", "work_contract", "award_agreement"),
    "documentstatus": ("draft", "review", "final", "executed", "amended", "terminated"),
    "workitemkind": ("task", "ticket"),
}

AMOUNT = sa.Numeric(12, 4)


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create ledger tables and enums."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "businesses",
        sa.Column("business_id", sa.Uuid(), primary_key=True),
        sa.Column("company_name", sa.String(length=255), nullable=True),
        sa.Column("contact_person", sa.String(length=255), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=64), nullable=True),
        sa.Column("entity_type", sa.String(length=100), nullable=True),
        sa.Column("equity_class", sa.String(length=100), nullable=True),
    )

    op.create_table(
        "profiles",
        sa.Column("profile_id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
    )

    op.create_table(
        "business_projects",
        sa.Column("project_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "business_id", sa.Uuid(), sa.ForeignKey("businesses.business_id"), nullable=True
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("equity_allocation", AMOUNT, nullable=False),
        sa.Column("equity_allocated", AMOUNT, nullable=False, server_default="0"),
        sa.Column("completion_percentage", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint(
            "equity_allocated <= equity_allocation", name="ck_projects_allocation_ceiling"
        ),
    )
    op.create_index("idx_projects_business", "business_projects", ["business_id"])

    op.create_table(
        "project_sub_tasks",
        sa.Column("task_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("business_projects.project_id"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("equity_allocation", AMOUNT, nullable=False, server_default="0"),
        sa.Column("status", _enum("taskstatus"), nullable=False, server_default="open"),
        sa.Column("completion_percentage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("estimated_hours", AMOUNT, nullable=True),
        sa.Column("hours_logged", AMOUNT, nullable=False, server_default="0"),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("equity_earned", AMOUNT, nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "completion_percentage BETWEEN 0 AND 100", name="ck_tasks_completion_range"
        ),
    )
    op.create_index("idx_tasks_project_status", "project_sub_tasks", ["project_id", "status"])

    op.create_table(
        "time_entries",
        sa.Column("time_entry_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "task_id", sa.Uuid(), sa.ForeignKey("project_sub_tasks.task_id"), nullable=False
        ),
        sa.Column("ticket_id", sa.Uuid(), nullable=True),
        sa.Column("actor_id", sa.String(length=255), nullable=False),
        sa.Column("hours_logged", AMOUNT, nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("hours_logged > 0", name="ck_time_entries_positive_hours"),
    )
    op.create_index("idx_time_entries_task", "time_entries", ["task_id", "created_at"])
    op.create_index("idx_time_entries_ticket", "time_entries", ["ticket_id"])

    op.create_table(
        "tickets",
        sa.Column("ticket_id", sa.Uuid(), primary_key=True),
        sa.Column("project_id", sa.Uuid(), nullable=True),
        sa.Column(
            "task_id",
            sa.Uuid(),
            sa.ForeignKey("project_sub_tasks.task_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("job_app_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="todo"),
        sa.Column("priority", sa.String(length=50), nullable=False, server_default="medium"),
        sa.Column("ticket_type", sa.String(length=50), nullable=False, server_default="task"),
        sa.Column("reporter_id", sa.String(length=255), nullable=True),
        sa.Column("assignee_id", sa.String(length=255), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("estimated_hours", AMOUNT, nullable=True),
        sa.Column("hours_logged", AMOUNT, nullable=False, server_default="0"),
        sa.Column("completion_percentage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("equity_points", AMOUNT, nullable=True),
        sa.Column(
            "notes", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")
        ),
        *_timestamps(),
    )
    op.create_index("idx_tickets_task", "tickets", ["task_id"])
    op.create_index("idx_tickets_project_status", "tickets", ["project_id", "status"])

    op.create_table(
        "deleted_work_items",
        sa.Column("archive_id", sa.Uuid(), primary_key=True),
        sa.Column("original_id", sa.Uuid(), nullable=False),
        sa.Column("item_kind", _enum("workitemkind"), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("completion_percentage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("estimated_hours", AMOUNT, nullable=True),
        sa.Column(
            "snapshot", postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.Column("deleted_by", sa.String(length=255), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_deleted_items_original", "deleted_work_items", ["original_id"])

    op.create_table(
        "job_applications",
        sa.Column("job_app_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "task_id",
            sa.Uuid(),
            sa.ForeignKey("project_sub_tasks.task_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("project_id", sa.Uuid(), nullable=True),
        sa.Column("applicant_id", sa.Uuid(), nullable=False),
        sa.Column(
            "status", _enum("applicationstatus"), nullable=False, server_default="pending"
        ),
        sa.Column("nda_document_id", sa.Uuid(), nullable=True),
        sa.Column("nda_status", _enum("documentstatus"), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_job_applications_task", "job_applications", ["task_id", "status"])

    op.create_table(
        "accepted_jobs",
        sa.Column("accepted_job_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "job_app_id",
            sa.Uuid(),
            sa.ForeignKey("job_applications.job_app_id"),
            nullable=False,
        ),
        sa.Column("equity_agreed", AMOUNT, nullable=False, server_default="0"),
        sa.Column("agreed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("accepted_discourse", sa.Text(), nullable=True),
        sa.Column("work_contract_document_id", sa.Uuid(), nullable=True),
        sa.Column("work_contract_status", _enum("documentstatus"), nullable=True),
        sa.Column("award_agreement_document_id", sa.Uuid(), nullable=True),
        sa.Column("award_agreement_status", _enum("documentstatus"), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("job_app_id", name="uq_accepted_job_application"),
    )

    op.create_table(
        "legal_documents",
        sa.Column("document_id", sa.Uuid(), primary_key=True),
        sa.Column("document_type", _enum("documenttype"), nullable=False),
        sa.Column("status", _enum("documentstatus"), nullable=False, server_default="draft"),
        sa.Column("business_id", sa.Uuid(), nullable=True),
        sa.Column("counterparty_id", sa.Uuid(), nullable=True),
        sa.Column("project_id", sa.Uuid(), nullable=True),
        sa.Column("job_application_id", sa.Uuid(), nullable=True),
        sa.Column("accepted_job_id", sa.Uuid(), nullable=True),
        sa.Column("version", sa.String(length=20), nullable=False),
        sa.Column("template_version", sa.String(length=20), nullable=True),
        sa.Column("storage_path", sa.String(length=512), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column("executed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "idx_documents_application", "legal_documents", ["job_application_id", "document_type"]
    )
    op.create_index(
        "idx_documents_accepted_job", "legal_documents", ["accepted_job_id", "document_type"]
    )

    op.create_table(
        "document_signatures",
        sa.Column("signature_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "document_id",
            sa.Uuid(),
            sa.ForeignKey("legal_documents.document_id"),
            nullable=False,
        ),
        sa.Column("signer_id", sa.String(length=255), nullable=False),
        sa.Column("signature_data", sa.Text(), nullable=False),
        sa.Column(
            "signature_metadata",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("version", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_signatures_document", "document_signatures", ["document_id", "created_at"]
    )

    op.create_table(
        "document_templates",
        sa.Column("template_id", sa.Uuid(), primary_key=True),
        sa.Column("template_type", _enum("documenttype"), nullable=False),
        sa.Column("template_version", sa.String(length=20), nullable=False),
        sa.Column("template_name", sa.String(length=255), nullable=False),
        sa.Column("template_content", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("template_type", "template_version", name="uq_template_version"),
    )


def downgrade() -> None:
    """Drop all tables and enums."""
    op.drop_table("document_templates")

    op.drop_index("idx_signatures_document", table_name="document_signatures")
    op.drop_table("document_signatures")

    op.drop_index("idx_documents_accepted_job", table_name="legal_documents")
    op.drop_index("idx_documents_application", table_name="legal_documents")
    op.drop_table("legal_documents")

    op.drop_table("accepted_jobs")

    op.drop_index("idx_job_applications_task", table_name="job_applications")
    op.drop_table("job_applications")

    op.drop_index("idx_deleted_items_original", table_name="deleted_work_items")
    op.drop_table("deleted_work_items")

    op.drop_index("idx_tickets_project_status", table_name="tickets")
    op.drop_index("idx_tickets_task", table_name="tickets")
    op.drop_table("tickets")

    op.drop_index("idx_time_entries_ticket", table_name="time_entries")
    op.drop_index("idx_time_entries_task", table_name="time_entries")
    op.drop_table("time_entries")

    op.drop_index("idx_tasks_project_status", table_name="project_sub_tasks")
    op.drop_table("project_sub_tasks")

    op.drop_index("idx_projects_business", table_name="business_projects")
    op.drop_table("business_projects")

    op.drop_table("profiles")
    op.drop_table("businesses")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        sa.Enum(name=name).drop(bind, checkfirst=True)
