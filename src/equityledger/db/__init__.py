"""EquityLedger database layer."""

from equityledger.db.base import Base, close_db, get_session, init_db
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

__all__ = [
    "Base",
    "close_db",
    "get_session",
    "init_db",
    "AcceptedJobTable",
    "BusinessTable",
    "DeletedWorkItemTable",
    "DocumentTemplateTable",
    "JobApplicationTable",
    "LegalDocumentTable",
    "ProfileTable",
    "ProjectTable",
    "SignatureTable",
    "TaskTable",
    "TicketTable",
    "TimeEntryTable",
]
