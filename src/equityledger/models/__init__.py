"""EquityLedger data models."""

from equityledger.models.enums import (
    ApplicationStatus,
    DocumentStatus,
    DocumentType,
    TaskStatus,
    WorkItemKind,
)
from equityledger.models.document import (
    DocumentData,
    DocumentTemplate,
    LegalDocument,
    Signature,
)
from equityledger.models.job import AcceptedJob, JobApplication
from equityledger.models.party import Business, Profile
from equityledger.models.project import Project, Task, TimeEntry
from equityledger.models.results import ApprovalResult, DeletionCheck, EffortResult
from equityledger.models.ticket import DeletedWorkItem, Ticket, TicketNote

__all__ = [
    "AcceptedJob",
    "ApplicationStatus",
    "ApprovalResult",
    "Business",
    "DeletedWorkItem",
    "DeletionCheck",
    "DocumentData",
    "DocumentStatus",
    "DocumentTemplate",
    "DocumentType",
    "EffortResult",
    "JobApplication",
    "LegalDocument",
    "Profile",
    "Project",
    "Signature",
    "Task",
    "TaskStatus",
    "Ticket",
    "TicketNote",
    "TimeEntry",
    "WorkItemKind",
]
