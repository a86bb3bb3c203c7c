"""EquityLedger enumerations."""

from enum import Enum


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    BLOCKED = "blocked"
    APPROVED = "approved"
    DONE = "done"

    @classmethod
    def settled_states(cls) -> set["TaskStatus"]:
        """States whose equity has been granted."""
        return {cls.APPROVED, cls.DONE}

    @classmethod
    def approvable_states(cls) -> set["TaskStatus"]:
        return {cls.IN_PROGRESS, cls.REVIEW}

    def is_settled(self) -> bool:
        return self in self.settled_states()


class ApplicationStatus(str, Enum):
    """Job application status."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    COMPLETED = "completed"


class DocumentType(str, Enum):
    """Kinds of generated legal documents."""

    NDA = "nda"
    WORK_CONTRACT = "work_contract"
    AWARD_AGREEMENT = "award_agreement"


class DocumentStatus(str, Enum):
    """Legal document lifecycle status."""

    DRAFT = "draft"
    REVIEW = "review"
    FINAL = "final"
    EXECUTED = "executed"
    AMENDED = "amended"
    TERMINATED = "terminated"

    @classmethod
    def signable_states(cls) -> set["DocumentStatus"]:
        return {cls.REVIEW, cls.FINAL}

    @classmethod
    def terminal_states(cls) -> set["DocumentStatus"]:
        return {cls.AMENDED, cls.TERMINATED}

    def is_signable(self) -> bool:
        return self in self.signable_states()


class WorkItemKind(str, Enum):
    """Kinds of records the deletion guard handles."""

    TASK = "task"
    TICKET = "ticket"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum values, not member names."""
    return [member.value for member in enum_cls]
