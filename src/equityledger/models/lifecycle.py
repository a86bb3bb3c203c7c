"""Status state machines for tasks and legal documents.

Both lifecycles are validated here and nowhere else. The engine asks
``can_transition_*`` before writing a status and raises
``InvalidTransition`` when the answer is no.

Task lifecycle (manual moves):
- open -> in-progress
- in-progress -> open, review, blocked
- review -> in-progress, blocked
- blocked -> in-progress, review
- approved -> done

``approved`` is never a manual target; only the equity allocation guard
moves a task there, because approval is what commits equity.

Document lifecycle:
- draft -> review -> final -> executed
- review/final/executed -> amended | terminated (administrative exits)

Documents never move backward, never skip a stage, and amended/terminated
are terminal.
"""

from equityledger.models.enums import DocumentStatus, TaskStatus


TASK_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.OPEN: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.IN_PROGRESS: frozenset(
        {TaskStatus.OPEN, TaskStatus.REVIEW, TaskStatus.BLOCKED}
    ),
    TaskStatus.REVIEW: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED}),
    TaskStatus.BLOCKED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.REVIEW}),
    TaskStatus.APPROVED: frozenset({TaskStatus.DONE}),
    TaskStatus.DONE: frozenset(),
}

# States from which reaching 100% effort completion moves a task to review.
AUTO_REVIEW_SOURCES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.OPEN, TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED}
)

_ADMINISTRATIVE_EXITS = frozenset(DocumentStatus.terminal_states())

DOCUMENT_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.DRAFT: frozenset({DocumentStatus.REVIEW}),
    DocumentStatus.REVIEW: frozenset({DocumentStatus.FINAL}) | _ADMINISTRATIVE_EXITS,
    DocumentStatus.FINAL: frozenset({DocumentStatus.EXECUTED}) | _ADMINISTRATIVE_EXITS,
    DocumentStatus.EXECUTED: _ADMINISTRATIVE_EXITS,
    DocumentStatus.AMENDED: frozenset(),
    DocumentStatus.TERMINATED: frozenset(),
}


def can_transition_task(current: TaskStatus, target: TaskStatus) -> bool:
    """Check a manual task status move."""
    return target in TASK_TRANSITIONS.get(current, frozenset())


def can_transition_document(current: DocumentStatus, target: DocumentStatus) -> bool:
    """Check a document status move."""
    return target in DOCUMENT_TRANSITIONS.get(current, frozenset())


def reaches_review(current: TaskStatus, completion_percentage: int) -> bool:
    """Whether effort completion should push the task into review."""
    return completion_percentage >= 100 and current in AUTO_REVIEW_SOURCES


# Board column written onto a task's linked ticket when the task moves.
TICKET_STATUS_FOR_TASK: dict[TaskStatus, str] = {
    TaskStatus.OPEN: "todo",
    TaskStatus.IN_PROGRESS: "in-progress",
    TaskStatus.REVIEW: "review",
    TaskStatus.BLOCKED: "blocked",
    TaskStatus.APPROVED: "done",
    TaskStatus.DONE: "done",
}


def ticket_status_for(status: TaskStatus) -> str:
    return TICKET_STATUS_FOR_TASK[status]
