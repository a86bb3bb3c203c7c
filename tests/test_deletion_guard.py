"""
Deletion guard tests.

Tickets and tasks with logged time or progress are never removed. Items
that pass the check are archived and removed in one unit of work.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from equityledger.engine import DeletionBlocked, InvalidInput, NotFound
from equityledger.models import WorkItemKind


@pytest.mark.asyncio
async def test_fresh_task_is_deletable(ledger):
    engine = ledger.engine
    check = await engine.can_delete(ledger.other_task_id)

    assert check.allowed is True
    assert check.reason is None
    assert check.item_kind == WorkItemKind.TASK


@pytest.mark.asyncio
async def test_soft_delete_archives_and_removes_task(ledger):
    engine = ledger.engine
    archive_id = await engine.soft_delete(ledger.other_task_id, "dana")
    await ledger.session.commit()

    with pytest.raises(NotFound):
        await engine.get_task(ledger.other_task_id)

    archived = await engine.archive.get_by_original(ledger.other_task_id)
    assert archived.archive_id == archive_id
    assert archived.item_kind == WorkItemKind.TASK
    assert archived.title == "Vision model"
    assert archived.status == "open"
    assert archived.deleted_by == "dana"
    assert archived.project_id == ledger.project_id
    assert archived.snapshot["title"] == "Vision model"
    assert Decimal(archived.snapshot["equity_allocation"]) == 4


@pytest.mark.asyncio
async def test_logged_time_blocks_deletion_without_estimate(ledger):
    """Time logged on a task with no estimate leaves completion at 0 but still blocks."""
    engine = ledger.engine
    await engine.log_effort(ledger.other_task_id, "sam", 2)

    task = await engine.get_task(ledger.other_task_id)
    assert task.completion_percentage == 0

    check = await engine.can_delete(ledger.other_task_id)
    assert check.allowed is False
    assert check.reason == "has_logged_time"


@pytest.mark.asyncio
async def test_progress_blocks_deletion(ledger):
    engine = ledger.engine
    await engine.tasks.update(ledger.other_task_id, completion_percentage=20)

    check = await engine.can_delete(ledger.other_task_id)
    assert check.allowed is False
    assert check.reason == "has_progress"


@pytest.mark.asyncio
async def test_blocked_delete_leaves_item_untouched(ledger):
    engine = ledger.engine
    await engine.log_effort(ledger.task_id, "sam", 1)
    await ledger.session.commit()

    with pytest.raises(DeletionBlocked) as exc_info:
        await engine.soft_delete(ledger.task_id, "dana")

    assert exc_info.value.reason == "has_logged_time"
    assert exc_info.value.to_dict()["reason"] == "has_logged_time"
    assert (await engine.get_task(ledger.task_id)).hours_logged == Decimal("1")
    assert await engine.archive.get_by_original(ledger.task_id) is None


@pytest.mark.asyncio
async def test_ticket_with_time_entries_is_blocked(ledger):
    engine = ledger.engine
    await engine.log_effort(ledger.task_id, "sam", 1)

    check = await engine.can_delete(ledger.ticket_id)
    assert check.item_kind == WorkItemKind.TICKET
    assert check.allowed is False
    assert check.reason == "has_logged_time"

    with pytest.raises(DeletionBlocked):
        await engine.soft_delete(ledger.ticket_id, "dana")
    assert (await engine.get_ticket(ledger.ticket_id)).ticket_id == ledger.ticket_id


@pytest.mark.asyncio
async def test_ticket_with_progress_is_blocked(ledger):
    engine = ledger.engine
    await engine.tickets.update(ledger.ticket_id, completion_percentage=30)

    check = await engine.can_delete(ledger.ticket_id)
    assert check.reason == "has_progress"


@pytest.mark.asyncio
async def test_fresh_ticket_is_archived_and_removed(ledger):
    engine = ledger.engine
    ticket = await engine.tickets.create(title="Write docs", project_id=ledger.project_id)

    archive_id = await engine.soft_delete(ticket.ticket_id, "dana")

    with pytest.raises(NotFound):
        await engine.get_ticket(ticket.ticket_id)
    archived = await engine.archive.get_by_original(ticket.ticket_id)
    assert archived.archive_id == archive_id
    assert archived.item_kind == WorkItemKind.TICKET
    assert archived.status == "todo"


@pytest.mark.asyncio
async def test_deleting_task_detaches_links(ledger):
    engine = ledger.engine
    await engine.soft_delete(ledger.task_id, "dana")
    await ledger.session.commit()

    ticket = await engine.get_ticket(ledger.ticket_id)
    assert ticket.task_id is None
    application = await engine.applications.get(ledger.application_id)
    assert application.task_id is None


@pytest.mark.asyncio
async def test_unknown_item_is_not_found(ledger):
    engine = ledger.engine
    with pytest.raises(NotFound):
        await engine.can_delete(uuid4())
    with pytest.raises(NotFound):
        await engine.soft_delete(uuid4(), "dana")


@pytest.mark.asyncio
async def test_actor_is_required(ledger):
    with pytest.raises(InvalidInput):
        await ledger.engine.soft_delete(ledger.other_task_id, "")
