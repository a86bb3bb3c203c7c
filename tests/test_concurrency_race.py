"""
Concurrency race tests.

Concurrent approvals in one project serialize on the project row, so the
pool is never overcommitted. Concurrent effort on one task serializes on the
task row, so no hours are lost. Completion recomputes serialize on the
project row, so progress on a sibling task is never dropped. Needs
PostgreSQL row locks; skipped on SQLite.
"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from equityledger.config import settings
from equityledger.engine import AllocationExceeded, EquityLedgerEngine

pytestmark = pytest.mark.skipif(
    settings.is_sqlite, reason="row-lock races need PostgreSQL"
)


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.mark.asyncio
async def test_concurrent_approvals_never_exceed_pool(ledger, session_factory):
    """Two tasks worth 15 and 12 race for a pool of 20; exactly one wins."""
    first = await ledger.add_task(equity_allocation="15")
    second = await ledger.add_task(equity_allocation="12")
    for task_id in (first, second):
        await ledger.engine.update_task_status(task_id, "in-progress", "sam")
    await ledger.session.commit()

    async def approve(task_id):
        async with session_factory() as session:
            try:
                await EquityLedgerEngine(session).approve_task(task_id, "dana")
                await session.commit()
                return "approved"
            except AllocationExceeded:
                await session.rollback()
                return "exceeded"

    outcomes = await asyncio.gather(approve(first), approve(second))

    assert sorted(outcomes) == ["approved", "exceeded"]
    project = await ledger.engine.get_project(ledger.project_id)
    assert project.equity_allocated in (Decimal("15"), Decimal("12"))
    assert project.equity_allocated <= project.equity_allocation


@pytest.mark.asyncio
async def test_concurrent_approvals_of_same_task_grant_once(ledger, session_factory):
    await ledger.engine.update_task_status(ledger.task_id, "in-progress", "sam")
    await ledger.session.commit()

    async def approve():
        async with session_factory() as session:
            result = await EquityLedgerEngine(session).approve_task(ledger.task_id, "dana")
            await session.commit()
            return result

    results = await asyncio.gather(*(approve() for _ in range(4)))

    assert sum(1 for r in results if not r.already_approved) == 1
    assert sum((r.equity_granted for r in results), Decimal(0)) == Decimal("6")
    project = await ledger.engine.get_project(ledger.project_id)
    assert project.equity_allocated == Decimal("6")


@pytest.mark.asyncio
async def test_concurrent_effort_is_not_lost(ledger, session_factory):
    async def log(hours):
        async with session_factory() as session:
            await EquityLedgerEngine(session).log_effort(ledger.task_id, "sam", hours)
            await session.commit()

    await asyncio.gather(*(log(Decimal("0.5")) for _ in range(6)))

    task = await ledger.engine.get_task(ledger.task_id)
    assert task.hours_logged == Decimal("3")
    assert task.completion_percentage == 30
    assert await ledger.engine.time_entries.count_for_task(ledger.task_id) == 6
    ticket = await ledger.engine.get_ticket(ledger.ticket_id)
    assert ticket.hours_logged == Decimal("3")


@pytest.mark.asyncio
async def test_concurrent_effort_on_sibling_tasks(ledger, session_factory):
    """Effort on two tasks of one project; the last writer sees both tasks' progress."""
    await ledger.engine.set_estimated_hours(ledger.other_task_id, 10)
    await ledger.session.commit()

    async def log(task_id, hours):
        async with session_factory() as session:
            await EquityLedgerEngine(session).log_effort(task_id, "sam", hours)
            await session.commit()

    await asyncio.gather(log(ledger.task_id, 5), log(ledger.other_task_id, 10))

    # (6 * 50 + 4 * 100) / 10
    project = await ledger.engine.get_project(ledger.project_id)
    assert project.completion_percentage == 70
    assert await ledger.engine.recompute_project_completion(ledger.project_id) == 70
