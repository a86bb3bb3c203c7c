"""
Pytest fixtures for EquityLedger tests.

Runs against SQLite (aiosqlite) by default. Point
EQUITYLEDGER_TEST_DATABASE_URL at a PostgreSQL test database to run the
full suite, including the row-lock race tests, against the production store.
"""

import os
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Ensure test config is set before importing equityledger modules.
os.environ.setdefault("EQUITYLEDGER_ALLOW_INSECURE_DEV", "true")
os.environ.setdefault("EQUITYLEDGER_ENV", "development")
os.environ.setdefault(
    "EQUITYLEDGER_DATABASE_URL",
    os.getenv(
        "EQUITYLEDGER_TEST_DATABASE_URL",
        "sqlite+aiosqlite:///./equityledger_test.db",
    ),
)

from equityledger.config import settings
from equityledger.db.base import Base, build_engine
import equityledger.db.tables  # noqa: F401
from equityledger.engine import EquityLedgerEngine
from equityledger.models import ApplicationStatus, Business, Profile
from equityledger.observability.metrics import metrics


def _ensure_test_database_url(database_url: str) -> None:
    if "test" not in database_url:
        raise RuntimeError(
            "Refusing to run EquityLedger tests against a non-test database. "
            "Set EQUITYLEDGER_TEST_DATABASE_URL to a dedicated test database."
        )


@pytest.fixture
async def engine():
    """Create a test engine and wire it into equityledger.db.base."""
    _ensure_test_database_url(settings.database_url)
    engine = build_engine(settings.database_url, echo=settings.debug)

    # Override global engine/session factory for dependency injection.
    from equityledger import db as db_module

    db_module.base.engine = engine
    db_module.base.async_session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    """Provide a clean database session per test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield


@dataclass
class Ledger:
    """Seeded ledger: one business, one counterparty, one project of 20 equity.

    ``task_id`` (6 equity, 10 h estimate) is held by an accepted application
    with an accepted job and is tracked by ``ticket_id``. ``other_task_id``
    (4 equity, no estimate) has neither.
    """

    engine: EquityLedgerEngine
    session: AsyncSession
    business_id: UUID
    profile_id: UUID
    project_id: UUID
    task_id: UUID
    other_task_id: UUID
    application_id: UUID
    accepted_job_id: UUID
    ticket_id: UUID

    async def add_task(
        self,
        equity_allocation: str = "1",
        estimated_hours: str | None = None,
        title: str = "Extra task",
    ) -> UUID:
        task = await self.engine.tasks.create(
            project_id=self.project_id,
            title=title,
            equity_allocation=Decimal(equity_allocation),
            estimated_hours=Decimal(estimated_hours) if estimated_hours else None,
        )
        await self.session.commit()
        return task.task_id


@pytest.fixture
async def ledger(session) -> Ledger:
    """Seed the records every intent needs."""
    engine = EquityLedgerEngine(session)

    business = await engine.parties.add_business(
        Business(
            business_id=uuid4(),
            company_name="Acme Robotics",
            contact_person="Dana Reyes",
            contact_email="dana@acme.test",
            contact_phone="555-0100",
            entity_type="LLC",
            equity_class="membership units",
        )
    )
    profile = await engine.parties.add_profile(
        Profile(
            profile_id=uuid4(),
            first_name="Sam",
            last_name="Okafor",
            email="sam@example.test",
            phone="555-0199",
        )
    )
    project = await engine.projects.create(
        title="Warehouse picker",
        description="Pick-and-place arm for small parcels",
        equity_allocation=Decimal("20"),
        business_id=business.business_id,
    )
    task = await engine.tasks.create(
        project_id=project.project_id,
        title="Gripper firmware",
        equity_allocation=Decimal("6"),
        estimated_hours=Decimal("10"),
    )
    other_task = await engine.tasks.create(
        project_id=project.project_id,
        title="Vision model",
        equity_allocation=Decimal("4"),
    )
    application = await engine.applications.create(
        applicant_id=profile.profile_id,
        task_id=task.task_id,
        project_id=project.project_id,
        status=ApplicationStatus.ACCEPTED,
    )
    accepted_job = await engine.accepted_jobs.create(job_app_id=application.job_app_id)
    ticket = await engine.tickets.create(
        title="Gripper firmware",
        project_id=project.project_id,
        task_id=task.task_id,
        job_app_id=application.job_app_id,
        estimated_hours=Decimal("10"),
    )
    await session.commit()

    return Ledger(
        engine=engine,
        session=session,
        business_id=business.business_id,
        profile_id=profile.profile_id,
        project_id=project.project_id,
        task_id=task.task_id,
        other_task_id=other_task.task_id,
        application_id=application.job_app_id,
        accepted_job_id=accepted_job.accepted_job_id,
        ticket_id=ticket.ticket_id,
    )


@pytest.fixture
async def client(session):
    """Async test client with overridden dependencies."""
    from equityledger.api.deps import get_db_session
    from equityledger.main import app

    async def override_get_db_session():
        yield session

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
