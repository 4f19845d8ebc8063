"""
Pytest configuration and fixtures.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from decimal import Decimal
from types import SimpleNamespace
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cleanops.application.interfaces.repositories import (
    InvoiceRepositoryInterface,
    JobRepositoryInterface,
    PhotoRepositoryInterface,
    PropertyRepositoryInterface,
    UserRepositoryInterface,
)
from cleanops.application.interfaces.services import (
    EventPublisherInterface,
    PhotoStoreInterface,
)
from cleanops.application.services.transactional_outbox import TransactionalOutbox
from cleanops.application.use_cases import (
    AcceptJobUseCase,
    ApproveInvoiceUseCase,
    CompleteJobUseCase,
    CreateJobRequest,
    CreateJobUseCase,
    GetCurrentInvoiceUseCase,
    MarkInvoicePaidUseCase,
    OverrideCompletionUseCase,
    ReassignJobUseCase,
    RecordPhotoUseCase,
    ReportAccessDeniedUseCase,
    ResetJobUseCase,
    ResolveGPSConflictUseCase,
    ResolvePhotoConflictUseCase,
    StartJobUseCase,
    SubmitInvoiceUseCase,
    VoidLineItemUseCase,
)
from cleanops.config.database import create_engine
from cleanops.domain.clock import FixedClock
from cleanops.domain.entities.property import Property
from cleanops.domain.entities.user import Actor, User
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.domain.value_objects.user_role import UserRole
from cleanops.infrastructure.database.immutability import (
    register_immutability_listeners,
)
from cleanops.infrastructure.database.models import Base
from cleanops.infrastructure.database.repositories import (
    InvoiceRepository,
    JobRepository,
    MediaRepository,
    PropertyRepository,
    TransactionService,
    UserRepository,
)

# Property location used by the lifecycle tests
PROPERTY_LAT = 40.7128
PROPERTY_LNG = -74.0061

# About 11m north of the property
NEARBY_LAT = 40.7129
NEARBY_LNG = -74.0061

# About 200m north of the property
FAR_LAT = 40.7146
FAR_LNG = -74.0061


@pytest.fixture
def clock():
    """Clock pinned to Monday 2025-01-06 09:00 UTC."""
    return FixedClock()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """File-backed SQLite engine so separate sessions see the same data."""
    register_immutability_listeners()
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'cleanops.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@dataclass
class SeedData:
    """Users and property of one business, plus an outsider business."""

    business_id: UUID
    manager: Actor
    cleaner: Actor
    other_cleaner: Actor
    hourly_cleaner: Actor
    inactive_cleaner_id: UUID
    property_id: UUID
    property_without_gps_id: UUID
    outsider_manager: Actor


def _actor(user: User) -> Actor:
    return Actor(id=user.id, role=user.role, business_id=user.business_id)


@pytest_asyncio.fixture
async def seed(session_factory) -> SeedData:
    """Insert a business with a manager, three cleaners and two properties."""
    business_id = uuid4()
    outsider_business_id = uuid4()

    async with session_factory() as session:
        users = UserRepository(session)
        properties = PropertyRepository(session)

        manager = await users.create(
            User(business_id=business_id, role=UserRole.MANAGER, email="manager@example.com")
        )
        cleaner = await users.create(
            User(
                business_id=business_id,
                role=UserRole.CLEANER,
                email="cleaner@example.com",
                first_name="Ana",
                pay_type=PayType.PER_JOB,
            )
        )
        other_cleaner = await users.create(
            User(
                business_id=business_id,
                role=UserRole.CLEANER,
                email="other@example.com",
                pay_type=PayType.PER_JOB,
            )
        )
        hourly_cleaner = await users.create(
            User(
                business_id=business_id,
                role=UserRole.CLEANER,
                email="hourly@example.com",
                pay_type=PayType.HOURLY,
            )
        )
        inactive_cleaner = await users.create(
            User(
                business_id=business_id,
                role=UserRole.CLEANER,
                email="inactive@example.com",
                is_active=False,
            )
        )
        outsider = await users.create(
            User(
                business_id=outsider_business_id,
                role=UserRole.MANAGER,
                email="outsider@example.com",
            )
        )

        property = await properties.create(
            Property(
                business_id=business_id,
                name="Harbor View Apartment",
                address="1 Harbor St",
                latitude=PROPERTY_LAT,
                longitude=PROPERTY_LNG,
            )
        )
        property_without_gps = await properties.create(
            Property(business_id=business_id, name="Unmapped Cabin")
        )

        await session.commit()

    return SeedData(
        business_id=business_id,
        manager=_actor(manager),
        cleaner=_actor(cleaner),
        other_cleaner=_actor(other_cleaner),
        hourly_cleaner=_actor(hourly_cleaner),
        inactive_cleaner_id=inactive_cleaner.id,
        property_id=property.id,
        property_without_gps_id=property_without_gps.id,
        outsider_manager=_actor(outsider),
    )


class Workflow:
    """Runs each use case in its own session, one per call like an API request."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], clock):
        self.session_factory = session_factory
        self.clock = clock

    @asynccontextmanager
    async def repos(self):
        async with self.session_factory() as session:
            yield SimpleNamespace(
                session=session,
                jobs=JobRepository(session),
                users=UserRepository(session),
                properties=PropertyRepository(session),
                invoices=InvoiceRepository(session),
                media=MediaRepository(session),
                outbox=TransactionalOutbox(session),
                tx=TransactionService(session),
            )

    async def create_job(
        self,
        actor: Actor,
        property_id: UUID,
        price: str = "150.00",
        pay_type_override: Optional[PayType] = None,
    ):
        async with self.repos() as r:
            use_case = CreateJobUseCase(r.jobs, r.properties, r.outbox, r.tx, self.clock)
            return await use_case.execute(
                CreateJobRequest(
                    property_id=property_id,
                    price=Decimal(price),
                    pay_type_override=pay_type_override,
                ),
                actor,
            )

    async def accept(self, job_id: UUID, actor: Actor):
        async with self.repos() as r:
            return await AcceptJobUseCase(r.jobs, r.outbox, r.tx, self.clock).execute(
                job_id, actor
            )

    async def start(self, job_id: UUID, actor: Actor, latitude=None, longitude=None):
        async with self.repos() as r:
            use_case = StartJobUseCase(r.jobs, r.outbox, r.tx, clock=self.clock)
            return await use_case.execute(job_id, actor, latitude, longitude)

    async def add_photo(self, job_id: UUID, actor: Actor, room: Optional[str] = None):
        async with self.repos() as r:
            use_case = RecordPhotoUseCase(r.jobs, r.media, r.tx, clock=self.clock)
            photo = await use_case.execute(job_id, actor, room=room)
            return photo.id

    async def complete(self, job_id: UUID, actor: Actor, latitude=None, longitude=None):
        async with self.repos() as r:
            use_case = CompleteJobUseCase(
                r.jobs, r.properties, r.users, r.invoices, r.media, r.outbox, r.tx,
                clock=self.clock,
            )
            return await use_case.execute(job_id, actor, latitude, longitude)

    async def report_access_denied(self, job_id: UUID, actor: Actor):
        async with self.repos() as r:
            use_case = ReportAccessDeniedUseCase(r.jobs, r.outbox, r.tx, clock=self.clock)
            return await use_case.execute(job_id, actor)

    async def override(self, job_id: UUID, reason: str, actor: Actor, latitude=None, longitude=None):
        async with self.repos() as r:
            use_case = OverrideCompletionUseCase(
                r.jobs, r.properties, r.users, r.invoices, r.media, r.outbox, r.tx,
                clock=self.clock,
            )
            return await use_case.execute(job_id, reason, actor, latitude, longitude)

    async def resolve_gps(self, job_id: UUID, reason: str, actor: Actor, latitude=None, longitude=None):
        async with self.repos() as r:
            use_case = ResolveGPSConflictUseCase(
                r.jobs, r.properties, r.users, r.invoices, r.media, r.outbox, r.tx,
                clock=self.clock,
            )
            return await use_case.execute(job_id, reason, actor, latitude, longitude)

    async def resolve_photos(self, job_id: UUID, reason: str, actor: Actor):
        async with self.repos() as r:
            use_case = ResolvePhotoConflictUseCase(
                r.jobs, r.properties, r.users, r.invoices, r.media, r.outbox, r.tx,
                clock=self.clock,
            )
            return await use_case.execute(job_id, reason, actor)

    async def reassign(self, job_id: UUID, cleaner_id: Optional[UUID], actor: Actor):
        async with self.repos() as r:
            use_case = ReassignJobUseCase(r.jobs, r.users, r.outbox, r.tx, self.clock)
            return await use_case.execute(job_id, cleaner_id, actor)

    async def reset(self, job_id: UUID, actor: Actor):
        async with self.repos() as r:
            return await ResetJobUseCase(r.jobs, r.outbox, r.tx, self.clock).execute(
                job_id, actor
            )

    async def current_invoice(self, actor: Actor):
        async with self.repos() as r:
            return await GetCurrentInvoiceUseCase(r.invoices).execute(actor)

    async def submit(self, invoice_id: UUID, actor: Actor):
        async with self.repos() as r:
            use_case = SubmitInvoiceUseCase(r.invoices, r.outbox, r.tx, self.clock)
            return await use_case.execute(invoice_id, actor)

    async def approve(self, invoice_id: UUID, actor: Actor):
        async with self.repos() as r:
            use_case = ApproveInvoiceUseCase(r.invoices, r.outbox, r.tx, self.clock)
            return await use_case.execute(invoice_id, actor)

    async def mark_paid(self, invoice_id: UUID, actor: Actor):
        async with self.repos() as r:
            use_case = MarkInvoicePaidUseCase(r.invoices, r.outbox, r.tx, self.clock)
            return await use_case.execute(invoice_id, actor)

    async def void(self, line_item_id: UUID, reason: str, actor: Actor):
        async with self.repos() as r:
            use_case = VoidLineItemUseCase(r.invoices, r.outbox, r.tx, self.clock)
            return await use_case.execute(line_item_id, reason, actor)

    async def get_job(self, job_id: UUID):
        async with self.repos() as r:
            return await r.jobs.get_by_id(job_id)

    async def get_invoice(self, invoice_id: UUID):
        async with self.repos() as r:
            return await r.invoices.get_by_id(invoice_id, with_line_items=True)

    async def pending_events(self, aggregate_id: UUID):
        async with self.repos() as r:
            return await r.outbox.get_pending_events(aggregate_id=str(aggregate_id))


@pytest.fixture
def workflow(session_factory, clock) -> Workflow:
    return Workflow(session_factory, clock)


@pytest_asyncio.fixture
async def client(session_factory, clock) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, the test database and the fixed clock."""
    from cleanops.api.app import create_app
    from cleanops.api.dependencies import get_clock
    from cleanops.config.database import get_db_session

    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            yield session

    async def override_clock():
        return clock

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_clock] = override_clock

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as http_client:
        yield http_client


def headers_for(actor: Actor) -> dict:
    """Identity headers the auth gateway would set for the actor."""
    return {
        "X-Actor-Id": str(actor.id),
        "X-Actor-Role": actor.role.value,
        "X-Business-Id": str(actor.business_id),
    }


@pytest.fixture
def business_id():
    return uuid4()


@pytest.fixture
def manager(business_id):
    return Actor(id=uuid4(), role=UserRole.MANAGER, business_id=business_id)


@pytest.fixture
def cleaner(business_id):
    return Actor(id=uuid4(), role=UserRole.CLEANER, business_id=business_id)


@pytest.fixture
def mock_job_repository():
    """Mock job repository."""
    mock_repo = AsyncMock(spec=JobRepositoryInterface)
    mock_repo.get_by_id = AsyncMock()
    mock_repo.update_if_status = AsyncMock(return_value=True)
    return mock_repo


@pytest.fixture
def mock_property_repository():
    mock_repo = AsyncMock(spec=PropertyRepositoryInterface)
    mock_repo.get_by_id = AsyncMock()
    mock_repo.update = AsyncMock(return_value=True)
    mock_repo.has_jobs = AsyncMock(return_value=False)
    mock_repo.delete = AsyncMock(return_value=True)
    return mock_repo


@pytest.fixture
def mock_user_repository():
    mock_repo = AsyncMock(spec=UserRepositoryInterface)
    mock_repo.get_by_id = AsyncMock()
    return mock_repo


@pytest.fixture
def mock_invoice_repository():
    """Mock invoice repository."""
    mock_repo = AsyncMock(spec=InvoiceRepositoryInterface)
    mock_repo.find_line_item = AsyncMock(return_value=None)
    mock_repo.append_line_item = AsyncMock(return_value=True)
    mock_repo.update_status_if = AsyncMock(return_value=True)
    mock_repo.void_line_item = AsyncMock(return_value=True)
    return mock_repo


@pytest.fixture
def mock_photo_store():
    mock_store = AsyncMock(spec=PhotoStoreInterface)
    mock_store.photo_count = AsyncMock(return_value=3)
    return mock_store


@pytest.fixture
def mock_photo_repository():
    mock_repo = AsyncMock(spec=PhotoRepositoryInterface)
    mock_repo.record = AsyncMock(side_effect=lambda photo: photo)
    mock_repo.void = AsyncMock(return_value=True)
    return mock_repo


@pytest.fixture
def mock_publisher():
    """Mock event publisher."""
    return AsyncMock(spec=EventPublisherInterface)


@pytest.fixture
def mock_transaction_service():
    """Transaction service that just runs the operation."""
    mock_service = AsyncMock(spec=TransactionService)

    async def run(operation, name="operation"):
        return await operation()

    mock_service.execute_in_transaction = AsyncMock(side_effect=run)
    return mock_service
