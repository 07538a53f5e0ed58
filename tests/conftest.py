# Standard Library
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, Callable, Awaitable, List, Optional, Tuple
from unittest.mock import AsyncMock

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# First-Party Libraries
from opsflow.main import app
from opsflow.database import get_db_session
from opsflow.auth.dependencies import get_current_actor
from opsflow.auth.models import CurrentActor
from opsflow.core.money import line_total, compute_totals
from opsflow.customers.models import Customer
from opsflow.email.dependencies import get_email_sender
from opsflow.notifications.dependencies import get_broadcaster
from opsflow.pdf.dependencies import get_pdf_generator
from opsflow.projects.models import Project
from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.models import Quote, QuoteItem
from opsflow.tenants.models import Tenant

# URL de base pour la DB en mémoire
TEST_DATABASE_BASE_URL = "sqlite+aiosqlite:///:memory:"

FAKE_PDF = b"%PDF-1.4 mock content"

# Lignes par défaut: 2 x 50.00 + 1 x 150.00 = 250.00, taxe 20 % et remise 10.00 -> 290.00
DEFAULT_LINES: List[Tuple[str, str, str]] = [
    ("Dalle béton", "2", "50.00"),
    ("Pose portail", "1", "150.00"),
]

# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    engine: AsyncEngine = create_async_engine(
        TEST_DATABASE_BASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()


class ActorState:
    """Acteur renvoyé par l'override de get_current_actor; modifiable dans un test."""

    def __init__(self):
        self.actor = CurrentActor(id=1, tenant_id=1)

    def act_as(self, actor_id: int, tenant_id: Optional[int]) -> None:
        self.actor = CurrentActor(id=actor_id, tenant_id=tenant_id)


@pytest.fixture
def actor_state() -> ActorState:
    return ActorState()


@pytest.fixture
def pdf_generator_mock() -> AsyncMock:
    generator = AsyncMock()
    generator.render_document.return_value = FAKE_PDF
    return generator


@pytest.fixture
def email_sender_mock() -> AsyncMock:
    sender = AsyncMock()
    sender.send_email.return_value = True
    return sender


@pytest.fixture
def broadcaster_mock() -> AsyncMock:
    return AsyncMock()


@pytest_asyncio.fixture(scope="function")
async def test_client(
    db_session: AsyncSession,
    actor_state: ActorState,
    pdf_generator_mock: AsyncMock,
    email_sender_mock: AsyncMock,
    broadcaster_mock: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Client httpx sur la session de test, acteur (1, tenant 1) et collaborateurs mockés."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_current_actor] = lambda: actor_state.actor
    app.dependency_overrides[get_pdf_generator] = lambda: pdf_generator_mock
    app.dependency_overrides[get_email_sender] = lambda: email_sender_mock
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster_mock
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def anonymous_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client sans override d'authentification."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

# --- Fixtures Données de référence ---

@pytest_asyncio.fixture(scope="function")
async def tenant(db_session: AsyncSession) -> Tenant:
    tenant = Tenant(id=1, name="Jardins du Sud", slug="jardins-du-sud")
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture(scope="function")
async def other_tenant(db_session: AsyncSession) -> Tenant:
    tenant = Tenant(id=2, name="Clôtures du Nord", slug="clotures-du-nord")
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture(scope="function")
async def customer(db_session: AsyncSession, tenant: Tenant) -> Customer:
    customer = Customer(tenant_id=tenant.id, name="Jean Martin", email="jean.martin@example.com")
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


@pytest_asyncio.fixture(scope="function")
async def project(db_session: AsyncSession, customer: Customer) -> Project:
    project = Project(tenant_id=customer.tenant_id, customer_id=customer.id, name="Terrasse Martin")
    db_session.add(project)
    await db_session.commit()
    await db_session.refresh(project)
    return project


QuoteFactory = Callable[..., Awaitable[Quote]]


@pytest.fixture
def make_quote(db_session: AsyncSession, project: Project) -> QuoteFactory:
    """Crée un devis cohérent (montants calculés) dans le statut demandé."""
    counter = {"n": 0}

    async def _make(
        status: QuoteStatus = QuoteStatus.ACCEPTED,
        tenant_id: int = 1,
        project_id: Optional[int] = -1,
        customer_id: Optional[int] = -1,
        lines: Optional[List[Tuple[str, str, str]]] = None,
        tax: str = "20",
        discount: str = "10",
    ) -> Quote:
        counter["n"] += 1
        items = [
            QuoteItem(
                description=description,
                quantity=Decimal(quantity),
                unit_price=Decimal(unit_price),
                total=line_total(Decimal(quantity), Decimal(unit_price)),
            )
            for description, quantity, unit_price in (DEFAULT_LINES if lines is None else lines)
        ]
        totals = compute_totals(items, tax=Decimal(tax), discount=Decimal(discount))
        quote = Quote(
            tenant_id=tenant_id,
            quote_number=f"TEST-{tenant_id}-{counter['n']:03d}",
            project_id=project.id if project_id == -1 else project_id,
            customer_id=project.customer_id if customer_id == -1 else customer_id,
            issue_date=date(2025, 6, 1),
            status=status.value,
            subtotal=totals.subtotal,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
            notes="Accès par le portail arrière",
            terms="Paiement à 30 jours",
            created_by=1,
        )
        quote.items = items
        db_session.add(quote)
        await db_session.commit()
        return quote

    return _make


@pytest_asyncio.fixture(scope="function")
async def accepted_quote(make_quote: QuoteFactory, tenant: Tenant) -> Quote:
    return await make_quote(QuoteStatus.ACCEPTED)


@pytest_asyncio.fixture(scope="function")
async def draft_quote(make_quote: QuoteFactory, tenant: Tenant) -> Quote:
    return await make_quote(QuoteStatus.DRAFT)
