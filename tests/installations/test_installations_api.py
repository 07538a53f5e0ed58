"""
Tests d'intégration de la planification des installations (POST /api/installations).
"""
import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.installations.models import Installation
from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.models import Quote

pytestmark = pytest.mark.asyncio


async def test_schedule_installation_books_accepted_quote(
    test_client: AsyncClient, db_session: AsyncSession, accepted_quote
):
    quote_id = accepted_quote.id

    response = await test_client.post(
        "/api/installations",
        json={
            "quoteId": quote_id,
            "scheduledDate": "2025-07-02",
            "startTime": "08:00",
            "endTime": "17:00",
            "assignedTo": [3, 4, 3],
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["installation"]["assignedTo"] == [3, 4]
    assert data["installation"]["status"] == "scheduled"
    assert data["installation"]["startTime"] == "08:00:00"
    assert data["quote"]["status"] == "installation_booked"
    assert data["warnings"] == []
    stored = await db_session.scalar(select(Quote.status).where(Quote.id == quote_id))
    assert stored == "installation_booked"


async def test_schedule_installation_defaults_to_empty_crew(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id

    response = await test_client.post("/api/installations", json={"quoteId": quote_id, "scheduledDate": "2025-07-02"})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["installation"]["assignedTo"] == []


async def test_schedule_installation_requires_accepted_quote(
    test_client: AsyncClient, db_session: AsyncSession, make_quote, tenant
):
    quote = await make_quote(QuoteStatus.SURVEY_BOOKED)
    quote_id = quote.id

    response = await test_client.post("/api/installations", json={"quoteId": quote_id, "scheduledDate": "2025-07-02"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Cannot schedule an installation for a quote that is not in 'accepted' status"
    assert response.json()["currentStatus"] == "survey_booked"
    assert await db_session.scalar(select(func.count()).select_from(Installation)) == 0


async def test_schedule_installation_rejects_completed_initial_status(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id

    response = await test_client.post(
        "/api/installations",
        json={"quoteId": quote_id, "scheduledDate": "2025-07-02", "status": "completed"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


async def test_complete_installation_with_snagging(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id
    created = await test_client.post("/api/installations", json={"quoteId": quote_id, "scheduledDate": "2025-07-02"})
    installation_id = created.json()["installation"]["id"]

    snagging = await test_client.post(
        f"/api/installations/{installation_id}/complete", json={"snaggingRequired": True}
    )
    completed = await test_client.post(
        f"/api/installations/{installation_id}/complete", json={"clientSignoff": True}
    )

    assert snagging.json()["status"] == "snagging"
    assert snagging.json()["completedAt"] is None
    assert completed.json()["status"] == "completed"
    assert completed.json()["clientSignoff"] is True
    assert completed.json()["completedBy"] == 1


async def test_list_installations(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id
    await test_client.post("/api/installations", json={"quoteId": quote_id, "scheduledDate": "2025-07-02"})

    response = await test_client.get("/api/installations", params={"status": "scheduled"})
    missing = await test_client.get("/api/installations/9999")

    assert response.json()["total"] == 1
    assert response.headers["Content-Range"] == "installations 0-0/1"
    assert missing.json()["message"] == "Installation not found"


async def test_schedule_installation_other_tenant_quote_is_not_found(
    test_client: AsyncClient, db_session: AsyncSession, actor_state, accepted_quote, other_tenant
):
    quote_id = accepted_quote.id
    actor_state.act_as(actor_id=7, tenant_id=2)

    response = await test_client.post("/api/installations", json={"quoteId": quote_id, "scheduledDate": "2025-07-02"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert await db_session.scalar(select(func.count()).select_from(Installation)) == 0
    assert await db_session.scalar(select(Quote.status).where(Quote.id == quote_id)) == "accepted"


async def test_schedule_installation_unknown_quote(test_client: AsyncClient, tenant):
    response = await test_client.post("/api/installations", json={"quoteId": 999, "scheduledDate": "2025-07-02"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Quote not found"
