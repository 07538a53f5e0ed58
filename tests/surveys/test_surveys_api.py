"""
Tests d'intégration de la planification des visites techniques (POST /api/surveys).
"""
import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.models import Quote
from opsflow.surveys.models import Survey

pytestmark = pytest.mark.asyncio


async def _survey_count(db_session: AsyncSession) -> int:
    return await db_session.scalar(select(func.count()).select_from(Survey))


async def _quote_status(db_session: AsyncSession, quote_id: int) -> str:
    return await db_session.scalar(select(Quote.status).where(Quote.id == quote_id))


async def test_schedule_survey_books_accepted_quote(test_client: AsyncClient, db_session: AsyncSession, accepted_quote):
    quote_id, project_id = accepted_quote.id, accepted_quote.project_id

    response = await test_client.post("/api/surveys", json={"quoteId": quote_id, "scheduledDate": "2025-06-15"})

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["survey"]["scheduledDate"] == "2025-06-15"
    assert data["survey"]["status"] == "scheduled"
    assert data["survey"]["quoteId"] == quote_id
    assert data["survey"]["projectId"] == project_id
    assert data["survey"]["createdBy"] == 1
    assert data["quote"]["status"] == "survey_booked"
    assert data["warnings"] == []
    assert await _quote_status(db_session, quote_id) == "survey_booked"


async def test_schedule_survey_normalizes_iso_datetime(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id

    response = await test_client.post(
        "/api/surveys",
        json={"quoteId": quote_id, "scheduledDate": "2025-06-15T23:30:00-02:00", "startTime": "09:00", "endTime": "11:30"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    survey = response.json()["survey"]
    # 23:30 à UTC-2 correspond au 16 juin en UTC
    assert survey["scheduledDate"] == "2025-06-16"
    assert survey["startTime"] == "09:00:00"
    assert survey["endTime"] == "11:30:00"


async def test_schedule_survey_draft_quote_is_rejected(test_client: AsyncClient, db_session: AsyncSession, draft_quote):
    quote_id = draft_quote.id

    response = await test_client.post("/api/surveys", json={"quoteId": quote_id, "scheduledDate": "2025-06-15"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert "not in 'accepted' status" in body["message"]
    assert body["currentStatus"] == "draft"
    assert await _survey_count(db_session) == 0
    assert await _quote_status(db_session, quote_id) == "draft"


async def test_schedule_survey_unknown_quote(test_client: AsyncClient, db_session: AsyncSession, tenant):
    response = await test_client.post("/api/surveys", json={"quoteId": 999, "scheduledDate": "2025-06-15"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Quote not found"
    assert await _survey_count(db_session) == 0


async def test_schedule_survey_twice_fails_second_time(test_client: AsyncClient, db_session: AsyncSession, accepted_quote):
    quote_id = accepted_quote.id
    payload = {"quoteId": quote_id, "scheduledDate": "2025-06-15"}

    first = await test_client.post("/api/surveys", json=payload)
    second = await test_client.post("/api/surveys", json=payload)

    assert first.status_code == status.HTTP_201_CREATED
    assert second.status_code == status.HTTP_400_BAD_REQUEST
    assert second.json()["currentStatus"] == "survey_booked"
    assert await _survey_count(db_session) == 1


async def test_schedule_survey_other_tenant_quote_is_not_found(
    test_client: AsyncClient, db_session: AsyncSession, actor_state, accepted_quote, other_tenant
):
    quote_id = accepted_quote.id
    actor_state.act_as(actor_id=7, tenant_id=2)

    response = await test_client.post("/api/surveys", json={"quoteId": quote_id, "scheduledDate": "2025-06-15"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert await _quote_status(db_session, quote_id) == "accepted"


async def test_schedule_survey_without_quote_requires_project(test_client: AsyncClient, project):
    project_id = project.id

    missing = await test_client.post("/api/surveys", json={"scheduledDate": "2025-07-01"})
    created = await test_client.post("/api/surveys", json={"projectId": project_id, "scheduledDate": "2025-07-01"})

    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["quote"] is None
    assert created.json()["survey"]["projectId"] == project_id


async def test_schedule_survey_unknown_project(test_client: AsyncClient, tenant):
    response = await test_client.post("/api/surveys", json={"projectId": 4242, "scheduledDate": "2025-07-01"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Project not found"


async def test_schedule_survey_invalid_time_window(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id

    response = await test_client.post(
        "/api/surveys",
        json={"quoteId": quote_id, "scheduledDate": "2025-06-15", "startTime": "14:00", "endTime": "10:00"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Invalid request data"


async def test_complete_survey(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id
    created = await test_client.post("/api/surveys", json={"quoteId": quote_id, "scheduledDate": "2025-06-15"})
    survey_id = created.json()["survey"]["id"]

    completed = await test_client.post(f"/api/surveys/{survey_id}/complete")
    again = await test_client.post(f"/api/surveys/{survey_id}/complete")

    assert completed.status_code == status.HTTP_200_OK
    assert completed.json()["status"] == "completed"
    assert completed.json()["completedBy"] == 1
    assert completed.json()["completedAt"] is not None
    assert again.status_code == status.HTTP_400_BAD_REQUEST
    assert again.json()["currentStatus"] == "completed"


async def test_list_and_get_surveys(test_client: AsyncClient, make_quote, tenant):
    first = await make_quote(QuoteStatus.ACCEPTED)
    second = await make_quote(QuoteStatus.ACCEPTED)
    first_id, second_id = first.id, second.id
    await test_client.post("/api/surveys", json={"quoteId": first_id, "scheduledDate": "2025-06-20"})
    await test_client.post("/api/surveys", json={"quoteId": second_id, "scheduledDate": "2025-06-10"})

    listing = await test_client.get("/api/surveys")
    filtered = await test_client.get("/api/surveys", params={"dateFrom": "2025-06-15"})
    by_quote = await test_client.get("/api/surveys", params={"quoteId": second_id})

    assert listing.status_code == status.HTTP_200_OK
    assert listing.json()["total"] == 2
    assert [s["scheduledDate"] for s in listing.json()["items"]] == ["2025-06-10", "2025-06-20"]
    assert listing.headers["Content-Range"] == "surveys 0-1/2"
    assert filtered.json()["total"] == 1
    assert filtered.json()["items"][0]["quoteId"] == first_id
    assert by_quote.json()["items"][0]["quoteId"] == second_id

    survey_id = by_quote.json()["items"][0]["id"]
    detail = await test_client.get(f"/api/surveys/{survey_id}")
    missing = await test_client.get("/api/surveys/9999")
    assert detail.json()["id"] == survey_id
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["message"] == "Survey not found"
