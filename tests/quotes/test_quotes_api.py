"""
Tests d'intégration pour les endpoints de l'API du module Quotes.
"""
import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.models import Quote, QuoteItem

pytestmark = pytest.mark.asyncio

QUOTE_PAYLOAD = {
    "tax": "20",
    "discount": "10",
    "items": [
        {"description": "Dalle béton", "quantity": "2", "unitPrice": "50.00"},
        {"description": "Pose portail", "quantity": "1", "unitPrice": "150.00"},
    ],
}

# --- Création et lecture ---

async def test_create_quote_computes_totals(test_client: AsyncClient, project):
    payload = {**QUOTE_PAYLOAD, "projectId": project.id}

    response = await test_client.post("/api/quotes", json=payload)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["quoteNumber"] == "QUO-1-00001"
    assert data["status"] == "draft"
    assert data["customerId"] == project.customer_id
    assert data["subtotal"] == "250.00"
    assert data["total"] == "290.00"
    assert [i["total"] for i in data["items"]] == ["100.00", "150.00"]
    assert data["createdBy"] == 1


async def test_create_quote_numbers_increment(test_client: AsyncClient, project):
    first = await test_client.post("/api/quotes", json=QUOTE_PAYLOAD)
    second = await test_client.post("/api/quotes", json=QUOTE_PAYLOAD)

    assert first.json()["quoteNumber"] == "QUO-1-00001"
    assert second.json()["quoteNumber"] == "QUO-1-00002"


async def test_create_quote_unknown_customer(test_client: AsyncClient, tenant):
    response = await test_client.post("/api/quotes", json={**QUOTE_PAYLOAD, "customerId": 555})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Customer not found"


async def test_create_quote_discount_larger_than_amount(test_client: AsyncClient, tenant):
    response = await test_client.post("/api/quotes", json={**QUOTE_PAYLOAD, "discount": "1000"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


async def test_read_quote_other_tenant(test_client: AsyncClient, actor_state, draft_quote, other_tenant):
    quote_id = draft_quote.id
    actor_state.act_as(actor_id=5, tenant_id=2)

    response = await test_client.get(f"/api/quotes/{quote_id}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Quote not found"


async def test_list_quotes_filters_by_status(test_client: AsyncClient, make_quote, tenant):
    await make_quote(QuoteStatus.DRAFT)
    await make_quote(QuoteStatus.ACCEPTED)
    await make_quote(QuoteStatus.ACCEPTED)

    response = await test_client.get("/api/quotes", params={"status": "accepted", "limit": 1})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["total"] == 2
    assert len(response.json()["items"]) == 1
    assert response.headers["Content-Range"] == "quotes 0-0/2"

# --- Lignes ---

async def test_add_item_recomputes_totals(test_client: AsyncClient, draft_quote):
    quote_id = draft_quote.id

    response = await test_client.post(
        f"/api/quotes/{quote_id}/items",
        json={"description": "Gravier", "quantity": "3", "unitPrice": "10.00"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data["items"]) == 3
    assert data["subtotal"] == "280.00"
    # 280 + 56 - 10
    assert data["total"] == "326.00"


async def test_add_item_to_accepted_quote_is_refused(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id

    response = await test_client.post(
        f"/api/quotes/{quote_id}/items",
        json={"description": "Gravier", "quantity": "3", "unitPrice": "10.00"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["currentStatus"] == "accepted"


async def test_add_item_respects_item_limit(
    test_client: AsyncClient, db_session: AsyncSession, make_quote, tenant, monkeypatch
):
    monkeypatch.setattr("opsflow.quotes.service.MAX_ITEMS_PER_QUOTE", 2)
    quote = await make_quote(QuoteStatus.DRAFT)
    quote_id = quote.id

    response = await test_client.post(
        f"/api/quotes/{quote_id}/items",
        json={"description": "Gravier", "quantity": "3", "unitPrice": "10.00"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "A quote cannot have more than 2 items"
    count = await db_session.scalar(select(func.count()).select_from(QuoteItem).where(QuoteItem.quote_id == quote_id))
    assert count == 2

# --- Statut ---

async def test_status_follows_state_machine(test_client: AsyncClient, db_session: AsyncSession, draft_quote):
    quote_id = draft_quote.id

    sent = await test_client.patch(f"/api/quotes/{quote_id}/status", json={"status": "sent"})
    accepted = await test_client.patch(f"/api/quotes/{quote_id}/status", json={"status": "accepted"})
    back = await test_client.patch(f"/api/quotes/{quote_id}/status", json={"status": "pending"})

    assert sent.json()["status"] == "sent"
    assert accepted.json()["status"] == "accepted"
    assert back.status_code == status.HTTP_400_BAD_REQUEST
    assert back.json()["currentStatus"] == "accepted"
    assert await db_session.scalar(select(Quote.status).where(Quote.id == quote_id)) == "accepted"


async def test_workflow_statuses_cannot_be_set_manually(test_client: AsyncClient, accepted_quote):
    quote_id = accepted_quote.id

    response = await test_client.patch(f"/api/quotes/{quote_id}/status", json={"status": "converted"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "cannot be set manually" in response.json()["message"]


async def test_terminal_quote_cannot_move(test_client: AsyncClient, make_quote, tenant):
    quote = await make_quote(QuoteStatus.REJECTED)
    quote_id = quote.id

    response = await test_client.patch(f"/api/quotes/{quote_id}/status", json={"status": "accepted"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["currentStatus"] == "rejected"
    assert response.json()["message"] == "Quote is closed ('rejected') and its status can no longer change"

# --- Documents ---

async def test_quote_pdf(test_client: AsyncClient, accepted_quote, pdf_generator_mock):
    quote_id, number = accepted_quote.id, accepted_quote.quote_number

    response = await test_client.get(f"/api/quotes/{quote_id}/pdf")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == f'inline; filename="quote-{number}.pdf"'
    document = pdf_generator_mock.render_document.await_args.args[0]
    assert document.customer_name == "Jean Martin"
    assert str(document.total) == "290.00"


async def test_email_quote_explicit_recipient(test_client: AsyncClient, accepted_quote, email_sender_mock):
    quote_id = accepted_quote.id

    response = await test_client.post(
        f"/api/quotes/{quote_id}/email",
        json={"recipientEmail": "archi@example.com", "subject": "Votre devis terrasse", "message": "Bonne lecture"},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["sent"] is True
    kwargs = email_sender_mock.send_email.await_args.kwargs
    assert kwargs["recipient_email"] == "archi@example.com"
    assert kwargs["subject"] == "Votre devis terrasse"
    assert "Bonne lecture" in kwargs["html_content"]


async def test_email_quote_without_any_recipient(test_client: AsyncClient, make_quote, tenant, email_sender_mock):
    quote = await make_quote(QuoteStatus.SENT, customer_id=None)
    quote_id = quote.id

    response = await test_client.post(f"/api/quotes/{quote_id}/email", json={})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Customer email is required"
    email_sender_mock.send_email.assert_not_awaited()


async def test_email_quote_sender_failure(test_client: AsyncClient, accepted_quote, email_sender_mock):
    quote_id = accepted_quote.id
    email_sender_mock.send_email.return_value = False

    response = await test_client.post(f"/api/quotes/{quote_id}/email", json={})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Failed to send quote email"
