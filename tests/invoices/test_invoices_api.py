"""
Tests des endpoints de consultation et d'envoi des factures.
"""
import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _convert(test_client: AsyncClient, quote_id: int) -> dict:
    response = await test_client.post(f"/api/quotes/{quote_id}/convert-to-invoice")
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


async def test_list_and_get_invoices(test_client: AsyncClient, accepted_quote):
    invoice = await _convert(test_client, accepted_quote.id)

    listing = await test_client.get("/api/invoices", params={"quoteId": invoice["quoteId"]})
    detail = await test_client.get(f"/api/invoices/{invoice['id']}")

    assert listing.json()["total"] == 1
    assert listing.headers["Content-Range"] == "invoices 0-0/1"
    assert detail.json()["invoiceNumber"] == invoice["invoiceNumber"]
    assert len(detail.json()["items"]) == 2


async def test_get_invoice_other_tenant(test_client: AsyncClient, actor_state, accepted_quote, other_tenant):
    invoice = await _convert(test_client, accepted_quote.id)
    actor_state.act_as(actor_id=9, tenant_id=2)

    response = await test_client.get(f"/api/invoices/{invoice['id']}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Invoice not found"


async def test_invoice_pdf(test_client: AsyncClient, accepted_quote, pdf_generator_mock):
    invoice = await _convert(test_client, accepted_quote.id)

    response = await test_client.get(f"/api/invoices/{invoice['id']}/pdf")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'inline; filename="invoice-INV-1-00001.pdf"'
    assert response.content == pdf_generator_mock.render_document.return_value
    document = pdf_generator_mock.render_document.await_args.args[0]
    assert document.kind == "invoice"
    assert document.secondary_date.isoformat() == invoice["dueDate"]


async def test_email_invoice_defaults_to_customer(test_client: AsyncClient, accepted_quote, email_sender_mock):
    invoice = await _convert(test_client, accepted_quote.id)

    response = await test_client.post(f"/api/invoices/{invoice['id']}/email", json={})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["recipientEmail"] == "jean.martin@example.com"
    kwargs = email_sender_mock.send_email.await_args.kwargs
    assert kwargs["recipient_email"] == "jean.martin@example.com"
    assert kwargs["attachments"][0]["filename"] == "invoice-INV-1-00001.pdf"


async def test_email_invoice_failure(test_client: AsyncClient, accepted_quote, email_sender_mock):
    invoice = await _convert(test_client, accepted_quote.id)
    email_sender_mock.send_email.return_value = False

    response = await test_client.post(f"/api/invoices/{invoice['id']}/email", json={"recipientEmail": "compta@example.com"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Failed to send invoice email"
