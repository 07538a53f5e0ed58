"""
Documents commerciaux: rendu PDF et envoi par email des devis et factures.
"""
import logging
from typing import Optional, Tuple

from opsflow.core.exceptions import DocumentDeliveryError
from opsflow.customers.models import Customer
from opsflow.customers.repositories import SQLAlchemyCustomerRepository
from opsflow.email.exceptions import RecipientRequiredException
from opsflow.email.schemas import DocumentEmailRequest, DocumentEmailResult
from opsflow.email.service import DocumentEmailService
from opsflow.invoices.config import INVOICE_STATUS_DISPLAY
from opsflow.invoices.exceptions import InvoiceNotFoundException
from opsflow.invoices.interfaces.repositories import AbstractInvoiceRepository
from opsflow.invoices.models import Invoice
from opsflow.pdf.generator import AbstractPDFGenerator
from opsflow.pdf.models import PDFDocumentData, PDFLine
from opsflow.quotes.config import QUOTE_STATUS_DISPLAY
from opsflow.quotes.exceptions import QuoteNotFoundException
from opsflow.quotes.interfaces.repositories import AbstractQuoteRepository
from opsflow.quotes.models import Quote

logger = logging.getLogger(__name__)


def quote_document(quote: Quote, customer: Optional[Customer]) -> PDFDocumentData:
    return PDFDocumentData(
        kind="quote",
        title="Devis",
        number=quote.quote_number,
        issue_date=quote.issue_date,
        secondary_date_label="Valable jusqu'au",
        secondary_date=quote.expiry_date,
        status=QUOTE_STATUS_DISPLAY.get(quote.status, quote.status),
        customer_name=customer.name if customer else None,
        customer_email=customer.email if customer else None,
        lines=[
            PDFLine(description=i.description, quantity=i.quantity, unit_price=i.unit_price, total=i.total)
            for i in quote.items
        ],
        subtotal=quote.subtotal,
        tax=quote.tax,
        discount=quote.discount,
        total=quote.total,
        notes=quote.notes,
        terms=quote.terms,
    )


def invoice_document(invoice: Invoice, customer: Optional[Customer]) -> PDFDocumentData:
    return PDFDocumentData(
        kind="invoice",
        title="Facture",
        number=invoice.invoice_number,
        issue_date=invoice.issue_date,
        secondary_date_label="Échéance",
        secondary_date=invoice.due_date,
        status=INVOICE_STATUS_DISPLAY.get(invoice.status, invoice.status),
        customer_name=customer.name if customer else None,
        customer_email=customer.email if customer else None,
        lines=[
            PDFLine(description=i.description, quantity=i.quantity, unit_price=i.unit_price, total=i.total)
            for i in invoice.items
        ],
        subtotal=invoice.subtotal,
        tax=invoice.tax,
        discount=invoice.discount,
        total=invoice.total,
        notes=invoice.notes,
        terms=invoice.terms,
    )


class DocumentService:
    """Prépare les données d'impression puis délègue au générateur PDF et à l'email."""

    def __init__(self,
                 quote_repo: AbstractQuoteRepository,
                 invoice_repo: AbstractInvoiceRepository,
                 customer_repo: SQLAlchemyCustomerRepository,
                 pdf_generator: AbstractPDFGenerator,
                 email_service: DocumentEmailService):
        self.quote_repo = quote_repo
        self.invoice_repo = invoice_repo
        self.customer_repo = customer_repo
        self.pdf_generator = pdf_generator
        self.email_service = email_service

    async def _customer(self, customer_id: Optional[int], tenant_id: int) -> Optional[Customer]:
        if customer_id is None:
            return None
        return await self.customer_repo.get_by_id(customer_id, tenant_id)

    async def quote_document(self, quote_id: int, tenant_id: int) -> PDFDocumentData:
        quote = await self.quote_repo.get_by_id_with_items(quote_id=quote_id, tenant_id=tenant_id)
        if quote is None:
            raise QuoteNotFoundException(quote_id)
        return quote_document(quote, await self._customer(quote.customer_id, tenant_id))

    async def invoice_document(self, invoice_id: int, tenant_id: int) -> PDFDocumentData:
        invoice = await self.invoice_repo.get_by_id_with_items(invoice_id=invoice_id, tenant_id=tenant_id)
        if invoice is None:
            raise InvoiceNotFoundException(invoice_id)
        return invoice_document(invoice, await self._customer(invoice.customer_id, tenant_id))

    async def render_quote_pdf(self, quote_id: int, tenant_id: int) -> Tuple[bytes, str]:
        document = await self.quote_document(quote_id, tenant_id)
        logger.info(f"[DocumentService] Génération PDF devis {document.number} (tenant {tenant_id})")
        return await self.pdf_generator.render_document(document), document.filename

    async def render_invoice_pdf(self, invoice_id: int, tenant_id: int) -> Tuple[bytes, str]:
        document = await self.invoice_document(invoice_id, tenant_id)
        logger.info(f"[DocumentService] Génération PDF facture {document.number} (tenant {tenant_id})")
        return await self.pdf_generator.render_document(document), document.filename

    async def _send(self, document: PDFDocumentData, request: DocumentEmailRequest, failure_message: str) -> DocumentEmailResult:
        recipient = request.recipient_email or document.customer_email
        if not recipient:
            raise RecipientRequiredException()

        pdf_content = await self.pdf_generator.render_document(document)
        sent = await self.email_service.send_document_email(
            document,
            recipient_email=recipient,
            pdf_content=pdf_content,
            subject=request.subject,
            message=request.message,
        )
        if not sent:
            raise DocumentDeliveryError(failure_message)
        return DocumentEmailResult(message=f"{document.title} {document.number} sent", sent=True, recipient_email=recipient)

    async def email_quote(self, quote_id: int, request: DocumentEmailRequest, tenant_id: int) -> DocumentEmailResult:
        """Envoie le PDF du devis; destinataire par défaut: l'email du client."""
        document = await self.quote_document(quote_id, tenant_id)
        return await self._send(document, request, "Failed to send quote email")

    async def email_invoice(self, invoice_id: int, request: DocumentEmailRequest, tenant_id: int) -> DocumentEmailResult:
        document = await self.invoice_document(invoice_id, tenant_id)
        return await self._send(document, request, "Failed to send invoice email")
