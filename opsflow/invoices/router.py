import logging
from typing import Optional

from fastapi import APIRouter, Body, Path, Query, Response

from opsflow.config import settings
from opsflow.core.pagination import set_content_range
from opsflow.documents.dependencies import DocumentServiceDep
from opsflow.documents.responses import pdf_response
from opsflow.email.schemas import DocumentEmailRequest, DocumentEmailResult
from opsflow.invoices.config import InvoiceStatus
from opsflow.invoices.dependencies import InvoiceServiceDep
from opsflow.invoices.schemas import InvoiceRead, PaginatedInvoiceRead
from opsflow.tenants.dependencies import TenantContextDep

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/invoices",
    tags=["Invoices"]
)


@router.get("", response_model=PaginatedInvoiceRead)
async def list_invoices(
    invoice_service: InvoiceServiceDep,
    ctx: TenantContextDep,
    response: Response,
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    quote_id: Optional[int] = Query(None, alias="quoteId"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    page = await invoice_service.list_invoices(
        ctx.tenant_id,
        status=invoice_status.value if invoice_status else None,
        quote_id=quote_id,
        customer_id=customer_id,
        limit=limit,
        offset=offset,
    )
    set_content_range(response, "invoices", offset, len(page.items), page.total)
    return page


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def read_invoice(
    invoice_service: InvoiceServiceDep,
    ctx: TenantContextDep,
    invoice_id: int = Path(..., title="ID de la facture", ge=1),
):
    return await invoice_service.get_invoice(invoice_id, ctx.tenant_id)


@router.get("/{invoice_id}/pdf", response_class=Response)
async def invoice_pdf(
    document_service: DocumentServiceDep,
    ctx: TenantContextDep,
    invoice_id: int = Path(..., title="ID de la facture", ge=1),
):
    content, filename = await document_service.render_invoice_pdf(invoice_id, ctx.tenant_id)
    return pdf_response(content, filename)


@router.post("/{invoice_id}/email", response_model=DocumentEmailResult)
async def email_invoice(
    document_service: DocumentServiceDep,
    ctx: TenantContextDep,
    invoice_id: int = Path(..., title="ID de la facture", ge=1),
    email_request: Optional[DocumentEmailRequest] = Body(None),
):
    logger.info(f"API email_invoice: facture {invoice_id} (tenant {ctx.tenant_id})")
    return await document_service.email_invoice(invoice_id, email_request or DocumentEmailRequest(), ctx.tenant_id)
