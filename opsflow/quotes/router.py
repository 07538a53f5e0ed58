import logging
from typing import Optional

from fastapi import APIRouter, Body, Path, Query, Response, status

from opsflow.config import settings
from opsflow.core.pagination import set_content_range
from opsflow.documents.dependencies import DocumentServiceDep
from opsflow.documents.responses import pdf_response
from opsflow.email.schemas import DocumentEmailRequest, DocumentEmailResult
from opsflow.invoices.dependencies import InvoiceServiceDep
from opsflow.invoices.schemas import InvoiceConverted
from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.dependencies import QuoteServiceDep
from opsflow.quotes.schemas import QuoteCreate, QuoteItemCreate, QuoteRead, QuoteStatusUpdate, PaginatedQuoteRead
from opsflow.tenants.dependencies import TenantContextDep

logger = logging.getLogger(__name__)

# --- Création du Routeur ---
router = APIRouter(
    prefix="/quotes",
    tags=["Quotes"]
)

# Les erreurs métier remontent aux gestionnaires globaux (core.error_handlers)


@router.get("", response_model=PaginatedQuoteRead)
async def list_quotes(
    quote_service: QuoteServiceDep,
    ctx: TenantContextDep,
    response: Response,
    quote_status: Optional[QuoteStatus] = Query(None, alias="status"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    project_id: Optional[int] = Query(None, alias="projectId"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Nombre max de devis à retourner"),
    offset: int = Query(0, ge=0, description="Nombre de devis à sauter"),
):
    """Liste les devis du tenant."""
    logger.info(f"API list_quotes: tenant {ctx.tenant_id}, limit={limit}, offset={offset}")
    page = await quote_service.list_quotes(
        ctx.tenant_id,
        status=quote_status.value if quote_status else None,
        customer_id=customer_id,
        project_id=project_id,
        limit=limit,
        offset=offset,
    )
    set_content_range(response, "quotes", offset, len(page.items), page.total)
    return page


@router.get("/{quote_id}", response_model=QuoteRead)
async def read_quote(
    quote_service: QuoteServiceDep,
    ctx: TenantContextDep,
    quote_id: int = Path(..., title="ID du devis", ge=1),
):
    return await quote_service.get_quote(quote_id, ctx.tenant_id)


@router.post("", response_model=QuoteRead, status_code=status.HTTP_201_CREATED)
async def create_quote(
    quote_service: QuoteServiceDep,
    ctx: TenantContextDep,
    quote_request: QuoteCreate,
):
    """Crée un devis en brouillon pour le tenant courant."""
    logger.info(f"API create_quote: tenant {ctx.tenant_id}, acteur {ctx.actor_id}")
    return await quote_service.create_quote(quote_request, ctx)


@router.post("/{quote_id}/items", response_model=QuoteRead)
async def add_quote_item(
    quote_service: QuoteServiceDep,
    ctx: TenantContextDep,
    item: QuoteItemCreate,
    quote_id: int = Path(..., title="ID du devis", ge=1),
):
    return await quote_service.add_item(quote_id, item, ctx)


@router.patch("/{quote_id}/status", response_model=QuoteRead)
async def update_quote_status(
    quote_service: QuoteServiceDep,
    ctx: TenantContextDep,
    quote_id: int = Path(..., title="ID du devis à MAJ", ge=1),
    status_update: QuoteStatusUpdate = Body(...),
):
    """Met à jour manuellement le statut d'un devis (pending, sent, accepted, rejected)."""
    logger.info(f"API update_quote_status: ID={quote_id} à '{status_update.status.value}' (tenant {ctx.tenant_id})")
    return await quote_service.update_quote_status(quote_id, status_update.status, ctx)


@router.post("/{quote_id}/convert-to-invoice", response_model=InvoiceConverted, status_code=status.HTTP_201_CREATED)
async def convert_quote_to_invoice(
    invoice_service: InvoiceServiceDep,
    ctx: TenantContextDep,
    quote_id: int = Path(..., title="ID du devis à convertir", ge=1),
):
    """Convertit un devis accepté en facture finale."""
    logger.info(f"API convert_quote_to_invoice: devis {quote_id} (tenant {ctx.tenant_id}, acteur {ctx.actor_id})")
    return await invoice_service.convert_quote_to_invoice(quote_id, ctx)


@router.get("/{quote_id}/pdf", response_class=Response)
async def quote_pdf(
    document_service: DocumentServiceDep,
    ctx: TenantContextDep,
    quote_id: int = Path(..., title="ID du devis", ge=1),
):
    content, filename = await document_service.render_quote_pdf(quote_id, ctx.tenant_id)
    return pdf_response(content, filename)


@router.post("/{quote_id}/email", response_model=DocumentEmailResult)
async def email_quote(
    document_service: DocumentServiceDep,
    ctx: TenantContextDep,
    quote_id: int = Path(..., title="ID du devis", ge=1),
    email_request: Optional[DocumentEmailRequest] = Body(None),
):
    logger.info(f"API email_quote: devis {quote_id} (tenant {ctx.tenant_id})")
    return await document_service.email_quote(quote_id, email_request or DocumentEmailRequest(), ctx.tenant_id)
