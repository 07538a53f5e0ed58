import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from opsflow.config import settings
from opsflow.core.dates import utc_now
from opsflow.core.exceptions import PersistenceError
from opsflow.core.money import compute_totals, line_total, totals_are_consistent
from opsflow.core.numbering import next_document_number
from opsflow.invoices.config import InvoiceStatus, InvoiceType, INVOICE_CREATED_EVENT
from opsflow.invoices.exceptions import InvoiceNotFoundException, QuoteNotConvertibleException
from opsflow.invoices.interfaces.repositories import AbstractInvoiceRepository
from opsflow.invoices.models import Invoice, InvoiceItem
from opsflow.invoices.schemas import InvoiceConverted, InvoiceRead, PaginatedInvoiceRead
from opsflow.notifications.broadcaster import AbstractBroadcaster
from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.exceptions import QuoteNotFoundException
from opsflow.quotes.models import Quote, QuoteItem
from opsflow.tenants.dependencies import TenantContext
from opsflow.workflow.engine import GatedTransition, WorkflowEngine
from opsflow.workflow.state_machine import assert_transition

logger = logging.getLogger(__name__)


def copy_quote_item(item: QuoteItem) -> InvoiceItem:
    """Nouvelle ligne de facture, sans référence partagée avec la ligne du devis."""
    return InvoiceItem(
        description=item.description,
        quantity=item.quantity,
        unit_price=item.unit_price,
        total=line_total(item.quantity, item.unit_price),
        catalog_item_id=item.catalog_item_id,
    )


def verify_invoice_totals(invoice: Invoice) -> None:
    if not totals_are_consistent(invoice.items, invoice.subtotal, invoice.tax, invoice.discount, invoice.total):
        logger.error(f"[InvoiceService] Montants incohérents pour la facture {invoice.invoice_number} (tenant {invoice.tenant_id})")
        raise PersistenceError("Inconsistent invoice totals")


class InvoiceService:
    """Service applicatif des factures: conversion de devis et consultation."""

    def __init__(self,
                 session: AsyncSession,
                 invoice_repo: AbstractInvoiceRepository,
                 broadcaster: AbstractBroadcaster):
        self.invoice_repo = invoice_repo
        self.broadcaster = broadcaster
        self.engine = WorkflowEngine(session)

    async def get_invoice_entity(self, invoice_id: int, tenant_id: int) -> Invoice:
        invoice_db = await self.invoice_repo.get_by_id_with_items(invoice_id=invoice_id, tenant_id=tenant_id)
        if not invoice_db:
            logger.warning(f"[InvoiceService] Facture ID {invoice_id} non trouvée pour tenant {tenant_id}.")
            raise InvoiceNotFoundException(invoice_id)
        return invoice_db

    async def get_invoice(self, invoice_id: int, tenant_id: int) -> InvoiceRead:
        return InvoiceRead.model_validate(await self.get_invoice_entity(invoice_id, tenant_id))

    async def list_invoices(
        self,
        tenant_id: int,
        *,
        status: Optional[str] = None,
        quote_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> PaginatedInvoiceRead:
        invoices_db, total_count = await self.invoice_repo.list_invoices(
            tenant_id=tenant_id,
            status=status,
            quote_id=quote_id,
            customer_id=customer_id,
            offset=offset,
            limit=limit,
        )
        return PaginatedInvoiceRead(items=[InvoiceRead.model_validate(i) for i in invoices_db], total=total_count)

    async def convert_quote_to_invoice(self, quote_id: int, ctx: TenantContext) -> InvoiceConverted:
        """
        Convertit un devis 'accepted' en facture finale.

        Dans une seule transaction: numérotation, création de la facture et de
        ses lignes (copies), passage du devis à 'converted'. La notification
        ``invoice:created`` est envoyée après commit; son échec ne fait
        qu'ajouter un avertissement à la réponse.

        Raises:
            QuoteNotFoundException: Devis absent du tenant.
            QuoteNotConvertibleException: Devis pas au statut 'accepted'.
        """
        logger.info(f"[InvoiceService] Conversion devis {quote_id} en facture (tenant {ctx.tenant_id}, acteur {ctx.actor_id})")

        async def build(quote: Quote) -> Invoice:
            issue_date = date.today()
            items: List[InvoiceItem] = [copy_quote_item(item) for item in quote.items]
            totals = compute_totals(items, tax=quote.tax, discount=quote.discount)
            if totals.subtotal != quote.subtotal or totals.total != quote.total:
                logger.warning(
                    f"[InvoiceService] Montants du devis {quote.quote_number} recalculés: "
                    f"sous-total {quote.subtotal} -> {totals.subtotal}, total {quote.total} -> {totals.total}"
                )
            invoice = Invoice(
                tenant_id=ctx.tenant_id,
                invoice_number=await next_document_number(self.engine.db, ctx.tenant_id, settings.INVOICE_NUMBER_PREFIX),
                reference=quote.reference,
                project_id=quote.project_id,
                customer_id=quote.customer_id,
                quote_id=quote.id,
                type=InvoiceType.FINAL.value,
                issue_date=issue_date,
                due_date=issue_date + timedelta(days=settings.INVOICE_DUE_DAYS),
                status=InvoiceStatus.ISSUED.value,
                subtotal=totals.subtotal,
                tax=totals.tax,
                discount=totals.discount,
                total=totals.total,
                notes=quote.notes,
                terms=quote.terms,
                created_by=ctx.actor_id,
            )
            invoice.items = items
            return await self.invoice_repo.add(invoice)

        async def notify(quote: Quote, invoice: Invoice) -> None:
            await self.broadcaster.broadcast(
                INVOICE_CREATED_EVENT,
                {
                    "id": invoice.id,
                    "message": f"Invoice created from quote #{quote.quote_number}",
                    "tenantId": ctx.tenant_id,
                },
                ctx.tenant_id,
            )

        transition = GatedTransition[Invoice](
            name="convert_quote_to_invoice",
            model=Quote,
            required_statuses=(QuoteStatus.ACCEPTED,),
            not_found=QuoteNotFoundException,
            invalid_state=QuoteNotConvertibleException,
            post_status=QuoteStatus.CONVERTED,
            build_target=build,
            check_transition=assert_transition,
            post_values=lambda _q: {"updated_at": utc_now()},
            verify=verify_invoice_totals,
            after_commit=notify,
            load_options=(selectinload(Quote.items),),
        )
        result = await self.engine.run(transition, source_id=quote_id, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id)
        invoice = result.target
        logger.info(f"[InvoiceService] Facture {invoice.invoice_number} (ID {invoice.id}) créée depuis le devis {quote_id}")

        invoice_db = await self.get_invoice_entity(invoice.id, ctx.tenant_id)
        return InvoiceConverted.model_validate(
            {**InvoiceRead.model_validate(invoice_db).model_dump(), "warnings": result.warnings}
        )
