import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from opsflow.config import settings
from opsflow.core.dates import utc_now
from opsflow.core.exceptions import InvalidStateError, PersistenceError
from opsflow.core.money import compute_totals, line_total, totals_are_consistent
from opsflow.core.numbering import next_document_number
from opsflow.customers.exceptions import CustomerNotFoundException
from opsflow.customers.repositories import SQLAlchemyCustomerRepository
from opsflow.projects.exceptions import ProjectNotFoundException
from opsflow.projects.repositories import SQLAlchemyProjectRepository
from opsflow.quotes.config import QuoteStatus, EDITABLE_QUOTE_STATUSES, MANUAL_QUOTE_STATUSES, MAX_ITEMS_PER_QUOTE
from opsflow.quotes.exceptions import (
    DiscountExceedsTotalException,
    ManualQuoteStatusException,
    QuoteClosedException,
    QuoteItemLimitException,
    QuoteNotEditableException,
    QuoteNotFoundException,
)
from opsflow.quotes.interfaces.repositories import AbstractQuoteRepository
from opsflow.quotes.models import Quote, QuoteItem
from opsflow.quotes.schemas import QuoteCreate, QuoteItemCreate, QuoteRead, PaginatedQuoteRead
from opsflow.tenants.dependencies import TenantContext
from opsflow.workflow.engine import GatedTransition, WorkflowEngine
from opsflow.workflow.state_machine import assert_transition, can_transition, is_terminal

logger = logging.getLogger(__name__)


def build_quote_item(item_in: QuoteItemCreate) -> QuoteItem:
    return QuoteItem(
        description=item_in.description,
        quantity=item_in.quantity,
        unit_price=item_in.unit_price,
        total=line_total(item_in.quantity, item_in.unit_price),
        catalog_item_id=item_in.catalog_item_id,
    )


def apply_quote_totals(quote: Quote) -> None:
    """Recalcule sous-total et total du devis à partir de ses lignes."""
    totals = compute_totals(quote.items, tax=quote.tax, discount=quote.discount)
    if totals.total < 0:
        raise DiscountExceedsTotalException()
    quote.subtotal = totals.subtotal
    quote.tax = totals.tax
    quote.discount = totals.discount
    quote.total = totals.total


def verify_quote_totals(quote: Quote) -> None:
    if not totals_are_consistent(quote.items, quote.subtotal, quote.tax, quote.discount, quote.total):
        logger.error(f"[QuoteService] Montants incohérents pour le devis {quote.id} (tenant {quote.tenant_id})")
        raise PersistenceError("Inconsistent quote totals")


class QuoteService:
    """Service applicatif pour la gestion des devis."""

    def __init__(self,
                 session: AsyncSession,
                 quote_repo: AbstractQuoteRepository,
                 customer_repo: SQLAlchemyCustomerRepository,
                 project_repo: SQLAlchemyProjectRepository):
        self.quote_repo = quote_repo
        self.customer_repo = customer_repo
        self.project_repo = project_repo
        self.engine = WorkflowEngine(session)

    def _map_quote_to_read(self, quote_db: Quote) -> QuoteRead:
        return QuoteRead.model_validate(quote_db)

    async def get_quote_entity(self, quote_id: int, tenant_id: int) -> Quote:
        quote_db = await self.quote_repo.get_by_id_with_items(quote_id=quote_id, tenant_id=tenant_id)
        if not quote_db:
            logger.warning(f"[QuoteService] Devis ID {quote_id} non trouvé pour tenant {tenant_id}.")
            raise QuoteNotFoundException(quote_id)
        return quote_db

    async def get_quote(self, quote_id: int, tenant_id: int) -> QuoteRead:
        logger.debug(f"[QuoteService] Récupération devis ID: {quote_id} (tenant {tenant_id})")
        return self._map_quote_to_read(await self.get_quote_entity(quote_id, tenant_id))

    async def list_quotes(
        self,
        tenant_id: int,
        *,
        status: Optional[str] = None,
        customer_id: Optional[int] = None,
        project_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> PaginatedQuoteRead:
        logger.debug(f"[QuoteService] Listage devis tenant {tenant_id}, status={status}, limit={limit}, offset={offset}")
        quotes_db, total_count = await self.quote_repo.list_quotes(
            tenant_id=tenant_id,
            status=status,
            customer_id=customer_id,
            project_id=project_id,
            offset=offset,
            limit=limit,
        )
        return PaginatedQuoteRead(items=[self._map_quote_to_read(q) for q in quotes_db], total=total_count)

    async def _resolve_references(self, quote_data: QuoteCreate, tenant_id: int):
        customer_id = quote_data.customer_id
        if quote_data.project_id is not None:
            project = await self.project_repo.get_by_id(quote_data.project_id, tenant_id)
            if project is None:
                raise ProjectNotFoundException(quote_data.project_id)
            if customer_id is None:
                customer_id = project.customer_id
        if customer_id is not None:
            customer = await self.customer_repo.get_by_id(customer_id, tenant_id)
            if customer is None:
                raise CustomerNotFoundException(customer_id)
        return quote_data.project_id, customer_id

    async def create_quote(self, quote_data: QuoteCreate, ctx: TenantContext) -> QuoteRead:
        """Crée un devis en brouillon avec ses lignes et un numéro de séquence du tenant."""
        logger.info(f"[QuoteService] Création devis pour tenant {ctx.tenant_id} par acteur {ctx.actor_id} ({len(quote_data.items)} lignes)")

        async def build(_source) -> Quote:
            project_id, customer_id = await self._resolve_references(quote_data, ctx.tenant_id)
            quote = Quote(
                tenant_id=ctx.tenant_id,
                quote_number=await next_document_number(self.engine.db, ctx.tenant_id, settings.QUOTE_NUMBER_PREFIX),
                reference=quote_data.reference,
                project_id=project_id,
                customer_id=customer_id,
                expiry_date=quote_data.expiry_date,
                status=QuoteStatus.DRAFT.value,
                tax=quote_data.tax,
                discount=quote_data.discount,
                notes=quote_data.notes,
                terms=quote_data.terms,
                created_by=ctx.actor_id,
            )
            if quote_data.issue_date is not None:
                quote.issue_date = quote_data.issue_date
            quote.items = [build_quote_item(item) for item in quote_data.items]
            apply_quote_totals(quote)
            return await self.quote_repo.add(quote)

        transition = GatedTransition[Quote](
            name="create_quote",
            model=Quote,
            required_statuses=(),
            not_found=QuoteNotFoundException,
            invalid_state=lambda s: InvalidStateError("Invalid quote state", current_status=s),
            build_target=build,
            verify=verify_quote_totals,
        )
        result = await self.engine.run(transition, source_id=None, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id)
        logger.info(f"[QuoteService] Devis ID {result.target.id} ({result.target.quote_number}) créé pour tenant {ctx.tenant_id}.")
        return await self.get_quote(result.target.id, ctx.tenant_id)

    async def add_item(self, quote_id: int, item_in: QuoteItemCreate, ctx: TenantContext) -> QuoteRead:
        """Ajoute une ligne à un devis modifiable et recalcule ses montants."""
        logger.info(f"[QuoteService] Ajout ligne au devis {quote_id} (tenant {ctx.tenant_id})")

        async def build(quote: Quote) -> Quote:
            if len(quote.items) >= MAX_ITEMS_PER_QUOTE:
                raise QuoteItemLimitException(quote_id, MAX_ITEMS_PER_QUOTE)
            quote.items.append(build_quote_item(item_in))
            apply_quote_totals(quote)
            quote.updated_at = utc_now()
            await self.engine.db.flush()
            return quote

        transition = GatedTransition[Quote](
            name="add_quote_item",
            model=Quote,
            required_statuses=EDITABLE_QUOTE_STATUSES,
            not_found=QuoteNotFoundException,
            invalid_state=lambda s: QuoteNotEditableException(quote_id, s),
            build_target=build,
            verify=verify_quote_totals,
            load_options=(selectinload(Quote.items),),
        )
        await self.engine.run(transition, source_id=quote_id, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id)
        return await self.get_quote(quote_id, ctx.tenant_id)

    async def update_quote_status(self, quote_id: int, new_status: QuoteStatus, ctx: TenantContext) -> QuoteRead:
        """Change manuellement le statut d'un devis en respectant la machine à états."""
        logger.info(f"[QuoteService] MAJ statut devis {quote_id} -> '{new_status.value}' (tenant {ctx.tenant_id}, acteur {ctx.actor_id})")
        if new_status not in MANUAL_QUOTE_STATUSES:
            raise ManualQuoteStatusException(new_status.value, [s.value for s in MANUAL_QUOTE_STATUSES])

        sources: List[QuoteStatus] = [s for s in QuoteStatus if can_transition(s, new_status)]

        def invalid_state(current: str) -> InvalidStateError:
            if is_terminal(current):
                return QuoteClosedException(quote_id, current)
            return InvalidStateError(
                f"Cannot move quote from '{current}' to '{new_status.value}'",
                current_status=current,
            )

        transition = GatedTransition[Quote](
            name="update_quote_status",
            model=Quote,
            required_statuses=sources,
            not_found=QuoteNotFoundException,
            invalid_state=invalid_state,
            post_status=new_status,
            check_transition=assert_transition,
            post_values=lambda _q: {"updated_at": utc_now()},
        )
        await self.engine.run(transition, source_id=quote_id, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id)
        return await self.get_quote(quote_id, ctx.tenant_id)
