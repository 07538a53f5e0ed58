import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from opsflow.core.exceptions import PersistenceError
from opsflow.invoices.interfaces.repositories import AbstractInvoiceRepository
from opsflow.invoices.models import Invoice

logger = logging.getLogger(__name__)


class SQLAlchemyInvoiceRepository(AbstractInvoiceRepository):
    """Implémentation SQLAlchemy du repository des factures."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_id_with_items(self, *, invoice_id: int, tenant_id: int) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.id == invoice_id, Invoice.tenant_id == tenant_id)
            .options(selectinload(Invoice.items))
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(statement)
            return result.scalars().one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB lecture facture {invoice_id} (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def list_invoices(
        self,
        *,
        tenant_id: int,
        status: Optional[str] = None,
        quote_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Invoice], int]:
        conditions = [Invoice.tenant_id == tenant_id]
        if status is not None:
            conditions.append(Invoice.status == status)
        if quote_id is not None:
            conditions.append(Invoice.quote_id == quote_id)
        if customer_id is not None:
            conditions.append(Invoice.customer_id == customer_id)

        statement = (
            select(Invoice)
            .where(*conditions)
            .options(selectinload(Invoice.items))
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_statement = select(func.count()).select_from(Invoice).where(*conditions)
        try:
            invoices = (await self.db.execute(statement)).scalars().all()
            total = await self.db.scalar(count_statement)
            return list(invoices), total or 0
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB listage factures (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def add(self, invoice: Invoice) -> Invoice:
        self.db.add(invoice)
        await self.db.flush()
        return invoice
