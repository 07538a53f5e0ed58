import logging
from typing import Optional, List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from opsflow.core.exceptions import PersistenceError
from opsflow.quotes.interfaces.repositories import AbstractQuoteRepository
from opsflow.quotes.models import Quote

logger = logging.getLogger(__name__)


class SQLAlchemyQuoteRepository(AbstractQuoteRepository):
    """Implémentation SQLAlchemy du repository des devis."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_id_with_items(self, *, quote_id: int, tenant_id: int) -> Optional[Quote]:
        statement = (
            select(Quote)
            .where(Quote.id == quote_id, Quote.tenant_id == tenant_id)
            .options(selectinload(Quote.items))
            # Relire l'état en base même si l'objet est déjà dans la session
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(statement)
            return result.scalars().one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB lecture devis {quote_id} (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def list_quotes(
        self,
        *,
        tenant_id: int,
        status: Optional[str] = None,
        customer_id: Optional[int] = None,
        project_id: Optional[int] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Quote], int]:
        conditions = [Quote.tenant_id == tenant_id]
        if status is not None:
            conditions.append(Quote.status == status)
        if customer_id is not None:
            conditions.append(Quote.customer_id == customer_id)
        if project_id is not None:
            conditions.append(Quote.project_id == project_id)

        statement = (
            select(Quote)
            .where(*conditions)
            .options(selectinload(Quote.items))
            .order_by(Quote.created_at.desc(), Quote.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_statement = select(func.count()).select_from(Quote).where(*conditions)
        try:
            quotes = (await self.db.execute(statement)).scalars().all()
            total = await self.db.scalar(count_statement)
            return list(quotes), total or 0
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB listage devis (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def add(self, quote: Quote) -> Quote:
        self.db.add(quote)
        await self.db.flush()
        return quote
