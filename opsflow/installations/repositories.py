import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastcrud import FastCRUD
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.core.exceptions import PersistenceError
from opsflow.installations.models import Installation

logger = logging.getLogger(__name__)


class SQLAlchemyInstallationRepository:
    """Implémentation SQLAlchemy du repository des installations."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.crud = FastCRUD(Installation)

    async def get_by_id(self, *, installation_id: int, tenant_id: int) -> Optional[Installation]:
        statement = (
            select(Installation)
            .where(Installation.id == installation_id, Installation.tenant_id == tenant_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(statement)
            return result.scalars().one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB lecture installation {installation_id} (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def list_installations(
        self,
        *,
        tenant_id: int,
        project_id: Optional[int] = None,
        quote_id: Optional[int] = None,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Dict[str, Any]], int]:
        filters: Dict[str, Any] = {"tenant_id": tenant_id}
        if project_id is not None:
            filters["project_id"] = project_id
        if quote_id is not None:
            filters["quote_id"] = quote_id
        if status is not None:
            filters["status"] = status
        if date_from is not None:
            filters["scheduled_date__gte"] = date_from
        if date_to is not None:
            filters["scheduled_date__lte"] = date_to
        try:
            result = await self.crud.get_multi(
                db=self.db,
                offset=offset,
                limit=limit,
                sort_columns=["scheduled_date", "id"],
                sort_orders=["asc", "asc"],
                **filters,
            )
            return result.get('data', []), result.get('total_count', 0)
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB listage installations (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def add(self, installation: Installation) -> Installation:
        self.db.add(installation)
        await self.db.flush()
        return installation
