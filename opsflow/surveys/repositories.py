import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastcrud import FastCRUD
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.core.exceptions import PersistenceError
from opsflow.surveys.models import Survey

logger = logging.getLogger(__name__)


class SQLAlchemySurveyRepository:
    """Implémentation SQLAlchemy du repository des visites techniques."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.crud = FastCRUD(Survey)

    async def get_by_id(self, *, survey_id: int, tenant_id: int) -> Optional[Survey]:
        statement = (
            select(Survey)
            .where(Survey.id == survey_id, Survey.tenant_id == tenant_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(statement)
            return result.scalars().one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Erreur DB lecture visite {survey_id} (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def list_surveys(
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
        """Liste les visites du tenant, triées par date planifiée."""
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
            logger.error(f"Erreur DB listage visites (tenant {tenant_id}): {e}", exc_info=True)
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e

    async def add(self, survey: Survey) -> Survey:
        """Ajoute la visite à la transaction en cours, sans commit."""
        self.db.add(survey)
        await self.db.flush()
        return survey
