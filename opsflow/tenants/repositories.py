from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.core.exceptions import PersistenceError
from opsflow.tenants.models import Tenant


class SQLAlchemyTenantRepository:
    """Accès lecture aux tenants."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_id(self, tenant_id: int) -> Optional[Tenant]:
        try:
            result = await self.db.execute(select(Tenant).where(Tenant.id == tenant_id))
            return result.scalars().one_or_none()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e
