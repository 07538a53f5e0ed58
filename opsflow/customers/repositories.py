from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.core.exceptions import PersistenceError
from opsflow.customers.models import Customer


class SQLAlchemyCustomerRepository:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_id(self, customer_id: int, tenant_id: int) -> Optional[Customer]:
        """Récupère un client, uniquement dans le périmètre du tenant."""
        statement = select(Customer).where(Customer.id == customer_id, Customer.tenant_id == tenant_id)
        try:
            result = await self.db.execute(statement)
            return result.scalars().one_or_none()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e
