from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.customers.repositories import SQLAlchemyCustomerRepository
from opsflow.database import get_db_session


def get_customer_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemyCustomerRepository:
    return SQLAlchemyCustomerRepository(db_session=session)


CustomerRepositoryDep = Annotated[SQLAlchemyCustomerRepository, Depends(get_customer_repository)]
