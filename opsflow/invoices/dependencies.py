import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.database import get_db_session
from opsflow.invoices.interfaces.repositories import AbstractInvoiceRepository
from opsflow.invoices.repositories import SQLAlchemyInvoiceRepository
from opsflow.invoices.service import InvoiceService
from opsflow.notifications.dependencies import BroadcasterDep

logger = logging.getLogger(__name__)


def get_invoice_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> AbstractInvoiceRepository:
    logger.debug("Fourniture de SQLAlchemyInvoiceRepository")
    return SQLAlchemyInvoiceRepository(db_session=session)


InvoiceRepositoryDep = Annotated[AbstractInvoiceRepository, Depends(get_invoice_repository)]


def get_invoice_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    invoice_repo: InvoiceRepositoryDep,
    broadcaster: BroadcasterDep,
) -> InvoiceService:
    return InvoiceService(session=session, invoice_repo=invoice_repo, broadcaster=broadcaster)


InvoiceServiceDep = Annotated[InvoiceService, Depends(get_invoice_service)]
