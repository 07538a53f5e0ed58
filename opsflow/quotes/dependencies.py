import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.customers.dependencies import CustomerRepositoryDep
from opsflow.database import get_db_session
from opsflow.projects.dependencies import ProjectRepositoryDep
from opsflow.quotes.interfaces.repositories import AbstractQuoteRepository
from opsflow.quotes.repositories import SQLAlchemyQuoteRepository
from opsflow.quotes.service import QuoteService

logger = logging.getLogger(__name__)


# --- Dépendances Repository ---

def get_quote_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> AbstractQuoteRepository:
    """
    Fournit une instance du repository de devis (implémentation SQLAlchemy).

    Args:
        session: Session de base de données asynchrone.

    Returns:
        AbstractQuoteRepository: Instance du repository de devis.
    """
    logger.debug("Fourniture de SQLAlchemyQuoteRepository")
    return SQLAlchemyQuoteRepository(db_session=session)


QuoteRepositoryDep = Annotated[AbstractQuoteRepository, Depends(get_quote_repository)]


# --- Dépendances Service ---

def get_quote_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    quote_repo: QuoteRepositoryDep,
    customer_repo: CustomerRepositoryDep,
    project_repo: ProjectRepositoryDep,
) -> QuoteService:
    logger.debug("Fourniture de QuoteService avec repositories")
    return QuoteService(
        session=session,
        quote_repo=quote_repo,
        customer_repo=customer_repo,
        project_repo=project_repo,
    )


QuoteServiceDep = Annotated[QuoteService, Depends(get_quote_service)]
