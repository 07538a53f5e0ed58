from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.database import get_db_session
from opsflow.installations.repositories import SQLAlchemyInstallationRepository
from opsflow.installations.service import InstallationService
from opsflow.projects.dependencies import ProjectRepositoryDep
from opsflow.quotes.dependencies import QuoteRepositoryDep


def get_installation_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemyInstallationRepository:
    return SQLAlchemyInstallationRepository(db_session=session)


InstallationRepositoryDep = Annotated[SQLAlchemyInstallationRepository, Depends(get_installation_repository)]


def get_installation_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    installation_repo: InstallationRepositoryDep,
    quote_repo: QuoteRepositoryDep,
    project_repo: ProjectRepositoryDep,
) -> InstallationService:
    return InstallationService(
        session=session,
        installation_repo=installation_repo,
        quote_repo=quote_repo,
        project_repo=project_repo,
    )


InstallationServiceDep = Annotated[InstallationService, Depends(get_installation_service)]
