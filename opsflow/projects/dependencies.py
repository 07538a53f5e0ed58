from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.database import get_db_session
from opsflow.projects.repositories import SQLAlchemyProjectRepository


def get_project_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemyProjectRepository:
    return SQLAlchemyProjectRepository(db_session=session)


ProjectRepositoryDep = Annotated[SQLAlchemyProjectRepository, Depends(get_project_repository)]
