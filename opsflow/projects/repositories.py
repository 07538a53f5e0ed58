from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from opsflow.core.exceptions import PersistenceError
from opsflow.projects.models import Project


class SQLAlchemyProjectRepository:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_id(self, project_id: int, tenant_id: int) -> Optional[Project]:
        """Récupère un projet, uniquement dans le périmètre du tenant."""
        statement = select(Project).where(Project.id == project_id, Project.tenant_id == tenant_id)
        try:
            result = await self.db.execute(statement)
            return result.scalars().one_or_none()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(original_exception=e) from e
