from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.database import get_db_session
from opsflow.projects.dependencies import ProjectRepositoryDep
from opsflow.quotes.dependencies import QuoteRepositoryDep
from opsflow.surveys.repositories import SQLAlchemySurveyRepository
from opsflow.surveys.service import SurveyService


def get_survey_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemySurveyRepository:
    return SQLAlchemySurveyRepository(db_session=session)


SurveyRepositoryDep = Annotated[SQLAlchemySurveyRepository, Depends(get_survey_repository)]


def get_survey_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    survey_repo: SurveyRepositoryDep,
    quote_repo: QuoteRepositoryDep,
    project_repo: ProjectRepositoryDep,
) -> SurveyService:
    """Fournit le service des visites techniques, lié à la session de la requête."""
    return SurveyService(session=session, survey_repo=survey_repo, quote_repo=quote_repo, project_repo=project_repo)


SurveyServiceDep = Annotated[SurveyService, Depends(get_survey_service)]
