import logging
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.core.dates import utc_now
from opsflow.projects.repositories import SQLAlchemyProjectRepository
from opsflow.projects.service import resolve_booking_project
from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.exceptions import QuoteNotFoundException
from opsflow.quotes.interfaces.repositories import AbstractQuoteRepository
from opsflow.quotes.models import Quote
from opsflow.quotes.schemas import QuoteRead
from opsflow.surveys.config import SurveyStatus, COMPLETABLE_SURVEY_STATUSES
from opsflow.surveys.exceptions import (
    SurveyNotCompletableException,
    SurveyNotFoundException,
    SurveyQuoteNotAcceptedException,
)
from opsflow.surveys.models import Survey
from opsflow.surveys.repositories import SQLAlchemySurveyRepository
from opsflow.surveys.schemas import SurveyCreate, SurveyRead, SurveyScheduled, PaginatedSurveyRead
from opsflow.tenants.dependencies import TenantContext
from opsflow.workflow.engine import GatedTransition, WorkflowEngine
from opsflow.workflow.state_machine import assert_transition

logger = logging.getLogger(__name__)


class SurveyService:
    """Planification et suivi des visites techniques."""

    def __init__(self,
                 session: AsyncSession,
                 survey_repo: SQLAlchemySurveyRepository,
                 quote_repo: AbstractQuoteRepository,
                 project_repo: SQLAlchemyProjectRepository):
        self.survey_repo = survey_repo
        self.quote_repo = quote_repo
        self.project_repo = project_repo
        self.engine = WorkflowEngine(session)

    async def schedule_survey(self, survey_data: SurveyCreate, ctx: TenantContext) -> SurveyScheduled:
        """Crée une visite; si un devis est lié il doit être 'accepted' et passe à 'survey_booked'.

        La création de la visite et le changement de statut du devis sont
        validés ensemble ou pas du tout.
        """
        logger.info(
            f"[SurveyService] Planification visite (tenant {ctx.tenant_id}, devis {survey_data.quote_id}, "
            f"projet {survey_data.project_id}, date {survey_data.scheduled_date.isoformat()})"
        )

        async def build(quote: Optional[Quote]) -> Survey:
            project_id = await resolve_booking_project(
                self.project_repo,
                tenant_id=ctx.tenant_id,
                quote=quote,
                requested_project_id=survey_data.project_id,
            )
            survey = Survey(
                tenant_id=ctx.tenant_id,
                project_id=project_id,
                quote_id=quote.id if quote is not None else None,
                scheduled_date=survey_data.scheduled_date,
                start_time=survey_data.start_time,
                end_time=survey_data.end_time,
                status=(survey_data.status or SurveyStatus.SCHEDULED).value,
                assigned_to=survey_data.assigned_to,
                notes=survey_data.notes,
                created_by=ctx.actor_id,
            )
            return await self.survey_repo.add(survey)

        transition = GatedTransition[Survey](
            name="schedule_survey",
            model=Quote,
            required_statuses=(QuoteStatus.ACCEPTED,),
            not_found=QuoteNotFoundException,
            invalid_state=SurveyQuoteNotAcceptedException,
            post_status=QuoteStatus.SURVEY_BOOKED,
            build_target=build,
            check_transition=assert_transition,
            post_values=lambda _q: {"updated_at": utc_now()},
        )
        result = await self.engine.run(
            transition, source_id=survey_data.quote_id, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id
        )
        survey = result.target
        logger.info(f"[SurveyService] Visite {survey.id} créée (tenant {ctx.tenant_id}, devis {survey.quote_id})")

        quote_read = None
        if survey_data.quote_id is not None:
            quote_db = await self.quote_repo.get_by_id_with_items(quote_id=survey_data.quote_id, tenant_id=ctx.tenant_id)
            quote_read = QuoteRead.model_validate(quote_db)
        return SurveyScheduled(survey=SurveyRead.model_validate(survey), quote=quote_read, warnings=result.warnings)

    async def get_survey(self, survey_id: int, tenant_id: int) -> SurveyRead:
        survey = await self.survey_repo.get_by_id(survey_id=survey_id, tenant_id=tenant_id)
        if survey is None:
            raise SurveyNotFoundException(survey_id)
        return SurveyRead.model_validate(survey)

    async def list_surveys(
        self,
        tenant_id: int,
        *,
        project_id: Optional[int] = None,
        quote_id: Optional[int] = None,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> PaginatedSurveyRead:
        rows, total = await self.survey_repo.list_surveys(
            tenant_id=tenant_id,
            project_id=project_id,
            quote_id=quote_id,
            status=status,
            date_from=date_from,
            date_to=date_to,
            offset=offset,
            limit=limit,
        )
        return PaginatedSurveyRead(items=[SurveyRead.model_validate(r) for r in rows], total=total)

    async def complete_survey(self, survey_id: int, ctx: TenantContext) -> SurveyRead:
        """Clôture une visite planifiée ou en cours (acteur et date de clôture)."""
        logger.info(f"[SurveyService] Clôture visite {survey_id} (tenant {ctx.tenant_id}, acteur {ctx.actor_id})")

        def completion_values(_survey: Survey):
            now = utc_now()
            return {"completed_by": ctx.actor_id, "completed_at": now, "updated_at": now}

        transition = GatedTransition[Survey](
            name="complete_survey",
            model=Survey,
            required_statuses=COMPLETABLE_SURVEY_STATUSES,
            not_found=SurveyNotFoundException,
            invalid_state=SurveyNotCompletableException,
            post_status=SurveyStatus.COMPLETED,
            post_values=completion_values,
        )
        await self.engine.run(transition, source_id=survey_id, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id)
        return await self.get_survey(survey_id, ctx.tenant_id)
