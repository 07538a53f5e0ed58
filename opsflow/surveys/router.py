import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Path, Query, Response, status

from opsflow.config import settings
from opsflow.core.pagination import set_content_range
from opsflow.surveys.config import SurveyStatus
from opsflow.surveys.dependencies import SurveyServiceDep
from opsflow.surveys.schemas import SurveyCreate, SurveyRead, SurveyScheduled, PaginatedSurveyRead
from opsflow.tenants.dependencies import TenantContextDep

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/surveys",
    tags=["Surveys"]
)


@router.post("", response_model=SurveyScheduled, status_code=status.HTTP_201_CREATED)
async def schedule_survey(
    survey_service: SurveyServiceDep,
    ctx: TenantContextDep,
    survey_request: SurveyCreate,
):
    """Planifie une visite technique; le devis lié passe à 'survey_booked'."""
    logger.info(f"API schedule_survey: tenant {ctx.tenant_id}, devis {survey_request.quote_id}")
    return await survey_service.schedule_survey(survey_request, ctx)


@router.get("", response_model=PaginatedSurveyRead)
async def list_surveys(
    survey_service: SurveyServiceDep,
    ctx: TenantContextDep,
    response: Response,
    project_id: Optional[int] = Query(None, alias="projectId"),
    quote_id: Optional[int] = Query(None, alias="quoteId"),
    survey_status: Optional[SurveyStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    page = await survey_service.list_surveys(
        ctx.tenant_id,
        project_id=project_id,
        quote_id=quote_id,
        status=survey_status.value if survey_status else None,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )
    set_content_range(response, "surveys", offset, len(page.items), page.total)
    return page


@router.get("/{survey_id}", response_model=SurveyRead)
async def read_survey(
    survey_service: SurveyServiceDep,
    ctx: TenantContextDep,
    survey_id: int = Path(..., title="ID de la visite", ge=1),
):
    return await survey_service.get_survey(survey_id, ctx.tenant_id)


@router.post("/{survey_id}/complete", response_model=SurveyRead)
async def complete_survey(
    survey_service: SurveyServiceDep,
    ctx: TenantContextDep,
    survey_id: int = Path(..., title="ID de la visite", ge=1),
):
    """Clôture une visite planifiée ou en cours."""
    logger.info(f"API complete_survey: visite {survey_id}, tenant {ctx.tenant_id}")
    return await survey_service.complete_survey(survey_id, ctx)
