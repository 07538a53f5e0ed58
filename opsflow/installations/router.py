import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Path, Query, Response, status

from opsflow.config import settings
from opsflow.core.pagination import set_content_range
from opsflow.installations.config import InstallationStatus
from opsflow.installations.dependencies import InstallationServiceDep
from opsflow.installations.schemas import (
    InstallationComplete,
    InstallationCreate,
    InstallationRead,
    InstallationScheduled,
    PaginatedInstallationRead,
)
from opsflow.tenants.dependencies import TenantContextDep

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/installations",
    tags=["Installations"]
)


@router.post("", response_model=InstallationScheduled, status_code=status.HTTP_201_CREATED)
async def schedule_installation(
    installation_service: InstallationServiceDep,
    ctx: TenantContextDep,
    installation_request: InstallationCreate,
):
    """Planifie une installation; le devis lié passe à 'installation_booked'."""
    logger.info(f"API schedule_installation: tenant {ctx.tenant_id}, devis {installation_request.quote_id}")
    return await installation_service.schedule_installation(installation_request, ctx)


@router.get("", response_model=PaginatedInstallationRead)
async def list_installations(
    installation_service: InstallationServiceDep,
    ctx: TenantContextDep,
    response: Response,
    project_id: Optional[int] = Query(None, alias="projectId"),
    quote_id: Optional[int] = Query(None, alias="quoteId"),
    installation_status: Optional[InstallationStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    page = await installation_service.list_installations(
        ctx.tenant_id,
        project_id=project_id,
        quote_id=quote_id,
        status=installation_status.value if installation_status else None,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )
    set_content_range(response, "installations", offset, len(page.items), page.total)
    return page


@router.get("/{installation_id}", response_model=InstallationRead)
async def read_installation(
    installation_service: InstallationServiceDep,
    ctx: TenantContextDep,
    installation_id: int = Path(..., title="ID de l'installation", ge=1),
):
    return await installation_service.get_installation(installation_id, ctx.tenant_id)


@router.post("/{installation_id}/complete", response_model=InstallationRead)
async def complete_installation(
    installation_service: InstallationServiceDep,
    ctx: TenantContextDep,
    installation_id: int = Path(..., title="ID de l'installation", ge=1),
    completion: Optional[InstallationComplete] = Body(None),
):
    logger.info(f"API complete_installation: installation {installation_id}, tenant {ctx.tenant_id}")
    return await installation_service.complete_installation(installation_id, completion or InstallationComplete(), ctx)
