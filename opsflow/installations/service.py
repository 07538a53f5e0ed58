import logging
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.core.dates import utc_now
from opsflow.installations.config import InstallationStatus, COMPLETABLE_INSTALLATION_STATUSES
from opsflow.installations.exceptions import (
    InstallationNotCompletableException,
    InstallationNotFoundException,
    InstallationQuoteNotAcceptedException,
)
from opsflow.installations.models import Installation
from opsflow.installations.repositories import SQLAlchemyInstallationRepository
from opsflow.installations.schemas import (
    InstallationComplete,
    InstallationCreate,
    InstallationRead,
    InstallationScheduled,
    PaginatedInstallationRead,
)
from opsflow.projects.repositories import SQLAlchemyProjectRepository
from opsflow.projects.service import resolve_booking_project
from opsflow.quotes.config import QuoteStatus
from opsflow.quotes.exceptions import QuoteNotFoundException
from opsflow.quotes.interfaces.repositories import AbstractQuoteRepository
from opsflow.quotes.models import Quote
from opsflow.quotes.schemas import QuoteRead
from opsflow.tenants.dependencies import TenantContext
from opsflow.workflow.engine import GatedTransition, WorkflowEngine
from opsflow.workflow.state_machine import assert_transition

logger = logging.getLogger(__name__)


class InstallationService:

    def __init__(self,
                 session: AsyncSession,
                 installation_repo: SQLAlchemyInstallationRepository,
                 quote_repo: AbstractQuoteRepository,
                 project_repo: SQLAlchemyProjectRepository):
        self.installation_repo = installation_repo
        self.quote_repo = quote_repo
        self.project_repo = project_repo
        self.engine = WorkflowEngine(session)

    async def schedule_installation(self, data: InstallationCreate, ctx: TenantContext) -> InstallationScheduled:
        """Crée une installation; le devis lié doit être 'accepted' et passe à 'installation_booked'."""
        logger.info(
            f"[InstallationService] Planification installation (tenant {ctx.tenant_id}, devis {data.quote_id}, "
            f"équipe {data.assigned_to})"
        )

        async def build(quote: Optional[Quote]) -> Installation:
            project_id = await resolve_booking_project(
                self.project_repo,
                tenant_id=ctx.tenant_id,
                quote=quote,
                requested_project_id=data.project_id,
            )
            installation = Installation(
                tenant_id=ctx.tenant_id,
                project_id=project_id,
                quote_id=quote.id if quote is not None else None,
                scheduled_date=data.scheduled_date,
                start_time=data.start_time,
                end_time=data.end_time,
                status=(data.status or InstallationStatus.SCHEDULED).value,
                assigned_to=list(data.assigned_to),
                notes=data.notes,
                created_by=ctx.actor_id,
            )
            return await self.installation_repo.add(installation)

        transition = GatedTransition[Installation](
            name="schedule_installation",
            model=Quote,
            required_statuses=(QuoteStatus.ACCEPTED,),
            not_found=QuoteNotFoundException,
            invalid_state=InstallationQuoteNotAcceptedException,
            post_status=QuoteStatus.INSTALLATION_BOOKED,
            build_target=build,
            check_transition=assert_transition,
            post_values=lambda _q: {"updated_at": utc_now()},
        )
        result = await self.engine.run(
            transition, source_id=data.quote_id, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id
        )
        installation = result.target
        logger.info(f"[InstallationService] Installation {installation.id} créée (tenant {ctx.tenant_id})")

        quote_read = None
        if data.quote_id is not None:
            quote_db = await self.quote_repo.get_by_id_with_items(quote_id=data.quote_id, tenant_id=ctx.tenant_id)
            quote_read = QuoteRead.model_validate(quote_db)
        return InstallationScheduled(
            installation=InstallationRead.model_validate(installation),
            quote=quote_read,
            warnings=result.warnings,
        )

    async def get_installation(self, installation_id: int, tenant_id: int) -> InstallationRead:
        installation = await self.installation_repo.get_by_id(installation_id=installation_id, tenant_id=tenant_id)
        if installation is None:
            raise InstallationNotFoundException(installation_id)
        return InstallationRead.model_validate(installation)

    async def list_installations(
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
    ) -> PaginatedInstallationRead:
        rows, total = await self.installation_repo.list_installations(
            tenant_id=tenant_id,
            project_id=project_id,
            quote_id=quote_id,
            status=status,
            date_from=date_from,
            date_to=date_to,
            offset=offset,
            limit=limit,
        )
        return PaginatedInstallationRead(items=[InstallationRead.model_validate(r) for r in rows], total=total)

    async def complete_installation(
        self, installation_id: int, completion: InstallationComplete, ctx: TenantContext
    ) -> InstallationRead:
        """Clôture le chantier, ou le passe en 'snagging' si des réserves sont signalées."""
        target_status = InstallationStatus.SNAGGING if completion.snagging_required else InstallationStatus.COMPLETED
        logger.info(
            f"[InstallationService] Clôture installation {installation_id} -> '{target_status.value}' "
            f"(tenant {ctx.tenant_id}, acteur {ctx.actor_id})"
        )

        def completion_values(installation: Installation):
            now = utc_now()
            values = {
                "client_signoff": completion.client_signoff,
                "snagging_required": completion.snagging_required,
                "updated_at": now,
            }
            if target_status == InstallationStatus.COMPLETED:
                values.update(completed_by=ctx.actor_id, completed_at=now)
            if completion.notes is not None:
                values["notes"] = completion.notes
            return values

        transition = GatedTransition[Installation](
            name="complete_installation",
            model=Installation,
            required_statuses=COMPLETABLE_INSTALLATION_STATUSES,
            not_found=InstallationNotFoundException,
            invalid_state=InstallationNotCompletableException,
            post_status=target_status,
            post_values=completion_values,
        )
        await self.engine.run(transition, source_id=installation_id, tenant_id=ctx.tenant_id, actor_id=ctx.actor_id)
        return await self.get_installation(installation_id, ctx.tenant_id)
