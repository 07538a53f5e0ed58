import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from opsflow.auth.dependencies import CurrentActorDep
from opsflow.database import get_db_session
from opsflow.tenants.exceptions import (
    TenantContextMissingException,
    TenantInactiveException,
    TenantNotFoundException,
)
from opsflow.tenants.repositories import SQLAlchemyTenantRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """Périmètre d'une requête: le tenant validé et l'acteur qui agit."""
    tenant_id: int
    actor_id: int


async def get_tenant_context(
    actor: CurrentActorDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> TenantContext:
    """
    Valide le tenant de l'acteur courant.

    Raises:
        TenantContextMissingException: L'acteur n'a pas de tenant (400).
        TenantNotFoundException: Le tenant n'existe pas (404).
        TenantInactiveException: Le tenant est désactivé (403).
    """
    if actor.tenant_id is None:
        logger.warning(f"Acteur {actor.id} sans contexte tenant.")
        raise TenantContextMissingException()

    tenant = await SQLAlchemyTenantRepository(db_session=session).get_by_id(actor.tenant_id)
    if tenant is None:
        raise TenantNotFoundException(actor.tenant_id)
    if not tenant.is_active:
        raise TenantInactiveException(actor.tenant_id)
    return TenantContext(tenant_id=tenant.id, actor_id=actor.id)


TenantContextDep = Annotated[TenantContext, Depends(get_tenant_context)]
