"""
Garde de statut: écriture conditionnée par le statut courant d'une entité.

``acquire`` lit la ligne (tenant, id) sous verrou ``SELECT ... FOR UPDATE`` et
vérifie le statut requis. ``advance`` pose le nouveau statut avec un
``UPDATE ... WHERE status = <attendu>``: si une autre transaction est passée
avant, aucune ligne n'est modifiée et l'appelant reçoit InvalidStateError.
Le second garde couvre les bases où FOR UPDATE est sans effet (SQLite).
"""
import logging
from typing import Any, Callable, Collection, Dict, Optional, Sequence, Type

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from opsflow.core.exceptions import InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)

NotFoundFactory = Callable[[int], NotFoundError]
InvalidStateFactory = Callable[[str], InvalidStateError]


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)


class StatusGate:
    """Primitive unique de pré-condition sur statut, partagée par tout le workflow."""

    def __init__(self, session: AsyncSession):
        self.db = session

    async def acquire(
        self,
        model: Type[SQLModel],
        entity_id: int,
        tenant_id: int,
        required_statuses: Collection[Any],
        not_found: NotFoundFactory,
        invalid_state: InvalidStateFactory,
        options: Sequence[Any] = (),
    ) -> Any:
        """Verrouille la ligne et vérifie qu'elle est dans un des statuts requis.

        Raises:
            NotFoundError: Ligne absente ou appartenant à un autre tenant.
            InvalidStateError: Statut courant hors de ``required_statuses``.
        """
        statement = (
            select(model)
            .where(model.id == entity_id, model.tenant_id == tenant_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        if options:
            statement = statement.options(*options)
        result = await self.db.execute(statement)
        row = result.scalars().one_or_none()
        if row is None:
            logger.info(f"[StatusGate] {model.__name__} {entity_id} introuvable pour tenant {tenant_id}")
            raise not_found(entity_id)

        allowed = {_status_value(s) for s in required_statuses}
        if row.status not in allowed:
            logger.info(
                f"[StatusGate] {model.__name__} {entity_id} (tenant {tenant_id}) en statut '{row.status}', "
                f"requis: {sorted(allowed)}"
            )
            raise invalid_state(row.status)
        return row

    async def advance(
        self,
        model: Type[SQLModel],
        entity_id: int,
        tenant_id: int,
        expected_status: Any,
        new_status: Any,
        invalid_state: InvalidStateFactory,
        values: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Passe de ``expected_status`` à ``new_status`` (check-and-set)."""
        expected = _status_value(expected_status)
        statement = (
            update(model)
            .where(model.id == entity_id, model.tenant_id == tenant_id, model.status == expected)
            .values(status=_status_value(new_status), **(values or {}))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(statement)
        if result.rowcount != 1:
            current = await self.db.scalar(
                select(model.status).where(model.id == entity_id, model.tenant_id == tenant_id)
            )
            logger.warning(
                f"[StatusGate] Conflit concurrent sur {model.__name__} {entity_id} (tenant {tenant_id}): "
                f"attendu '{expected}', trouvé '{current}'"
            )
            raise invalid_state(current or expected)
        logger.debug(f"[StatusGate] {model.__name__} {entity_id}: '{expected}' -> '{_status_value(new_status)}'")
