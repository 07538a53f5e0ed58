"""
Moteur de workflow: transition transactionnelle conditionnée par statut.

Une ``GatedTransition`` décrit une opération du workflow (planifier une
visite technique, planifier une installation, convertir un devis en facture,
clôturer une intervention...) par:

- l'entité source et les statuts qu'elle doit avoir,
- le constructeur de l'entité cible,
- le statut posé sur la source une fois la cible écrite,
- une vérification de cohérence avant commit,
- un effet de bord optionnel exécuté après commit.

``WorkflowEngine.run`` exécute l'ensemble dans une seule transaction:
tout est écrit, ou rien.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Collection, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from opsflow.core.exceptions import PersistenceError
from opsflow.workflow.gate import InvalidStateFactory, NotFoundFactory, StatusGate

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOTIFICATION_FAILED = "notification_failed"


@dataclass(frozen=True)
class GatedTransition(Generic[T]):
    name: str
    model: Type[SQLModel]
    required_statuses: Collection[Any]
    not_found: NotFoundFactory
    invalid_state: InvalidStateFactory
    post_status: Optional[Any] = None
    # Reçoit la source verrouillée (ou None) et écrit la cible dans la session
    build_target: Optional[Callable[[Optional[Any]], Awaitable[T]]] = None
    # Contrôle supplémentaire de la transition (machine à états)
    check_transition: Optional[Callable[[str, Any], None]] = None
    post_values: Optional[Callable[[Any], Dict[str, Any]]] = None
    verify: Optional[Callable[[T], None]] = None
    after_commit: Optional[Callable[[Optional[Any], T], Awaitable[None]]] = None
    load_options: Sequence[Any] = ()


@dataclass
class TransitionResult(Generic[T]):
    source: Optional[Any]
    target: T
    warnings: List[str] = field(default_factory=list)


class WorkflowEngine:
    """Exécute les transitions gardées dans la transaction de la session."""

    def __init__(self, session: AsyncSession):
        self.db = session
        self.gate = StatusGate(session)

    async def run(
        self,
        transition: GatedTransition[T],
        *,
        source_id: Optional[int],
        tenant_id: int,
        actor_id: Optional[int] = None,
    ) -> TransitionResult[T]:
        """Exécute ``transition`` pour la source ``source_id`` (optionnelle).

        Sans source, seule la cible est écrite (ex: visite sans devis lié).

        Raises:
            NotFoundError / InvalidStateError: Pré-condition non remplie, rien n'est écrit.
            PersistenceError: Échec base de données, transaction annulée.
        """
        logger.info(
            f"[WorkflowEngine] {transition.name}: début (tenant {tenant_id}, "
            f"{transition.model.__name__} {source_id}, acteur {actor_id})"
        )
        source = None
        try:
            if source_id is not None:
                source = await self.gate.acquire(
                    transition.model,
                    source_id,
                    tenant_id,
                    transition.required_statuses,
                    transition.not_found,
                    transition.invalid_state,
                    options=transition.load_options,
                )
                if transition.post_status is not None and transition.check_transition is not None:
                    transition.check_transition(source.status, transition.post_status)

            target = await transition.build_target(source) if transition.build_target else source

            if source is not None and transition.post_status is not None:
                values = transition.post_values(source) if transition.post_values else None
                await self.gate.advance(
                    transition.model,
                    source_id,
                    tenant_id,
                    expected_status=source.status,
                    new_status=transition.post_status,
                    invalid_state=transition.invalid_state,
                    values=values,
                )

            if transition.verify is not None:
                transition.verify(target)

            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[WorkflowEngine] {transition.name}: erreur DB, rollback (tenant {tenant_id}, source {source_id}): {e}", exc_info=True)
            raise PersistenceError(original_exception=e) from e
        except Exception:
            await self.db.rollback()
            logger.info(f"[WorkflowEngine] {transition.name}: annulée (tenant {tenant_id}, source {source_id})")
            raise

        logger.info(f"[WorkflowEngine] {transition.name}: validée (tenant {tenant_id}, source {source_id})")
        result = TransitionResult(source=source, target=target)

        if transition.after_commit is not None:
            try:
                await transition.after_commit(source, target)
            except Exception as e:
                # Effet de bord best-effort: la transaction est déjà validée
                logger.error(f"[WorkflowEngine] {transition.name}: effet post-commit en échec (tenant {tenant_id}): {e}", exc_info=True)
                result.warnings.append(NOTIFICATION_FAILED)
        return result
