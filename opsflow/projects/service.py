import logging
from typing import Optional

from opsflow.core.exceptions import ValidationError
from opsflow.projects.exceptions import ProjectNotFoundException
from opsflow.projects.repositories import SQLAlchemyProjectRepository
from opsflow.quotes.models import Quote

logger = logging.getLogger(__name__)


async def resolve_booking_project(
    project_repo: SQLAlchemyProjectRepository,
    *,
    tenant_id: int,
    quote: Optional[Quote],
    requested_project_id: Optional[int],
) -> int:
    """Détermine le projet d'une visite ou d'une installation.

    Le projet du devis lié prime sur celui fourni par l'appelant. Sans devis
    (ou devis sans projet), le projet explicite est obligatoire.

    Raises:
        ValidationError: Aucun projet déterminable.
        ProjectNotFoundException: Projet absent du tenant.
    """
    project_id = requested_project_id
    if quote is not None and quote.project_id is not None:
        if requested_project_id is not None and requested_project_id != quote.project_id:
            logger.warning(
                f"Projet {requested_project_id} fourni ignoré: le devis {quote.id} porte le projet "
                f"{quote.project_id} (tenant {tenant_id})"
            )
        project_id = quote.project_id

    if project_id is None:
        raise ValidationError(
            "Project ID is required when no quote with a project is provided",
            errors={"projectId": "Required"},
        )

    project = await project_repo.get_by_id(project_id, tenant_id)
    if project is None:
        raise ProjectNotFoundException(project_id)
    return project.id
