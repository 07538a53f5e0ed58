"""
Dépendances FastAPI pour l'authentification: résolution de l'acteur courant.
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from opsflow.auth.config import OAUTH2_TOKEN_URL
from opsflow.auth.exceptions import TokenMissingException, TokenInvalidException
from opsflow.auth.models import CurrentActor
from opsflow.auth.security import decode_access_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=OAUTH2_TOKEN_URL, auto_error=False)


async def get_current_actor(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
) -> CurrentActor:
    """Résout l'acteur courant ``{id, tenantId}`` à partir du bearer token."""
    if not token:
        raise TokenMissingException()
    actor = decode_access_token(token)
    if actor is None:
        raise TokenInvalidException()
    logger.debug(f"Acteur {actor.id} authentifié (tenant {actor.tenant_id})")
    return actor


CurrentActorDep = Annotated[CurrentActor, Depends(get_current_actor)]
