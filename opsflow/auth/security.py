"""
Création et décodage des tokens JWT portant l'acteur et son tenant.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from opsflow.auth.config import JWT_SECRET_KEY, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from opsflow.auth.models import CurrentActor, TokenClaims

logger = logging.getLogger(__name__)


def create_access_token(actor_id: int, tenant_id: Optional[int], expires_delta: Optional[timedelta] = None) -> str:
    """Crée un token JWT pour un acteur et son tenant."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(actor_id), "exp": expire}
    if tenant_id is not None:
        to_encode["tenant_id"] = tenant_id
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[CurrentActor]:
    """Décode un token JWT et retourne l'acteur, ou None si invalide/expiré."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
        claims = TokenClaims.model_validate(payload)
        return CurrentActor(id=int(claims.sub), tenant_id=claims.tenant_id)
    except JWTError as e:
        logger.warning(f"Erreur de décodage JWT: {e}")
        return None
    except (PydanticValidationError, ValueError) as e:
        logger.warning(f"Claims JWT invalides: {e}")
        return None
