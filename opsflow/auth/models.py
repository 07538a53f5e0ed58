from typing import Optional

from pydantic import BaseModel


class CurrentActor(BaseModel):
    """Acteur authentifié de la requête: ``{id, tenantId}``."""
    id: int
    tenant_id: Optional[int] = None


class TokenClaims(BaseModel):
    sub: str
    tenant_id: Optional[int] = None
