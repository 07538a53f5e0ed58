"""Exceptions spécifiques au module Tenants."""
from opsflow.core.exceptions import NotFoundError, ForbiddenError, ValidationError


class TenantNotFoundException(NotFoundError):
    """Levée lorsque le tenant de la requête n'existe pas."""
    def __init__(self, tenant_id: int):
        super().__init__("Tenant not found")
        self.tenant_id = tenant_id


class TenantInactiveException(ForbiddenError):
    def __init__(self, tenant_id: int):
        super().__init__("Tenant is inactive")
        self.tenant_id = tenant_id


class TenantContextMissingException(ValidationError):
    """Levée lorsque l'acteur courant n'est rattaché à aucun tenant."""
    def __init__(self):
        super().__init__("Tenant context required")
