"""
Exceptions personnalisées pour le module d'authentification.
"""
from typing import Dict

from opsflow.auth.config import (
    ERROR_TOKEN_INVALID,
    ERROR_TOKEN_MISSING,
    HEADER_WWW_AUTHENTICATE,
    HEADER_WWW_AUTHENTICATE_VALUE,
)
from opsflow.core.exceptions import WorkflowError


class AuthenticationError(WorkflowError):
    status_code = 401
    headers: Dict[str, str] = {HEADER_WWW_AUTHENTICATE: HEADER_WWW_AUTHENTICATE_VALUE}


class TokenMissingException(AuthenticationError):
    """Exception pour un token JWT absent."""
    def __init__(self):
        super().__init__(ERROR_TOKEN_MISSING)


class TokenInvalidException(AuthenticationError):
    """Exception pour un token JWT invalide, expiré ou mal formé."""
    def __init__(self):
        super().__init__(ERROR_TOKEN_INVALID)
