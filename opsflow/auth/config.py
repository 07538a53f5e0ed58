"""Configuration du module d'authentification (lecture seule des tokens)."""
from opsflow.config import settings

JWT_SECRET_KEY = settings.JWT_SECRET_KEY
JWT_ALGORITHM = settings.JWT_ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

# Le token est émis par le service d'authentification externe
OAUTH2_TOKEN_URL = "/api/auth/token"

ERROR_TOKEN_MISSING = "Authentication required"
ERROR_TOKEN_INVALID = "Invalid or expired token"
HEADER_WWW_AUTHENTICATE = "WWW-Authenticate"
HEADER_WWW_AUTHENTICATE_VALUE = "Bearer"
