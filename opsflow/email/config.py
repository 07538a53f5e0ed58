from typing import Optional

from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """Configuration du module email.

    Les paramètres sont chargés depuis les variables d'environnement avec le préfixe EMAIL_.
    """
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SENDER_EMAIL: Optional[str] = None
    SENDER_PASSWORD: Optional[str] = None
    USE_TLS: bool = True
    DEFAULT_FROM_NAME: Optional[str] = "OpsFlow"
    TIMEOUT_SECONDS: int = 30

    class Config:
        env_prefix = "EMAIL_"
        env_file = ".env"
        extra = "ignore"

# Instance globale des paramètres
email_settings = EmailSettings()
