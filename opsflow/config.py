import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()


class Settings(BaseSettings):
    # --- Base de Données ---
    POSTGRES_DB: str = "opsflow"
    POSTGRES_USER: str = "opsflow"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DATABASE_URL: Optional[str] = None  # Surcharge complète de l'URL si fournie
    DB_ECHO_LOG: bool = False
    CREATE_TABLES_ON_STARTUP: bool = False

    # --- Pagination ---
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 200

    # --- JWT (émis par le service d'authentification externe) ---
    JWT_SECRET_KEY: str = "remplacer_par_une_vraie_cle_secrete_forte"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # --- Workflow ---
    INVOICE_DUE_DAYS: int = 30
    QUOTE_NUMBER_PREFIX: str = "QUO"
    INVOICE_NUMBER_PREFIX: str = "INV"

    # --- Application ---
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'

    @property
    def database_url(self) -> str:
        """URL SQLAlchemy async (asyncpg par défaut)."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()

if settings.JWT_SECRET_KEY == "remplacer_par_une_vraie_cle_secrete_forte":
    logger.warning("La variable JWT_SECRET_KEY utilise la valeur par défaut. Veuillez définir une clé secrète forte.")

logger.info(f"Configuration chargée: DB={settings.POSTGRES_DB}@{settings.POSTGRES_HOST}, échéance factures={settings.INVOICE_DUE_DAYS}j")
