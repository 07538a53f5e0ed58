"""Configuration spécifique au module PDF.

Utilise Pydantic BaseSettings pour permettre la surcharge par
des variables d'environnement préfixées ``PDF_``.
"""
from pydantic_settings import BaseSettings


class PDFSettings(BaseSettings):
    """Paramètres de configuration pour la génération de PDF."""

    LOGO_PATH: str = "static/logo.png"
    COMPANY_NAME: str = "OpsFlow"
    COMPANY_INFO_HTML: str = (
        "<b>OpsFlow</b><br/>"
        "Gestion de chantiers et interventions"
    )
    FOOTER_TEXT: str = "Document généré par OpsFlow"
    PRIMARY_COLOR_HEX: str = "#1f5a9a"
    CURRENCY_SYMBOL: str = "€"

    class Config:
        env_prefix = "PDF_"
        env_file = '.env'
        env_file_encoding = 'utf-8'
        extra = 'ignore'


pdf_settings = PDFSettings()
