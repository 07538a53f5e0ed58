"""
Dépendances pour le module PDF.
"""
from typing import Annotated

from fastapi import Depends

from opsflow.pdf.config import PDFSettings, pdf_settings
from opsflow.pdf.generator import AbstractPDFGenerator
from opsflow.pdf.reportlab_generator import ReportLabPDFGenerator


def get_pdf_settings() -> PDFSettings:
    """Retourne l'instance globale des paramètres PDF."""
    return pdf_settings

PDFSettingsDep = Annotated[PDFSettings, Depends(get_pdf_settings)]


def get_pdf_generator(
    settings: PDFSettingsDep
) -> AbstractPDFGenerator:
    """Fournit l'implémentation concrète du générateur PDF, configurée."""
    return ReportLabPDFGenerator(settings=settings)

PDFGeneratorDep = Annotated[AbstractPDFGenerator, Depends(get_pdf_generator)]
