"""Exceptions spécifiques au module PDF."""
from typing import Optional

from opsflow.core.exceptions import DocumentDeliveryError


class PDFGenerationException(DocumentDeliveryError):
    """Levée lorsqu'une erreur survient pendant la génération d'un PDF."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception
