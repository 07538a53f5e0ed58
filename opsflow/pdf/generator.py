from abc import ABC, abstractmethod

from opsflow.pdf.models import PDFDocumentData


class AbstractPDFGenerator(ABC):
    """Interface abstraite pour un générateur de documents PDF.
    Approche orientée données, l'implémentation gère la mise en page.
    """

    @abstractmethod
    async def render_document(self, document: PDFDocumentData) -> bytes:
        """Génère le PDF d'un devis ou d'une facture.

        Args:
            document: Données formatées du document.

        Returns:
            Le contenu binaire du PDF généré.

        Raises:
            PDFGenerationException: Si une erreur survient durant la génération.
        """
        raise NotImplementedError
