import logging
from pathlib import Path
from typing import Any, Dict, Optional

import jinja2

from opsflow.email.exceptions import EmailSendingException
from opsflow.email.sender import AbstractEmailSender
from opsflow.pdf.config import pdf_settings
from opsflow.pdf.models import PDFDocumentData

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=jinja2.select_autoescape(['html', 'xml']),
)

DOCUMENT_LABELS = {
    "quote": "votre devis",
    "invoice": "votre facture",
}


class DocumentEmailService:
    """Service applicatif pour l'envoi des devis et factures par email."""

    def __init__(self, email_sender: AbstractEmailSender):
        self.email_sender = email_sender

    def _render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return env.get_template(template_name).render(context)

    async def send_document_email(
        self,
        document: PDFDocumentData,
        recipient_email: str,
        pdf_content: bytes,
        subject: Optional[str] = None,
        message: Optional[str] = None,
    ) -> bool:
        """Envoie le document en pièce jointe PDF.

        Returns:
            True si l'envoi a réussi. Les erreurs du transport sont journalisées
            et rapportées comme False.
        """
        subject = subject or f"{document.title} {document.number} - {pdf_settings.COMPANY_NAME}"
        logger.info(f"[DocumentEmailService] Préparation email {document.kind} {document.number} pour {recipient_email}")

        html_content = self._render_template("document_email.html", {
            "subject": subject,
            "message": message,
            "document": document,
            "document_label": DOCUMENT_LABELS.get(document.kind, "votre document"),
            "customer_name": document.customer_name,
            "company_name": pdf_settings.COMPANY_NAME,
            "currency": pdf_settings.CURRENCY_SYMBOL,
        })
        attachments = [{
            "filename": document.filename,
            "content": pdf_content,
            "subtype": "pdf",
        }]

        try:
            success = await self.email_sender.send_email(
                recipient_email=recipient_email,
                subject=subject,
                html_content=html_content,
                attachments=attachments,
            )
        except EmailSendingException as e:
            logger.error(f"[DocumentEmailService] Échec envoi {document.kind} {document.number} à {recipient_email}: {e}")
            return False

        if success:
            logger.info(f"[DocumentEmailService] {document.kind} {document.number} envoyé à {recipient_email}")
        else:
            logger.warning(f"[DocumentEmailService] Envoi {document.kind} {document.number} refusé pour {recipient_email}")
        return success
