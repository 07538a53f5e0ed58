import asyncio
import logging
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from opsflow.email.config import EmailSettings, email_settings
from opsflow.email.exceptions import EmailConfigurationException, EmailSendingException
from opsflow.email.sender import AbstractEmailSender

logger = logging.getLogger(__name__)


class SmtpEmailSender(AbstractEmailSender):
    """Implémentation de l'envoi d'email via SMTP standard."""

    def __init__(self, settings: EmailSettings = email_settings):
        if not all([settings.SMTP_HOST, settings.SMTP_PORT, settings.SENDER_EMAIL, settings.SENDER_PASSWORD]):
            logger.error("[SmtpEmailSender] Configuration SMTP incomplète.")
            raise EmailConfigurationException("Email delivery is not configured")
        self.settings = settings
        logger.info(f"[SmtpEmailSender] Initialisé pour {settings.SMTP_HOST}:{settings.SMTP_PORT}")

    def _build_message(self, sender: str, recipient_email: str, subject: str, html_content: str,
                       attachments: Optional[List[Dict[str, Any]]]) -> MIMEMultipart:
        msg = MIMEMultipart('mixed')
        msg["From"] = f"{self.settings.DEFAULT_FROM_NAME} <{sender}>"
        msg["To"] = recipient_email
        msg["Subject"] = subject
        msg.attach(MIMEText(html_content, "html", "utf-8"))

        for attachment in attachments or []:
            filename = attachment.get('filename')
            content = attachment.get('content')
            if not filename or not content:
                logger.warning(f"[SmtpEmailSender] Pièce jointe ignorée (manque filename ou content): {filename}")
                continue
            part = MIMEApplication(content, _subtype=attachment.get('subtype', 'octet-stream'))
            part.add_header("Content-Disposition", "attachment", filename=filename)
            msg.attach(part)
        return msg

    def _deliver(self, sender: str, recipient_email: str, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=self.settings.TIMEOUT_SECONDS) as server:
            if self.settings.USE_TLS:
                server.starttls()
            server.login(self.settings.SENDER_EMAIL, self.settings.SENDER_PASSWORD)
            server.sendmail(sender, [recipient_email], msg.as_string())

    async def send_email(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        sender_email: Optional[str] = None,
        attachments: Optional[List[Dict[str, Any]]] = None
    ) -> bool:
        final_sender = sender_email or self.settings.SENDER_EMAIL
        msg = self._build_message(final_sender, recipient_email, subject, html_content, attachments)

        try:
            logger.info(f"[SmtpEmailSender] Envoi de l'email à {recipient_email} (Sujet: {subject})")
            # smtplib est bloquant: exécution hors de la boucle d'événements
            await asyncio.to_thread(self._deliver, final_sender, recipient_email, msg)
            logger.info(f"[SmtpEmailSender] Email envoyé avec succès à {recipient_email}")
            return True
        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"[SmtpEmailSender] Destinataire refusé: {recipient_email}. Détails: {e.recipients}")
            return False
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"[SmtpEmailSender] Échec authentification SMTP: {e}", exc_info=True)
            raise EmailSendingException("SMTP authentication failed", original_exception=e)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"[SmtpEmailSender] Erreur SMTP lors de l'envoi à {recipient_email}: {e}", exc_info=True)
            raise EmailSendingException(f"SMTP error: {e}", original_exception=e)
