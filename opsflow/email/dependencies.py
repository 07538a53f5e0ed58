from typing import Annotated

from fastapi import Depends

from opsflow.email.sender import AbstractEmailSender
from opsflow.email.service import DocumentEmailService
from opsflow.email.smtp_sender import SmtpEmailSender


def get_email_sender() -> AbstractEmailSender:
    """
    Fournit l'implémentation concrète de l'Email Sender.

    SmtpEmailSender lève EmailConfigurationException si la configuration manque.
    """
    return SmtpEmailSender()

EmailSenderDep = Annotated[AbstractEmailSender, Depends(get_email_sender)]


def get_document_email_service(
    email_sender: EmailSenderDep
) -> DocumentEmailService:
    return DocumentEmailService(email_sender=email_sender)

DocumentEmailServiceDep = Annotated[DocumentEmailService, Depends(get_document_email_service)]
