from typing import Optional

from pydantic import EmailStr, Field

from opsflow.core.schemas import ApiModel


class DocumentEmailRequest(ApiModel):
    """Envoi d'un document par email; le destinataire par défaut est le client."""
    recipient_email: Optional[EmailStr] = None
    subject: Optional[str] = Field(default=None, max_length=255)
    message: Optional[str] = None


class DocumentEmailResult(ApiModel):
    message: str
    sent: bool
    recipient_email: str
