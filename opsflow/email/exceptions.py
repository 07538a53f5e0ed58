"""Exceptions spécifiques au module Email."""
from typing import Optional

from opsflow.core.exceptions import DocumentDeliveryError, ValidationError


class EmailSendingException(DocumentDeliveryError):
    """Levée lorsqu'une erreur survient pendant la tentative d'envoi d'un email."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception


class EmailConfigurationException(DocumentDeliveryError):
    """Levée si la configuration SMTP est incomplète."""
    pass


class RecipientRequiredException(ValidationError):
    """Aucun destinataire fourni et le client n'a pas d'email."""
    def __init__(self):
        super().__init__("Customer email is required", errors={"recipientEmail": "Required"})
