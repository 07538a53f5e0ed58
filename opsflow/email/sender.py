from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class AbstractEmailSender(ABC):
    """Interface d'envoi d'email (transport externe)."""

    @abstractmethod
    async def send_email(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        sender_email: Optional[str] = None,
        attachments: Optional[List[Dict[str, Any]]] = None
    ) -> bool:
        """Envoie un email HTML.

        Args:
            attachments: Liste de dicts ``{filename, content, subtype}``.

        Returns:
            True si le serveur a accepté le message, False sinon.

        Raises:
            EmailSendingException: Échec technique de l'envoi.
        """
        raise NotImplementedError
