"""Taxonomie d'erreurs partagée par tous les modules métier.

Chaque exception porte son code HTTP et sait produire le corps JSON
``{message, errors?, currentStatus?}`` renvoyé au client.
"""
from typing import Any, Dict, Optional


class WorkflowError(Exception):
    """Classe de base pour les erreurs métier de l'application."""
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(WorkflowError):
    """Données d'entrée invalides ou incomplètes."""
    status_code = 400

    def __init__(self, message: str, errors: Optional[Any] = None):
        super().__init__(message)
        self.errors = errors

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class NotFoundError(WorkflowError):
    """Entité absente ou hors du périmètre du tenant."""
    status_code = 404


class InvalidStateError(WorkflowError):
    """L'entité existe mais n'est pas dans le statut requis."""
    status_code = 400

    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.current_status is not None:
            body["currentStatus"] = self.current_status
        return body


class ForbiddenError(WorkflowError):
    status_code = 403


class PersistenceError(WorkflowError):
    """Échec transactionnel ou base de données. Rien n'a été appliqué."""
    status_code = 500

    def __init__(self, message: str = "Database error", original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.original_exception = original_exception


class DocumentDeliveryError(WorkflowError):
    """Échec de génération PDF ou d'envoi d'email sur un endpoint document."""
    status_code = 500
