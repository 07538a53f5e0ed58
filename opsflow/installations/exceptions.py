"""Exceptions spécifiques au module Installations."""
from opsflow.core.exceptions import InvalidStateError, NotFoundError


class InstallationNotFoundException(NotFoundError):
    def __init__(self, installation_id: int):
        super().__init__("Installation not found")
        self.installation_id = installation_id


class InstallationQuoteNotAcceptedException(InvalidStateError):
    """Le devis lié n'est pas au statut 'accepted'."""
    def __init__(self, current_status: str):
        super().__init__(
            "Cannot schedule an installation for a quote that is not in 'accepted' status",
            current_status=current_status,
        )


class InstallationNotCompletableException(InvalidStateError):
    def __init__(self, current_status: str):
        super().__init__(
            "Only scheduled, in-progress or snagging installations can be completed",
            current_status=current_status,
        )
