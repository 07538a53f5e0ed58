"""
Configuration spécifique au module Installations (chantiers planifiés).
"""
from enum import Enum
from typing import FrozenSet


class InstallationStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    SNAGGING = "snagging"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


INITIAL_INSTALLATION_STATUSES: FrozenSet[InstallationStatus] = frozenset(
    {InstallationStatus.SCHEDULED, InstallationStatus.IN_PROGRESS}
)
# Une installation avec réserves peut être reclôturée une fois les réserves levées
COMPLETABLE_INSTALLATION_STATUSES: FrozenSet[InstallationStatus] = frozenset(
    {InstallationStatus.SCHEDULED, InstallationStatus.IN_PROGRESS, InstallationStatus.SNAGGING}
)
