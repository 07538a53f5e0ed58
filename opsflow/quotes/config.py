"""
Configuration spécifique au module Quotes.
Contient les statuts du cycle de vie d'un devis et les limites associées.
"""
from enum import Enum
from typing import Dict, FrozenSet


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    SENT = "sent"
    ACCEPTED = "accepted"
    SURVEY_BOOKED = "survey_booked"
    INSTALLATION_BOOKED = "installation_booked"
    REJECTED = "rejected"
    CONVERTED = "converted"


# Mapping des statuts pour l'affichage en français
QUOTE_STATUS_DISPLAY: Dict[str, str] = {
    QuoteStatus.DRAFT.value: "Brouillon",
    QuoteStatus.PENDING.value: "En attente",
    QuoteStatus.SENT.value: "Envoyé",
    QuoteStatus.ACCEPTED.value: "Accepté",
    QuoteStatus.SURVEY_BOOKED.value: "Visite technique planifiée",
    QuoteStatus.INSTALLATION_BOOKED.value: "Installation planifiée",
    QuoteStatus.REJECTED.value: "Refusé",
    QuoteStatus.CONVERTED.value: "Facturé",
}

# Les lignes ne sont modifiables qu'avant l'acceptation
EDITABLE_QUOTE_STATUSES: FrozenSet[QuoteStatus] = frozenset({
    QuoteStatus.DRAFT,
    QuoteStatus.PENDING,
    QuoteStatus.SENT,
})

# Statuts atteignables via PATCH /status; les autres sont posés par le workflow
MANUAL_QUOTE_STATUSES: FrozenSet[QuoteStatus] = frozenset({
    QuoteStatus.PENDING,
    QuoteStatus.SENT,
    QuoteStatus.ACCEPTED,
    QuoteStatus.REJECTED,
})

MAX_ITEMS_PER_QUOTE: int = 200
