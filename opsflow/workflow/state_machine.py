"""
Machine à états des devis, colonne vertébrale du workflow:

    draft -> pending -> sent -> accepted -> {survey_booked, installation_booked} -> converted
    accepted -> rejected

``converted`` et ``rejected`` sont terminaux. Aucun retour arrière.
"""
from typing import Dict, FrozenSet, Union

from opsflow.core.exceptions import InvalidStateError
from opsflow.quotes.config import QuoteStatus

QUOTE_TRANSITIONS: Dict[QuoteStatus, FrozenSet[QuoteStatus]] = {
    QuoteStatus.DRAFT: frozenset({QuoteStatus.PENDING, QuoteStatus.SENT}),
    QuoteStatus.PENDING: frozenset({QuoteStatus.SENT}),
    QuoteStatus.SENT: frozenset({QuoteStatus.ACCEPTED, QuoteStatus.REJECTED}),
    QuoteStatus.ACCEPTED: frozenset({
        QuoteStatus.SURVEY_BOOKED,
        QuoteStatus.INSTALLATION_BOOKED,
        QuoteStatus.CONVERTED,
        QuoteStatus.REJECTED,
    }),
    QuoteStatus.SURVEY_BOOKED: frozenset({QuoteStatus.INSTALLATION_BOOKED, QuoteStatus.CONVERTED}),
    QuoteStatus.INSTALLATION_BOOKED: frozenset({QuoteStatus.CONVERTED}),
    QuoteStatus.REJECTED: frozenset(),
    QuoteStatus.CONVERTED: frozenset(),
}


def _as_status(value: Union[str, QuoteStatus]) -> QuoteStatus:
    try:
        return QuoteStatus(value)
    except ValueError:
        raise InvalidStateError(f"Unknown quote status '{value}'", current_status=str(value))


def can_transition(current: Union[str, QuoteStatus], target: Union[str, QuoteStatus]) -> bool:
    try:
        current, target = QuoteStatus(current), QuoteStatus(target)
    except ValueError:
        return False
    return target in QUOTE_TRANSITIONS[current]


def assert_transition(current: Union[str, QuoteStatus], target: Union[str, QuoteStatus]) -> None:
    """Lève InvalidStateError si ``current -> target`` n'est pas une transition légale."""
    current_status = _as_status(current)
    target_status = _as_status(target)
    if not can_transition(current_status, target_status):
        raise InvalidStateError(
            f"Cannot move quote from '{current_status.value}' to '{target_status.value}'",
            current_status=current_status.value,
        )


def is_terminal(status: Union[str, QuoteStatus]) -> bool:
    return not QUOTE_TRANSITIONS[_as_status(status)]
