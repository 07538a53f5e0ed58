"""Exceptions spécifiques au module Quote."""
from typing import Iterable

from opsflow.core.exceptions import InvalidStateError, NotFoundError, ValidationError


class QuoteNotFoundException(NotFoundError):
    """Levée lorsqu'un devis n'existe pas dans le périmètre du tenant."""
    def __init__(self, quote_id: int):
        super().__init__("Quote not found")
        self.quote_id = quote_id


class QuoteNotEditableException(InvalidStateError):
    """Levée lorsqu'on modifie les lignes d'un devis déjà accepté ou clôturé."""
    def __init__(self, quote_id: int, current_status: str):
        super().__init__("Quote items can only be changed while the quote is draft, pending or sent", current_status=current_status)
        self.quote_id = quote_id


class ManualQuoteStatusException(ValidationError):
    """Statut réservé au workflow (survey_booked, installation_booked, converted)."""
    def __init__(self, status: str, allowed: Iterable[str]):
        allowed_str = ", ".join(sorted(allowed))
        super().__init__(
            f"Status '{status}' cannot be set manually",
            errors={"status": f"Allowed values: {allowed_str}"},
        )
        self.status = status


class DiscountExceedsTotalException(ValidationError):
    def __init__(self):
        super().__init__("Discount cannot exceed the quote amount", errors={"discount": "Too large"})


class QuoteClosedException(InvalidStateError):
    """Devis dans un statut terminal (converted, rejected)."""
    def __init__(self, quote_id: int, current_status: str):
        super().__init__(f"Quote is closed ('{current_status}') and its status can no longer change", current_status=current_status)
        self.quote_id = quote_id


class QuoteItemLimitException(ValidationError):
    def __init__(self, quote_id: int, limit: int):
        super().__init__(f"A quote cannot have more than {limit} items", errors={"items": f"Max {limit}"})
        self.quote_id = quote_id
