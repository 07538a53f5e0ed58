"""Exceptions spécifiques au module Invoices."""
from opsflow.core.exceptions import InvalidStateError, NotFoundError


class InvoiceNotFoundException(NotFoundError):
    def __init__(self, invoice_id: int):
        super().__init__("Invoice not found")
        self.invoice_id = invoice_id


class QuoteNotConvertibleException(InvalidStateError):
    """Seul un devis 'accepted' peut être converti en facture."""
    def __init__(self, current_status: str):
        super().__init__("Only accepted quotes can be converted to invoices", current_status=current_status)
