"""
Configuration spécifique au module Invoices.
"""
from enum import Enum
from typing import Dict


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    SENT = "sent"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class InvoiceType(str, Enum):
    DEPOSIT = "deposit"
    FINAL = "final"


INVOICE_STATUS_DISPLAY: Dict[str, str] = {
    InvoiceStatus.DRAFT.value: "Brouillon",
    InvoiceStatus.ISSUED.value: "Émise",
    InvoiceStatus.SENT.value: "Envoyée",
    InvoiceStatus.PARTIALLY_PAID.value: "Partiellement payée",
    InvoiceStatus.PAID.value: "Payée",
    InvoiceStatus.OVERDUE.value: "En retard",
    InvoiceStatus.CANCELLED.value: "Annulée",
}

INVOICE_CREATED_EVENT = "invoice:created"
