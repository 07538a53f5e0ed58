"""Schémas d'API du module Invoices."""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from opsflow.core.schemas import ApiModel, Page


class InvoiceItemRead(ApiModel):
    id: int
    invoice_id: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    catalog_item_id: Optional[int] = None


class InvoiceRead(ApiModel):
    id: int
    tenant_id: int
    invoice_number: str
    reference: Optional[str] = None
    project_id: Optional[int] = None
    customer_id: Optional[int] = None
    quote_id: Optional[int] = None
    type: str
    issue_date: date
    due_date: date
    status: str
    payment_date: Optional[date] = None
    payment_amount: Optional[Decimal] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    notes: Optional[str] = None
    terms: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    items: List[InvoiceItemRead] = []


class InvoiceConverted(InvoiceRead):
    """Facture issue d'une conversion, avec les avertissements post-commit."""
    warnings: List[str] = Field(default_factory=list)


PaginatedInvoiceRead = Page[InvoiceRead]
