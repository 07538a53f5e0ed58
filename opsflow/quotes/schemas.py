"""Schémas d'API (entrée/sortie) du module Quotes."""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from opsflow.core.dates import normalize_calendar_date
from opsflow.core.schemas import ApiModel, Page
from opsflow.quotes.config import QuoteStatus, MAX_ITEMS_PER_QUOTE


class QuoteItemCreate(ApiModel):
    """Ligne de devis fournie par le client; le total de ligne est calculé."""
    description: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    unit_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    catalog_item_id: Optional[int] = None


class QuoteItemRead(ApiModel):
    id: int
    quote_id: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    catalog_item_id: Optional[int] = None


class QuoteCreate(ApiModel):
    project_id: Optional[int] = None
    customer_id: Optional[int] = None
    reference: Optional[str] = Field(default=None, max_length=255)
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    tax: Decimal = Field(default=Decimal("0"), ge=0, le=100, max_digits=5, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    notes: Optional[str] = None
    terms: Optional[str] = None
    items: List[QuoteItemCreate] = Field(default_factory=list, max_length=MAX_ITEMS_PER_QUOTE)

    @field_validator("issue_date", "expiry_date", mode="before")
    @classmethod
    def _normalize_dates(cls, value):
        return normalize_calendar_date(value)


class QuoteRead(ApiModel):
    id: int
    tenant_id: int
    quote_number: str
    reference: Optional[str] = None
    project_id: Optional[int] = None
    customer_id: Optional[int] = None
    issue_date: date
    expiry_date: Optional[date] = None
    status: str
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    notes: Optional[str] = None
    terms: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[QuoteItemRead] = []


class QuoteStatusUpdate(ApiModel):
    """Changement manuel de statut (pending, sent, accepted, rejected)."""
    status: QuoteStatus


PaginatedQuoteRead = Page[QuoteRead]
