"""
Données prêtes à l'impression pour un devis ou une facture.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class PDFLine(BaseModel):
    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal


class PDFDocumentData(BaseModel):
    """Document à rendre: l'implémentation gère la mise en page."""
    kind: str = Field(..., description="'quote' ou 'invoice'")
    title: str
    number: str
    issue_date: date
    secondary_date_label: Optional[str] = None
    secondary_date: Optional[date] = None
    status: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    lines: List[PDFLine] = []
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    notes: Optional[str] = None
    terms: Optional[str] = None

    @property
    def filename(self) -> str:
        return f"{self.kind}-{self.number}.pdf"
