from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from opsflow.core.dates import utc_now
from opsflow.invoices.config import InvoiceStatus, InvoiceType


class InvoiceItem(SQLModel, table=True):
    """Ligne de facture, copie indépendante d'une ligne de devis."""
    __tablename__ = "invoice_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_id: int = Field(foreign_key="invoices.id", index=True)
    description: str
    quantity: Decimal = Field(max_digits=10, decimal_places=2)
    unit_price: Decimal = Field(max_digits=12, decimal_places=2)
    total: Decimal = Field(max_digits=12, decimal_places=2)
    catalog_item_id: Optional[int] = Field(default=None)

    invoice: Optional["Invoice"] = Relationship(back_populates="items")


class Invoice(SQLModel, table=True):
    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint("tenant_id", "invoice_number", name="uq_invoices_tenant_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    invoice_number: str = Field(max_length=50)
    reference: Optional[str] = Field(default=None, max_length=255)
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id", index=True)
    customer_id: Optional[int] = Field(default=None, foreign_key="customers.id", index=True)
    quote_id: Optional[int] = Field(default=None, foreign_key="quotes.id", index=True)
    type: str = Field(default=InvoiceType.FINAL.value, max_length=20)
    issue_date: date
    due_date: date
    status: str = Field(default=InvoiceStatus.DRAFT.value, max_length=50, index=True)
    payment_date: Optional[date] = Field(default=None)
    payment_amount: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    payment_method: Optional[str] = Field(default=None, max_length=100)
    payment_reference: Optional[str] = Field(default=None, max_length=255)
    subtotal: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    tax: Decimal = Field(default=Decimal("0.00"), max_digits=5, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    total: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    notes: Optional[str] = Field(default=None)
    terms: Optional[str] = Field(default=None)
    created_by: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    items: List[InvoiceItem] = Relationship(
        back_populates="invoice",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "InvoiceItem.id"},
    )
