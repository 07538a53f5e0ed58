from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from opsflow.core.dates import utc_now
from opsflow.quotes.config import QuoteStatus

# --- Modèles pour QuoteItem ---

class QuoteItem(SQLModel, table=True):
    """Modèle de table pour une ligne de devis."""
    id: Optional[int] = Field(default=None, primary_key=True)
    quote_id: int = Field(foreign_key="quotes.id", index=True)
    description: str
    quantity: Decimal = Field(max_digits=10, decimal_places=2)
    unit_price: Decimal = Field(max_digits=12, decimal_places=2)
    total: Decimal = Field(max_digits=12, decimal_places=2)
    catalog_item_id: Optional[int] = Field(default=None)

    quote: Optional["Quote"] = Relationship(back_populates="items")

    __tablename__ = "quote_items"

# --- Modèles pour Quote ---

class Quote(SQLModel, table=True):
    """Modèle de table pour un devis. Montants recalculés à chaque modification des lignes."""
    __tablename__ = "quotes"
    __table_args__ = (UniqueConstraint("tenant_id", "quote_number", name="uq_quotes_tenant_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    quote_number: str = Field(max_length=50)
    reference: Optional[str] = Field(default=None, max_length=255)
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id", index=True)
    customer_id: Optional[int] = Field(default=None, foreign_key="customers.id", index=True)
    issue_date: date = Field(default_factory=date.today)
    expiry_date: Optional[date] = Field(default=None)
    status: str = Field(default=QuoteStatus.DRAFT.value, max_length=50, index=True)
    subtotal: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    tax: Decimal = Field(default=Decimal("0.00"), max_digits=5, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    total: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)
    notes: Optional[str] = Field(default=None)
    terms: Optional[str] = Field(default=None)
    created_by: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    items: List[QuoteItem] = Relationship(
        back_populates="quote",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "QuoteItem.id"},
    )
