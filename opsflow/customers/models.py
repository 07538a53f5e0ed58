from typing import Optional

from sqlmodel import SQLModel, Field


class Customer(SQLModel, table=True):
    """Client d'un tenant (référencé par les projets, devis et factures)."""
    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None)

    __tablename__ = "customers"
