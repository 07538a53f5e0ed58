from typing import Optional

from sqlmodel import SQLModel, Field


class Project(SQLModel, table=True):
    """Chantier d'un client: porte les visites techniques et les installations."""
    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    customer_id: Optional[int] = Field(default=None, foreign_key="customers.id", index=True)
    name: str = Field(max_length=255)
    status: str = Field(default="active", max_length=50)
    address: Optional[str] = Field(default=None)

    __tablename__ = "projects"
