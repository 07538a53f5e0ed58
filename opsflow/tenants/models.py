from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from opsflow.core.dates import utc_now


class Tenant(SQLModel, table=True):
    """Frontière d'isolation: toute entité métier appartient à un tenant."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    slug: str = Field(max_length=100, unique=True, index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    __tablename__ = "tenants"
