from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import SQLModel, Field

from opsflow.core.dates import utc_now
from opsflow.installations.config import InstallationStatus


class Installation(SQLModel, table=True):
    """Chantier planifié sur un projet, éventuellement lié à un devis."""
    __tablename__ = "installations"

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    quote_id: Optional[int] = Field(default=None, foreign_key="quotes.id", index=True)
    scheduled_date: date = Field(index=True)
    start_time: Optional[time] = Field(default=None)
    end_time: Optional[time] = Field(default=None)
    status: str = Field(default=InstallationStatus.SCHEDULED.value, max_length=50, index=True)
    # Équipe de pose: liste d'identifiants utilisateurs
    assigned_to: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    client_signoff: bool = Field(default=False)
    snagging_required: bool = Field(default=False)
    completed_by: Optional[int] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    notes: Optional[str] = Field(default=None)
    created_by: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
