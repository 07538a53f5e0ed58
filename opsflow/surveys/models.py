from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from opsflow.core.dates import utc_now
from opsflow.surveys.config import SurveyStatus


class Survey(SQLModel, table=True):
    """Visite technique planifiée sur un projet, éventuellement liée à un devis."""
    __tablename__ = "surveys"

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    quote_id: Optional[int] = Field(default=None, foreign_key="quotes.id", index=True)
    scheduled_date: date = Field(index=True)
    start_time: Optional[time] = Field(default=None)
    end_time: Optional[time] = Field(default=None)
    status: str = Field(default=SurveyStatus.SCHEDULED.value, max_length=50, index=True)
    # Un seul technicien par visite
    assigned_to: Optional[int] = Field(default=None)
    completed_by: Optional[int] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    notes: Optional[str] = Field(default=None)
    created_by: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
