"""Schémas d'API du module Installations."""
from datetime import date, datetime, time
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from opsflow.core.dates import normalize_calendar_date, validate_time_window
from opsflow.core.schemas import ApiModel, Page
from opsflow.installations.config import InstallationStatus, INITIAL_INSTALLATION_STATUSES
from opsflow.quotes.schemas import QuoteRead


class InstallationCreate(ApiModel):
    quote_id: Optional[int] = None
    project_id: Optional[int] = None
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    assigned_to: List[int] = Field(default_factory=list)
    status: Optional[InstallationStatus] = None
    notes: Optional[str] = None

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _normalize_scheduled_date(cls, value):
        return normalize_calendar_date(value)

    @field_validator("assigned_to", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("assigned_to")
    @classmethod
    def _dedupe_assignees(cls, value: List[int]) -> List[int]:
        # Doublons supprimés, ordre conservé
        return list(dict.fromkeys(value))

    @field_validator("status")
    @classmethod
    def _initial_status(cls, value: Optional[InstallationStatus]) -> Optional[InstallationStatus]:
        if value is not None and value not in INITIAL_INSTALLATION_STATUSES:
            raise ValueError("A new installation must be 'scheduled' or 'in-progress'")
        return value

    @model_validator(mode="after")
    def _check_time_window(self):
        validate_time_window(self.start_time, self.end_time)
        return self


class InstallationComplete(ApiModel):
    """Clôture de chantier; avec réserves, l'installation passe en 'snagging'."""
    client_signoff: bool = False
    snagging_required: bool = False
    notes: Optional[str] = None


class InstallationRead(ApiModel):
    id: int
    tenant_id: int
    project_id: int
    quote_id: Optional[int] = None
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: str
    assigned_to: List[int] = []
    client_signoff: bool = False
    snagging_required: bool = False
    completed_by: Optional[int] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("assigned_to", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class InstallationScheduled(ApiModel):
    installation: InstallationRead
    quote: Optional[QuoteRead] = None
    warnings: List[str] = Field(default_factory=list)


PaginatedInstallationRead = Page[InstallationRead]
