"""Schémas d'API du module Surveys."""
from datetime import date, datetime, time
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from opsflow.core.dates import normalize_calendar_date, validate_time_window
from opsflow.core.schemas import ApiModel, Page
from opsflow.quotes.schemas import QuoteRead
from opsflow.surveys.config import SurveyStatus, INITIAL_SURVEY_STATUSES


class SurveyCreate(ApiModel):
    quote_id: Optional[int] = None
    project_id: Optional[int] = None
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    assigned_to: Optional[int] = None
    status: Optional[SurveyStatus] = None
    notes: Optional[str] = None

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _normalize_scheduled_date(cls, value):
        return normalize_calendar_date(value)

    @field_validator("status")
    @classmethod
    def _initial_status(cls, value: Optional[SurveyStatus]) -> Optional[SurveyStatus]:
        if value is not None and value not in INITIAL_SURVEY_STATUSES:
            raise ValueError("A new survey must be 'scheduled' or 'in-progress'")
        return value

    @model_validator(mode="after")
    def _check_time_window(self):
        validate_time_window(self.start_time, self.end_time)
        return self


class SurveyRead(ApiModel):
    id: int
    tenant_id: int
    project_id: int
    quote_id: Optional[int] = None
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: str
    assigned_to: Optional[int] = None
    completed_by: Optional[int] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class SurveyScheduled(ApiModel):
    """Réponse de planification: la visite, le devis mis à jour et les avertissements."""
    survey: SurveyRead
    quote: Optional[QuoteRead] = None
    warnings: List[str] = Field(default_factory=list)


PaginatedSurveyRead = Page[SurveyRead]
