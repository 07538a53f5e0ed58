"""
Configuration spécifique au module Surveys (visites techniques).
"""
from enum import Enum
from typing import FrozenSet


class SurveyStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuts possibles à la création et statuts depuis lesquels on peut clôturer
INITIAL_SURVEY_STATUSES: FrozenSet[SurveyStatus] = frozenset({SurveyStatus.SCHEDULED, SurveyStatus.IN_PROGRESS})
COMPLETABLE_SURVEY_STATUSES: FrozenSet[SurveyStatus] = INITIAL_SURVEY_STATUSES
