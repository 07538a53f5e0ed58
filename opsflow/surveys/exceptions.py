"""Exceptions spécifiques au module Surveys."""
from opsflow.core.exceptions import InvalidStateError, NotFoundError


class SurveyNotFoundException(NotFoundError):
    def __init__(self, survey_id: int):
        super().__init__("Survey not found")
        self.survey_id = survey_id


class SurveyQuoteNotAcceptedException(InvalidStateError):
    """Le devis lié n'est pas au statut 'accepted'."""
    def __init__(self, current_status: str):
        super().__init__(
            "Cannot schedule a survey for a quote that is not in 'accepted' status",
            current_status=current_status,
        )


class SurveyNotCompletableException(InvalidStateError):
    def __init__(self, current_status: str):
        super().__init__("Only scheduled or in-progress surveys can be completed", current_status=current_status)
