"""Exceptions spécifiques au module Projects."""
from opsflow.core.exceptions import NotFoundError


class ProjectNotFoundException(NotFoundError):
    def __init__(self, project_id: int):
        super().__init__("Project not found")
        self.project_id = project_id
