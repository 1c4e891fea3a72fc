"""Abstract gateway interface (port) for the remote project backend."""

from abc import ABC, abstractmethod

from projectdesk.application.schemas.project import ProjectUpdate
from projectdesk.domain.entities import Customer, Project, ProjectFile


class ProjectGateway(ABC):
    """Port for the backend REST API — implemented in the infrastructure layer.

    Implementations raise ``EntityNotFoundError`` for 404 responses and
    ``ApiError`` for every other failure, including timeouts.
    """

    @abstractmethod
    async def get_project(self, project_id: str) -> Project:
        """Fetch a single project."""
        ...

    @abstractmethod
    async def update_project(self, project_id: str, update: ProjectUpdate) -> Project:
        """Apply a partial update and return the stored project."""
        ...

    @abstractmethod
    async def get_customer(self, customer_id: str) -> Customer:
        """Fetch the customer a project belongs to."""
        ...

    @abstractmethod
    async def list_project_files(self, project_id: str) -> list[ProjectFile]:
        """List the files attached to a project, with their source tags."""
        ...
