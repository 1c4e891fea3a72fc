"""Project endpoints of the sandbox API."""

from fastapi import APIRouter, Depends, HTTPException, status

from projectdesk.application.schemas.project import ProjectResponse, ProjectUpdate
from projectdesk.domain.exceptions import EntityNotFoundError
from projectdesk.infrastructure.dependencies import get_sandbox_backend
from projectdesk.infrastructure.sandbox import InMemoryBackend

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    backend: InMemoryBackend = Depends(get_sandbox_backend),
) -> ProjectResponse:
    """Retrieve a single project by ID."""
    try:
        project = backend.get_project(project_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ProjectResponse.model_validate(project, from_attributes=True)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    backend: InMemoryBackend = Depends(get_sandbox_backend),
) -> ProjectResponse:
    """Partially update a project; omitted fields keep their values."""
    try:
        project = backend.update_project(project_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ProjectResponse.model_validate(project, from_attributes=True)
