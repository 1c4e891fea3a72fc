"""File listing endpoint of the sandbox API."""

from fastapi import APIRouter, Depends, HTTPException, status

from projectdesk.application.schemas.project import ProjectFileResponse
from projectdesk.domain.exceptions import EntityNotFoundError
from projectdesk.infrastructure.dependencies import get_sandbox_backend
from projectdesk.infrastructure.sandbox import InMemoryBackend

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/project/{project_id}", response_model=list[ProjectFileResponse])
async def list_project_files(
    project_id: str,
    backend: InMemoryBackend = Depends(get_sandbox_backend),
) -> list[ProjectFileResponse]:
    """List the files attached to a project with their source tags."""
    try:
        files = backend.list_files(project_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [ProjectFileResponse.model_validate(f, from_attributes=True) for f in files]
