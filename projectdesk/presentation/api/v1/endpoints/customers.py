"""Customer endpoints of the sandbox API."""

from fastapi import APIRouter, Depends, HTTPException, status

from projectdesk.application.schemas.project import CustomerResponse
from projectdesk.domain.exceptions import EntityNotFoundError
from projectdesk.infrastructure.dependencies import get_sandbox_backend
from projectdesk.infrastructure.sandbox import InMemoryBackend

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: str,
    backend: InMemoryBackend = Depends(get_sandbox_backend),
) -> CustomerResponse:
    """Retrieve a single customer by ID."""
    try:
        customer = backend.get_customer(customer_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CustomerResponse.model_validate(customer, from_attributes=True)
