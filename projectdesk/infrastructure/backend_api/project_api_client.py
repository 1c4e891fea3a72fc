"""Backend API client — implements the ProjectGateway interface.

Talks to the CRM backend REST API with httpx. Every request carries the
bearer token when one is configured; error bodies follow the
``{"detail": "..."}`` convention.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from projectdesk.application.interfaces import ProjectGateway
from projectdesk.application.schemas.project import (
    CustomerResponse,
    ProjectFileResponse,
    ProjectResponse,
    ProjectUpdate,
)
from projectdesk.domain.entities import Customer, Project, ProjectFile
from projectdesk.domain.exceptions import ApiError, EntityNotFoundError

logger = logging.getLogger(__name__)


class ProjectApiClient(ProjectGateway):
    """Infrastructure adapter — connects to the backend REST API.

    Pass a shared ``httpx.AsyncClient`` to reuse connections; otherwise a
    client is created and closed per request.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._http_client = http_client

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        entity_type: str,
        entity_id: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            logger.debug("%s %s", method, url)
            response = await client.request(
                method, url, headers=self._get_headers(), json=json
            )
        except httpx.TimeoutException as exc:
            raise ApiError(0, f"Request to {url} timed out") from exc
        except httpx.HTTPError as exc:
            raise ApiError(0, f"Backend not reachable at {self._base_url}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code == 404:
            raise EntityNotFoundError(entity_type, entity_id)
        if response.is_error:
            self._raise_api_error(response)
        if response.status_code == 204:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, f"Invalid JSON from {url}") from exc

    @staticmethod
    def _parse(schema: type[BaseModel], data: Any) -> Any:
        try:
            return schema.model_validate(data)
        except PydanticValidationError as exc:
            raise ApiError(200, f"Unexpected {schema.__name__} shape: {exc.error_count()} error(s)") from exc

    @staticmethod
    def _raise_api_error(response: httpx.Response) -> None:
        """Raise ApiError from a non-2xx httpx Response."""
        message = f"HTTP {response.status_code}: {response.reason_phrase}"
        try:
            detail = response.json().get("detail")
        except Exception:
            detail = None
        if isinstance(detail, str) and detail:
            message = detail
        elif detail:
            message = str(detail)

        raise ApiError(status_code=response.status_code, message=message)

    # ── ProjectGateway ──────────────────────────────────────────────

    async def get_project(self, project_id: str) -> Project:
        data = await self._request(
            "GET", f"/projects/{project_id}", entity_type="Project", entity_id=project_id
        )
        return self._parse(ProjectResponse, data).to_entity()

    async def update_project(self, project_id: str, update: ProjectUpdate) -> Project:
        data = await self._request(
            "PATCH",
            f"/projects/{project_id}",
            entity_type="Project",
            entity_id=project_id,
            json=update.to_request_body(),
        )
        return self._parse(ProjectResponse, data).to_entity()

    async def get_customer(self, customer_id: str) -> Customer:
        data = await self._request(
            "GET", f"/customers/{customer_id}", entity_type="Customer", entity_id=customer_id
        )
        return self._parse(CustomerResponse, data).to_entity()

    async def list_project_files(self, project_id: str) -> list[ProjectFile]:
        data = await self._request(
            "GET", f"/files/project/{project_id}", entity_type="Project", entity_id=project_id
        )
        return [self._parse(ProjectFileResponse, item).to_entity() for item in data or []]
