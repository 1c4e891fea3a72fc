"""In-memory fakes for the application ports, shared by the unit tests."""

import asyncio
import copy
from datetime import datetime, timezone

from projectdesk.application.interfaces import ProjectGateway
from projectdesk.application.schemas.project import ProjectUpdate
from projectdesk.domain.entities import Customer, Project, ProjectFile, ProjectStatus
from projectdesk.domain.exceptions import ApiError, EntityNotFoundError

PROJECT_ID = "3b8e0c52-91f4-4d1e-8c3a-6a2f7d9e5b10"
CUSTOMER_ID = "7f1c2a9e-4b7d-4a38-9a55-2d0f4f6c1a01"


def make_project(**overrides) -> Project:
    values = dict(
        id=PROJECT_ID,
        customer_id=CUSTOMER_ID,
        product_code="HEIZLAST",
        product_name="Heizlastberechnung",
        status=ProjectStatus.IN_PROGRESS,
        credits="100",
        content="server content",
        project_street="Hauptstraße 12",
        project_zip_code="80331",
        project_city="München",
        payload={},
    )
    values.update(overrides)
    return Project(**values)


def make_customer(**overrides) -> Customer:
    values = dict(id=CUSTOMER_ID, name="Müller", total_revenue=3000.0)
    values.update(overrides)
    return Customer(**values)


class FakeProjectGateway(ProjectGateway):
    """Serves projects by id; records every PATCH body it receives.

    ``fail_updates`` makes the next N updates raise ``ApiError``.
    ``hold_updates`` parks updates until ``release()`` is called.
    ``other_projects`` are served alongside the primary ``project``.
    """

    def __init__(
        self,
        project: Project | None = None,
        customer: Customer | None = None,
        files: list[ProjectFile] | None = None,
        other_projects: list[Project] | None = None,
    ):
        self.project = project or make_project()
        self.projects = {p.id: p for p in [self.project, *(other_projects or [])]}
        self.customer = customer or make_customer()
        self.files = files or []
        self.updates: list[dict] = []
        self.updated_ids: list[str] = []
        self.get_calls = 0
        self.fail_updates = 0
        self.fail_gets = False
        self.in_flight = 0
        self.max_in_flight = 0
        self._gate: asyncio.Event | None = None

    def hold_updates(self) -> None:
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    async def get_project(self, project_id: str) -> Project:
        self.get_calls += 1
        if self.fail_gets:
            raise ApiError(503, "Service unavailable")
        if project_id not in self.projects:
            raise EntityNotFoundError("Project", project_id)
        return copy.deepcopy(self.projects[project_id])

    async def update_project(self, project_id: str, update: ProjectUpdate) -> Project:
        body = update.to_request_body()
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self._gate is not None:
                await self._gate.wait()
            else:
                await asyncio.sleep(0)
            if self.fail_updates > 0:
                self.fail_updates -= 1
                raise ApiError(500, "Internal Server Error")
            project = self.projects[project_id]
            self.updates.append(body)
            self.updated_ids.append(project_id)
            changes = update.model_dump(exclude_unset=True)
            for name, value in changes.items():
                setattr(project, name, copy.deepcopy(value))
            project.updated_at = datetime.now(timezone.utc)
            return copy.deepcopy(project)
        finally:
            self.in_flight -= 1

    async def get_customer(self, customer_id: str) -> Customer:
        if customer_id != self.customer.id:
            raise EntityNotFoundError("Customer", customer_id)
        return copy.deepcopy(self.customer)

    async def list_project_files(self, project_id: str) -> list[ProjectFile]:
        return list(self.files)
