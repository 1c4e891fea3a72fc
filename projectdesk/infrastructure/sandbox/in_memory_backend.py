"""In-memory project/customer/file store behind the sandbox API.

Mirrors the backend's partial-update semantics: only fields present in a
PATCH body change, and ``payload`` is replaced as a whole.
"""

import copy
import logging
import uuid
from datetime import date, datetime, timedelta, timezone

from projectdesk.application.schemas.project import ProjectUpdate
from projectdesk.domain.entities import (
    Customer,
    Project,
    ProjectFile,
    ProjectStatus,
    QcStatus,
)
from projectdesk.domain.exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)


class InMemoryBackend:
    """Holds projects, customers and file listings keyed by id."""

    def __init__(self) -> None:
        self._projects: dict[str, Project] = {}
        self._customers: dict[str, Customer] = {}
        self._files: dict[str, list[ProjectFile]] = {}

    # ── Customers ───────────────────────────────────────────────────

    def add_customer(self, customer: Customer) -> Customer:
        self._customers[customer.id] = customer
        return customer

    def get_customer(self, customer_id: str) -> Customer:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise EntityNotFoundError("Customer", customer_id)
        return copy.deepcopy(customer)

    # ── Projects ────────────────────────────────────────────────────

    def add_project(self, project: Project) -> Project:
        self._projects[project.id] = copy.deepcopy(project)
        self._files.setdefault(project.id, [])
        return project

    def get_project(self, project_id: str) -> Project:
        return copy.deepcopy(self._require_project(project_id))

    def update_project(self, project_id: str, update: ProjectUpdate) -> Project:
        project = self._require_project(project_id)
        changes = update.model_dump(exclude_unset=True)
        for name, value in changes.items():
            if value is None:
                if name == "status":
                    continue
                value = _blank(name)
            setattr(project, name, copy.deepcopy(value))
        project.updated_at = datetime.now(timezone.utc)
        logger.debug("Sandbox updated project %s: %s", project_id, sorted(changes))
        return copy.deepcopy(project)

    # ── Files ───────────────────────────────────────────────────────

    def add_file(self, project_id: str, file: ProjectFile) -> ProjectFile:
        self._require_project(project_id)
        self._files[project_id].append(file)
        return file

    def list_files(self, project_id: str) -> list[ProjectFile]:
        self._require_project(project_id)
        return list(self._files.get(project_id, []))

    def _require_project(self, project_id: str) -> Project:
        project = self._projects.get(project_id)
        if project is None:
            raise EntityNotFoundError("Project", project_id)
        return project


def _blank(name: str) -> object:
    """Value stored when a PATCH sends null for a field."""
    if name == "payload":
        return {}
    if name in {"deadline", "qc_status"}:
        return None
    return ""


# Stable ids so the demo data can be opened by a known URL.
DEMO_CUSTOMER_ID = "7f1c2a9e-4b7d-4a38-9a55-2d0f4f6c1a01"
DEMO_PROJECT_ID = "3b8e0c52-91f4-4d1e-8c3a-6a2f7d9e5b10"
DEMO_PROJECT_WITH_OUTPUT_ID = "c4d2e9a7-1f63-4b8e-a0d5-92e7b3f1c6d4"


def seed_demo_data(backend: InMemoryBackend) -> InMemoryBackend:
    """Populate ``backend`` with a customer and two projects."""
    now = datetime.now(timezone.utc)
    backend.add_customer(
        Customer(
            id=DEMO_CUSTOMER_ID,
            name="Energieberatung Müller",
            email="kontakt@mueller-energie.de",
            company_name="Müller Energieberatung GmbH",
            total_revenue=4500.0,
            order_count=3,
        )
    )
    backend.add_project(
        Project(
            id=DEMO_PROJECT_ID,
            customer_id=DEMO_CUSTOMER_ID,
            product_code="HEIZLAST",
            product_name="Heizlastberechnung",
            status=ProjectStatus.IN_PROGRESS,
            qc_status=None,
            credits="150.00",
            content="Einfamilienhaus, Baujahr 1978",
            deadline=date.today() + timedelta(days=14),
            project_street="Hauptstraße 12",
            project_zip_code="80331",
            project_city="München",
            project_country="DE",
            payload={"source": "order-form"},
            created_at=now,
            updated_at=now,
        )
    )
    backend.add_project(
        Project(
            id=DEMO_PROJECT_WITH_OUTPUT_ID,
            customer_id=DEMO_CUSTOMER_ID,
            product_code="ISFP_ERSTELLUNG",
            product_name="iSFP Erstellung",
            status=ProjectStatus.REVISION,
            qc_status=QcStatus.REJECTED,
            payload={},
            created_at=now,
            updated_at=now,
        )
    )
    backend.add_file(
        DEMO_PROJECT_WITH_OUTPUT_ID,
        ProjectFile(
            file_id=str(uuid.uuid4()),
            filename="isfp_report.pdf",
            size=482_133,
            uploaded_at=now,
            source="output",
        ),
    )
    return backend
