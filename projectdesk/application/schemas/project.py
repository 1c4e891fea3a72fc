"""Pydantic DTOs (Data Transfer Objects) for the project detail workspace."""

from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from projectdesk.domain.entities import (
    Customer,
    Project,
    ProjectFile,
    ProjectStatus,
    QcStatus,
)

_TEXT_FIELDS = (
    "credits",
    "content",
    "output_text",
    "additional_email",
    "project_street",
    "project_zip_code",
    "project_city",
    "project_country",
)


def _text_or_empty(value: Any) -> Any:
    """Backend and drafts use null for blank text; numbers arrive for credits."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ProjectFieldValues(BaseModel):
    """Partial map of the editable slots — used for coercion and draft storage.

    Only explicitly set fields are meaningful; dump with ``exclude_unset=True``.
    """

    status: ProjectStatus | None = None
    credits: str | None = None
    content: str | None = None
    output_text: str | None = None
    deadline: date | None = None
    additional_email: str | None = Field(None, max_length=255)
    project_street: str | None = Field(None, max_length=255)
    project_zip_code: str | None = Field(None, max_length=20)
    project_city: str | None = Field(None, max_length=255)
    project_country: str | None = Field(None, max_length=100)

    model_config = {"extra": "ignore"}

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _normalise_text(cls, value: Any) -> Any:
        return _text_or_empty(value)

    @field_validator("status")
    @classmethod
    def _status_required(cls, value: ProjectStatus | None) -> ProjectStatus:
        if value is None:
            raise ValueError("status cannot be empty")
        return value


class ProjectUpdate(BaseModel):
    """PATCH body — every field optional, omitted fields stay unchanged server-side."""

    status: ProjectStatus | None = None
    qc_status: QcStatus | None = None
    credits: str | None = None
    content: str | None = None
    customer_notes: str | None = None
    internal_notes: str | None = None
    deadline: date | None = None
    additional_email: str | None = None
    project_street: str | None = None
    project_zip_code: str | None = None
    project_city: str | None = None
    project_country: str | None = None
    payload: dict[str, Any] | None = None

    def to_request_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ProjectResponse(BaseModel):
    """Project as returned by ``GET /projects/{id}``."""

    id: str
    customer_id: str
    product_code: str
    product_name: str = ""
    project_number: str | None = None
    status: ProjectStatus = ProjectStatus.NEW
    qc_status: QcStatus | None = None
    credits: str | None = None
    content: str | None = None
    customer_notes: str | None = None
    internal_notes: str | None = None
    deadline: date | None = None
    additional_email: str | None = None
    project_street: str | None = None
    project_zip_code: str | None = None
    project_city: str | None = None
    project_country: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"extra": "ignore", "from_attributes": True}

    @field_validator("credits", mode="before")
    @classmethod
    def _credits_as_text(cls, value: Any) -> Any:
        if value is None:
            return None
        return _text_or_empty(value)

    @field_validator("payload", mode="before")
    @classmethod
    def _payload_default(cls, value: Any) -> Any:
        return value if value is not None else {}

    def to_entity(self) -> Project:
        now = datetime.now(timezone.utc)
        return Project(
            id=self.id,
            customer_id=self.customer_id,
            product_code=self.product_code,
            product_name=self.product_name,
            project_number=self.project_number,
            status=self.status,
            qc_status=self.qc_status,
            credits=self.credits or "",
            content=self.content or "",
            customer_notes=self.customer_notes or "",
            internal_notes=self.internal_notes or "",
            deadline=self.deadline,
            additional_email=self.additional_email or "",
            project_street=self.project_street or "",
            project_zip_code=self.project_zip_code or "",
            project_city=self.project_city or "",
            project_country=self.project_country or "",
            payload=dict(self.payload),
            created_at=self.created_at or now,
            updated_at=self.updated_at or now,
        )


class CustomerResponse(BaseModel):
    """Customer as returned by ``GET /customers/{id}``."""

    id: str
    name: str
    email: str = ""
    company_name: str | None = None
    total_revenue: float = 0.0
    order_count: int = 0

    model_config = {"extra": "ignore", "from_attributes": True}

    def to_entity(self) -> Customer:
        return Customer(
            id=self.id,
            name=self.name,
            email=self.email,
            company_name=self.company_name,
            total_revenue=self.total_revenue,
            order_count=self.order_count,
        )


class ProjectFileResponse(BaseModel):
    """One entry of ``GET /files/project/{id}``."""

    file_id: str
    filename: str
    size: int = 0
    uploaded_at: datetime | None = None
    source: str | None = None

    model_config = {"extra": "ignore", "from_attributes": True}

    def to_entity(self) -> ProjectFile:
        return ProjectFile(
            file_id=self.file_id,
            filename=self.filename,
            size=self.size,
            uploaded_at=self.uploaded_at,
            source=self.source,
        )
