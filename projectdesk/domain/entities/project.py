"""Domain entity — the project record edited in the workspace."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    NEW = "NEU"
    IN_PROGRESS = "IN_BEARBEITUNG"
    REVISION = "REVISION"
    COMPLETED = "FERTIGGESTELLT"
    ARCHIVED = "ARCHIV"
    PROBLEM = "PROBLEM"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    ProjectStatus.NEW: "Neu",
    ProjectStatus.IN_PROGRESS: "In Bearbeitung",
    ProjectStatus.REVISION: "Revision",
    ProjectStatus.COMPLETED: "Fertiggestellt",
    ProjectStatus.ARCHIVED: "Archiv",
    ProjectStatus.PROBLEM: "Problem",
}


class QcStatus(str, Enum):
    """Quality-control review status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# Slots the workspace edits and autosaves, in PATCH field order.
EDITABLE_FIELDS: tuple[str, ...] = (
    "status",
    "credits",
    "content",
    "output_text",
    "deadline",
    "additional_email",
    "project_street",
    "project_zip_code",
    "project_city",
    "project_country",
)


@dataclass
class Project:
    """A customer order being worked on.

    ``payload`` is an open JSON map shared with other producers; only the
    keys in ``project_payload.OWNED_KEYS`` are ever rewritten by this client.
    """

    id: str
    customer_id: str
    product_code: str
    product_name: str = ""
    project_number: str | None = None
    status: ProjectStatus = ProjectStatus.NEW
    qc_status: QcStatus | None = None
    credits: str = ""
    content: str = ""
    customer_notes: str = ""
    internal_notes: str = ""
    deadline: date | None = None
    additional_email: str = ""
    project_street: str = ""
    project_zip_code: str = ""
    project_city: str = ""
    project_country: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def display_name(self, when: date | None = None) -> str:
        return format_project_name(
            self.product_name,
            street=self.project_street,
            zip_code=self.project_zip_code,
            city=self.project_city,
            when=when,
        )


def format_project_name(
    product_name: str,
    *,
    street: str | None = None,
    zip_code: str | None = None,
    city: str | None = None,
    when: date | None = None,
) -> str:
    """Build the display name ``"<product> [<street> <zip> <city>, MM.YYYY]"``.

    Empty address parts are left out; the date part is always present.
    """
    when = when or datetime.now(timezone.utc).date()

    address_parts: list[str] = []
    if street and street.strip():
        address_parts.append(street.strip())
    city_part = " ".join(p.strip() for p in (zip_code, city) if p and p.strip())
    if city_part:
        address_parts.append(city_part)

    suffix = ", ".join(p for p in (" ".join(address_parts), f"{when.month:02d}.{when.year}") if p)
    base_name = product_name.strip()
    return f"{base_name} [{suffix}]" if suffix else base_name
