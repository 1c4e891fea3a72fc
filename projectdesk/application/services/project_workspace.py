"""Project Workspace — view-model for one open project.

Wires the record store, draft overlay, autosave scheduler, status guard
and notes editor together. A UI layer talks only to this class.

Usage:
    workspace = ProjectWorkspace(gateway, DraftOverlay(store))
    await workspace.load(project_id)
    workspace.set_field("content", "…")     # autosaved after the quiet period
    await workspace.add_note("internal", "Called the customer")
    await workspace.close()
"""

import logging
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from projectdesk.application.interfaces import ProjectGateway
from projectdesk.application.services.autosave_scheduler import AutosaveScheduler, SaveState
from projectdesk.application.services.draft_overlay import DraftOverlay
from projectdesk.application.services.notes_editor import NotesEditor
from projectdesk.application.services.record_store import RecordStore
from projectdesk.application.services.status_transition_guard import (
    GuardState,
    StatusTransitionGuard,
)
from projectdesk.domain.entities import (
    Customer,
    Note,
    NoteList,
    Project,
    ProjectStatus,
    format_project_name,
)
from projectdesk.domain.exceptions import (
    ApiError,
    EntityNotFoundError,
    FetchError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Credits are a fraction of the customer's monthly revenue.
_CREDIT_REVENUE_DIVISOR = Decimal(30)


def _is_well_formed_id(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (TypeError, ValueError, AttributeError):
        return False
    return True


class ProjectWorkspace:
    """Edit session for a single project record."""

    def __init__(
        self,
        gateway: ProjectGateway,
        drafts: DraftOverlay,
        *,
        quiet_period: float = 2.0,
        output_source: str = "output",
    ):
        self._gateway = gateway
        self._drafts = drafts
        self.store = RecordStore()
        self.scheduler = AutosaveScheduler(
            self.store, gateway, drafts, quiet_period=quiet_period
        )
        self.status_guard = StatusTransitionGuard(
            self.store, gateway, self.scheduler, output_source=output_source
        )
        self.notes_editor = NotesEditor(self.store, self.scheduler)
        self._unsubscribe = self.store.subscribe(self._on_field_changed)

    # ── Loading ─────────────────────────────────────────────────────

    @property
    def is_loaded(self) -> bool:
        return self.store.is_loaded

    @property
    def project(self) -> Project | None:
        return self.store.project

    @property
    def customer(self) -> Customer | None:
        return self.store.customer

    async def load(self, project_id: str) -> Project:
        """Fetch the project and its customer, then merge any local draft.

        Raises ``EntityNotFoundError`` for a malformed id (before any request)
        or a missing project, and ``FetchError`` when the backend fails.
        The workspace stays unloaded on error.

        Pending and in-flight writes for the previously open record finish
        before its slots are cleared. The draft stays stored until a save
        confirms the merged values.
        """
        if not _is_well_formed_id(project_id):
            raise EntityNotFoundError("Project", project_id)

        await self.scheduler.flush()
        self.scheduler.close()
        self.status_guard.cancel()
        self.store.clear()

        try:
            project = await self._gateway.get_project(project_id)
        except ApiError as exc:
            raise FetchError("Project", project_id, exc) from exc
        try:
            customer = await self._gateway.get_customer(project.customer_id)
        except (ApiError, EntityNotFoundError) as exc:
            cause = exc if isinstance(exc, ApiError) else ApiError(404, str(exc))
            raise FetchError("Customer", project.customer_id, cause) from exc

        draft = self._drafts.read(project_id)
        self.store.populate(project, customer, draft)

        if draft:
            logger.info("Restored %d unsaved field(s) for project %s", len(draft), project_id)
            self.scheduler.notify_change()
        return project

    # ── Fields ──────────────────────────────────────────────────────

    def get_field(self, name: str) -> Any:
        return self.store.get_field(name)

    def set_field(self, name: str, value: Any) -> Any:
        """Edit one field. Status changes must go through ``request_status``."""
        if name == "status":
            raise ValidationError("status", "use request_status to change the status")
        return self.store.set_field(name, value)

    def _on_field_changed(self, name: str, value: Any) -> None:
        self._drafts.write(self.store.record_id, name, value)
        self.scheduler.notify_change()

    async def save(self) -> Project:
        """Manual save. Raises ``SaveError``; field values are kept as-is."""
        return await self.scheduler.save_now()

    @property
    def save_state(self) -> SaveState:
        return self.scheduler.state

    # ── Status ──────────────────────────────────────────────────────

    async def request_status(self, status: ProjectStatus | str) -> GuardState:
        return await self.status_guard.request(status)

    def set_checklist_confirmed(self, confirmed: bool) -> None:
        self.status_guard.set_checklist_confirmed(confirmed)

    async def confirm_status(self) -> Project:
        return await self.status_guard.confirm()

    def cancel_status(self) -> None:
        self.status_guard.cancel()

    # ── Notes ───────────────────────────────────────────────────────

    def notes(self, note_list: NoteList | str) -> list[Note]:
        return self.notes_editor.notes(note_list)

    async def add_note(self, note_list: NoteList | str, text: str) -> Note:
        return await self.notes_editor.add(note_list, text)

    async def remove_note(self, note_list: NoteList | str, note_id: str) -> None:
        await self.notes_editor.remove(note_list, note_id)

    # ── Helpers ─────────────────────────────────────────────────────

    def calculate_credits(self, factor: str | float) -> str:
        """Set credits to ``(customer revenue / 30) * factor``, two decimals."""
        customer = self.store.customer
        if customer is None:
            raise ValidationError("credits", "no customer loaded")
        try:
            revenue = Decimal(str(customer.total_revenue))
            multiplier = Decimal(str(factor).strip().replace(",", "."))
        except InvalidOperation as exc:
            raise ValidationError("credit_factor", f"not a number: {factor!r}") from exc
        if not revenue.is_finite() or not multiplier.is_finite():
            raise ValidationError("credit_factor", f"not a number: {factor!r}")

        credits = (revenue / _CREDIT_REVENUE_DIVISOR * multiplier).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        return self.set_field("credits", str(credits))

    def display_name(self, when: date | None = None) -> str:
        project = self.store.project
        if project is None:
            return ""
        return format_project_name(
            project.product_name,
            street=self.store.get_field("project_street"),
            zip_code=self.store.get_field("project_zip_code"),
            city=self.store.get_field("project_city"),
            when=when,
        )

    async def close(self) -> None:
        """Stop observing the record. In-flight saves finish on their own;
        anything not yet saved stays in the draft overlay."""
        self.scheduler.close()
        self.status_guard.cancel()
        self._unsubscribe()
