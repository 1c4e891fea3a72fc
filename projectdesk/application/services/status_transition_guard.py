"""Status Transition Guard — gates marking a project as completed."""

import logging
from dataclasses import dataclass
from enum import Enum

from projectdesk.application.interfaces import ProjectGateway
from projectdesk.application.services.autosave_scheduler import AutosaveScheduler
from projectdesk.application.services.record_store import RecordStore
from projectdesk.domain.entities import Project, ProjectStatus, QcStatus
from projectdesk.domain.exceptions import (
    ApiError,
    FetchError,
    PreconditionFailedError,
    SaveError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class GuardState(str, Enum):
    NORMAL = "normal"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


@dataclass
class PendingStatusTransition:
    """Candidate status waiting for the user to tick the checklist."""

    target: ProjectStatus
    checklist_confirmed: bool = False


class StatusTransitionGuard:
    """Applies status changes, holding back the completed status.

    Completing a project moves it into the QC review queue, so it requires
    at least one output file and an explicit confirmation. On confirm the
    status and ``qc_status=PENDING`` are written together in one save.
    """

    def __init__(
        self,
        store: RecordStore,
        gateway: ProjectGateway,
        scheduler: AutosaveScheduler,
        *,
        output_source: str = "output",
    ):
        self._store = store
        self._gateway = gateway
        self._scheduler = scheduler
        self._output_source = output_source
        self._pending: PendingStatusTransition | None = None

    @property
    def state(self) -> GuardState:
        if self._pending is None:
            return GuardState.NORMAL
        return GuardState.AWAITING_CONFIRMATION

    @property
    def pending(self) -> PendingStatusTransition | None:
        return self._pending

    async def request(self, status: ProjectStatus | str) -> GuardState:
        """Ask for a status change.

        Ordinary statuses are written to the store right away. The completed
        status raises ``PreconditionFailedError`` when no output file exists,
        otherwise opens the confirmation step.
        """
        try:
            target = ProjectStatus(status)
        except ValueError as exc:
            raise ValidationError("status", f"unknown status {status!r}") from exc

        if target is not ProjectStatus.COMPLETED:
            self._pending = None
            self._store.set_field("status", target)
            return self.state

        record_id = self._store.record_id
        output_count = await self._count_output_files(record_id)
        if output_count < 1:
            logger.info("Refusing to complete project %s: no output files", record_id)
            raise PreconditionFailedError(
                "mark project as completed",
                "upload at least one output file first",
            )

        self._pending = PendingStatusTransition(target=target)
        return self.state

    def set_checklist_confirmed(self, confirmed: bool) -> None:
        self._require_pending().checklist_confirmed = confirmed

    async def confirm(self) -> Project:
        """Write the pending status together with ``qc_status=PENDING``."""
        pending = self._require_pending()
        if not pending.checklist_confirmed:
            raise ValidationError("checklist_confirmed", "confirm the checklist first")

        previous_status = self._store.get_field("status")
        previous_qc = self._store.qc_status

        def apply() -> None:
            self._store.apply({"status": pending.target})
            self._store.qc_status = QcStatus.PENDING

        try:
            saved = await self._scheduler.save_now(
                before=apply,
                extra={"qc_status": QcStatus.PENDING},
            )
        except SaveError:
            self._store.apply({"status": previous_status})
            self._store.qc_status = previous_qc
            raise

        self._pending = None
        logger.info("Project %s marked as %s", saved.id, pending.target.value)
        return saved

    def cancel(self) -> None:
        self._pending = None

    async def _count_output_files(self, record_id: str) -> int:
        try:
            files = await self._gateway.list_project_files(record_id)
        except ApiError as exc:
            raise FetchError("project files", record_id, exc) from exc
        return sum(1 for f in files if f.has_source(self._output_source))

    def _require_pending(self) -> PendingStatusTransition:
        if self._pending is None:
            raise ValidationError("status", "no status change is awaiting confirmation")
        return self._pending
