"""Autosave Scheduler — debounced background persistence of field edits."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from projectdesk.application.interfaces import ProjectGateway
from projectdesk.application.schemas.project import ProjectUpdate
from projectdesk.application.services.draft_overlay import DraftOverlay
from projectdesk.application.services.record_store import RecordStore
from projectdesk.domain.entities import Project
from projectdesk.domain.exceptions import ApiError, EntityNotFoundError, SaveError

logger = logging.getLogger(__name__)


class SaveState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    SAVING = "saving"


class AutosaveScheduler:
    """Saves the open record after a quiet period without edits.

    Every change restarts the timer, so a burst of edits produces a single
    request. Manual and automatic saves share one FIFO lock: at most one
    save is in flight, and whichever comes second waits for the first.
    Edits made while a request is in flight arm a fresh cycle once it settles.
    Note writes go through ``save_payload`` and share the same lock, so two
    writers never send competing copies of ``payload``.

    Automatic saves never raise; their failures are only logged. ``save_now``
    raises ``SaveError``.
    """

    def __init__(
        self,
        store: RecordStore,
        gateway: ProjectGateway,
        drafts: DraftOverlay,
        *,
        quiet_period: float = 2.0,
    ):
        self._store = store
        self._gateway = gateway
        self._drafts = drafts
        self._quiet_period = quiet_period
        self._lock = asyncio.Lock()
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._saving = False
        self._changed_during_save = False
        self.last_saved_at: datetime | None = None

    @property
    def state(self) -> SaveState:
        if self._saving:
            return SaveState.SAVING
        if self._timer is not None:
            return SaveState.ARMED
        return SaveState.IDLE

    @property
    def quiet_period(self) -> float:
        return self._quiet_period

    def notify_change(self) -> None:
        """Called for every tracked mutation."""
        if self._saving:
            self._changed_during_save = True
            return
        self._arm()

    async def save_now(
        self,
        *,
        before: Callable[[], None] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> Project:
        """Explicit save. Raises ``SaveError`` on failure.

        ``before`` runs once the save lock is held, right before the snapshot,
        so its mutation cannot be picked up by a queued autosave first.
        ``extra`` adds fields to the PATCH body that are not tracked slots.
        """
        self._cancel_timer()
        return await self._save(before=before, extra=extra)

    async def save_payload(
        self,
        *,
        apply: Callable[[], None],
        revert: Callable[[], None],
    ) -> Project:
        """Write only ``payload``, under the same lock as full-record saves.

        ``apply`` runs once the lock is held and ``revert`` runs, still under
        the lock, when the request fails. No other save can snapshot the
        record between the two. Raises ``SaveError``.
        """
        async with self._lock:
            record_id = self._store.record_id
            apply()
            update = ProjectUpdate(payload=self._store.build_payload())
            try:
                saved = await self._gateway.update_project(record_id, update)
            except ApiError as exc:
                revert()
                logger.warning("Saving payload for project %s failed: %s", record_id, exc.message)
                raise SaveError("Project", record_id, exc) from exc
            except EntityNotFoundError as exc:
                revert()
                raise SaveError("Project", record_id, ApiError(404, str(exc))) from exc

            if self._store.is_current(saved.id):
                self._store.rebase_payload(saved.payload)
            return saved

    async def flush(self) -> None:
        """Run an armed save immediately and wait until no write holds the lock."""
        while True:
            async with self._lock:
                pass
            if self._timer is None and not self._tasks:
                return
            if self._timer is not None:
                self._cancel_timer()
                await self._autosave()
            if self._tasks:
                await asyncio.gather(*self._tasks)

    def close(self) -> None:
        """Stop the timer. An in-flight request is left to finish on its own."""
        self._cancel_timer()

    # ── Internals ───────────────────────────────────────────────────

    def _arm(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._quiet_period, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        task = asyncio.create_task(self._autosave())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _autosave(self) -> None:
        try:
            await self._save()
        except SaveError as exc:
            logger.warning("Autosave failed for project %s: %s", exc.entity_id, exc.cause.message)
        except Exception:
            logger.exception("Autosave crashed")

    async def _save(
        self,
        *,
        before: Callable[[], None] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> Project:
        async with self._lock:
            if before is not None:
                before()
            record_id = self._store.record_id
            update = self._build_update(extra)

            self._saving = True
            self._changed_during_save = False
            try:
                try:
                    saved = await self._gateway.update_project(record_id, update)
                except ApiError as exc:
                    raise SaveError("Project", record_id, exc) from exc
                except EntityNotFoundError as exc:
                    raise SaveError("Project", record_id, ApiError(404, str(exc))) from exc

                if self._store.is_current(saved.id):
                    self._store.mark_saved(saved)
                self.last_saved_at = datetime.now(timezone.utc)
                if not self._changed_during_save:
                    self._drafts.discard(record_id)
                logger.info("Saved project %s", record_id)
                return saved
            finally:
                self._saving = False
                if self._changed_during_save:
                    self._changed_during_save = False
                    self._arm()

    def _build_update(self, extra: dict[str, Any] | None) -> ProjectUpdate:
        values = self._store.snapshot()
        values.pop("output_text", None)
        values["payload"] = self._store.build_payload()
        if extra:
            values.update(extra)
        return ProjectUpdate(**values)
