"""Record Store — in-memory slots for the project open in the workspace."""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from projectdesk.application.schemas.project import ProjectFieldValues
from projectdesk.domain.entities import (
    EDITABLE_FIELDS,
    Customer,
    Note,
    NoteList,
    Project,
    QcStatus,
)
from projectdesk.domain.entities.project_payload import (
    compose_payload,
    extract_notes,
    extract_output_text,
)
from projectdesk.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

FieldListener = Callable[[str, Any], None]


def coerce_fields(values: dict[str, Any]) -> dict[str, Any]:
    """Validate a partial field map and return it with typed values.

    Raises ``ValidationError`` for unknown fields or values of the wrong type.
    """
    unknown = set(values) - set(EDITABLE_FIELDS)
    if unknown:
        name = sorted(unknown)[0]
        raise ValidationError(name, "not an editable field")
    try:
        parsed = ProjectFieldValues.model_validate(values)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "record"
        raise ValidationError(field, error["msg"]) from exc
    return {name: getattr(parsed, name) for name in values}


class RecordStore:
    """Single source of truth for the open record's editable fields.

    Each editable field is an independent slot; ``set_field`` notifies
    subscribers with just the changed slot. The two note lists and the
    output text are lifted out of ``payload`` into their own slots and
    folded back in by ``build_payload``.
    """

    def __init__(self) -> None:
        self._project: Project | None = None
        self._customer: Customer | None = None
        self._fields: dict[str, Any] = {}
        self._notes: dict[NoteList, list[Note]] = {note_list: [] for note_list in NoteList}
        self._qc_status: QcStatus | None = None
        self._payload_base: dict[str, Any] = {}
        self._listeners: list[FieldListener] = []

    # ── Loading ─────────────────────────────────────────────────────

    @property
    def is_loaded(self) -> bool:
        return self._project is not None

    @property
    def project(self) -> Project | None:
        """The record as last fetched or saved; slots may hold newer values."""
        return self._project

    @property
    def customer(self) -> Customer | None:
        return self._customer

    def is_current(self, record_id: str) -> bool:
        """Whether ``record_id`` is the record loaded right now."""
        return self._project is not None and self._project.id == record_id

    @property
    def record_id(self) -> str:
        if self._project is None:
            raise RuntimeError("RecordStore has no record loaded")
        return self._project.id

    def populate(
        self,
        project: Project,
        customer: Customer,
        draft: dict[str, Any] | None = None,
    ) -> None:
        """Fill every slot from ``project``, then overlay ``draft`` per field."""
        fields = {name: getattr(project, name, None) for name in EDITABLE_FIELDS}
        fields["output_text"] = extract_output_text(project.payload)
        if draft:
            fields.update(draft)

        self._project = project
        self._customer = customer
        self._fields = fields
        self._notes = extract_notes(project.payload)
        self._qc_status = project.qc_status
        self._payload_base = dict(project.payload)
        logger.debug(
            "Loaded project %s (%d draft field(s) applied)",
            project.id,
            len(draft or {}),
        )

    def clear(self) -> None:
        self._project = None
        self._customer = None
        self._fields = {}
        self._notes = {note_list: [] for note_list in NoteList}
        self._qc_status = None
        self._payload_base = {}

    # ── Field slots ─────────────────────────────────────────────────

    def subscribe(self, listener: FieldListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def get_field(self, name: str) -> Any:
        if name not in EDITABLE_FIELDS:
            raise ValidationError(name, "not an editable field")
        return self._fields.get(name)

    def set_field(self, name: str, value: Any) -> Any:
        """Overwrite one slot and notify listeners. Returns the coerced value."""
        self._require_loaded()
        coerced = coerce_fields({name: value})[name]
        self._fields[name] = coerced
        for listener in list(self._listeners):
            listener(name, coerced)
        return coerced

    def apply(self, changes: dict[str, Any]) -> None:
        """Write several slots at once without notifying listeners."""
        self._require_loaded()
        self._fields.update(coerce_fields(changes))

    @property
    def qc_status(self) -> QcStatus | None:
        return self._qc_status

    @qc_status.setter
    def qc_status(self, value: QcStatus | None) -> None:
        self._qc_status = value

    def snapshot(self) -> dict[str, Any]:
        """Copy of every tracked slot."""
        return dict(self._fields)

    # ── Notes & payload ─────────────────────────────────────────────

    def get_notes(self, note_list: NoteList) -> list[Note]:
        return list(self._notes[note_list])

    def set_notes(self, note_list: NoteList, notes: list[Note]) -> None:
        self._notes[note_list] = list(notes)

    def build_payload(self) -> dict[str, Any]:
        """Payload to send: last known server map with the owned keys replaced."""
        return compose_payload(
            self._payload_base,
            output_text=self._fields.get("output_text") or "",
            notes=self._notes,
        )

    def rebase_payload(self, server_payload: dict[str, Any]) -> None:
        """Adopt the server's payload as the base for later writes."""
        self._payload_base = dict(server_payload)

    def mark_saved(self, project: Project) -> None:
        """Record the project returned by a confirmed write."""
        self._project = project
        self.rebase_payload(project.payload)

    def _require_loaded(self) -> None:
        if self._project is None:
            raise RuntimeError("RecordStore has no record loaded")
