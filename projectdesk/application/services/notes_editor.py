"""Notes Editor — the customer and internal note lists kept inside ``payload``."""

import logging

from projectdesk.application.services.autosave_scheduler import AutosaveScheduler
from projectdesk.application.services.record_store import RecordStore
from projectdesk.domain.entities import Note, NoteList
from projectdesk.domain.exceptions import EntityNotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _resolve(note_list: NoteList | str) -> NoteList:
    try:
        return NoteList(note_list)
    except ValueError as exc:
        raise ValidationError("note_list", f"unknown note list {note_list!r}") from exc


class NotesEditor:
    """Adds and removes notes with optimistic updates and rollback.

    Each operation is its own read-modify-write of ``payload`` and is not
    debounced. Writes are queued on the scheduler's save lock, behind any
    field save already in flight: a note operation never starts from a
    snapshot another write is still changing, and a field save never sends
    a note that is about to be rolled back.
    """

    def __init__(self, store: RecordStore, scheduler: AutosaveScheduler):
        self._store = store
        self._scheduler = scheduler

    def notes(self, note_list: NoteList | str) -> list[Note]:
        return self._store.get_notes(_resolve(note_list))

    async def add(self, note_list: NoteList | str, text: str) -> Note:
        """Prepend a note and persist it. Blank text raises ``ValidationError``."""
        note_list = _resolve(note_list)
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("text", "note text cannot be empty")

        note = Note(text=text)

        def apply() -> None:
            self._store.set_notes(note_list, [note, *self._store.get_notes(note_list)])

        def revert() -> None:
            self._store.set_notes(
                note_list,
                [n for n in self._store.get_notes(note_list) if n.id != note.id],
            )

        saved = await self._scheduler.save_payload(apply=apply, revert=revert)
        logger.info("Added %s note %s to project %s", note_list.value, note.id, saved.id)
        return note

    async def remove(self, note_list: NoteList | str, note_id: str) -> None:
        """Remove a note and persist; the previous list is restored on failure."""
        note_list = _resolve(note_list)
        previous: list[Note] = []

        def apply() -> None:
            previous[:] = self._store.get_notes(note_list)
            remaining = [n for n in previous if n.id != note_id]
            if len(remaining) == len(previous):
                raise EntityNotFoundError("Note", note_id)
            self._store.set_notes(note_list, remaining)

        def revert() -> None:
            self._store.set_notes(note_list, previous)

        saved = await self._scheduler.save_payload(apply=apply, revert=revert)
        logger.info("Removed %s note %s from project %s", note_list.value, note_id, saved.id)
