"""Helpers for the keys this client owns inside a project's ``payload`` map.

The payload is shared with other producers. Reading extracts the owned keys
into typed values; writing copies the base map and replaces only the owned
keys, so every foreign key round-trips untouched.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from .note import Note, NoteList

logger = logging.getLogger(__name__)

OUTPUT_TEXT_KEY = "output_text"
NOTES_KEY = "crm_notes"
OWNED_KEYS = frozenset({OUTPUT_TEXT_KEY, NOTES_KEY})


def extract_output_text(payload: dict[str, Any]) -> str:
    value = payload.get(OUTPUT_TEXT_KEY)
    return value if isinstance(value, str) else ""


def extract_notes(payload: dict[str, Any]) -> dict[NoteList, list[Note]]:
    """Parse ``payload["crm_notes"]`` into one list per ``NoteList``."""
    raw = payload.get(NOTES_KEY)
    if not isinstance(raw, dict):
        raw = {}
    return {note_list: _parse_notes(raw.get(note_list.value)) for note_list in NoteList}


def _parse_notes(entries: Any) -> list[Note]:
    if not isinstance(entries, list):
        return []
    notes: list[Note] = []
    for entry in entries:
        try:
            notes.append(note_from_json(entry))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed note entry %r: %s", entry, exc)
    return notes


def note_from_json(entry: dict[str, Any]) -> Note:
    text = entry["text"]
    if not isinstance(text, str) or not text.strip():
        raise ValueError("note text must be a non-empty string")
    created_at = datetime.fromisoformat(entry["created_at"])
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Note(id=str(entry["id"]), text=text, created_at=created_at)


def note_to_json(note: Note) -> dict[str, str]:
    return {
        "id": note.id,
        "text": note.text,
        "created_at": note.created_at.isoformat(),
    }


def compose_payload(
    base: dict[str, Any],
    *,
    output_text: str,
    notes: dict[NoteList, list[Note]],
) -> dict[str, Any]:
    """Return a copy of ``base`` with the owned keys replaced."""
    payload = dict(base)
    payload[OUTPUT_TEXT_KEY] = output_text
    existing = payload.get(NOTES_KEY)
    notes_blob = dict(existing) if isinstance(existing, dict) else {}
    for note_list in NoteList:
        notes_blob[note_list.value] = [note_to_json(n) for n in notes.get(note_list, [])]
    payload[NOTES_KEY] = notes_blob
    return payload
