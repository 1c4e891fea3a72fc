"""Draft Overlay — local fallback persistence for unsaved field edits."""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from projectdesk.application.interfaces import DraftStore
from projectdesk.application.schemas.project import ProjectFieldValues

logger = logging.getLogger(__name__)

_KEY_PREFIX = "project-draft:"


class DraftOverlay:
    """Keeps one partial field map per record id in a local key-value store.

    The overlay is a convenience, not the source of truth: storage failures
    are logged and never raised to the caller.
    """

    def __init__(self, store: DraftStore):
        self._store = store

    @staticmethod
    def _key(record_id: str) -> str:
        return f"{_KEY_PREFIX}{record_id}"

    def write(self, record_id: str, field_name: str, value: Any) -> None:
        """Merge one field into the record's draft."""
        try:
            draft = self._load_raw(record_id)
            draft.update(
                ProjectFieldValues.model_validate({field_name: value}).model_dump(
                    mode="json", include={field_name}
                )
            )
            self._store.set(self._key(record_id), json.dumps(draft))
        except Exception as exc:
            logger.warning("Could not write draft for %s.%s: %s", record_id, field_name, exc)

    def read(self, record_id: str) -> dict[str, Any] | None:
        """Return the typed draft fields for ``record_id``, or ``None``."""
        try:
            raw = self._load_raw(record_id)
        except Exception as exc:
            logger.warning("Could not read draft for %s: %s", record_id, exc)
            return None
        if not raw:
            return None
        return self._coerce(record_id, raw)

    @contextmanager
    def read_and_clear(self, record_id: str) -> Iterator[dict[str, Any] | None]:
        """Yield the draft; remove it only once the ``with`` block succeeds.

        If the block raises, the stored draft is left in place so it can be
        recovered on the next load.
        """
        draft = self.read(record_id)
        yield draft
        if draft is not None:
            self.discard(record_id)

    def discard(self, record_id: str) -> None:
        try:
            self._store.delete(self._key(record_id))
        except Exception as exc:
            logger.warning("Could not discard draft for %s: %s", record_id, exc)

    def _load_raw(self, record_id: str) -> dict[str, Any]:
        stored = self._store.get(self._key(record_id))
        if not stored:
            return {}
        try:
            data = json.loads(stored)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt draft for %s", record_id)
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _coerce(record_id: str, raw: dict[str, Any]) -> dict[str, Any]:
        """Keep the draft fields that still validate; drop the rest per field."""
        draft: dict[str, Any] = {}
        for name, value in raw.items():
            if name not in ProjectFieldValues.model_fields:
                logger.debug("Ignoring unknown draft field %s for %s", name, record_id)
                continue
            try:
                parsed = ProjectFieldValues.model_validate({name: value})
            except ValueError as exc:
                logger.warning("Dropping invalid draft field %s for %s: %s", name, record_id, exc)
                continue
            draft[name] = getattr(parsed, name)
        return draft
