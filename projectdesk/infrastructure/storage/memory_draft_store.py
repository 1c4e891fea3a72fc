"""In-process DraftStore — drafts live only as long as the process."""

from projectdesk.application.interfaces import DraftStore


class InMemoryDraftStore(DraftStore):
    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)
