"""Abstract key-value store (port) backing the draft overlay."""

from abc import ABC, abstractmethod


class DraftStore(ABC):
    """Synchronous string-keyed store, one entry per record id.

    Values are opaque strings (the overlay stores JSON).
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value or ``None``."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Insert or replace the value for ``key``."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        ...
