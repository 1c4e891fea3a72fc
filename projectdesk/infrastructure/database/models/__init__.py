from .draft_entry import DraftEntryModel

__all__ = [
    "DraftEntryModel",
]
