from .base import Base
from .session import create_draft_engine, create_session_factory
from .models import DraftEntryModel

__all__ = [
    "Base",
    "create_draft_engine",
    "create_session_factory",
    "DraftEntryModel",
]
