from .draft_store_repository import SQLAlchemyDraftStore

__all__ = [
    "SQLAlchemyDraftStore",
]
