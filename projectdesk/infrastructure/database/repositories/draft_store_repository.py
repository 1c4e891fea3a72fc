"""Concrete DraftStore implementation backed by SQLAlchemy."""

from sqlalchemy.orm import Session, sessionmaker

from projectdesk.application.interfaces import DraftStore
from projectdesk.infrastructure.database.models import DraftEntryModel


class SQLAlchemyDraftStore(DraftStore):
    """Implements the DraftStore port with one short transaction per call."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        with self._session_factory() as session:
            model = session.get(DraftEntryModel, key)
            return model.data if model else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory.begin() as session:
            model = session.get(DraftEntryModel, key)
            if model is None:
                session.add(DraftEntryModel(key=key, data=value))
            else:
                model.data = value

    def delete(self, key: str) -> None:
        with self._session_factory.begin() as session:
            model = session.get(DraftEntryModel, key)
            if model is not None:
                session.delete(model)
