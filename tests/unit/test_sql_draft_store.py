"""Unit tests for the SQLAlchemy-backed draft store."""

import pytest

from projectdesk.application.services import DraftOverlay
from projectdesk.infrastructure.database import create_draft_engine, create_session_factory
from projectdesk.infrastructure.database.repositories import SQLAlchemyDraftStore
from tests.fakes import PROJECT_ID


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'nested' / 'drafts.sqlite3'}"


def _store(url: str) -> SQLAlchemyDraftStore:
    return SQLAlchemyDraftStore(create_session_factory(create_draft_engine(url)))


def test_set_get_overwrite_delete(db_url):
    store = _store(db_url)

    assert store.get("k") is None
    store.set("k", "one")
    store.set("k", "two")
    assert store.get("k") == "two"

    store.delete("k")
    store.delete("k")
    assert store.get("k") is None


def test_drafts_survive_a_new_engine(db_url):
    DraftOverlay(_store(db_url)).write(PROJECT_ID, "content", "before restart")

    restored = DraftOverlay(_store(db_url)).read(PROJECT_ID)

    assert restored == {"content": "before restart"}
