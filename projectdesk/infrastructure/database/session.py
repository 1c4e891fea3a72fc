"""SQLAlchemy engine and session configuration for the local draft store."""

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from projectdesk.infrastructure.database.base import Base


def _ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if url.startswith("sqlite:///") and ":memory:" not in url:
        Path(url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)


def create_draft_engine(url: str, *, echo: bool = False) -> Engine:
    """Build an engine for ``url`` and create the draft tables if missing."""
    _ensure_sqlite_directory(url)
    engine = create_engine(url, echo=echo, future=True)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, expire_on_commit=False)
