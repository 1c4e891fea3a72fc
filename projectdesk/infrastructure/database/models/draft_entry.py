"""SQLAlchemy ORM model for draft overlay entries."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from projectdesk.infrastructure.database.base import Base


class DraftEntryModel(Base):
    """ORM model — maps to the 'draft_entries' table."""

    __tablename__ = "draft_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<DraftEntryModel(key={self.key}, bytes={len(self.data)})>"
