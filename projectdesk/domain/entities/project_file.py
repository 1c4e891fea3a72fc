"""Domain entity — a file attached to a project, as reported by the file listing."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ProjectFile:
    file_id: str
    filename: str
    size: int = 0
    uploaded_at: datetime | None = None
    source: str | None = None

    def has_source(self, source: str) -> bool:
        return (self.source or "").lower() == source.lower()
