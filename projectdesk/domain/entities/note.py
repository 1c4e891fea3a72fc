"""Domain entity — free-text note stored inside a project's payload."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class NoteList(str, Enum):
    """The two independent note collections of a project."""

    CUSTOMER = "customer"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Note:
    """A single note. Ids and timestamps are generated on the client."""

    text: str
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
