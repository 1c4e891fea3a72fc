from .draft_store import DraftStore
from .project_gateway import ProjectGateway

__all__ = [
    "DraftStore",
    "ProjectGateway",
]
