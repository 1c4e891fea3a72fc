from .project import (
    CustomerResponse,
    ProjectFieldValues,
    ProjectFileResponse,
    ProjectResponse,
    ProjectUpdate,
)

__all__ = [
    "CustomerResponse",
    "ProjectFieldValues",
    "ProjectFileResponse",
    "ProjectResponse",
    "ProjectUpdate",
]
