from .customer import Customer
from .note import Note, NoteList
from .project import (
    EDITABLE_FIELDS,
    Project,
    ProjectStatus,
    QcStatus,
    format_project_name,
)
from .project_file import ProjectFile

__all__ = [
    "Customer",
    "Note",
    "NoteList",
    "EDITABLE_FIELDS",
    "Project",
    "ProjectStatus",
    "QcStatus",
    "format_project_name",
    "ProjectFile",
]
