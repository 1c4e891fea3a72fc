from .autosave_scheduler import AutosaveScheduler, SaveState
from .draft_overlay import DraftOverlay
from .notes_editor import NotesEditor
from .project_workspace import ProjectWorkspace
from .record_store import RecordStore
from .status_transition_guard import (
    GuardState,
    PendingStatusTransition,
    StatusTransitionGuard,
)

__all__ = [
    "AutosaveScheduler",
    "SaveState",
    "DraftOverlay",
    "NotesEditor",
    "ProjectWorkspace",
    "RecordStore",
    "GuardState",
    "PendingStatusTransition",
    "StatusTransitionGuard",
]
