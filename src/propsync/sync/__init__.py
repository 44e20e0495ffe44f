from propsync.sync.engine import (
    CANCEL_LABEL,
    DEFINITION_ACCEPT_LABEL,
    USAGES_ACCEPT_LABEL,
    SyncEngine,
)
from propsync.sync.locator import LocatedDefinition, locate_definition
from propsync.sync.model import (
    DocumentSnapshot,
    EditPlan,
    FileEditPlan,
    Insertion,
    PassOutcome,
    Replacement,
    SaveEvent,
    SaveOutcome,
    SyncContext,
    SyncDirection,
    SyncStatus,
    TextEdit,
    apply_text_edits,
)
from propsync.sync.workspace import (
    FileSystemWorkspace,
    Workspace,
    candidate_files,
    discover_files,
    is_test_file,
    open_readable,
)

__all__ = [
    "CANCEL_LABEL",
    "DEFINITION_ACCEPT_LABEL",
    "DocumentSnapshot",
    "EditPlan",
    "FileEditPlan",
    "FileSystemWorkspace",
    "Insertion",
    "LocatedDefinition",
    "PassOutcome",
    "Replacement",
    "SaveEvent",
    "SaveOutcome",
    "SyncContext",
    "SyncDirection",
    "SyncEngine",
    "SyncStatus",
    "TextEdit",
    "USAGES_ACCEPT_LABEL",
    "Workspace",
    "apply_text_edits",
    "candidate_files",
    "discover_files",
    "is_test_file",
    "locate_definition",
    "open_readable",
]
