from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlparse

from pydantic import ValidationError
from pygls.lsp.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_DID_SAVE,
    ApplyWorkspaceEditParams,
    DidSaveTextDocumentParams,
    MessageActionItem,
    MessageType,
    OptionalVersionedTextDocumentIdentifier,
    Position,
    Range,
    ShowMessageParams,
    ShowMessageRequestParams,
    TextDocumentEdit,
    TextEdit,
    WorkspaceEdit,
)

from propsync import __version__
from propsync.config import SyncSettings, apply_overrides, settings_from_section, sync_defaults
from propsync.scan.registry import language_for_path
from propsync.schema import SyncRequest, SyncResponse, save_outcome_to_response
from propsync.sync.engine import SyncEngine
from propsync.sync.model import DocumentSnapshot, EditPlan, SaveEvent, SaveOutcome, SyncStatus
from propsync.sync.workspace import discover_files

server = LanguageServer("propsync", __version__)
SYNC_COMMAND = "propsync.syncDocument"

# Save events are handled on worker threads; one sync pass runs at a time so
# no pass computes offsets against a file another pass is about to rewrite.
_SYNC_LOCK = threading.Lock()


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def _workspace_root(ls: LanguageServer) -> Path:
    root_path = getattr(ls.workspace, "root_path", None)
    return Path(root_path) if root_path else Path.cwd()


def _lsp_position(snapshot: DocumentSnapshot, offset: int) -> Position:
    line, character = snapshot.position_at(offset)
    return Position(line=line, character=character)


def workspace_edit_for(plan: EditPlan) -> WorkspaceEdit:
    document_changes: list[TextDocumentEdit] = []
    for file_plan in plan.files:
        snapshot = file_plan.snapshot
        edits: list[TextEdit] = [
            TextEdit(
                range=Range(
                    start=_lsp_position(snapshot, edit.start),
                    end=_lsp_position(snapshot, edit.end),
                ),
                new_text=edit.text,
            )
            for edit in file_plan.text_edits()
        ]
        document_changes.append(
            TextDocumentEdit(
                text_document=OptionalVersionedTextDocumentIdentifier(
                    uri=snapshot.path.as_uri(),
                    version=snapshot.version,
                ),
                edits=edits,
            )
        )
    return WorkspaceEdit(document_changes=document_changes)


class LspWorkspace:
    """Workspace collaborator backed by the connected editor.

    Blocking on request futures is only safe off the event loop, so this is
    used from threaded handlers.
    """

    def __init__(self, ls: LanguageServer, root: Path, *, auto_answer: str | None = None) -> None:
        self.ls = ls
        self.root = root
        self.auto_answer = auto_answer

    def find_files(self, include: str, exclude: str) -> list[Path]:
        return discover_files(self.root, include, exclude)

    def open_document(self, path: Path) -> DocumentSnapshot:
        document = self.ls.workspace.get_text_document(path.as_uri())
        return DocumentSnapshot(path=path, text=document.source, version=document.version)

    def ask(self, message: str, accept_label: str, cancel_label: str) -> str | None:
        if self.auto_answer == "accept":
            return accept_label
        if self.auto_answer == "decline":
            return cancel_label
        future = self.ls.window_show_message_request(
            ShowMessageRequestParams(
                type=MessageType.Info,
                message=message,
                actions=[
                    MessageActionItem(title=accept_label),
                    MessageActionItem(title=cancel_label),
                ],
            )
        )
        choice = future.result()
        return choice.title if choice is not None else None

    def apply_edit(self, plan: EditPlan) -> bool:
        future = self.ls.workspace_apply_edit(
            ApplyWorkspaceEditParams(edit=workspace_edit_for(plan), label="propsync")
        )
        result = future.result()
        return bool(result is not None and result.applied)

    def notify(self, message: str) -> None:
        self.ls.window_show_message(ShowMessageParams(type=MessageType.Info, message=message))


def _settings_for(root: Path, overrides: dict | None = None) -> SyncSettings:
    return settings_from_section(apply_overrides(sync_defaults(root=root), overrides))


def _auto_answer(request: SyncRequest) -> str | None:
    if request.dry_run:
        return "decline"
    if request.assume_yes:
        return "accept"
    return None


def run_save_event(
    ls: LanguageServer,
    event: SaveEvent,
    *,
    settings: SyncSettings | None = None,
    auto_answer: str | None = None,
) -> SaveOutcome:
    root = _workspace_root(ls)
    workspace = LspWorkspace(ls, root, auto_answer=auto_answer)
    engine = SyncEngine(workspace, settings=settings or _settings_for(root))
    with _SYNC_LOCK:
        return engine.on_save(event)


def _save_event_from_params(ls: LanguageServer, params: DidSaveTextDocumentParams) -> SaveEvent:
    uri = params.text_document.uri
    document = ls.workspace.get_text_document(uri)
    path = _uri_to_path(uri)
    language_id = getattr(document, "language_id", None) or language_for_path(path) or ""
    text = params.text if params.text is not None else document.source
    return SaveEvent(path=path, language_id=language_id, text=text)


@server.feature(TEXT_DOCUMENT_DID_SAVE)
@server.thread()
def did_save(ls: LanguageServer, params: DidSaveTextDocumentParams) -> None:
    run_save_event(ls, _save_event_from_params(ls, params))


@server.command(SYNC_COMMAND)
@server.thread()
def execute_sync(ls: LanguageServer, payload: dict | None = None) -> dict:
    if not isinstance(payload, dict):
        return SyncResponse(path="", errors=["missing command payload"]).model_dump()
    try:
        request = SyncRequest.model_validate(payload)
    except ValidationError as exc:
        return SyncResponse(path=str(payload.get("path", "")), errors=[str(exc)]).model_dump()
    path = Path(request.path)
    if not path.is_absolute():
        path = _workspace_root(ls) / path
    try:
        text = ls.workspace.get_text_document(path.as_uri()).source
    except OSError as exc:
        return SyncResponse(path=request.path, errors=[str(exc)]).model_dump()
    event = SaveEvent(
        path=path,
        language_id=request.language_id or language_for_path(path) or "",
        text=text,
    )
    settings = payload.get("settings")
    outcome = run_save_event(
        ls,
        event,
        settings=_settings_for(_workspace_root(ls), settings if isinstance(settings, dict) else None),
        auto_answer=_auto_answer(request),
    )
    errors = [
        f"Editor rejected edits for <{item.component}>."
        for item in outcome.passes
        if item.status is SyncStatus.APPLY_FAILED
    ]
    return save_outcome_to_response(outcome, errors=errors).model_dump()


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server on stdio."""
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
