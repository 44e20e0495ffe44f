from __future__ import annotations

from dataclasses import dataclass

from propsync.config import SyncSettings
from propsync.scan.adapter_contract import ComponentScanner, DefinitionMatch
from propsync.scan.registry import resolve_scanner
from propsync.sync.model import DocumentSnapshot
from propsync.sync.workspace import Workspace, candidate_files, open_readable


@dataclass(frozen=True)
class LocatedDefinition:
    snapshot: DocumentSnapshot
    match: DefinitionMatch

    @property
    def props(self) -> list[str]:
        return list(self.match.props)


def locate_definition(
    workspace: Workspace,
    component_name: str,
    *,
    settings: SyncSettings,
    scanner: ComponentScanner | None = None,
) -> LocatedDefinition | None:
    """Return the first definition of ``component_name`` in the workspace.

    Files are visited in enumeration order and each is read once, skipping
    files that cannot be decoded; within a file the function form is tried before the arrow form.
    """
    paths = candidate_files(workspace, settings.include, settings.exclude)
    for snapshot in open_readable(workspace, paths):
        file_scanner = scanner or resolve_scanner(path=snapshot.path)
        match = file_scanner.find_definition(snapshot.text, component_name)
        if match is not None:
            return LocatedDefinition(snapshot=snapshot, match=match)
    return None
