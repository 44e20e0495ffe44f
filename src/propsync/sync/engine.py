"""Bidirectional prop synchronization between component definitions and usages.

Two protocols run on every save:

* definition -> usages: every JSX tag of a component defined in the saved
  document gets a placeholder attribute for each prop it lacks;
* usage -> definition: props seen on a tag in the saved document but absent
  from the component's definition are appended to the definition, and the
  widened prop list is then pushed to every other usage.

Both sides only ever grow. Each protocol builds its whole edit plan against
immutable snapshots before asking for confirmation; a declined prompt
discards the plan.
"""

from __future__ import annotations

from pathlib import Path

from propsync.config import SyncSettings
from propsync.scan.adapter_contract import ComponentScanner, UsageSite
from propsync.scan.props import union_props
from propsync.scan.registry import resolve_scanner, scanner_for_language
from propsync.sync.locator import LocatedDefinition, locate_definition
from propsync.sync.model import (
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
)
from propsync.sync.workspace import Workspace, candidate_files, open_readable

USAGES_ACCEPT_LABEL = "Apply changes to usages"
DEFINITION_ACCEPT_LABEL = "Update definition and usages"
CANCEL_LABEL = "Cancel"


def usages_prompt(component_name: str) -> str:
    return (
        f"Missing props of <{component_name} /> will be added to its usages. "
        "Apply the changes?"
    )


def definition_prompt(component_name: str, added: list[str]) -> str:
    return (
        f"New props detected in <{component_name} />: {', '.join(added)}. "
        "Update the definition and sync its usages?"
    )


def usages_synced_message(component_name: str) -> str:
    return f"Props synced in usages of <{component_name} />."


def render_definition_props(props_raw: str, merged: list[str], added: list[str], *, mode: str) -> str:
    if mode == "append" and props_raw.strip():
        body = props_raw.rstrip()
        trailing = props_raw[len(body) :]
        separator = " " if body.endswith(",") else ", "
        return body + separator + ", ".join(added) + trailing
    if not props_raw.strip():
        return ", ".join(merged)
    leading = props_raw[: len(props_raw) - len(props_raw.lstrip())]
    trailing = props_raw[len(props_raw.rstrip()) :]
    return leading + ", ".join(merged) + trailing


class SyncEngine:
    def __init__(
        self,
        workspace: Workspace,
        *,
        settings: SyncSettings | None = None,
        scanner: ComponentScanner | None = None,
    ) -> None:
        self.workspace = workspace
        self.settings = settings or SyncSettings()
        self.scanner = scanner

    def _scanner_for_path(self, path: Path) -> ComponentScanner:
        if self.scanner is not None:
            return self.scanner
        return resolve_scanner(path=path)

    def on_save(self, event: SaveEvent) -> SaveOutcome:
        outcome = SaveOutcome(path=event.path)
        if not self.settings.accepts_language(event.language_id):
            outcome.skipped = True
            return outcome
        scanner = self.scanner or scanner_for_language(event.language_id)
        if scanner is None:
            outcome.skipped = True
            return outcome

        synced_definitions: set[str] = set()
        for definition in scanner.extract_definitions(event.text):
            if not definition.props or definition.name in synced_definitions:
                continue
            synced_definitions.add(definition.name)
            outcome.passes.append(self.sync_usages(definition.name, list(definition.props)))

        context = SyncContext()
        for usage in scanner.extract_usages(event.text):
            outcome.passes.extend(self.sync_definition_from_usage(usage, context=context))
        return outcome

    def plan_usage_edits(self, component_name: str, props: list[str]) -> EditPlan:
        placeholder = self.settings.placeholder
        files: list[FileEditPlan] = []
        paths = candidate_files(self.workspace, self.settings.include, self.settings.exclude)
        for snapshot in open_readable(self.workspace, paths):
            insertions: list[Insertion] = []
            for tag in self._scanner_for_path(snapshot.path).find_tags(snapshot.text, component_name):
                missing = tag.missing(props)
                if not missing:
                    continue
                text = "".join(f" {name}={placeholder}" for name in missing)
                insertions.append(Insertion(offset=tag.insert_offset, text=text))
            if insertions:
                files.append(FileEditPlan(snapshot=snapshot, insertions=tuple(insertions)))
        return EditPlan(files=tuple(files))

    def sync_usages(self, component_name: str, props: list[str]) -> PassOutcome:
        direction = SyncDirection.DEFINITION_TO_USAGES
        plan = self.plan_usage_edits(component_name, props)
        if plan.is_empty:
            return PassOutcome(component_name, direction, SyncStatus.NO_CHANGES)
        choice = self.workspace.ask(
            usages_prompt(component_name), USAGES_ACCEPT_LABEL, CANCEL_LABEL
        )
        if choice != USAGES_ACCEPT_LABEL:
            return PassOutcome(component_name, direction, SyncStatus.DECLINED, plan)
        if not self.workspace.apply_edit(plan):
            return PassOutcome(component_name, direction, SyncStatus.APPLY_FAILED, plan)
        self.workspace.notify(usages_synced_message(component_name))
        return PassOutcome(component_name, direction, SyncStatus.APPLIED, plan)

    def plan_definition_update(
        self, located: LocatedDefinition, usage_props: list[str]
    ) -> tuple[EditPlan, list[str], list[str]]:
        definition_props = located.props
        merged = union_props(definition_props, usage_props)
        added = [name for name in merged if name not in definition_props]
        if not added:
            return EditPlan(), definition_props, []
        match = located.match
        replacement = Replacement(
            start=match.props_start,
            end=match.props_end,
            text=render_definition_props(
                match.props_raw, merged, added, mode=self.settings.definition_rewrite
            ),
        )
        plan = EditPlan(
            files=(FileEditPlan(snapshot=located.snapshot, replacements=(replacement,)),)
        )
        return plan, merged, added

    def sync_definition_from_usage(
        self, usage: UsageSite, *, context: SyncContext | None = None
    ) -> list[PassOutcome]:
        name = usage.component_name
        direction = SyncDirection.USAGE_TO_DEFINITION
        if not usage.props:
            return []
        if context is not None and not context.claim(name):
            return []
        located = locate_definition(
            self.workspace, name, settings=self.settings, scanner=self.scanner
        )
        if located is None:
            return [PassOutcome(name, direction, SyncStatus.NO_DEFINITION)]
        plan, merged, added = self.plan_definition_update(located, list(usage.props))
        if not added:
            return [PassOutcome(name, direction, SyncStatus.IN_SYNC)]
        choice = self.workspace.ask(
            definition_prompt(name, added), DEFINITION_ACCEPT_LABEL, CANCEL_LABEL
        )
        if choice != DEFINITION_ACCEPT_LABEL:
            return [PassOutcome(name, direction, SyncStatus.DECLINED, plan, tuple(added))]
        if not self.workspace.apply_edit(plan):
            return [PassOutcome(name, direction, SyncStatus.APPLY_FAILED, plan, tuple(added))]
        outcomes = [PassOutcome(name, direction, SyncStatus.APPLIED, plan, tuple(added))]
        outcomes.append(self.sync_usages(name, merged))
        return outcomes
