from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Iterable, List, Tuple

from propsync.invariants import never

Position = Tuple[int, int]


@dataclass(frozen=True)
class DocumentSnapshot:
    """Immutable text of one file, read once per sync pass.

    Every offset in an edit plan is relative to the snapshot it was computed
    from; ``version`` is the editor's document version when known.
    """

    path: Path
    text: str
    version: int | None = None

    def position_at(self, offset: int) -> Position:
        if offset < 0 or offset > len(self.text):
            never("offset outside snapshot", path=str(self.path), offset=offset)
        line = self.text.count("\n", 0, offset)
        line_start = self.text.rfind("\n", 0, offset) + 1
        return (line, offset - line_start)

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Insertion:
    offset: int
    text: str


@dataclass(frozen=True)
class Replacement:
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class TextEdit:
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class FileEditPlan:
    snapshot: DocumentSnapshot
    insertions: Tuple[Insertion, ...] = ()
    replacements: Tuple[Replacement, ...] = ()

    @property
    def path(self) -> Path:
        return self.snapshot.path

    def text_edits(self) -> list[TextEdit]:
        edits = [TextEdit(item.offset, item.offset, item.text) for item in self.insertions]
        edits.extend(TextEdit(item.start, item.end, item.text) for item in self.replacements)
        return sorted(edits, key=lambda edit: (edit.start, edit.end))

    def apply(self) -> str:
        return apply_text_edits(self.snapshot.text, self.text_edits())


@dataclass(frozen=True)
class EditPlan:
    files: Tuple[FileEditPlan, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not any(plan.insertions or plan.replacements for plan in self.files)

    @property
    def paths(self) -> list[Path]:
        return [plan.path for plan in self.files]

    @property
    def edit_count(self) -> int:
        return sum(len(plan.insertions) + len(plan.replacements) for plan in self.files)


def apply_text_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Apply offset edits that were all computed against ``text``.

    Edits are applied from the end of the text backwards so earlier offsets
    stay valid. Insertions at the same offset keep their given order.
    """
    ordered = sorted(enumerate(edits), key=lambda item: (item[1].start, item[1].end, item[0]))
    previous_end = 0
    for _, edit in ordered:
        if edit.start < 0 or edit.end < edit.start or edit.end > len(text):
            never("edit outside snapshot", start=edit.start, end=edit.end, length=len(text))
        if edit.start < previous_end:
            never("overlapping edits", start=edit.start, end=edit.end)
        previous_end = edit.end
    result = text
    for _, edit in reversed(ordered):
        result = result[: edit.start] + edit.text + result[edit.end :]
    return result


class SyncDirection(StrEnum):
    DEFINITION_TO_USAGES = "definition_to_usages"
    USAGE_TO_DEFINITION = "usage_to_definition"


class SyncStatus(StrEnum):
    NO_CHANGES = "no_changes"
    NO_DEFINITION = "no_definition"
    IN_SYNC = "in_sync"
    DECLINED = "declined"
    APPLIED = "applied"
    APPLY_FAILED = "apply_failed"


@dataclass(frozen=True)
class SaveEvent:
    path: Path
    language_id: str
    text: str


@dataclass
class SyncContext:
    """State scoped to a single save event."""

    seen_components: set[str] = field(default_factory=set)

    def claim(self, component_name: str) -> bool:
        if component_name in self.seen_components:
            return False
        self.seen_components.add(component_name)
        return True


@dataclass(frozen=True)
class PassOutcome:
    component: str
    direction: SyncDirection
    status: SyncStatus
    plan: EditPlan = field(default_factory=EditPlan)
    added_props: Tuple[str, ...] = ()


@dataclass
class SaveOutcome:
    path: Path
    skipped: bool = False
    passes: List[PassOutcome] = field(default_factory=list)

    @property
    def applied(self) -> list[PassOutcome]:
        return [item for item in self.passes if item.status is SyncStatus.APPLIED]
